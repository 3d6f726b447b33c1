from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(slots=True)
class UiTokenAmount:
    """
    Raw token amount as reported by the node.

    Attributes:
        amount: Integer amount in base units, encoded as a decimal string.
        decimals: Decimals of the mint.
    """
    amount: str
    decimals: int
    uiAmountString: Optional[str] = None


@dataclass(slots=True)
class TokenBalance:
    accountIndex: int
    mint: str
    owner: Optional[str]
    uiTokenAmount: UiTokenAmount
    programId: Optional[str] = None


@dataclass(slots=True)
class Instruction:
    """
    A compiled instruction with its data already decoded to raw bytes.

    Attributes:
        programIdIndex: Index of the invoked program in the account key table.
        accounts: Indices of the accounts passed to the program.
        data: Raw instruction data.
        stackHeight: Invocation depth, if the node reports it.
    """
    programIdIndex: int
    accounts: List[int]
    data: bytes
    stackHeight: Optional[int] = None


@dataclass(slots=True)
class InnerInstructions:
    index: int
    instructions: List[Instruction]


@dataclass(slots=True)
class AddressTableLookup:
    accountKey: str
    writableIndexes: List[int]
    readonlyIndexes: List[int]


@dataclass(slots=True)
class LoadedAddresses:
    writable: List[str] = field(default_factory=list)
    readonly: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Message:
    accountKeys: List[str]
    recentBlockhash: str
    instructions: List[Instruction]
    addressTableLookups: List[AddressTableLookup] = field(default_factory=list)
    numRequiredSignatures: int = 1


@dataclass(slots=True)
class Meta:
    fee: int
    preBalances: List[int]
    postBalances: List[int]
    preTokenBalances: List[TokenBalance]
    postTokenBalances: List[TokenBalance]
    innerInstructions: List[InnerInstructions]
    logMessages: List[str] = field(default_factory=list)
    err: Optional[Any] = None
    computeUnitsConsumed: Optional[int] = None


@dataclass(slots=True)
class Transaction:
    """
    Standardized transaction, independent of the source that delivered it.

    Attributes:
        slot: Slot the transaction landed in.
        blockTime: Unix timestamp of the block, if the source provides it.
        signatures: Transaction signatures, fee payer's first.
        message: The transaction message, or None if the source omitted it.
        meta: Execution metadata, or None if the source omitted it.
        loadedAddresses: Addresses loaded through address lookup tables.
    """
    slot: Optional[int]
    blockTime: Optional[int]
    signatures: List[str]
    message: Optional[Message]
    meta: Optional[Meta]
    loadedAddresses: LoadedAddresses = field(default_factory=LoadedAddresses)

    @property
    def all_accounts(self) -> List[str]:
        """Static account keys followed by loaded writable then loaded readonly addresses."""
        keys = list(self.message.accountKeys) if self.message else []
        return keys + list(self.loadedAddresses.writable) + list(self.loadedAddresses.readonly)
