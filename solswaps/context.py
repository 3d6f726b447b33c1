"""
Read-only indexed view of one transaction.

A context is built once per decode call and shared by the dispatcher and every
decoder. Apart from the diagnostics list it never changes after construction.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from solswaps.constants import (
    SOL_DECIMALS,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    TRANSFER_CHECKED_TAG,
    TRANSFER_TAG,
    WSOL_MINT,
)
from solswaps.errors import DecodeError, IndexOutOfRange, MalformedTransaction
from solswaps.logger import get_logger
from solswaps.normalizer.models import Instruction, Meta, TokenBalance, Transaction
from solswaps.registry import DEFAULT_REGISTRY, ProtocolRegistry

logger = get_logger(__name__)

TOKEN_PROGRAM_IDS = frozenset({TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID})


@dataclass(frozen=True, slots=True)
class TokenAccountInfo:
    """
    What is known about one token account.

    Attributes:
        mint: Mint held by the account.
        decimals: Decimals of that mint.
        owner: Wallet owning the account, when a balance snapshot names it.
        assumed: True when nothing linked the account to a mint and it was
            taken to be a wrapped-SOL account.
    """
    mint: str
    decimals: int
    owner: Optional[str] = None
    assumed: bool = False


class TransactionContext:
    """
    Indexed view over a transaction: account key table, instruction tree,
    token account and mint decimals tables.

    Raises:
        MalformedTransaction: If the message or metadata is missing, or if the
            transaction failed on chain.
    """

    def __init__(self, tx: Transaction, registry: ProtocolRegistry = DEFAULT_REGISTRY) -> None:
        if tx is None or tx.message is None:
            raise MalformedTransaction("Transaction message is missing")
        if tx.meta is None:
            raise MalformedTransaction("Transaction metadata is missing")
        if tx.meta.err is not None:
            raise MalformedTransaction(f"Transaction failed on chain: {tx.meta.err}")

        self.tx = tx
        self.registry = registry
        self.signatures: Tuple[str, ...] = tuple(tx.signatures)
        self.block_time: Optional[int] = tx.blockTime
        self.account_keys: Tuple[str, ...] = tuple(tx.all_accounts)
        self.instructions: Tuple[Instruction, ...] = tuple(tx.message.instructions)

        inner: Dict[int, Tuple[Instruction, ...]] = {}
        for group in tx.meta.innerInstructions:
            # Some nodes split one outer index across several groups; keep execution order.
            inner[group.index] = inner.get(group.index, ()) + tuple(group.instructions)
        self.inner_instructions: Mapping[int, Tuple[Instruction, ...]] = MappingProxyType(inner)

        self.decode_errors: List[DecodeError] = []
        self._report_dangling_transfers()

        self.mint_decimals: Mapping[str, int] = MappingProxyType(self._extract_mint_decimals(tx.meta))
        self.token_accounts: Mapping[str, TokenAccountInfo] = MappingProxyType(
            self._extract_token_accounts(tx.meta)
        )

    @property
    def meta(self) -> Meta:
        return self.tx.meta

    @property
    def signer(self) -> str:
        """Fee payer and primary signer."""
        return self.account(0)

    def account(self, index: int) -> str:
        if not 0 <= index < len(self.account_keys):
            raise IndexOutOfRange(f"Account index {index} outside key table of {len(self.account_keys)}")
        return self.account_keys[index]

    def program_id(self, instruction: Instruction) -> str:
        return self.account(instruction.programIdIndex)

    def instruction_account(self, instruction: Instruction, position: int) -> str:
        """Resolves the account passed at `position` of an instruction."""
        if position >= len(instruction.accounts):
            raise IndexOutOfRange(
                f"Instruction has {len(instruction.accounts)} accounts, position {position} requested"
            )
        return self.account(instruction.accounts[position])

    def inner(self, instruction_index: int) -> Tuple[Instruction, ...]:
        """Inner instructions triggered by the outer instruction at `instruction_index`."""
        return self.inner_instructions.get(instruction_index, ())

    def outer(self, instruction_index: int) -> Instruction:
        if not 0 <= instruction_index < len(self.instructions):
            raise IndexOutOfRange(f"Outer instruction index {instruction_index} out of range")
        return self.instructions[instruction_index]

    def contains_program(self, program_id: str) -> bool:
        return program_id in self.account_keys

    def references_in_range(self, instruction: Instruction, count: int) -> bool:
        """True if the program and the first `count` accounts of an instruction resolve."""
        size = len(self.account_keys)
        if not 0 <= instruction.programIdIndex < size:
            return False
        return len(instruction.accounts) >= count and all(0 <= a < size for a in instruction.accounts[:count])

    def decimals(self, mint: str, default: int = 0) -> int:
        return self.mint_decimals.get(mint, default)

    def report(self, error: DecodeError) -> None:
        """Records a recoverable decode error for this invocation."""
        logger.warning("Recoverable decode error: %s", error)
        self.decode_errors.append(error)

    def all_instructions(self):
        """Every outer and inner instruction, outer first, each inner group in execution order."""
        yield from self.instructions
        for index in sorted(self.inner_instructions):
            yield from self.inner_instructions[index]

    def token_transfers(self):
        """
        Yields (instruction, tag) for every well-formed SPL Transfer and
        TransferChecked instruction, outer and inner.
        """
        for instr in self.all_instructions():
            tag = self.transfer_tag(instr)
            if tag is not None:
                yield instr, tag

    def transfer_tag(self, instr: Instruction) -> Optional[int]:
        """
        Returns the SPL transfer tag of an instruction, or None if it is not a
        well-formed Transfer/TransferChecked.
        """
        shape = self._transfer_shape(instr)
        if shape is None:
            return None
        tag, count = shape
        return tag if self.references_in_range(instr, count) else None

    def _transfer_shape(self, instr: Instruction) -> Optional[Tuple[int, int]]:
        # (tag, accounts needed) going by program and data alone.
        if not instr.data or len(instr.data) < 9:
            return None
        if not 0 <= instr.programIdIndex < len(self.account_keys):
            return None
        program_id = self.account_keys[instr.programIdIndex]
        tag = instr.data[0]
        if tag == TRANSFER_TAG and program_id == TOKEN_PROGRAM_ID:
            return tag, 3
        if tag == TRANSFER_CHECKED_TAG and program_id in TOKEN_PROGRAM_IDS:
            return tag, 4
        return None

    def _report_dangling_transfers(self) -> None:
        """Reports token transfers whose accounts point past the key table."""
        groups = [(index, (instr,)) for index, instr in enumerate(self.instructions)]
        groups.extend(sorted(self.inner_instructions.items()))
        for index, instrs in groups:
            for instr in instrs:
                shape = self._transfer_shape(instr)
                if shape is None or len(instr.accounts) < shape[1] or self.references_in_range(instr, shape[1]):
                    continue
                self.report(
                    IndexOutOfRange(
                        f"Token transfer references accounts {instr.accounts[:shape[1]]} "
                        f"outside key table of {len(self.account_keys)}",
                        index,
                    )
                )

    def _extract_mint_decimals(self, meta: Meta) -> Dict[str, int]:
        mint_to_decimals: Dict[str, int] = {}

        for balance in list(meta.postTokenBalances) + list(meta.preTokenBalances):
            if balance.mint and balance.mint not in mint_to_decimals:
                mint_to_decimals[balance.mint] = balance.uiTokenAmount.decimals

        for instr in self.all_instructions():
            if self.transfer_tag(instr) == TRANSFER_CHECKED_TAG and len(instr.data) >= 10:
                mint = self.account_keys[instr.accounts[1]]
                mint_to_decimals.setdefault(mint, instr.data[9])

        mint_to_decimals.setdefault(WSOL_MINT, SOL_DECIMALS)
        return mint_to_decimals

    def _extract_token_accounts(self, meta: Meta) -> Dict[str, TokenAccountInfo]:
        accounts: Dict[str, TokenAccountInfo] = {}

        def from_balance(balance: TokenBalance) -> None:
            if not balance.mint or not 0 <= balance.accountIndex < len(self.account_keys):
                return
            address = self.account_keys[balance.accountIndex]
            if address not in accounts:
                accounts[address] = TokenAccountInfo(
                    mint=balance.mint,
                    decimals=balance.uiTokenAmount.decimals,
                    owner=balance.owner,
                )

        # Post balances are authoritative, pre balances cover accounts closed by the transaction.
        for balance in meta.postTokenBalances:
            from_balance(balance)
        for balance in meta.preTokenBalances:
            from_balance(balance)

        transfers = list(self.token_transfers())
        unresolved = set()
        for instr, tag in transfers:
            source = self.account_keys[instr.accounts[0]]
            destination = self.account_keys[instr.accounts[2 if tag == TRANSFER_CHECKED_TAG else 1]]
            if tag == TRANSFER_CHECKED_TAG:
                mint = self.account_keys[instr.accounts[1]]
                decimals = instr.data[9] if len(instr.data) >= 10 else self.mint_decimals.get(mint, 0)
                for address in (source, destination):
                    if address not in accounts:
                        accounts[address] = TokenAccountInfo(mint=mint, decimals=decimals)
            unresolved.update(a for a in (source, destination) if a not in accounts)

        # A plain Transfer moves one mint; propagate it across the pair until stable.
        changed = True
        while changed and unresolved:
            changed = False
            for instr, tag in transfers:
                if tag != TRANSFER_TAG:
                    continue
                source = self.account_keys[instr.accounts[0]]
                destination = self.account_keys[instr.accounts[1]]
                known = accounts.get(source) or accounts.get(destination)
                if known is None or known.assumed:
                    continue
                for address in (source, destination):
                    if address not in accounts:
                        accounts[address] = TokenAccountInfo(mint=known.mint, decimals=known.decimals)
                        unresolved.discard(address)
                        changed = True

        for address in sorted(unresolved):
            if address in accounts:
                continue
            logger.warning("Token account %s has no known mint, assuming wrapped SOL", address)
            accounts[address] = TokenAccountInfo(mint=WSOL_MINT, decimals=SOL_DECIMALS, assumed=True)

        return accounts
