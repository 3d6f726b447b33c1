from dataclasses import dataclass
from typing import Optional

from solswaps.constants import TRANSFER_CHECKED_TAG, TRANSFER_TAG, ProtocolTag
from solswaps.context import TransactionContext
from solswaps.logger import get_logger
from solswaps.normalizer.models import Instruction
from solswaps.parser.models import SwapFragment

logger = get_logger(__name__)


@dataclass(slots=True)
class Transfer:
    """
    A decoded SPL token Transfer or TransferChecked.

    Attributes:
        source: Source token account.
        destination: Destination token account.
        authority: Signer authorizing the transfer.
        mint: Mint moved, resolved through the token account table for plain
            transfers, read from the instruction for checked ones.
        amount: Amount in base units.
        decimals: Decimals of the mint.
        checked: True for TransferChecked.
        assumed: True when the mint is the wrapped-SOL fallback guess.
    """
    source: str
    destination: str
    authority: str
    mint: str
    amount: int
    decimals: int
    checked: bool = False
    assumed: bool = False


class _TokenProgramParser:
    program_name = "TokenProgram"

    def route_instruction(self, ctx: TransactionContext, instr: Instruction) -> Optional[Transfer]:
        tag = ctx.transfer_tag(instr)
        if tag == TRANSFER_TAG:
            return self.parse_transfer(ctx, instr)
        if tag == TRANSFER_CHECKED_TAG:
            return self.parse_transfer_checked(ctx, instr)
        return None

    def parse_transfer(self, ctx: TransactionContext, instr: Instruction) -> Optional[Transfer]:
        amount = int.from_bytes(instr.data[1:9], byteorder="little", signed=False)
        source = ctx.account(instr.accounts[0])
        destination = ctx.account(instr.accounts[1])
        info = ctx.token_accounts.get(destination) or ctx.token_accounts.get(source)
        if info is None:
            logger.debug("Transfer %s -> %s touches no known token account", source, destination)
            return None
        return Transfer(
            source=source,
            destination=destination,
            authority=ctx.account(instr.accounts[2]),
            mint=info.mint,
            amount=amount,
            decimals=info.decimals,
            assumed=info.assumed,
        )

    def parse_transfer_checked(self, ctx: TransactionContext, instr: Instruction) -> Transfer:
        amount = int.from_bytes(instr.data[1:9], byteorder="little", signed=False)
        mint = ctx.account(instr.accounts[1])
        decimals = instr.data[9] if len(instr.data) >= 10 else ctx.decimals(mint)
        return Transfer(
            source=ctx.account(instr.accounts[0]),
            destination=ctx.account(instr.accounts[2]),
            authority=ctx.account(instr.accounts[3]),
            mint=mint,
            amount=amount,
            decimals=decimals,
            checked=True,
        )

    def to_fragment(self, transfer: Transfer, protocol: ProtocolTag, instruction_index: int) -> SwapFragment:
        return SwapFragment(
            protocol=protocol,
            mint_in=transfer.mint,
            amount_in=transfer.amount,
            decimals_in=transfer.decimals,
            instruction_index=instruction_index,
            assumed=transfer.assumed,
        )


TokenProgramParser = _TokenProgramParser()
