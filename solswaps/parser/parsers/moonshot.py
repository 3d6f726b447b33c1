from typing import List

import qborsh

from solswaps.balances import native_change, net_change
from solswaps.constants import (
    MOONSHOT_BUY_DISCRIMINATOR,
    MOONSHOT_SELL_DISCRIMINATOR,
    SOL_DECIMALS,
    WSOL_MINT,
    ProtocolTag,
)
from solswaps.context import TransactionContext
from solswaps.errors import UnknownDiscriminator
from solswaps.logger import get_logger
from solswaps.parser.models import DiscriminatedProgram, SwapFragment, borsh_decode

logger = get_logger(__name__)

TRADE_DATA_LEN = 33
TRADE_ACCOUNTS_LEN = 11
MINT_ACCOUNT_POSITION = 6


@qborsh.schema
class TradeParams:
    """
    Arguments of a buy or sell instruction.

    Attributes:
        token_amount: Token amount limit.
        collateral_amount: Lamport amount limit.
        fixed_side: Which of the two amounts is exact.
        slippage_bps: Allowed slippage in basis points.
    """
    token_amount: qborsh.U64
    collateral_amount: qborsh.U64
    fixed_side: qborsh.U8
    slippage_bps: qborsh.U64


class _MoonshotParser(DiscriminatedProgram):
    """
    Fixed-price bonding curve. The instruction only states limits, so the
    executed amounts are measured from the signer's balance changes.
    """

    tag = ProtocolTag.MOONSHOT
    program_name = "Moonshot"
    desc_len = 8

    def __init__(self) -> None:
        self.desc_map = {
            MOONSHOT_BUY_DISCRIMINATOR: self.parse_buy,
            MOONSHOT_SELL_DISCRIMINATOR: self.parse_sell,
        }

    def is_trade(self, instr) -> bool:
        return len(instr.data) == TRADE_DATA_LEN and len(instr.accounts) == TRADE_ACCOUNTS_LEN

    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        instr = ctx.outer(instruction_index)
        if not self.is_trade(instr):
            logger.debug("Moonshot instruction %d is not a trade", instruction_index)
            return []
        handler = self.handler_for(instr.data)
        if handler is None:
            raise UnknownDiscriminator(
                f"Unknown Moonshot instruction {self.desc(instr.data).hex()}", instruction_index
            )
        return handler(ctx, instruction_index, instr.data)

    def _measure(self, ctx: TransactionContext, instruction_index: int, data: bytes):
        params = borsh_decode(TradeParams, data[self.desc_len :], "Moonshot trade parameters")
        mint = ctx.instruction_account(ctx.outer(instruction_index), MINT_ACCOUNT_POSITION)
        token_amount = abs(net_change(ctx, mint, ctx.signer))
        sol_amount = abs(native_change(ctx, 0))
        logger.debug(
            "Moonshot trade on %s: limits %s/%s, measured %s/%s",
            mint, params["token_amount"], params["collateral_amount"], token_amount, sol_amount,
        )
        return mint, token_amount, sol_amount

    def parse_buy(self, ctx: TransactionContext, instruction_index: int, data: bytes) -> List[SwapFragment]:
        mint, token_amount, sol_amount = self._measure(ctx, instruction_index, data)
        return [
            SwapFragment(
                protocol=self.tag,
                mint_in=WSOL_MINT,
                amount_in=sol_amount,
                decimals_in=SOL_DECIMALS,
                mint_out=mint,
                amount_out=token_amount,
                decimals_out=ctx.decimals(mint),
                instruction_index=instruction_index,
            )
        ]

    def parse_sell(self, ctx: TransactionContext, instruction_index: int, data: bytes) -> List[SwapFragment]:
        mint, token_amount, sol_amount = self._measure(ctx, instruction_index, data)
        return [
            SwapFragment(
                protocol=self.tag,
                mint_in=mint,
                amount_in=token_amount,
                decimals_in=ctx.decimals(mint),
                mint_out=WSOL_MINT,
                amount_out=sol_amount,
                decimals_out=SOL_DECIMALS,
                instruction_index=instruction_index,
            )
        ]


MoonshotParser = _MoonshotParser()
