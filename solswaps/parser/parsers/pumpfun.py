from typing import List

import qborsh

from solswaps.constants import (
    PUMPFUN_CREATE_EVENT_DISCRIMINATOR,
    PUMPFUN_TRADE_EVENT_DISCRIMINATOR,
    SOL_DECIMALS,
    WSOL_MINT,
    ProtocolTag,
)
from solswaps.context import TransactionContext
from solswaps.logger import get_logger
from solswaps.parser.models import EventProgram, SwapFragment, borsh_decode
from solswaps.utils import to_address

logger = get_logger(__name__)


@qborsh.schema
class TradeEvent:
    """
    Borsh schema for the bonding curve trade event.

    Newer program versions append fields after `virtual_token_reserves`;
    they are not read.

    Attributes:
        mint: Token mint address (the token being bought or sold).
        sol_amount: Lamports paid or received.
        token_amount: Amount of token.
        is_buy: True for a buy operation, False for a sell.
        user: The trader's account address.
        timestamp: Unix time of the trade.
        virtual_sol_reserves: Curve SOL reserves after the trade.
        virtual_token_reserves: Curve token reserves after the trade.
    """
    mint: qborsh.PubKey
    sol_amount: qborsh.U64
    token_amount: qborsh.U64
    is_buy: qborsh.Bool
    user: qborsh.PubKey
    timestamp: qborsh.I64
    virtual_sol_reserves: qborsh.U64
    virtual_token_reserves: qborsh.U64


@qborsh.schema
class CreateEvent:
    name: qborsh.String
    symbol: qborsh.String
    uri: qborsh.String
    mint: qborsh.PubKey
    bonding_curve: qborsh.PubKey
    user: qborsh.PubKey


class _PumpFunParser(EventProgram):
    tag = ProtocolTag.PUMP_FUN
    program_name = "PumpFun"

    def __init__(self) -> None:
        self.desc_map = {
            PUMPFUN_TRADE_EVENT_DISCRIMINATOR: self.parse_trade,
            PUMPFUN_CREATE_EVENT_DISCRIMINATOR: self.parse_create,
        }

    def parse_trade(self, ctx: TransactionContext, instruction_index: int, data: bytes) -> List[SwapFragment]:
        event = borsh_decode(TradeEvent, data[self.desc_len :], "PumpFun trade event")
        mint = to_address(event["mint"])
        sol_amount = int(event["sol_amount"])
        token_amount = int(event["token_amount"])
        token_decimals = ctx.decimals(mint)
        if mint not in ctx.mint_decimals:
            logger.warning("No decimals known for mint %s, defaulting to 0", mint)

        if event["is_buy"]:
            legs = dict(
                mint_in=WSOL_MINT, amount_in=sol_amount, decimals_in=SOL_DECIMALS,
                mint_out=mint, amount_out=token_amount, decimals_out=token_decimals,
            )
        else:
            legs = dict(
                mint_in=mint, amount_in=token_amount, decimals_in=token_decimals,
                mint_out=WSOL_MINT, amount_out=sol_amount, decimals_out=SOL_DECIMALS,
            )
        return [
            SwapFragment(
                protocol=self.tag,
                instruction_index=instruction_index,
                timestamp=int(event["timestamp"]),
                who=to_address(event["user"]),
                **legs,
            )
        ]

    def parse_create(self, ctx: TransactionContext, instruction_index: int, data: bytes) -> List[SwapFragment]:
        event = borsh_decode(CreateEvent, data[self.desc_len :], "PumpFun create event")
        logger.debug(
            "PumpFun token %s (%s) created by %s", to_address(event["mint"]), event["symbol"], to_address(event["user"])
        )
        return []


PumpFunParser = _PumpFunParser()
