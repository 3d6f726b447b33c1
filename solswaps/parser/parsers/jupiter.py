from typing import List

import qborsh

from solswaps.constants import JUPITER_ROUTE_EVENT_DISCRIMINATOR, ProtocolTag
from solswaps.context import TransactionContext
from solswaps.parser.models import EventProgram, SwapFragment, borsh_decode
from solswaps.utils import to_address


@qborsh.schema
class SwapEvent:
    """
    Route event emitted by the aggregator for every hop it executes.

    Attributes:
        amm: Program of the pool used for the hop.
        input_mint: Mint sold into the hop.
        input_amount: Amount sold.
        output_mint: Mint bought from the hop.
        output_amount: Amount bought.
    """
    amm: qborsh.PubKey
    input_mint: qborsh.PubKey
    input_amount: qborsh.U64
    output_mint: qborsh.PubKey
    output_amount: qborsh.U64


class _JupiterParser(EventProgram):
    """
    Reads the route events the aggregator logs. Each event is one hop; the
    resolver nets the hops into a single swap.
    """

    tag = ProtocolTag.JUPITER
    program_name = "Jupiter"

    def __init__(self) -> None:
        self.desc_map = {JUPITER_ROUTE_EVENT_DISCRIMINATOR: self.parse_swap_event}

    def parse_swap_event(self, ctx: TransactionContext, instruction_index: int, data: bytes) -> List[SwapFragment]:
        event = borsh_decode(SwapEvent, data[self.desc_len :], "Jupiter swap event")
        input_mint = to_address(event["input_mint"])
        output_mint = to_address(event["output_mint"])
        return [
            SwapFragment(
                protocol=self.tag,
                mint_in=input_mint,
                amount_in=int(event["input_amount"]),
                decimals_in=ctx.decimals(input_mint),
                mint_out=output_mint,
                amount_out=int(event["output_amount"]),
                decimals_out=ctx.decimals(output_mint),
                instruction_index=instruction_index,
            )
        ]


JupiterParser = _JupiterParser()
