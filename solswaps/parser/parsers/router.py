"""
Umbrella programs that route a trade through other DEXes.

A router has no swap layout of its own. Its inner instructions are scanned
for known DEX programs, and each one found is decoded on the router's outer
instruction, once per protocol.
"""

from typing import AbstractSet, List, Mapping, Optional, Set, Tuple

from solswaps.constants import (
    OKX_COMMISSION_SPL_SWAP2_DISCRIMINATOR,
    OKX_SWAP2_DISCRIMINATOR,
    OKX_SWAP3_DISCRIMINATOR,
    OKX_SWAP_DISCRIMINATOR,
    ProtocolTag,
)
from solswaps.context import TransactionContext
from solswaps.errors import UnknownDiscriminator
from solswaps.logger import get_logger
from solswaps.parser.models import DiscriminatedProgram, Program, SwapFragment

logger = get_logger(__name__)


class RouterProgram(Program):
    """
    Args:
        tag: Protocol tag of the router.
        program_name: Human-readable name.
        nested_tags: Protocols the router is known to route through.
    """

    def __init__(self, tag: ProtocolTag, program_name: str, nested_tags: AbstractSet[ProtocolTag]) -> None:
        self.tag = tag
        self.program_name = program_name
        self.nested_tags = frozenset(nested_tags)
        self.nested: Mapping[ProtocolTag, Program] = {}

    def bind(self, decoders: Mapping[ProtocolTag, Program]) -> None:
        """Attaches the decoders used for nested protocols."""
        self.nested = {tag: decoders[tag] for tag in self.nested_tags if tag in decoders}

    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        ctx.outer(instruction_index)
        return self.route_nested(ctx, instruction_index)

    def route_nested(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        fragments: List[SwapFragment] = []
        seen: Set[Tuple] = set()
        processed: Set[ProtocolTag] = set()

        for instr in ctx.inner(instruction_index):
            if not 0 <= instr.programIdIndex < len(ctx.account_keys):
                continue
            spec = ctx.registry.lookup(ctx.program_id(instr))
            if spec is None or spec.tag in processed or spec.tag not in self.nested:
                continue
            processed.add(spec.tag)
            logger.debug("%s instruction %d routes through %s", self.program_name, instruction_index, spec.tag)

            for fragment in self.nested[spec.tag].route(ctx, instruction_index):
                # Approximate: distinct hops with equal mint and amount collapse.
                key = fragment.dedup_key()
                if key in seen:
                    continue
                seen.add(key)
                fragments.append(fragment)

        return fragments


class OKXRouter(RouterProgram, DiscriminatedProgram):
    """Router whose outer instruction must be one of its known entry points."""

    desc_len = 8

    def __init__(self, nested_tags: AbstractSet[ProtocolTag]) -> None:
        super().__init__(ProtocolTag.OKX, "OKX", nested_tags)
        self.desc_map = {
            OKX_SWAP_DISCRIMINATOR: self.parse_swap,
            OKX_SWAP2_DISCRIMINATOR: self.parse_swap,
            OKX_COMMISSION_SPL_SWAP2_DISCRIMINATOR: self.parse_swap,
            OKX_SWAP3_DISCRIMINATOR: self.parse_swap,
        }

    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        instr = ctx.outer(instruction_index)
        handler = self.handler_for(instr.data) if len(instr.data) >= self.desc_len else None
        if handler is None:
            raise UnknownDiscriminator(
                f"Unknown OKX entry point {self.desc(instr.data).hex() or '<empty>'}", instruction_index
            )
        return handler(ctx, instruction_index, instr.data)

    def parse_swap(
        self, ctx: TransactionContext, instruction_index: int, data: Optional[bytes] = None
    ) -> List[SwapFragment]:
        return self.route_nested(ctx, instruction_index)


TradingBotRouter = RouterProgram(
    ProtocolTag.TRADING_BOT,
    "TradingBot",
    {
        ProtocolTag.RAYDIUM,
        ProtocolTag.ORCA,
        ProtocolTag.METEORA,
        ProtocolTag.PUMP_FUN_AMM,
        ProtocolTag.PUMP_FUN,
    },
)

OKXParser = OKXRouter(
    {
        ProtocolTag.RAYDIUM,
        ProtocolTag.ORCA,
        ProtocolTag.METEORA,
        ProtocolTag.PUMP_FUN,
        ProtocolTag.RAYDIUM_LAUNCHPAD,
    }
)
