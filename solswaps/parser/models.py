import abc
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from solswaps.constants import ProtocolTag
from solswaps.context import TransactionContext
from solswaps.errors import DecodeError


@dataclass(frozen=True, slots=True)
class SwapFragment:
    """
    One observed token movement attributable to one hop of a route.

    Transfer-based decoders see a single leg per token transfer and leave the
    `*_out` fields empty. Event and balance-based decoders see both legs.

    Attributes:
        protocol: Protocol family that produced the fragment.
        mint_in: Mint of the token going in (or of the single moved token).
        amount_in: Amount in base units.
        decimals_in: Decimals of `mint_in`.
        mint_out: Mint of the token coming out, for complete fragments.
        amount_out: Amount coming out, in base units.
        decimals_out: Decimals of `mint_out`.
        sequence_index: Discovery order within the transaction.
        instruction_index: Outer instruction the fragment was decoded from.
        timestamp: Unix timestamp carried by the event, if any.
        who: Wallet the event names as trader, if any.
        assumed: True when a leg's mint is the wrapped-SOL guess made for a
            token account nothing else linked to a mint.
    """
    protocol: ProtocolTag
    mint_in: str
    amount_in: int
    decimals_in: int
    mint_out: Optional[str] = None
    amount_out: Optional[int] = None
    decimals_out: Optional[int] = None
    sequence_index: int = 0
    instruction_index: Optional[int] = None
    timestamp: Optional[int] = None
    who: Optional[str] = None
    assumed: bool = False

    @property
    def is_complete(self) -> bool:
        return self.mint_out is not None

    def legs(self) -> List[Tuple[str, int, int]]:
        """(mint, amount, decimals) movements, in leg first then out leg."""
        legs = [(self.mint_in, self.amount_in, self.decimals_in)]
        if self.is_complete:
            legs.append((self.mint_out, self.amount_out, self.decimals_out))
        return legs

    def dedup_key(self) -> Tuple[Any, ...]:
        """Structural identity used to drop fragments seen through several paths."""
        return (self.protocol, self.mint_in, self.amount_in, self.mint_out, self.amount_out)


Handler = Callable[[TransactionContext, int, bytes], List[SwapFragment]]


class Program(abc.ABC):
    """
    Base class for protocol decoders.

    A decoder turns one outer instruction (by index) into zero or more
    fragments. Decoders that dispatch on a data prefix set `desc` and
    `desc_map`, the way on-chain programs route on their discriminators.
    """

    tag: ProtocolTag
    program_name: str

    def route(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        """
        Decodes one outer instruction. Decode-local failures are recorded on
        the context and yield no fragments.
        """
        try:
            return self.decode(ctx, instruction_index)
        except DecodeError as e:
            if e.instruction_index is None:
                e.instruction_index = instruction_index
            ctx.report(e)
            return []

    @abc.abstractmethod
    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        ...


class DiscriminatedProgram(Program):
    """Decoder routing on a fixed-length prefix of some instruction data."""

    desc_len: int
    desc_map: Dict[bytes, Handler]

    def desc(self, data: bytes) -> bytes:
        return bytes(data[: self.desc_len])

    def handler_for(self, data: bytes) -> Optional[Handler]:
        return self.desc_map.get(self.desc(data))


def borsh_decode(schema: Any, data: bytes, what: str) -> Dict[str, Any]:
    """
    Decodes `data` with a qborsh schema.

    Raises:
        DecodeError: If the payload is truncated or holds invalid values.
    """
    try:
        return schema.decode(bytes(data))
    except (ValueError, RuntimeError) as e:
        raise DecodeError(f"Could not decode {what}: {e}") from e


class EventProgram(DiscriminatedProgram):
    """
    Decoder for programs that log structured events as self-invocations.

    Events are the inner instructions, under the decoded outer instruction,
    that the protocol's own program executes with a known 16-byte prefix.
    """

    desc_len = 16

    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        ctx.outer(instruction_index)
        program_ids = ctx.registry.program_ids(self.tag)
        fragments: List[SwapFragment] = []
        for instr in ctx.inner(instruction_index):
            if len(instr.data) < self.desc_len or not 0 <= instr.programIdIndex < len(ctx.account_keys):
                continue
            if ctx.program_id(instr) not in program_ids:
                continue
            handler = self.handler_for(instr.data)
            if handler is None:
                continue
            try:
                fragments.extend(handler(ctx, instruction_index, instr.data))
            except DecodeError as e:
                # One bad event does not void the others.
                e.instruction_index = instruction_index
                ctx.report(e)
        return fragments
