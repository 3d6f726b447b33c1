from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from solswaps.constants import ProtocolTag
from solswaps.context import TransactionContext
from solswaps.errors import DecodeError, IndexOutOfRange
from solswaps.logger import get_logger
from solswaps.normalizer.models import Transaction
from solswaps.parser import models, parsers
from solswaps.parser.models import Program, SwapFragment
from solswaps.registry import DEFAULT_REGISTRY, ProtocolRegistry, Stage

logger = get_logger(__name__)


class DispatchStage(str, Enum):
    NOT_STARTED = "NotStarted"
    SCANNING_PRIORITY = "ScanningPriorityProtocols"
    PRIORITY_FOUND = "PriorityFound"
    SCANNING_DIRECT = "ScanningDirectProtocols"
    DIRECT_FOUND = "DirectFound"
    GENERIC_FALLBACK = "GenericFallback"
    DONE = "Done"

    def __str__(self) -> str:
        return self.value


# Stages after which the run is over.
OUTCOME_STAGES = (DispatchStage.PRIORITY_FOUND, DispatchStage.DIRECT_FOUND, DispatchStage.GENERIC_FALLBACK)

Programs = List[Optional[str]]
Step = Callable[[TransactionContext, Programs, List[SwapFragment]], DispatchStage]


@dataclass(slots=True)
class ParseResult:
    """
    Output of the dispatcher for one transaction.

    Attributes:
        signatures: Transaction signatures.
        fragments: Swap fragments, in discovery order.
        stage: Stage that settled the outcome: PriorityFound, DirectFound or
            GenericFallback.
        trail: Every stage visited, from NotStarted to Done.
        errors: Recoverable decode errors met on the way.
        context: The context the fragments were decoded from.
    """
    signatures: List[str]
    fragments: List[SwapFragment]
    stage: DispatchStage
    trail: Tuple[DispatchStage, ...]
    errors: List[DecodeError]
    context: TransactionContext = field(repr=False)


class Dispatcher:
    """
    Routes outer instructions to protocol decoders in three stages:
    aggregators and routers first, then direct DEXes, then the generic
    transfer heuristic. Each stage visits every outer instruction once.

    Args:
        registry: Program address to protocol lookup.
        decoders: Protocol tag to decoder.
    """

    def __init__(
        self,
        registry: ProtocolRegistry = DEFAULT_REGISTRY,
        decoders: Mapping[ProtocolTag, Program] = parsers.DECODERS,
    ) -> None:
        self.registry = registry
        self.decoders = decoders
        self.steps: Dict[DispatchStage, Step] = {
            DispatchStage.NOT_STARTED: lambda ctx, programs, found: DispatchStage.SCANNING_PRIORITY,
            DispatchStage.SCANNING_PRIORITY: self.scan_priority,
            DispatchStage.PRIORITY_FOUND: lambda ctx, programs, found: DispatchStage.DONE,
            DispatchStage.SCANNING_DIRECT: self.scan_direct,
            DispatchStage.DIRECT_FOUND: lambda ctx, programs, found: DispatchStage.DONE,
            DispatchStage.GENERIC_FALLBACK: self.scan_generic,
        }

    def run(self, ctx: TransactionContext) -> ParseResult:
        programs = self._outer_programs(ctx)
        fragments: List[SwapFragment] = []
        state = DispatchStage.NOT_STARTED
        trail = [state]

        while state is not DispatchStage.DONE:
            next_state = self.steps[state](ctx, programs, fragments)
            logger.debug("Dispatcher %s -> %s (%d fragments)", state, next_state, len(fragments))
            state = next_state
            trail.append(state)

        outcome = next(s for s in reversed(trail) if s in OUTCOME_STAGES)
        return ParseResult(
            signatures=list(ctx.signatures),
            fragments=[replace(f, sequence_index=i) for i, f in enumerate(fragments)],
            stage=outcome,
            trail=tuple(trail),
            errors=list(ctx.decode_errors),
            context=ctx,
        )

    def scan_priority(self, ctx: TransactionContext, programs: Programs, found: List[SwapFragment]) -> DispatchStage:
        self._scan(ctx, programs, found, Stage.PRIORITY)
        return DispatchStage.PRIORITY_FOUND if found else DispatchStage.SCANNING_DIRECT

    def scan_direct(self, ctx: TransactionContext, programs: Programs, found: List[SwapFragment]) -> DispatchStage:
        self._scan(ctx, programs, found, Stage.DIRECT)
        return DispatchStage.DIRECT_FOUND if found else DispatchStage.GENERIC_FALLBACK

    def scan_generic(self, ctx: TransactionContext, programs: Programs, found: List[SwapFragment]) -> DispatchStage:
        decoder = self.decoders[ProtocolTag.GENERIC]
        for index, program_id in enumerate(programs):
            if program_id is not None:
                found.extend(decoder.route(ctx, index))
        return DispatchStage.DONE

    def _scan(self, ctx: TransactionContext, programs: Programs, found: List[SwapFragment], stage: Stage) -> None:
        for index, program_id in enumerate(programs):
            if program_id is None:
                continue
            spec = self.registry.lookup(program_id)
            if spec is None or spec.stage is not stage:
                continue
            decoder = self.decoders.get(spec.tag)
            if decoder is None:
                logger.warning("No decoder for %s, skipping instruction %d", spec.tag, index)
                continue
            fragments = decoder.route(ctx, index)
            logger.debug("%s matched instruction %d, %d fragments", spec.tag, index, len(fragments))
            found.extend(fragments)

    def _outer_programs(self, ctx: TransactionContext) -> Programs:
        programs: Programs = []
        for index, instr in enumerate(ctx.instructions):
            try:
                programs.append(ctx.program_id(instr))
            except IndexOutOfRange as e:
                e.instruction_index = index
                ctx.report(e)
                programs.append(None)
        return programs


def parse(tx: Transaction, registry: ProtocolRegistry = DEFAULT_REGISTRY) -> ParseResult:
    """
    Decodes a normalized transaction into swap fragments.

    Args:
        tx: A normalized Transaction object.
        registry: Protocol configuration to dispatch with.

    Returns:
        A ParseResult with the fragments and the dispatcher outcome.

    Raises:
        MalformedTransaction: If the transaction has no message or metadata, or
            failed on chain.
    """
    ctx = TransactionContext(tx, registry)
    return Dispatcher(registry).run(ctx)


__all__ = ["DispatchStage", "Dispatcher", "ParseResult", "parse", "models", "parsers"]
