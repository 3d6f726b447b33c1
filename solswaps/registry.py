"""
Immutable protocol configuration.

The dispatcher only ever asks the registry "which protocol owns this program
address, and in which stage does it run". Adding a protocol address means
adding an entry here, not touching the dispatcher.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from solswaps import constants as c
from solswaps.constants import ProtocolTag


class Stage(str, Enum):
    PRIORITY = "priority"
    DIRECT = "direct"


@dataclass(frozen=True, slots=True)
class ProtocolSpec:
    tag: ProtocolTag
    stage: Stage
    program_ids: FrozenSet[str]


class ProtocolRegistry:
    """
    Read-only lookup from program address to protocol spec.

    Also holds the program set that switches the summary signer (recurring
    orders are relayed on behalf of the trader).
    """

    __slots__ = ("_specs", "_by_program", "_relay_programs")

    def __init__(self, specs: Iterable[ProtocolSpec], relay_programs: Iterable[str] = ()) -> None:
        specs = tuple(specs)
        by_program: Dict[str, ProtocolSpec] = {}
        for spec in specs:
            for program_id in spec.program_ids:
                if program_id in by_program:
                    raise ValueError(
                        f"Program {program_id} registered for both {by_program[program_id].tag} and {spec.tag}"
                    )
                by_program[program_id] = spec
        self._specs = specs
        self._by_program: Mapping[str, ProtocolSpec] = MappingProxyType(by_program)
        self._relay_programs = frozenset(relay_programs)

    def lookup(self, program_id: str) -> Optional[ProtocolSpec]:
        return self._by_program.get(program_id)

    def spec(self, tag: ProtocolTag) -> Optional[ProtocolSpec]:
        for spec in self._specs:
            if spec.tag is tag:
                return spec
        return None

    def program_ids(self, tag: ProtocolTag) -> FrozenSet[str]:
        spec = self.spec(tag)
        return spec.program_ids if spec else frozenset()

    @property
    def specs(self) -> tuple:
        return self._specs

    @property
    def relay_programs(self) -> FrozenSet[str]:
        return self._relay_programs


def _spec(tag: ProtocolTag, stage: Stage, *program_ids: str) -> ProtocolSpec:
    return ProtocolSpec(tag=tag, stage=stage, program_ids=frozenset(program_ids))


DEFAULT_REGISTRY = ProtocolRegistry(
    specs=(
        _spec(ProtocolTag.JUPITER, Stage.PRIORITY, c.JUPITER_PROGRAM_ID),
        _spec(ProtocolTag.MOONSHOT, Stage.PRIORITY, c.MOONSHOT_PROGRAM_ID),
        _spec(
            ProtocolTag.TRADING_BOT,
            Stage.PRIORITY,
            c.BANANA_GUN_PROGRAM_ID,
            c.MINTECH_PROGRAM_ID,
            c.BLOOM_PROGRAM_ID,
            c.NOVA_PROGRAM_ID,
            c.MAESTRO_PROGRAM_ID,
        ),
        _spec(ProtocolTag.OKX, Stage.PRIORITY, c.OKX_DEX_ROUTER_PROGRAM_ID),
        _spec(
            ProtocolTag.RAYDIUM,
            Stage.DIRECT,
            c.RAYDIUM_V4_PROGRAM_ID,
            c.RAYDIUM_CPMM_PROGRAM_ID,
            c.RAYDIUM_AMM_PROGRAM_ID,
            c.RAYDIUM_CONCENTRATED_LIQUIDITY_PROGRAM_ID,
            c.RAYDIUM_CONCENTRATED_LIQUIDITY_LEGACY_PROGRAM_ID,
        ),
        _spec(ProtocolTag.RAYDIUM_LAUNCHPAD, Stage.DIRECT, c.RAYDIUM_LAUNCHPAD_PROGRAM_ID),
        _spec(ProtocolTag.ORCA, Stage.DIRECT, c.ORCA_PROGRAM_ID),
        _spec(
            ProtocolTag.METEORA,
            Stage.DIRECT,
            c.METEORA_PROGRAM_ID,
            c.METEORA_POOLS_PROGRAM_ID,
            c.METEORA_DAMM_V2_PROGRAM_ID,
        ),
        _spec(ProtocolTag.PUMP_FUN_AMM, Stage.DIRECT, c.PUMPFUN_AMM_PROGRAM_ID),
        _spec(ProtocolTag.PUMP_FUN, Stage.DIRECT, c.PUMPFUN_PROGRAM_ID, c.PUMPFUN_SECONDARY_PROGRAM_ID),
    ),
    relay_programs=(c.JUPITER_DCA_PROGRAM_ID,),
)
