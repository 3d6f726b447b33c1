"""
Pools that leave no event behind. Their swaps are read off the SPL token
transfers they make while executing the outer instruction.
"""

from typing import List

from solswaps.constants import ProtocolTag
from solswaps.context import TransactionContext
from solswaps.logger import get_logger
from solswaps.parser.models import Program, SwapFragment
from solswaps.parser.parsers.tokenProgram import TokenProgramParser

logger = get_logger(__name__)


class TransferAMM(Program):
    """
    Token-transfer AMM decoder. Every qualifying inner transfer becomes a
    single-leg fragment.

    Args:
        tag: Protocol tag reported on the fragments.
        program_name: Human-readable name.
        checked: Whether TransferChecked instructions count as well.
    """

    def __init__(self, tag: ProtocolTag, program_name: str, checked: bool = True) -> None:
        self.tag = tag
        self.program_name = program_name
        self.checked = checked

    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        ctx.outer(instruction_index)
        fragments = []
        for instr in ctx.inner(instruction_index):
            transfer = TokenProgramParser.route_instruction(ctx, instr)
            if transfer is None or (transfer.checked and not self.checked):
                continue
            fragments.append(TokenProgramParser.to_fragment(transfer, self.tag, instruction_index))
        logger.debug("%s instruction %d made %d transfers", self.program_name, instruction_index, len(fragments))
        return fragments


RaydiumParser = TransferAMM(ProtocolTag.RAYDIUM, "Raydium")
RaydiumLaunchpadParser = TransferAMM(ProtocolTag.RAYDIUM_LAUNCHPAD, "RaydiumLaunchpad")
OrcaParser = TransferAMM(ProtocolTag.ORCA, "Orca", checked=False)
MeteoraParser = TransferAMM(ProtocolTag.METEORA, "Meteora")
PumpFunAMMParser = TransferAMM(ProtocolTag.PUMP_FUN_AMM, "PumpFunAMM")
