from typing import List, Optional

from solswaps.constants import ProtocolTag
from solswaps.context import TransactionContext
from solswaps.logger import get_logger
from solswaps.parser.models import Program, SwapFragment
from solswaps.parser.parsers.tokenProgram import TokenProgramParser, Transfer

logger = get_logger(__name__)


class _GenericParser(Program):
    """
    Last-resort decoder for programs nobody registered.

    Looks for one transfer out of a token account the primary signer owns and
    one transfer into such an account carrying a different mint, and pairs
    them into a single swap.
    """

    tag = ProtocolTag.GENERIC
    program_name = "Generic"

    def decode(self, ctx: TransactionContext, instruction_index: int) -> List[SwapFragment]:
        ctx.outer(instruction_index)
        transfers: List[Transfer] = []
        for instr in ctx.inner(instruction_index):
            transfer = TokenProgramParser.route_instruction(ctx, instr)
            if transfer is None or transfer.amount == 0:
                continue
            transfers.append(transfer)

        if len(transfers) < 2:
            return []

        signer = ctx.signer
        outgoing: Optional[Transfer] = None
        incoming: Optional[Transfer] = None
        for i, candidate in enumerate(transfers):
            if self._owner(ctx, candidate.source) != signer:
                continue
            for j, other in enumerate(transfers):
                if i == j or other.mint == candidate.mint:
                    continue
                if self._owner(ctx, other.destination) == signer:
                    outgoing, incoming = candidate, other
                    break
            if outgoing is not None:
                break

        if outgoing is None or incoming is None:
            logger.debug("No signer-owned transfer pair under instruction %d", instruction_index)
            return []

        logger.debug("Generic swap %s -> %s at instruction %d", outgoing.mint, incoming.mint, instruction_index)
        return [
            SwapFragment(
                protocol=self.tag,
                mint_in=outgoing.mint,
                amount_in=outgoing.amount,
                decimals_in=ctx.decimals(outgoing.mint, outgoing.decimals),
                mint_out=incoming.mint,
                amount_out=incoming.amount,
                decimals_out=ctx.decimals(incoming.mint, incoming.decimals),
                instruction_index=instruction_index,
                who=signer,
                assumed=outgoing.assumed or incoming.assumed,
            )
        ]

    def _owner(self, ctx: TransactionContext, token_account: str) -> Optional[str]:
        info = ctx.token_accounts.get(token_account)
        return info.owner if info else None


GenericParser = _GenericParser()
