"""
Collapses the fragments of a transaction into one swap.

Which rule applies depends on what the dispatcher found: aggregator route
events are netted hop by hop, a lone complete fragment maps straight through,
and anything else is read as a sequence of token movements from the first
mint sent to the last mint received.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set, Tuple

from solswaps.constants import ProtocolTag
from solswaps.context import TransactionContext
from solswaps.errors import AmbiguousRoute, NoSwapDetected
from solswaps.logger import get_logger
from solswaps.parser import ParseResult
from solswaps.parser.models import SwapFragment
from solswaps.resolver import models
from solswaps.resolver.models import SwapSummary, TokenAmount

logger = get_logger(__name__)


def signers(ctx: TransactionContext) -> Tuple[str, ...]:
    """
    The wallet a swap is attributed to. Recurring-order programs trade on
    behalf of a user who sits at account position 2.
    """
    if any(ctx.contains_program(p) for p in ctx.registry.relay_programs):
        if len(ctx.account_keys) > 2:
            return (ctx.account_keys[2],)
        logger.warning("Relayed order with only %d accounts, keeping the fee payer", len(ctx.account_keys))
    return (ctx.signer,)


def amms(fragments: Sequence[SwapFragment]) -> Tuple[str, ...]:
    seen: List[str] = []
    for fragment in fragments:
        if str(fragment.protocol) not in seen:
            seen.append(str(fragment.protocol))
    return tuple(seen)


def net_route(fragments: Sequence[SwapFragment]) -> Tuple[TokenAmount, TokenAmount]:
    """
    Nets a multi-hop route. Mints that went in and came out in equal total
    are intermediates and drop out.

    Raises:
        AmbiguousRoute: If netting leaves anything but one mint per side.
    """
    token_in: Dict[str, int] = {}
    token_out: Dict[str, int] = {}
    decimals: Dict[str, int] = {}

    for fragment in fragments:
        if not fragment.is_complete:
            continue
        token_in[fragment.mint_in] = token_in.get(fragment.mint_in, 0) + fragment.amount_in
        token_out[fragment.mint_out] = token_out.get(fragment.mint_out, 0) + fragment.amount_out
        decimals.setdefault(fragment.mint_in, fragment.decimals_in)
        decimals.setdefault(fragment.mint_out, fragment.decimals_out)

    for mint in list(token_in):
        if mint in token_out and token_in[mint] == token_out[mint]:
            del token_in[mint]
            del token_out[mint]

    if len(token_in) != 1 or len(token_out) != 1:
        raise AmbiguousRoute(
            f"Route nets to {len(token_in)} input and {len(token_out)} output mints: "
            f"in={sorted(token_in)} out={sorted(token_out)}"
        )

    (mint_in, amount_in), = token_in.items()
    (mint_out, amount_out), = token_out.items()
    return TokenAmount(mint_in, amount_in, decimals[mint_in]), TokenAmount(mint_out, amount_out, decimals[mint_out])


def single(fragment: SwapFragment) -> Tuple[TokenAmount, TokenAmount]:
    if not fragment.is_complete:
        raise NoSwapDetected(f"A single {fragment.protocol} transfer of {fragment.mint_in} is not a swap")
    return (
        TokenAmount(fragment.mint_in, fragment.amount_in, fragment.decimals_in),
        TokenAmount(fragment.mint_out, fragment.amount_out, fragment.decimals_out),
    )


def movements(fragments: Sequence[SwapFragment]) -> Tuple[TokenAmount, TokenAmount]:
    """
    Reads a heterogeneous fragment list as token movements. Mints are ordered
    by first appearance; the first is the input and the last the output.
    Amounts are summed per side, counting each (amount, mint) observation once.

    A trailing fee paid in the input mint therefore adds to the input side
    instead of hiding the output.

    Raises:
        NoSwapDetected: If fewer than two distinct mints moved.
    """
    legs = [leg for fragment in fragments for leg in fragment.legs()]
    decimals: Dict[str, int] = {}
    for mint, _, leg_decimals in legs:
        decimals.setdefault(mint, leg_decimals)
    ordered = list(decimals)
    if len(ordered) < 2:
        raise NoSwapDetected(f"Token movements only touch {ordered[0]}")
    first_mint, last_mint = ordered[0], ordered[-1]

    seen_in: Set[Tuple[int, str]] = set()
    seen_out: Set[Tuple[int, str]] = set()
    amount_in = amount_out = 0
    for mint, amount, _ in legs:
        if mint == first_mint and (amount, mint) not in seen_in:
            amount_in += amount
            seen_in.add((amount, mint))
        if mint == last_mint and (amount, mint) not in seen_out:
            amount_out += amount
            seen_out.add((amount, mint))

    return (
        TokenAmount(first_mint, amount_in, decimals[first_mint]),
        TokenAmount(last_mint, amount_out, decimals[last_mint]),
    )


def flag_assumed(amount: TokenAmount, fragments: Sequence[SwapFragment]) -> TokenAmount:
    """Marks a side whose mint some contributing fragment only guessed."""
    if any(f.assumed and amount.mint in (f.mint_in, f.mint_out) for f in fragments):
        logger.warning("Summary mint %s rests on the wrapped-SOL guess", amount.mint)
        return replace(amount, assumed=True)
    return amount


def timestamp(ctx: TransactionContext, fragments: Sequence[SwapFragment]) -> Optional[int]:
    for fragment in fragments:
        if fragment.timestamp is not None:
            return fragment.timestamp
    return ctx.block_time


def resolve(result: ParseResult) -> SwapSummary:
    """
    Resolves the fragments of a parsed transaction into one swap.

    Args:
        result: Output of `solswaps.parse`.

    Returns:
        The SwapSummary of the transaction.

    Raises:
        NoSwapDetected: If there is nothing to resolve.
        AmbiguousRoute: If an aggregator route does not net to one pair.
    """
    ctx = result.context
    fragments = list(result.fragments)
    if not fragments:
        raise NoSwapDetected(f"No swap found in {ctx.signatures[0] if ctx.signatures else 'transaction'}")

    routed = [f for f in fragments if f.protocol is ProtocolTag.JUPITER]
    if routed:
        logger.debug("Netting %d route events", len(routed))
        token_in, token_out = net_route(routed)
        used = routed
    elif len(fragments) == 1:
        token_in, token_out = single(fragments[0])
        used = fragments
    else:
        logger.debug("Reading %d fragments as token movements", len(fragments))
        token_in, token_out = movements(fragments)
        used = fragments

    return SwapSummary(
        signers=signers(ctx),
        signatures=tuple(ctx.signatures),
        amms=amms(used),
        token_in=flag_assumed(token_in, used),
        token_out=flag_assumed(token_out, used),
        timestamp=timestamp(ctx, used),
    )


__all__ = ["resolve", "models", "SwapSummary", "TokenAmount"]
