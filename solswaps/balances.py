"""
Net balance changes over a transaction.

Used by decoders for protocols that emit no event, where the executed amount
has to be read off the balance snapshots.
"""

from typing import Iterable, Optional, Union

from solswaps.constants import WSOL_MINT
from solswaps.context import TransactionContext
from solswaps.errors import BalanceNotFound
from solswaps.normalizer.models import TokenBalance

AccountSelector = Union[int, str]


def _find(balances: Iterable[TokenBalance], mint: str, who: AccountSelector) -> Optional[TokenBalance]:
    for tb in balances:
        if tb.mint != mint:
            continue
        if isinstance(who, int) and tb.accountIndex == who:
            return tb
        if isinstance(who, str) and tb.owner == who:
            return tb
    return None


def native_change(ctx: TransactionContext, account_index: int = 0) -> int:
    """
    Lamport change of one account, post minus pre. Fees are included.

    Raises:
        BalanceNotFound: If either snapshot has no entry for the account.
    """
    pre, post = ctx.meta.preBalances, ctx.meta.postBalances
    if not (0 <= account_index < len(pre) and 0 <= account_index < len(post)):
        raise BalanceNotFound(f"No native balance recorded for account index {account_index}")
    return int(post[account_index]) - int(pre[account_index])


def net_change(ctx: TransactionContext, mint: str, who: AccountSelector = 0) -> int:
    """
    Signed change of `mint` held by `who` across the transaction.

    Args:
        ctx: Transaction context.
        mint: Token mint, or the wrapped-SOL mint for native lamports.
        who: Account index of the token account (or of the wallet, for native
            SOL), or an owner address. For native SOL an owner address is
            resolved to its index in the key table.

    Returns:
        Post amount minus pre amount, in base units. A side with no entry
        counts as zero as long as the other side has one.

    Raises:
        BalanceNotFound: If neither a pre- nor a post-entry exists.
    """
    if mint == WSOL_MINT:
        if isinstance(who, str):
            if who not in ctx.account_keys:
                raise BalanceNotFound(f"Owner {who} is not in the account key table")
            who = ctx.account_keys.index(who)
        return native_change(ctx, who)

    pre = _find(ctx.meta.preTokenBalances, mint, who)
    post = _find(ctx.meta.postTokenBalances, mint, who)
    if pre is None and post is None:
        raise BalanceNotFound(f"No token balance for mint {mint} and account {who}")

    pre_amount = int(pre.uiTokenAmount.amount) if pre else 0
    post_amount = int(post.uiTokenAmount.amount) if post else 0
    return post_amount - pre_amount
