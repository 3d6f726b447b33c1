"""Unit tests for the Moonshot decoder"""
import pytest

from solswaps.constants import (
    MOONSHOT_BUY_DISCRIMINATOR,
    MOONSHOT_PROGRAM_ID,
    MOONSHOT_SELL_DISCRIMINATOR,
    WSOL_MINT,
    ProtocolTag,
)
from solswaps.context import TransactionContext
from solswaps.errors import BalanceNotFound, UnknownDiscriminator
from solswaps.normalizer import normalize
from solswaps.parser.parsers.moonshot import MoonshotParser
from tests.builders import MINT_A, SIGNER, TxBuilder, address, moonshot_trade


def _accounts(mint: str):
    accounts = [SIGNER] + [address(f"moonshot-{i}") for i in range(1, 11)]
    accounts[6] = mint
    return accounts


def _trade(data: bytes, pre: int, post: int, accounts=None, balances: bool = True) -> TransactionContext:
    tx = TxBuilder()
    tx.outer(MOONSHOT_PROGRAM_ID, accounts or _accounts(MINT_A), data)
    tx.native_balance(SIGNER, 3_000_000_000, 2_000_000_000 if post > pre else 3_500_000_000)
    if balances:
        tx.token_balance(address("signer-ata"), MINT_A, SIGNER, pre=pre, post=post, decimals=9)
    return TransactionContext(normalize(tx.build()))


class TestMoonshotParser:
    def test_buy_uses_measured_amounts(self):
        # Stated limits are far from what executed.
        ctx = _trade(moonshot_trade(MOONSHOT_BUY_DISCRIMINATOR, 1, 1), pre=0, post=123_456)
        [fragment] = MoonshotParser.route(ctx, 0)
        assert fragment.protocol is ProtocolTag.MOONSHOT
        assert (fragment.mint_in, fragment.amount_in) == (WSOL_MINT, 1_000_000_000)
        assert (fragment.mint_out, fragment.amount_out, fragment.decimals_out) == (MINT_A, 123_456, 9)

    def test_sell(self):
        ctx = _trade(moonshot_trade(MOONSHOT_SELL_DISCRIMINATOR), pre=200_000, post=50_000)
        [fragment] = MoonshotParser.route(ctx, 0)
        assert (fragment.mint_in, fragment.amount_in) == (MINT_A, 150_000)
        assert (fragment.mint_out, fragment.amount_out) == (WSOL_MINT, 500_000_000)

    def test_non_trade_instruction_skipped(self):
        ctx = _trade(moonshot_trade(MOONSHOT_BUY_DISCRIMINATOR), pre=0, post=1, accounts=_accounts(MINT_A)[:9])
        assert MoonshotParser.route(ctx, 0) == []
        assert ctx.decode_errors == []

    def test_unknown_discriminator_reported(self):
        ctx = _trade(moonshot_trade(bytes(8)), pre=0, post=1)
        assert MoonshotParser.route(ctx, 0) == []
        assert isinstance(ctx.decode_errors[0], UnknownDiscriminator)

    def test_missing_token_balance_reported(self):
        ctx = _trade(moonshot_trade(MOONSHOT_BUY_DISCRIMINATOR), pre=0, post=1, balances=False)
        assert MoonshotParser.route(ctx, 0) == []
        assert isinstance(ctx.decode_errors[0], BalanceNotFound)

    @pytest.mark.parametrize("length", [32, 34])
    def test_wrong_data_length_skipped(self, length):
        data = moonshot_trade(MOONSHOT_BUY_DISCRIMINATOR)
        data = data[:length] if length < len(data) else data + bytes(length - len(data))
        ctx = _trade(data, pre=0, post=1)
        assert MoonshotParser.route(ctx, 0) == []
