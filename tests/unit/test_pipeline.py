"""End-to-end tests: raw transaction in, swap summary out"""
import pytest

import solswaps
from solswaps.constants import MOONSHOT_BUY_DISCRIMINATOR, MOONSHOT_PROGRAM_ID, PUMPFUN_AMM_PROGRAM_ID, WSOL_MINT
from solswaps.errors import MalformedTransaction, NoSwapDetected
from tests.builders import (
    MINT_A,
    MINT_B,
    MINT_C,
    MINT_D,
    SIGNER,
    UNKNOWN_PROGRAM,
    TxBuilder,
    address,
    jupiter_route,
    moonshot_trade,
    pumpfun_trade,
)

TOKEN_X = address("token-x")


class TestProcess:
    def test_single_event_swap(self):
        tx = jupiter_route([(WSOL_MINT, 1_000_000_000, TOKEN_X, 50_000)])
        tx.token_balance(address("signer-ata-x"), TOKEN_X, SIGNER, pre=0, post=50_000, decimals=6)
        summary = solswaps.process(tx.build())
        assert (summary.token_in.mint, summary.token_in.amount, summary.token_in.decimals) == (
            WSOL_MINT, 1_000_000_000, 9,
        )
        assert (summary.token_out.mint, summary.token_out.amount, summary.token_out.decimals) == (
            TOKEN_X, 50_000, 6,
        )
        assert summary.amms == ("Jupiter",)
        assert summary.signers == (SIGNER,)

    def test_three_hop_route_nets_out(self):
        tx = jupiter_route([(MINT_A, 100, MINT_B, 80), (MINT_B, 80, MINT_C, 80), (MINT_C, 80, MINT_D, 60)])
        summary = solswaps.process(tx.build())
        assert (summary.token_in.mint, summary.token_in.amount) == (MINT_A, 100)
        assert (summary.token_out.mint, summary.token_out.amount) == (MINT_D, 60)

    def test_bonding_curve_sell(self):
        summary = solswaps.process(pumpfun_trade(MINT_A, 2_000_000, 777_000, is_buy=False).build())
        assert summary.token_in == solswaps.TokenAmount(MINT_A, 777_000, 6)
        assert summary.token_out == solswaps.TokenAmount(WSOL_MINT, 2_000_000, 9)
        assert summary.timestamp == 1_710_000_000

    def test_moonshot_buy(self):
        tx = TxBuilder()
        accounts = [SIGNER] + [address(f"moonshot-{i}") for i in range(1, 11)]
        accounts[6] = MINT_A
        tx.outer(MOONSHOT_PROGRAM_ID, accounts, moonshot_trade(MOONSHOT_BUY_DISCRIMINATOR))
        tx.native_balance(SIGNER, 2_000_000_000, 1_250_000_000)
        tx.token_balance(address("signer-ata"), MINT_A, SIGNER, pre=0, post=42_000, decimals=9)
        summary = solswaps.process(tx.build())
        assert summary.amms == ("Moonshot",)
        assert summary.token_in == solswaps.TokenAmount(WSOL_MINT, 750_000_000, 9)
        assert summary.token_out == solswaps.TokenAmount(MINT_A, 42_000, 9)

    def test_amm_swap_with_trailing_fee_leg(self):
        tx = TxBuilder()
        index = tx.outer(PUMPFUN_AMM_PROGRAM_ID, [SIGNER])
        user_wsol, user_token = address("user-wsol"), address("user-token")
        pool_wsol, pool_token = address("pool-wsol"), address("pool-token")
        pool = address("pool")
        tx.token_balance(user_wsol, WSOL_MINT, SIGNER, pre=2_000, post=990, decimals=9)
        tx.token_balance(user_token, MINT_A, SIGNER, pre=0, post=500, decimals=6)
        tx.token_balance(pool_wsol, WSOL_MINT, pool, pre=0, post=1_000, decimals=9)
        tx.token_balance(pool_token, MINT_A, pool, pre=500, post=0, decimals=6)
        tx.transfer(index, user_wsol, pool_wsol, 1_000)
        tx.transfer(index, pool_token, user_token, 500, authority=pool)
        tx.transfer(index, user_wsol, address("fee-wsol"), 10)
        summary = solswaps.process(tx.build())
        assert summary.amms == ("PumpFunAMM",)
        assert summary.token_in == solswaps.TokenAmount(WSOL_MINT, 1_010, 9)
        assert summary.token_out == solswaps.TokenAmount(MINT_A, 500, 6)

    def test_guessed_wrapped_sol_flagged(self):
        tx = TxBuilder()
        index = tx.outer(PUMPFUN_AMM_PROGRAM_ID, [SIGNER])
        tx.token_balance(address("user-a"), MINT_A, SIGNER, pre=100, post=0, decimals=6)
        tx.transfer(index, address("user-a"), address("vault-a"), 100)
        tx.transfer(index, address("vault-x"), address("user-x"), 7, authority=address("pool"))
        summary = solswaps.process(tx.build())
        assert summary.token_in.assumed is False
        assert (summary.token_out.mint, summary.token_out.assumed) == (WSOL_MINT, True)

    def test_envelope_input(self):
        tx = jupiter_route([(MINT_A, 5, MINT_B, 6)])
        assert solswaps.process(tx.build(envelope=True)) == solswaps.process(tx.build())

    def test_idempotent(self):
        raw = pumpfun_trade(MINT_A, 10, 20, is_buy=True).build()
        assert solswaps.process(raw) == solswaps.process(raw)

    def test_failed_transaction(self):
        tx = jupiter_route([(MINT_A, 100, MINT_B, 80)]).failed()
        with pytest.raises(MalformedTransaction):
            solswaps.process(tx.build())

    def test_fallback_without_signer_accounts(self):
        tx = TxBuilder()
        index = tx.outer(UNKNOWN_PROGRAM, [SIGNER])
        stranger = address("stranger")
        tx.token_balance(address("x-src"), MINT_A, stranger, pre=10, post=0)
        tx.token_balance(address("y-src"), MINT_B, stranger, pre=5, post=0)
        tx.transfer(index, address("x-src"), address("x-dst"), 10, authority=stranger)
        tx.transfer(index, address("y-src"), address("y-dst"), 5, authority=stranger)
        with pytest.raises(NoSwapDetected):
            solswaps.process(tx.build())

    def test_custom_registry_passed_through(self):
        registry = solswaps.ProtocolRegistry([])
        tx = jupiter_route([(MINT_A, 5, MINT_B, 6)])
        with pytest.raises(NoSwapDetected):
            solswaps.process(tx.build(), registry)
