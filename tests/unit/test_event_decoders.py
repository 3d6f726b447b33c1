"""Unit tests for the event-log decoders (Jupiter, PumpFun)"""
from solswaps.constants import (
    JUPITER_PROGRAM_ID,
    JUPITER_ROUTE_EVENT_DISCRIMINATOR,
    PUMPFUN_PROGRAM_ID,
    PUMPFUN_SECONDARY_PROGRAM_ID,
    SOL_DECIMALS,
    WSOL_MINT,
    ProtocolTag,
)
from solswaps.context import TransactionContext
from solswaps.errors import DecodeError, IndexOutOfRange
from solswaps.normalizer import normalize
from solswaps.parser.parsers.jupiter import JupiterParser
from solswaps.parser.parsers.pumpfun import PumpFunParser
from tests.builders import (
    MINT_A,
    MINT_B,
    SIGNER,
    TxBuilder,
    address,
    jupiter_event,
    jupiter_route,
    pumpfun_create_event,
    pumpfun_trade,
    pumpfun_trade_event,
)


def _ctx(tx: TxBuilder) -> TransactionContext:
    return TransactionContext(normalize(tx.build()))


class TestJupiterParser:
    def test_single_event(self):
        tx = jupiter_route([(WSOL_MINT, 1_000_000_000, MINT_A, 50_000)])
        tx.token_balance(address("ata"), MINT_A, SIGNER, pre=0, post=50_000, decimals=6)
        ctx = _ctx(tx)
        [fragment] = JupiterParser.route(ctx, 0)
        assert fragment.protocol is ProtocolTag.JUPITER
        assert (fragment.mint_in, fragment.amount_in, fragment.decimals_in) == (WSOL_MINT, 1_000_000_000, 9)
        assert (fragment.mint_out, fragment.amount_out, fragment.decimals_out) == (MINT_A, 50_000, 6)
        assert fragment.instruction_index == 0

    def test_unknown_decimals_default_to_zero(self):
        ctx = _ctx(jupiter_route([(MINT_A, 10, MINT_B, 20)]))
        [fragment] = JupiterParser.route(ctx, 0)
        assert fragment.decimals_in == 0
        assert fragment.decimals_out == 0

    def test_one_event_per_hop_in_order(self):
        ctx = _ctx(jupiter_route([(MINT_A, 10, MINT_B, 20), (MINT_B, 20, WSOL_MINT, 30)]))
        fragments = JupiterParser.route(ctx, 0)
        assert [(f.mint_in, f.mint_out) for f in fragments] == [(MINT_A, MINT_B), (MINT_B, WSOL_MINT)]

    def test_events_from_other_programs_ignored(self):
        tx = TxBuilder()
        index = tx.outer(JUPITER_PROGRAM_ID, [SIGNER])
        tx.event(index, address("impostor"), jupiter_event(MINT_A, 1, MINT_B, 2))
        assert JupiterParser.route(_ctx(tx), index) == []

    def test_truncated_event_is_recoverable(self):
        tx = jupiter_route([(MINT_A, 10, MINT_B, 20)])
        tx.event(0, JUPITER_PROGRAM_ID, JUPITER_ROUTE_EVENT_DISCRIMINATOR + bytes(10))
        ctx = _ctx(tx)
        fragments = JupiterParser.route(ctx, 0)
        # The well-formed hop survives the broken one.
        assert len(fragments) == 1
        assert len(ctx.decode_errors) == 1
        assert isinstance(ctx.decode_errors[0], DecodeError)
        assert ctx.decode_errors[0].instruction_index == 0

    def test_missing_outer_instruction_is_recoverable(self):
        ctx = _ctx(jupiter_route([]))
        assert JupiterParser.route(ctx, 7) == []
        assert isinstance(ctx.decode_errors[0], IndexOutOfRange)


class TestPumpFunParser:
    def test_buy(self):
        ctx = _ctx(pumpfun_trade(MINT_A, 1_000_000_000, 35_000_000, is_buy=True))
        [fragment] = PumpFunParser.route(ctx, 0)
        assert fragment.protocol is ProtocolTag.PUMP_FUN
        assert (fragment.mint_in, fragment.amount_in, fragment.decimals_in) == (WSOL_MINT, 1_000_000_000, SOL_DECIMALS)
        assert (fragment.mint_out, fragment.amount_out, fragment.decimals_out) == (MINT_A, 35_000_000, 6)
        assert fragment.timestamp == 1_710_000_000
        assert fragment.who == SIGNER

    def test_sell(self):
        ctx = _ctx(pumpfun_trade(MINT_A, 900_000_000, 35_000_000, is_buy=False))
        [fragment] = PumpFunParser.route(ctx, 0)
        assert (fragment.mint_in, fragment.amount_in, fragment.decimals_in) == (MINT_A, 35_000_000, 6)
        assert (fragment.mint_out, fragment.amount_out) == (WSOL_MINT, 900_000_000)

    def test_trailing_fields_ignored(self):
        tx = TxBuilder()
        index = tx.outer(PUMPFUN_PROGRAM_ID, [SIGNER])
        tx.event(index, PUMPFUN_PROGRAM_ID, pumpfun_trade_event(MINT_A, 5, 6, True) + bytes(64))
        [fragment] = PumpFunParser.route(_ctx(tx), index)
        assert fragment.amount_out == 6

    def test_create_event_yields_nothing(self):
        tx = TxBuilder()
        index = tx.outer(PUMPFUN_PROGRAM_ID, [SIGNER])
        tx.event(index, PUMPFUN_PROGRAM_ID, pumpfun_create_event(MINT_A))
        ctx = _ctx(tx)
        assert PumpFunParser.route(ctx, index) == []
        assert ctx.decode_errors == []

    def test_create_then_buy(self):
        tx = TxBuilder()
        index = tx.outer(PUMPFUN_PROGRAM_ID, [SIGNER])
        tx.event(index, PUMPFUN_PROGRAM_ID, pumpfun_create_event(MINT_A))
        tx.event(index, PUMPFUN_PROGRAM_ID, pumpfun_trade_event(MINT_A, 5, 6, True))
        assert len(PumpFunParser.route(_ctx(tx), index)) == 1

    def test_secondary_program_events(self):
        tx = TxBuilder()
        index = tx.outer(PUMPFUN_SECONDARY_PROGRAM_ID, [SIGNER])
        tx.event(index, PUMPFUN_SECONDARY_PROGRAM_ID, pumpfun_trade_event(MINT_A, 5, 6, False))
        [fragment] = PumpFunParser.route(_ctx(tx), index)
        assert fragment.mint_out == WSOL_MINT
