from typing import Dict

from solswaps.constants import ProtocolTag
from solswaps.parser.models import Program
from solswaps.parser.parsers import generic, jupiter, moonshot, pumpfun, router, tokenProgram, transfers

# Closed mapping from protocol tag to its decoder.
DECODERS: Dict[ProtocolTag, Program] = {
    ProtocolTag.JUPITER: jupiter.JupiterParser,
    ProtocolTag.MOONSHOT: moonshot.MoonshotParser,
    ProtocolTag.TRADING_BOT: router.TradingBotRouter,
    ProtocolTag.OKX: router.OKXParser,
    ProtocolTag.RAYDIUM: transfers.RaydiumParser,
    ProtocolTag.RAYDIUM_LAUNCHPAD: transfers.RaydiumLaunchpadParser,
    ProtocolTag.ORCA: transfers.OrcaParser,
    ProtocolTag.METEORA: transfers.MeteoraParser,
    ProtocolTag.PUMP_FUN_AMM: transfers.PumpFunAMMParser,
    ProtocolTag.PUMP_FUN: pumpfun.PumpFunParser,
    ProtocolTag.GENERIC: generic.GenericParser,
}

router.TradingBotRouter.bind(DECODERS)
router.OKXParser.bind(DECODERS)

__all__ = ["DECODERS", "generic", "jupiter", "moonshot", "pumpfun", "router", "tokenProgram", "transfers"]
