from solswaps.errors import (
    AmbiguousRoute,
    BalanceNotFound,
    DecodeError,
    IndexOutOfRange,
    MalformedTransaction,
    NoSwapDetected,
    SwapParseError,
    UnknownDiscriminator,
)
from solswaps.normalizer import normalize
from solswaps.parser import ParseResult, parse
from solswaps.registry import DEFAULT_REGISTRY, ProtocolRegistry
from solswaps.resolver import SwapSummary, TokenAmount, resolve


def process(tx: dict, registry: ProtocolRegistry = DEFAULT_REGISTRY) -> SwapSummary:
    """
    Runs a raw transaction through the whole pipeline.

    Args:
        tx: A raw transaction, as returned by RPC or streamed by Geyser.
        registry: Protocol configuration to dispatch with.

    Returns:
        The SwapSummary of the transaction.
    """
    return resolve(parse(normalize(tx), registry))


__all__ = [
    "normalize",
    "parse",
    "resolve",
    "process",
    "ParseResult",
    "SwapSummary",
    "TokenAmount",
    "ProtocolRegistry",
    "DEFAULT_REGISTRY",
    "SwapParseError",
    "MalformedTransaction",
    "DecodeError",
    "IndexOutOfRange",
    "UnknownDiscriminator",
    "BalanceNotFound",
    "AmbiguousRoute",
    "NoSwapDetected",
]
