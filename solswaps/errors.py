from typing import Optional


class SwapParseError(Exception):
    """Base class for every error raised by solswaps."""


class MalformedTransaction(SwapParseError):
    """The transaction is missing its message or metadata, or failed on chain."""


class DecodeError(SwapParseError):
    """
    A decoder-local failure. The failing decoder yields no fragments and the
    dispatcher moves on; these never reach the caller as exceptions.
    """

    def __init__(self, message: str, instruction_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.instruction_index = instruction_index


class IndexOutOfRange(DecodeError):
    """An instruction references an account or program index beyond the key table."""


class UnknownDiscriminator(DecodeError):
    """Data is present but its prefix matches no registered event or instruction."""


class BalanceNotFound(DecodeError):
    """Neither a pre- nor a post-balance exists for the requested account and mint."""


class AmbiguousRoute(SwapParseError):
    """Netting a multi-hop route left more than one mint on a side."""


class NoSwapDetected(SwapParseError):
    """No dispatcher stage produced a usable fragment."""
