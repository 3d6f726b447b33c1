from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class TokenAmount:
    """
    One side of a swap.

    Attributes:
        mint: Token mint address.
        amount: Amount in base units.
        decimals: Decimals of the mint.
        assumed: True when the mint was guessed as wrapped SOL for a token
            account no balance or checked transfer identified.
    """
    mint: str
    amount: int
    decimals: int
    assumed: bool = False


@dataclass(frozen=True, slots=True)
class SwapSummary:
    """
    Canonical description of the swap a transaction performed.

    Attributes:
        signers: Wallet(s) the swap is attributed to.
        signatures: Transaction signatures.
        amms: Protocols touched, in first-seen order.
        token_in: What the signer gave.
        token_out: What the signer got.
        timestamp: Unix timestamp from the protocol event, else the block time.
    """
    signers: Tuple[str, ...]
    signatures: Tuple[str, ...]
    amms: Tuple[str, ...]
    token_in: TokenAmount
    token_out: TokenAmount
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signers": list(self.signers),
            "signatures": list(self.signatures),
            "amms": list(self.amms),
            "token_in": asdict(self.token_in),
            "token_out": asdict(self.token_out),
            "timestamp": self.timestamp,
        }
