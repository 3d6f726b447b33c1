from solswaps.errors import MalformedTransaction
from solswaps.normalizer import models, normalizers


def _is_geyser(tx: dict) -> bool:
    container = tx.get("transaction")
    return isinstance(container, dict) and isinstance(container.get("transaction"), dict) and (
        "meta" in container["transaction"] or "transaction" in container["transaction"]
    )


def normalize(tx: dict) -> models.Transaction:
    """
    Standardizes a raw transaction, whichever source delivered it.

    Args:
        tx: A Geyser-style message or an RPC `getTransaction` response.

    Returns:
        A standardized Transaction object.
    """
    if not isinstance(tx, dict):
        raise MalformedTransaction(f"Expected a JSON object, got {type(tx).__name__}")
    if _is_geyser(tx):
        return normalizers.geyser.normalize(tx)
    return normalizers.rpc.normalize(tx)


__all__ = ["normalize", "models"]
