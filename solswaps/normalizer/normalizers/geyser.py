from typing import List

from solswaps.normalizer import models
from solswaps.normalizer.normalizers import shared
from solswaps.utils import make_readable


def normalize(tx: dict) -> models.Transaction:
    """
    Standardizes a Geyser-style transaction response.

    Notes:
        This Geyser-style transaction uses a modified version of the
        YellowStone Geyser Protobuf format, with keys, account index lists
        and instruction data base64-encoded.

    Args:
        tx: A Geyser-style transaction response.

    Returns:
        A standardized Transaction object.
    """
    txn_container = tx["transaction"]
    slot = txn_container.get("slot")
    geyser_txn = txn_container["transaction"]
    geyser_meta = geyser_txn.get("meta")

    real_txn = geyser_txn.get("transaction") or {}
    signatures = real_txn.get("signatures", [])
    message = real_txn.get("message")

    loaded_addresses = models.LoadedAddresses(
        writable=[make_readable(_addr) for _addr in (geyser_meta or {}).get("loadedWritableAddresses", [])],
        readonly=[make_readable(_addr) for _addr in (geyser_meta or {}).get("loadedReadonlyAddresses", [])],
    )

    # Geyser doesn't provide blockTime.
    block_time = None

    parsed_message = None
    if message is not None:
        instructions: List[models.Instruction] = [
            shared.instructions(i, encoding="base64") for i in message.get("instructions", [])
        ]
        parsed_message = models.Message(
            accountKeys=[make_readable(_key) for _key in message["accountKeys"]],
            recentBlockhash=message.get("recentBlockhash", ""),
            instructions=instructions,
            addressTableLookups=[shared.address_lookup(lu) for lu in message.get("addressTableLookups", [])],
            numRequiredSignatures=shared.num_required_signatures(message),
        )

    meta = None
    if geyser_meta is not None:
        meta = models.Meta(
            fee=geyser_meta.get("fee", 0),
            preBalances=[int(b) for b in geyser_meta.get("preBalances", [])],
            postBalances=[int(b) for b in geyser_meta.get("postBalances", [])],
            preTokenBalances=[shared.token_balance(tb) for tb in geyser_meta.get("preTokenBalances", [])],
            postTokenBalances=[shared.token_balance(tb) for tb in geyser_meta.get("postTokenBalances", [])],
            innerInstructions=[
                shared.inner_instructions(_inner, encoding="base64")
                for _inner in geyser_meta.get("innerInstructions", [])
            ],
            logMessages=geyser_meta.get("logMessages", []),
            err=geyser_meta.get("err"),
            computeUnitsConsumed=geyser_meta.get("computeUnitsConsumed"),
        )

    return models.Transaction(
        slot=slot,
        blockTime=block_time,
        signatures=signatures,
        message=parsed_message,
        meta=meta,
        loadedAddresses=loaded_addresses,
    )
