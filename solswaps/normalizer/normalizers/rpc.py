from typing import List

from solswaps.errors import MalformedTransaction
from solswaps.normalizer import models
from solswaps.normalizer.normalizers import shared


def normalize(tx: dict) -> models.Transaction:
    """
    Standardizes an RPC `getTransaction` response requested with `encoding=json`.

    Args:
        tx: The response `result`, or the full JSON-RPC envelope around it.

    Returns:
        A standardized Transaction object. `message` or `meta` is None when the
        response omits it; that is reported later, when a context is built.
    """
    if "result" in tx and "jsonrpc" in tx:
        tx = tx["result"]
        if tx is None:
            raise MalformedTransaction("RPC response carries no transaction")

    raw_txn = tx.get("transaction")
    if isinstance(raw_txn, list):
        raise MalformedTransaction("Binary-encoded transactions are not supported, request encoding=json")

    raw_txn = raw_txn or {}
    raw_meta = tx.get("meta")
    message = raw_txn.get("message")

    loaded = (raw_meta or {}).get("loadedAddresses") or {}
    loaded_addresses = models.LoadedAddresses(
        writable=list(loaded.get("writable", [])),
        readonly=list(loaded.get("readonly", [])),
    )

    parsed_message = None
    if message is not None:
        account_keys = message.get("accountKeys", [])
        if any(isinstance(k, dict) for k in account_keys):
            # jsonParsed wraps keys in objects and drops programIdIndex from instructions.
            raise MalformedTransaction("jsonParsed transactions are not supported, request encoding=json")
        instructions: List[models.Instruction] = [shared.instructions(i) for i in message.get("instructions", [])]
        parsed_message = models.Message(
            accountKeys=list(account_keys),
            recentBlockhash=message.get("recentBlockhash", ""),
            instructions=instructions,
            addressTableLookups=[shared.address_lookup(lu) for lu in message.get("addressTableLookups") or []],
            numRequiredSignatures=shared.num_required_signatures(message),
        )

    meta = None
    if raw_meta is not None:
        meta = models.Meta(
            fee=raw_meta.get("fee", 0),
            preBalances=list(raw_meta.get("preBalances", [])),
            postBalances=list(raw_meta.get("postBalances", [])),
            preTokenBalances=[shared.token_balance(tb) for tb in raw_meta.get("preTokenBalances") or []],
            postTokenBalances=[shared.token_balance(tb) for tb in raw_meta.get("postTokenBalances") or []],
            innerInstructions=[shared.inner_instructions(g) for g in raw_meta.get("innerInstructions") or []],
            logMessages=list(raw_meta.get("logMessages") or []),
            err=raw_meta.get("err"),
            computeUnitsConsumed=raw_meta.get("computeUnitsConsumed"),
        )

    return models.Transaction(
        slot=tx.get("slot"),
        blockTime=tx.get("blockTime"),
        signatures=list(raw_txn.get("signatures", [])),
        message=parsed_message,
        meta=meta,
        loadedAddresses=loaded_addresses,
    )
