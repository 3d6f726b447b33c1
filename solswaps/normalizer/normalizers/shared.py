import base64
from typing import Any, Dict, List, Optional

from solswaps.errors import MalformedTransaction
from solswaps.normalizer import models
from solswaps.utils import decode_data


def _accounts(raw: Any, encoding: str) -> List[int]:
    # Geyser packs account indices into a base64 byte string.
    if isinstance(raw, str):
        return list(base64.b64decode(raw)) if encoding == "base64" else [int(raw)]
    return [int(a) for a in raw or []]


def instructions(instr: Dict[str, Any], encoding: str = "base58") -> models.Instruction:
    try:
        data = decode_data(instr.get("data", ""), encoding)
    except ValueError as e:
        raise MalformedTransaction(f"Undecodable instruction data: {e}") from e
    return models.Instruction(
        programIdIndex=int(instr["programIdIndex"]),
        accounts=_accounts(instr.get("accounts", []), encoding),
        data=data,
        stackHeight=instr.get("stackHeight"),
    )


def inner_instructions(group: Dict[str, Any], encoding: str = "base58") -> models.InnerInstructions:
    return models.InnerInstructions(
        index=int(group["index"]),
        instructions=[instructions(i, encoding) for i in group.get("instructions", [])],
    )


def address_lookup(lookup: Dict[str, Any]) -> models.AddressTableLookup:
    return models.AddressTableLookup(
        accountKey=lookup["accountKey"],
        writableIndexes=list(lookup.get("writableIndexes", [])),
        readonlyIndexes=list(lookup.get("readonlyIndexes", [])),
    )


def token_balance(tb: Dict[str, Any]) -> models.TokenBalance:
    ui = tb.get("uiTokenAmount", {})
    return models.TokenBalance(
        accountIndex=int(tb["accountIndex"]),
        mint=tb["mint"],
        owner=tb.get("owner") or None,
        uiTokenAmount=models.UiTokenAmount(
            amount=str(ui.get("amount", "0")),
            decimals=int(ui.get("decimals", 0)),
            uiAmountString=ui.get("uiAmountString"),
        ),
        programId=tb.get("programId"),
    )


def num_required_signatures(message: Dict[str, Any], default: Optional[int] = 1) -> int:
    header = message.get("header") or {}
    return int(header.get("numRequiredSignatures", default))
