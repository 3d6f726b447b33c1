import base64
import binascii
from typing import Union

import qbase58 as base58


def to_address(value: Union[str, bytes]) -> str:
    """
    Return a base58 address as str. qbase58 may hand back bytes depending on the build.
    """
    return value.decode("utf-8") if isinstance(value, bytes) else value


def make_readable(data: str) -> str:
    """
    Convert a base64-encoded public key to a base58-encoded Solana address string.

    Args:
        data: A string containing the base64-encoded key.

    Returns:
        A string with the base58-encoded Solana address.
    """
    raw_bytes: bytes = base64.b64decode(data)
    return to_address(base58.encode(raw_bytes))


def decode_data(data: Union[str, bytes, None], encoding: str = "base58") -> bytes:
    """
    Decodes instruction data delivered as text.

    Base58 is the encoding of RPC `json` responses, base64 the one of Geyser
    streams. Data already in bytes is returned as-is.

    Raises:
        ValueError: If the text is not valid in the requested encoding.
    """
    if not data:
        return b""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if encoding == "base58":
        return base58.decode(data)
    if encoding == "base64":
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 data: {e}") from e
    raise ValueError(f"Unsupported data encoding: {encoding}")
