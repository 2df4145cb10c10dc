"""
Value encodings shared by the storage components.

Two independent concerns live here:

* the fixed-width integer encoding used by the credential store, which can
  only hold strings. Integers are 8 bytes, signed, little-endian, and booleans
  are the integers 1 and 0. This is a wire contract: entries written by one
  build must decode in every other one, whatever the host word size.
* the JSON representation of a key -> scalar mapping, used by the file backend
  and the preference store. ``str``, ``int`` and ``bool`` are native JSON;
  ``bytes`` becomes ``{"$bytes": "<base64>"}``.
"""
from __future__ import annotations

import base64
import binascii
import struct
from typing import Any, Mapping

INT_WIDTH = 8
_INT_FORMAT = "<q"

BYTES_TAG = "$bytes"


def encode_int(value: int) -> bytes:
    try:
        return struct.pack(_INT_FORMAT, value)
    except struct.error as e:
        raise OverflowError(f"{value} does not fit in a signed {INT_WIDTH * 8}-bit integer") from e


def decode_int(data: bytes) -> int | None:
    if len(data) < INT_WIDTH:
        return None
    return struct.unpack_from(_INT_FORMAT, data, 0)[0]


def encode_bool(value: bool) -> bytes:
    return encode_int(1 if value else 0)


def decode_bool(data: bytes) -> bool | None:
    n = decode_int(data)
    if n is None:
        return None
    return n == 1


def bytes_to_text(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def text_to_bytes(text: str) -> bytes | None:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError):
        return None


def encode_value(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return {BYTES_TAG: bytes_to_text(bytes(value))}
    # Everything else is already JSON, including values this package did not
    # write itself; they are carried through untouched.
    return value


def decode_value(raw: Any) -> Any:
    if isinstance(raw, dict) and set(raw) == {BYTES_TAG} and isinstance(raw[BYTES_TAG], str):
        data = text_to_bytes(raw[BYTES_TAG])
        if data is not None:
            return data
    return raw


def encode_mapping(mapping: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k): encode_value(v) for k, v in mapping.items()}


def decode_mapping(doc: Any) -> dict[str, Any]:
    """Decode a JSON document into a mapping; ValueError if the root is not an object."""
    if not isinstance(doc, dict):
        raise ValueError(f"document root is {type(doc).__name__}, expected an object")
    return {str(k): decode_value(v) for k, v in doc.items()}
