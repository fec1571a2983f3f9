"""
Minimal protobuf (proto3) wire encoding.

Only what a Cosmos SDK transaction needs: varints and length-delimited
fields. Scalar fields holding their default value (0, "", b"") are
omitted, exactly like the reference encoders do, otherwise the chain
re-encodes the SignDoc differently and rejects the signature.
"""
from typing import Iterable

WIRE_VARINT = 0
WIRE_LEN = 2


def encode_varint(n: int) -> bytes:
    if n < 0:
        raise ValueError("varint must be non-negative")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)


def field_key(num: int, wire_type: int) -> bytes:
    return encode_varint((num << 3) | wire_type)


def field_varint(num: int, value: int) -> bytes:
    if not value:
        return b""
    return field_key(num, WIRE_VARINT) + encode_varint(int(value))


def field_bytes(num: int, value: bytes, always: bool = False) -> bytes:
    # always=True for elements of repeated fields and set sub-messages
    if not value and not always:
        return b""
    return field_key(num, WIRE_LEN) + encode_varint(len(value)) + value


def field_string(num: int, value: str) -> bytes:
    return field_bytes(num, value.encode("utf-8"))


def field_message(num: int, payload: bytes) -> bytes:
    return field_bytes(num, payload, always=True)


def repeated_message(num: int, payloads: Iterable[bytes]) -> bytes:
    return b"".join(field_message(num, p) for p in payloads)


def any_message(type_url: str, value: bytes) -> bytes:
    """google.protobuf.Any"""
    return field_string(1, type_url) + field_bytes(2, value)
