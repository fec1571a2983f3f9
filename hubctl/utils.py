import json
import sys
import hashlib
from typing import Any

from Crypto.Hash import RIPEMD160


def sha256_bytes(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def ripemd160(data: bytes) -> bytes:
    """
    hashlib only exposes ripemd160 when OpenSSL still ships it,
    so we always go through pycryptodome.
    """
    h = RIPEMD160.new()
    h.update(data)
    return h.digest()


def canonical_json(obj: Any) -> bytes:
    """
    Deterministic JSON serialization:
    - sort keys
    - compact separators
    - UTF-8
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def short(s: str, n: int = 14) -> str:
    if len(s) <= n:
        return s
    return s[:n] + "…"


def normalize_hex(s: str) -> str:
    """
    Remove optional 0x prefix, surrounding whitespace and lowercase.
    """
    s = s.strip()
    if s.startswith("0x") or s.startswith("0X"):
        s = s[2:]
    return s.lower()


def is_hex(s: str) -> bool:
    try:
        int(s, 16)
        return True
    except ValueError:
        return False


class Log:
    """Console status lines. stdout is reserved for command results."""

    @staticmethod
    def info(msg: str) -> None:
        print(f"[INFO] {msg}", file=sys.stderr)

    @staticmethod
    def ok(msg: str) -> None:
        print(f"[ OK ] {msg}", file=sys.stderr)

    @staticmethod
    def warn(msg: str) -> None:
        print(f"[WARN] {msg}", file=sys.stderr)

    @staticmethod
    def err(msg: str) -> None:
        print(f"[ERR ] {msg}", file=sys.stderr)
