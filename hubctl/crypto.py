from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

import bech32
from coincurve import PrivateKey, PublicKey  # secp256k1
from eth_account.hdaccount import key_from_seed, seed_from_mnemonic
from eth_utils import ValidationError

from .utils import sha256_bytes, ripemd160, normalize_hex, is_hex

COIN_TYPE = 330


def hash_msg(message_bytes: bytes) -> bytes:
    """
    Cosmos SDK signs the SHA-256 digest of the serialized SignDoc.
    """
    return sha256_bytes(message_bytes)


@dataclass(frozen=True)
class Keypair:
    private_key_hex: str
    public_key_hex: str  # compressed secp256k1 pubkey (33 bytes)

    @property
    def public_key_bytes(self) -> bytes:
        return bytes.fromhex(self.public_key_hex)

    def address(self, prefix: str = "terra") -> str:
        return pubkey_to_address(self.public_key_bytes, prefix)


def keypair_from_private_hex(priv_hex: str) -> Keypair:
    priv_hex = normalize_hex(priv_hex)
    if len(priv_hex) != 64 or not is_hex(priv_hex):
        raise ValueError("private key must be 32 bytes hex (64 hex chars)")
    priv = PrivateKey(bytes.fromhex(priv_hex))
    return Keypair(
        private_key_hex=priv.to_hex(),
        public_key_hex=priv.public_key.format(compressed=True).hex(),
    )


def generate_keypair() -> Keypair:
    priv = PrivateKey()
    return keypair_from_private_hex(priv.to_hex())


def pubkey_from_hex(pub_hex: str) -> PublicKey:
    return PublicKey(bytes.fromhex(pub_hex))


def privkey_from_hex(priv_hex: str) -> PrivateKey:
    return PrivateKey(bytes.fromhex(priv_hex))


# ---------------- bech32 addresses ----------------

def pubkey_to_address(pub_compressed: bytes, prefix: str = "terra") -> str:
    """
    Account address = bech32(prefix, ripemd160(sha256(compressed_pubkey)))
    """
    if len(pub_compressed) != 33:
        raise ValueError("Expected compressed pubkey bytes (33 bytes)")
    raw = ripemd160(sha256_bytes(pub_compressed))
    return bech32.bech32_encode(prefix, bech32.convertbits(raw, 8, 5))


def decode_address(addr: str) -> Tuple[str, bytes]:
    hrp, data = bech32.bech32_decode(addr)
    if hrp is None or data is None:
        raise ValueError(f"invalid bech32 address: {addr}")
    raw = bech32.convertbits(data, 5, 8, False)
    if raw is None:
        raise ValueError(f"invalid bech32 payload: {addr}")
    return hrp, bytes(raw)


def is_address(addr: str, prefix: str) -> bool:
    """
    Accounts are 20 bytes, contracts 32 bytes.
    """
    try:
        hrp, raw = decode_address(addr)
    except ValueError:
        return False
    return hrp == prefix and len(raw) in (20, 32)


# ---------------- BIP39 / BIP32 ----------------

def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """
    BIP39 seed. Unknown words or a bad checksum raise ValueError.
    """
    try:
        return seed_from_mnemonic(" ".join(mnemonic.split()), passphrase)
    except ValidationError as e:
        raise ValueError(f"invalid mnemonic: {e}") from e


def derive_private_key(seed: bytes, path: str) -> bytes:
    try:
        return key_from_seed(seed, path)
    except ValidationError as e:
        raise ValueError(f"invalid derivation path {path}: {e}") from e


def hd_path(account: int = 0, index: int = 0, coin_type: int = COIN_TYPE) -> str:
    return f"m/44'/{coin_type}'/{account}'/0/{index}"


def keypair_from_mnemonic(mnemonic: str, account: int = 0, index: int = 0,
                          passphrase: str = "", coin_type: int = COIN_TYPE) -> Keypair:
    seed = mnemonic_to_seed(mnemonic, passphrase)
    priv = derive_private_key(seed, hd_path(account, index, coin_type))
    return keypair_from_private_hex(priv.hex())


# ---------------- ECDSA DER helpers ----------------
# DER format: 0x30 len 0x02 lenR R 0x02 lenS S

def der_to_rs(sig_der: bytes) -> Tuple[int, int]:
    if len(sig_der) < 8 or sig_der[0] != 0x30:
        raise ValueError("Invalid DER signature")
    if sig_der[2] != 0x02:
        raise ValueError("Invalid DER (no integer for r)")
    len_r = sig_der[3]
    r_bytes = sig_der[4:4 + len_r]

    idx = 4 + len_r
    if sig_der[idx] != 0x02:
        raise ValueError("Invalid DER (no integer for s)")
    len_s = sig_der[idx + 1]
    s_bytes = sig_der[idx + 2: idx + 2 + len_s]

    return int.from_bytes(r_bytes, "big"), int.from_bytes(s_bytes, "big")


def int_to_der_integer_bytes(x: int) -> bytes:
    b = x.to_bytes((x.bit_length() + 7) // 8 or 1, "big")
    if b[0] & 0x80:
        b = b"\x00" + b
    return b


def rs_to_der(r: int, s: int) -> bytes:
    r_b = int_to_der_integer_bytes(r)
    s_b = int_to_der_integer_bytes(s)
    seq = b"\x02" + bytes([len(r_b)]) + r_b + b"\x02" + bytes([len(s_b)]) + s_b
    return b"\x30" + bytes([len(seq)]) + seq


def sign_bytes(priv_hex: str, message: bytes) -> bytes:
    """
    Returns the 64-byte compact signature r || s over sha256(message).
    libsecp256k1 always emits low-S, which the SDK requires.
    """
    priv = privkey_from_hex(priv_hex)
    sig_der = priv.sign(hash_msg(message), hasher=None)
    r, s = der_to_rs(sig_der)
    return r.to_bytes(32, "big") + s.to_bytes(32, "big")


def verify_bytes(pub_hex: str, message: bytes, sig64: bytes) -> bool:
    if len(sig64) != 64:
        return False
    pub = pubkey_from_hex(pub_hex)
    sig_der = rs_to_der(int.from_bytes(sig64[:32], "big"), int.from_bytes(sig64[32:], "big"))
    try:
        return pub.verify(sig_der, hash_msg(message), hasher=None)
    except ValueError:
        return False
