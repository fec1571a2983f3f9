from __future__ import annotations
import base64
import getpass
import json
import os
from typing import Any, Dict, Optional

from Crypto.Cipher import AES
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes

from .crypto import Keypair, keypair_from_private_hex
from .paths import DEFAULT_KEY_DIR, ensure_dir, resolve_key_path
from .utils import Log

PASSWORD_ENV = "HUBCTL_KEY_PASSWORD"
KDF_NAME = "pbkdf2-sha256"
DEFAULT_ITERATIONS = 100_000
SALT_SIZE = 16
NONCE_SIZE = 12


def read_json(path: str) -> Optional[Any]:
    if not os.path.exists(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: str, obj: Any) -> None:
    parent = os.path.dirname(path)
    if parent:
        ensure_dir(parent)
    tmp = path + ".tmp"
    # key files are readable by the owner only
    fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def get_password(prompt: str = "Enter password to decrypt the key: ", confirm: bool = False) -> str:
    pw = os.environ.get(PASSWORD_ENV)
    if pw is not None:
        return pw
    pw = getpass.getpass(prompt)
    if confirm and getpass.getpass("Repeat password: ") != pw:
        raise ValueError("passwords do not match")
    return pw


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return PBKDF2(password.encode("utf-8"), salt, dkLen=32, count=iterations, hmac_hash_module=SHA256)


def encrypt_key(kp: Keypair, password: str, iterations: int = DEFAULT_ITERATIONS) -> Dict[str, Any]:
    salt = get_random_bytes(SALT_SIZE)
    nonce = get_random_bytes(NONCE_SIZE)
    cipher = AES.new(_derive(password, salt, iterations), AES.MODE_GCM, nonce=nonce)
    ciphertext, tag = cipher.encrypt_and_digest(kp.private_key_hex.encode("ascii"))
    return {
        "kdf": KDF_NAME,
        "iterations": iterations,
        "salt": base64.b64encode(salt).decode(),
        "nonce": base64.b64encode(nonce).decode(),
        "tag": base64.b64encode(tag).decode(),
        "ciphertext": base64.b64encode(ciphertext).decode(),
    }


def decrypt_key(entry: Dict[str, Any], password: str) -> Keypair:
    if entry.get("kdf") != KDF_NAME:
        raise ValueError(f"unsupported key file kdf: {entry.get('kdf')}")
    try:
        salt = base64.b64decode(entry["salt"])
        nonce = base64.b64decode(entry["nonce"])
        tag = base64.b64decode(entry["tag"])
        ciphertext = base64.b64decode(entry["ciphertext"])
        iterations = int(entry["iterations"])
    except KeyError as e:
        raise ValueError(f"key file is missing field {e}") from e

    cipher = AES.new(_derive(password, salt, iterations), AES.MODE_GCM, nonce=nonce)
    try:
        plain = cipher.decrypt_and_verify(ciphertext, tag)
    except ValueError as e:
        raise ValueError("failed to decrypt key: wrong password or corrupted file") from e
    return keypair_from_private_hex(plain.decode("ascii"))


def save_key(name: str, kp: Keypair, password: str, key_dir: str = DEFAULT_KEY_DIR,
             prefix: str = "terra", overwrite: bool = False,
             iterations: int = DEFAULT_ITERATIONS) -> str:
    path = resolve_key_path(name, key_dir)
    if os.path.exists(path) and not overwrite:
        raise FileExistsError(f"key already exists: {path}")

    entry = {"name": name, "address": kp.address(prefix)}
    entry.update(encrypt_key(kp, password, iterations))
    write_json(path, entry)
    Log.ok(f"Saved key {name} to {path}")
    return path


def read_key_entry(name: str, key_dir: str = DEFAULT_KEY_DIR) -> Dict[str, Any]:
    path = resolve_key_path(name, key_dir)
    entry = read_json(path)
    if not entry:
        raise FileNotFoundError(f"key not found: {path}. Create one with scripts/keys.py add")
    return entry


def load_key(name: str, key_dir: str = DEFAULT_KEY_DIR, password: Optional[str] = None) -> Keypair:
    entry = read_key_entry(name, key_dir)
    if password is None:
        password = get_password()
    return decrypt_key(entry, password)


def remove_key(name: str, key_dir: str = DEFAULT_KEY_DIR) -> str:
    path = resolve_key_path(name, key_dir)
    if not os.path.exists(path):
        raise FileNotFoundError(f"key not found: {path}")
    os.remove(path)
    Log.ok(f"Removed key {name}")
    return path
