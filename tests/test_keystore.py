import json
import os

import pytest

from hubctl import keystore
from hubctl.crypto import keypair_from_private_hex
from hubctl.keystore import load_key, read_key_entry, remove_key, save_key
from hubctl.paths import list_key_names, resolve_key_path

ITER = 1000


def test_resolve_key_path(tmp_path):
    assert resolve_key_path("worker", str(tmp_path)) == os.path.join(str(tmp_path), "worker.json")
    assert resolve_key_path("./keys/worker.json", str(tmp_path)) == "./keys/worker.json"
    with pytest.raises(ValueError):
        resolve_key_path("", str(tmp_path))


def test_save_and_load(tmp_path, keypair):
    path = save_key("worker", keypair, "hunter2", str(tmp_path), iterations=ITER)
    entry = json.loads(open(path, encoding="utf-8").read())
    assert entry["address"] == keypair.address()
    assert keypair.private_key_hex not in json.dumps(entry)
    assert load_key("worker", str(tmp_path), password="hunter2") == keypair
    assert list_key_names(str(tmp_path)) == ["worker"]


def test_wrong_password(tmp_path, keypair):
    save_key("worker", keypair, "hunter2", str(tmp_path), iterations=ITER)
    with pytest.raises(ValueError):
        load_key("worker", str(tmp_path), password="nope")


def test_tampered_file(tmp_path, keypair):
    path = save_key("worker", keypair, "pw", str(tmp_path), iterations=ITER)
    entry = read_key_entry("worker", str(tmp_path))
    entry["ciphertext"] = entry["ciphertext"][::-1]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(entry, f)
    with pytest.raises(ValueError):
        load_key("worker", str(tmp_path), password="pw")


def test_refuses_overwrite(tmp_path, keypair):
    save_key("worker", keypair, "pw", str(tmp_path), iterations=ITER)
    other = keypair_from_private_hex("2a" * 32)
    with pytest.raises(FileExistsError):
        save_key("worker", other, "pw", str(tmp_path), iterations=ITER)
    save_key("worker", other, "pw", str(tmp_path), overwrite=True, iterations=ITER)
    assert load_key("worker", str(tmp_path), password="pw") == other


def test_missing_key(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_key("ghost", str(tmp_path), password="pw")
    with pytest.raises(FileNotFoundError):
        remove_key("ghost", str(tmp_path))


def test_password_from_env(tmp_path, keypair, monkeypatch):
    save_key("worker", keypair, "from-env", str(tmp_path), iterations=ITER)
    monkeypatch.setenv(keystore.PASSWORD_ENV, "from-env")
    assert load_key("worker", str(tmp_path)) == keypair


def test_password_prompt(tmp_path, keypair, monkeypatch):
    save_key("worker", keypair, "typed", str(tmp_path), iterations=ITER)
    monkeypatch.delenv(keystore.PASSWORD_ENV, raising=False)
    monkeypatch.setattr(keystore.getpass, "getpass", lambda prompt="": "typed")
    assert load_key("worker", str(tmp_path)) == keypair


def test_remove(tmp_path, keypair):
    save_key("worker", keypair, "pw", str(tmp_path), iterations=ITER)
    remove_key("worker", str(tmp_path))
    assert list_key_names(str(tmp_path)) == []
