import os

DEFAULT_KEY_DIR = os.path.join(os.path.expanduser("~"), ".terra-keys")
KEY_FILE_EXT = ".json"


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def resolve_key_path(key_arg: str, key_dir: str = DEFAULT_KEY_DIR) -> str:
    """
    If key_arg is a path (contains / or \\) it is used as-is.
    Otherwise it is a key name, stored as <key_dir>/<name>.json.
    """
    if not key_arg:
        raise ValueError("key name is empty")

    if ("/" in key_arg) or ("\\" in key_arg):
        return key_arg

    return os.path.join(os.path.expanduser(key_dir), key_arg + KEY_FILE_EXT)


def list_key_names(key_dir: str = DEFAULT_KEY_DIR) -> list:
    d = os.path.expanduser(key_dir)
    if not os.path.isdir(d):
        return []
    return sorted(f[: -len(KEY_FILE_EXT)] for f in os.listdir(d) if f.endswith(KEY_FILE_EXT))
