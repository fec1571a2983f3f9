import argparse
import getpass

from hubctl.crypto import generate_keypair, keypair_from_mnemonic, keypair_from_private_hex
from hubctl.keystore import get_password, read_key_entry, remove_key, save_key
from hubctl.paths import DEFAULT_KEY_DIR, list_key_names
from hubctl.utils import Log


def cmd_add(args):
    if args.mnemonic:
        try:
            kp = keypair_from_mnemonic(getpass.getpass("Enter mnemonic: "), account=args.account, index=args.index)
        except ValueError as e:
            raise SystemExit(str(e))
    elif args.private_key:
        try:
            kp = keypair_from_private_hex(getpass.getpass("Enter private key (hex): "))
        except ValueError as e:
            raise SystemExit(str(e))
    else:
        kp = generate_keypair()
        Log.warn("Generated a new random key. It only exists in the encrypted key file, back that file up")

    password = get_password("Enter password to encrypt the key: ", confirm=True)
    try:
        save_key(args.name, kp, password, args.key_dir, prefix=args.prefix, overwrite=args.overwrite)
    except FileExistsError as e:
        raise SystemExit(f"{e} (use --overwrite to replace it)")
    print(kp.address(args.prefix))


def cmd_list(args):
    names = list_key_names(args.key_dir)
    if not names:
        Log.info(f"No keys in {args.key_dir}")
    for name in names:
        try:
            entry = read_key_entry(name, args.key_dir)
        except (OSError, ValueError) as e:
            Log.warn(f"Unreadable key file for {name}: {e}")
            entry = None
        address = entry.get("address", "?") if isinstance(entry, dict) else "?"
        print(f"{name}\t{address}")


def cmd_show(args):
    print(read_key_entry(args.name, args.key_dir)["address"])


def cmd_remove(args):
    remove_key(args.name, args.key_dir)


def main(argv=None):
    p = argparse.ArgumentParser(description="Manage encrypted signing keys")
    p.add_argument("--key-dir", default=DEFAULT_KEY_DIR)
    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("add", help="import or generate a key")
    a.add_argument("name")
    src = a.add_mutually_exclusive_group()
    src.add_argument("--mnemonic", action="store_true", help="import from a BIP39 mnemonic (prompted)")
    src.add_argument("--private-key", action="store_true", help="import a raw private key hex (prompted)")
    a.add_argument("--account", type=int, default=0, help="HD account index")
    a.add_argument("--index", type=int, default=0, help="HD address index")
    a.add_argument("--prefix", default="terra", help="bech32 account prefix shown in the key file")
    a.add_argument("--overwrite", action="store_true")
    a.set_defaults(func=cmd_add)

    ls = sub.add_parser("list", help="list stored keys")
    ls.set_defaults(func=cmd_list)

    s = sub.add_parser("show", help="print the address of a key")
    s.add_argument("name")
    s.set_defaults(func=cmd_show)

    r = sub.add_parser("remove", help="delete a key file")
    r.add_argument("name")
    r.set_defaults(func=cmd_remove)

    args = p.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
