import argparse

from hubctl.crypto import is_address
from hubctl.hub import execute_add_validator
from hubctl.lcd import create_lcd_client
from hubctl.paths import DEFAULT_KEY_DIR
from hubctl.wallet import load_wallet, send_tx_with_confirm


def main(argv=None):
    p = argparse.ArgumentParser(description="Register a validator with the hub contract")
    p.add_argument("--network", required=True, help="mainnet | testnet | localterra")
    p.add_argument("--key", required=True, help="key name in the keystore, or path to a key file")
    p.add_argument("--key-dir", default=DEFAULT_KEY_DIR)
    p.add_argument("--hub-address", required=True, help="hub contract address")
    p.add_argument("--validator-address", required=True, help="validator operator address (terravaloper1...)")
    args = p.parse_args(argv)

    try:
        terra = create_lcd_client(args.network)
    except ValueError as e:
        raise SystemExit(str(e))

    if not is_address(args.hub_address, terra.cfg.account_prefix):
        raise SystemExit(f"--hub-address must be a {terra.cfg.account_prefix}1... address")
    if not is_address(args.validator_address, terra.cfg.validator_prefix):
        raise SystemExit(f"--validator-address must be a {terra.cfg.validator_prefix}1... address")

    worker = load_wallet(terra, args.key, args.key_dir)

    result = send_tx_with_confirm(worker, [
        execute_add_validator(worker.address, args.hub_address, args.validator_address),
    ])
    print(f"Success! Txhash: {result['txhash']}")


if __name__ == "__main__":
    main()
