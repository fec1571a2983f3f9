from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from .crypto import Keypair, sign_bytes
from .keystore import load_key
from .lcd import LCDClient, TxError, check_tx_response
from .models import Fee, MsgExecuteContract, Tx, encode_auth_info, encode_body, encode_sign_doc
from .paths import DEFAULT_KEY_DIR
from .utils import Log, canonical_json, short

POLL_INTERVAL = 1.0
MAX_POLLS = 60


class Wallet:
    def __init__(self, lcd: LCDClient, key: Keypair):
        self.lcd = lcd
        self.key = key
        self.address = key.address(lcd.cfg.account_prefix)

    def create_and_sign_tx(self, msgs: List[MsgExecuteContract], fee: Optional[Fee] = None,
                           memo: str = "") -> Tx:
        acct = self.lcd.account_info(self.address)
        body = encode_body(msgs, memo)

        if fee is None:
            # simulation only checks that a signature slot exists, not its content
            draft = Tx(body, encode_auth_info(self.key.public_key_bytes, acct.sequence, Fee(0)), [b""])
            fee = self.lcd.estimate_fee(draft.to_bytes())

        for m in msgs:
            Log.info(f"Msg: {canonical_json(m.to_dict()).decode()}")
        Log.info(f"Fee: {canonical_json(fee.to_dict()).decode()}")

        auth_info = encode_auth_info(self.key.public_key_bytes, acct.sequence, fee)
        sign_doc = encode_sign_doc(body, auth_info, self.lcd.chain_id, acct.account_number)
        return Tx(body, auth_info, [sign_bytes(self.key.private_key_hex, sign_doc)])


def load_wallet(lcd: LCDClient, key_name: str, key_dir: str = DEFAULT_KEY_DIR,
                password: Optional[str] = None) -> Wallet:
    w = Wallet(lcd, load_key(key_name, key_dir, password))
    Log.info(f"Loaded key {key_name} ({w.address})")
    return w


def wait_for_tx(lcd: LCDClient, txhash: str, poll_interval: float = POLL_INTERVAL,
                max_polls: int = MAX_POLLS) -> Dict[str, Any]:
    for attempt in range(max_polls):
        info = lcd.tx_info(txhash)
        if info is not None:
            return check_tx_response(info)
        if attempt + 1 < max_polls:
            time.sleep(poll_interval)
    raise TimeoutError(f"tx {txhash} not confirmed after {max_polls} polls")


def send_tx_with_confirm(wallet: Wallet, msgs: List[MsgExecuteContract], fee: Optional[Fee] = None,
                         memo: str = "", poll_interval: float = POLL_INTERVAL,
                         max_polls: int = MAX_POLLS) -> Dict[str, Any]:
    tx = wallet.create_and_sign_tx(msgs, fee, memo)
    resp = wallet.lcd.broadcast_sync(tx.to_bytes())
    txhash = resp.get("txhash") or tx.txhash()
    Log.info(f"Submitted tx {short(txhash)}, waiting for confirmation")
    try:
        info = wait_for_tx(wallet.lcd, txhash, poll_interval, max_polls)
    except TxError:
        Log.err(f"Tx {txhash} failed on chain")
        raise
    Log.ok(f"Confirmed at height {info.get('height')}")
    return info
