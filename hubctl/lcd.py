from __future__ import annotations

import base64
import math
from decimal import Decimal
from typing import Any, Dict, Optional

import requests

from .models import AccountInfo, Coin, Fee
from .networks import NetworkConfig, get_network
from .utils import Log

DEFAULT_TIMEOUT = 10


class LCDError(RuntimeError):
    def __init__(self, msg: str, status_code: Optional[int] = None):
        super().__init__(msg)
        self.status_code = status_code


class TxError(RuntimeError):
    """A transaction was rejected by CheckTx or failed during execution."""

    def __init__(self, txhash: str, code: int, raw_log: str, codespace: str = ""):
        super().__init__(f"tx {txhash} failed: code={code} codespace={codespace or '-'} {raw_log}")
        self.txhash = txhash
        self.code = code
        self.raw_log = raw_log
        self.codespace = codespace


def check_tx_response(resp: Dict[str, Any]) -> Dict[str, Any]:
    code = int(resp.get("code") or 0)
    if code != 0:
        raise TxError(resp.get("txhash", ""), code, resp.get("raw_log", ""), resp.get("codespace", ""))
    return resp


class LCDClient:
    def __init__(self, cfg: NetworkConfig, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.cfg = cfg
        self.base = cfg.lcd_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def chain_id(self) -> str:
        return self.cfg.chain_id

    def _check(self, r: requests.Response) -> Dict[str, Any]:
        if r.status_code != 200:
            raise LCDError(f"{r.url} -> {r.status_code} {r.text}", r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise LCDError(f"non-JSON response from {r.url}: {r.text[:200]}", r.status_code) from e

    def get(self, path: str) -> Dict[str, Any]:
        return self._check(self.session.get(self.base + path, timeout=self.timeout))

    def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._check(self.session.post(self.base + path, json=body, timeout=self.timeout))

    # ---------------- queries ----------------
    def account_info(self, address: str) -> AccountInfo:
        try:
            d = self.get(f"/cosmos/auth/v1beta1/accounts/{address}")
        except LCDError as e:
            if e.status_code == 404:
                raise LCDError(f"account {address} not found on {self.chain_id}; is it funded?", 404) from e
            raise
        return AccountInfo.from_dict(d["account"])

    def tx_info(self, txhash: str) -> Optional[Dict[str, Any]]:
        """
        Returns the tx_response, or None while the tx is not in a block yet.
        """
        r = self.session.get(f"{self.base}/cosmos/tx/v1beta1/txs/{txhash}", timeout=self.timeout)
        # older nodes answer 400 with "tx not found" instead of 404
        if r.status_code == 404 or (r.status_code == 400 and "not found" in r.text):
            return None
        return self._check(r)["tx_response"]

    # ---------------- tx ----------------
    def simulate(self, tx_bytes: bytes) -> int:
        d = self.post("/cosmos/tx/v1beta1/simulate", {"tx_bytes": base64.b64encode(tx_bytes).decode()})
        return int(d["gas_info"]["gas_used"])

    def estimate_fee(self, tx_bytes: bytes) -> Fee:
        gas_used = self.simulate(tx_bytes)
        gas = math.ceil(gas_used * Decimal(str(self.cfg.gas_adjustment)))
        amount = math.ceil(gas * Decimal(str(self.cfg.gas_price)))
        Log.info(f"Estimated gas {gas} (used {gas_used}), fee {amount}{self.cfg.fee_denom}")
        return Fee(gas_limit=gas, amount=[Coin(self.cfg.fee_denom, amount)])

    def broadcast_sync(self, tx_bytes: bytes) -> Dict[str, Any]:
        d = self.post("/cosmos/tx/v1beta1/txs", {
            "tx_bytes": base64.b64encode(tx_bytes).decode(),
            "mode": "BROADCAST_MODE_SYNC",
        })
        return check_tx_response(d["tx_response"])


def create_lcd_client(network: str, session: Optional[requests.Session] = None) -> LCDClient:
    return LCDClient(get_network(network), session=session)
