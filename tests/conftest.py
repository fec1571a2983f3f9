import json

import bech32
import pytest

from hubctl.crypto import keypair_from_private_hex
from hubctl.lcd import LCDClient
from hubctl.networks import NETWORKS

PRIV_HEX = "1f" * 32
ACCOUNT_NUMBER = 7
SEQUENCE = 3


class FakeResponse:
    def __init__(self, status_code=200, body=None, url=""):
        self.status_code = status_code
        self._body = body
        self.url = url
        self.text = body if isinstance(body, str) else json.dumps(body)

    def json(self):
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body


class FakeSession:
    """
    Routes are keyed by (method, path). A list value is consumed one
    response per call; the last one repeats.
    """

    def __init__(self, base, routes):
        self.base = base
        self.routes = routes
        self.calls = []

    def _respond(self, method, url, body=None):
        path = url[len(self.base):]
        self.calls.append((method, path, body))
        r = self.routes.get((method, path))
        if r is None:
            return FakeResponse(404, {"code": 5, "message": "not found"}, url)
        if isinstance(r, list):
            r = r.pop(0) if len(r) > 1 else r[0]
        status, payload = r
        return FakeResponse(status, payload, url)

    def get(self, url, timeout=None):
        return self._respond("GET", url)

    def post(self, url, json=None, timeout=None):
        return self._respond("POST", url, json)


@pytest.fixture
def keypair():
    return keypair_from_private_hex(PRIV_HEX)


@pytest.fixture
def hub_address():
    return bech32.bech32_encode("terra", bech32.convertbits(b"\x11" * 32, 8, 5))


@pytest.fixture
def validator_address():
    return bech32.bech32_encode("terravaloper", bech32.convertbits(b"\x22" * 20, 8, 5))


def chain_routes(address, txhash="ABCDEF", polls_before_found=1, tx_code=0):
    """Happy-path LCD for one account and one tx."""
    pending = [(404, {"code": 5, "message": "tx not found"})] * polls_before_found
    return {
        ("GET", f"/cosmos/auth/v1beta1/accounts/{address}"): (200, {"account": {
            "@type": "/cosmos.auth.v1beta1.BaseAccount",
            "address": address,
            "pub_key": None,
            "account_number": str(ACCOUNT_NUMBER),
            "sequence": str(SEQUENCE),
        }}),
        ("POST", "/cosmos/tx/v1beta1/simulate"): (200, {"gas_info": {"gas_wanted": "0", "gas_used": "100000"}}),
        ("POST", "/cosmos/tx/v1beta1/txs"): (200, {"tx_response": {"txhash": txhash, "code": 0, "raw_log": "[]"}}),
        ("GET", f"/cosmos/tx/v1beta1/txs/{txhash}"): pending + [
            (200, {"tx_response": {"txhash": txhash, "code": tx_code, "height": "4242", "raw_log": "out of gas" if tx_code else ""}}),
        ],
    }


@pytest.fixture
def make_lcd():
    def _make(routes, network="localterra"):
        cfg = NETWORKS[network]
        session = FakeSession(cfg.lcd_url, routes)
        return LCDClient(cfg, session=session)
    return _make
