import base64

import pytest

from conftest import ACCOUNT_NUMBER, SEQUENCE, chain_routes
from hubctl.lcd import LCDError, TxError, create_lcd_client
from hubctl.networks import LCD_URL_ENV, get_network


def test_network_presets(monkeypatch):
    monkeypatch.delenv(LCD_URL_ENV, raising=False)
    assert get_network("mainnet").chain_id == "phoenix-1"
    assert get_network("testnet").chain_id == "pisco-1"
    with pytest.raises(ValueError):
        get_network("columbus")


def test_lcd_url_override(monkeypatch):
    monkeypatch.setenv(LCD_URL_ENV, "http://10.0.0.5:1317/")
    lcd = create_lcd_client("testnet")
    assert lcd.base == "http://10.0.0.5:1317"
    assert lcd.chain_id == "pisco-1"


def test_account_info(make_lcd, keypair):
    addr = keypair.address()
    lcd = make_lcd(chain_routes(addr))
    acct = lcd.account_info(addr)
    assert (acct.account_number, acct.sequence) == (ACCOUNT_NUMBER, SEQUENCE)


def test_account_not_found(make_lcd):
    lcd = make_lcd({})
    with pytest.raises(LCDError) as e:
        lcd.account_info("terra1nobody")
    assert e.value.status_code == 404
    assert "is it funded" in str(e.value)


def test_estimate_fee(make_lcd, keypair):
    lcd = make_lcd(chain_routes(keypair.address()))
    fee = lcd.estimate_fee(b"\x0a\x00")
    assert fee.gas_limit == 140000
    assert fee.amount[0].denom == "uluna"
    assert fee.amount[0].amount == 21000
    method, path, body = lcd.session.calls[-1]
    assert (method, path) == ("POST", "/cosmos/tx/v1beta1/simulate")
    assert base64.b64decode(body["tx_bytes"]) == b"\x0a\x00"


def test_broadcast_sync(make_lcd, keypair):
    lcd = make_lcd(chain_routes(keypair.address(), txhash="FEED"))
    resp = lcd.broadcast_sync(b"raw")
    assert resp["txhash"] == "FEED"
    assert lcd.session.calls[-1][2]["mode"] == "BROADCAST_MODE_SYNC"


def test_broadcast_rejected_by_check_tx(make_lcd):
    lcd = make_lcd({("POST", "/cosmos/tx/v1beta1/txs"): (200, {"tx_response": {
        "txhash": "BAD", "code": 5, "codespace": "sdk", "raw_log": "insufficient funds"}})})
    with pytest.raises(TxError) as e:
        lcd.broadcast_sync(b"raw")
    assert e.value.code == 5
    assert "insufficient funds" in str(e.value)


def test_tx_info_pending_then_found(make_lcd, keypair):
    lcd = make_lcd(chain_routes(keypair.address(), txhash="AB"))
    assert lcd.tx_info("AB") is None
    assert lcd.tx_info("AB")["height"] == "4242"


def test_tx_info_legacy_not_found(make_lcd):
    lcd = make_lcd({("GET", "/cosmos/tx/v1beta1/txs/AB"): (400, "tx (AB) not found")})
    assert lcd.tx_info("AB") is None


def test_server_error(make_lcd):
    lcd = make_lcd({("GET", "/cosmos/tx/v1beta1/txs/AB"): (500, {"message": "boom"})})
    with pytest.raises(LCDError) as e:
        lcd.tx_info("AB")
    assert e.value.status_code == 500
