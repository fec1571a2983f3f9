import os
from dataclasses import dataclass, replace
from typing import Dict

LCD_URL_ENV = "HUBCTL_LCD_URL"


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    chain_id: str
    lcd_url: str
    fee_denom: str = "uluna"
    gas_price: float = 0.15
    gas_adjustment: float = 1.4
    account_prefix: str = "terra"
    validator_prefix: str = "terravaloper"


NETWORKS: Dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(name="mainnet", chain_id="phoenix-1", lcd_url="https://phoenix-lcd.terra.dev"),
    "testnet": NetworkConfig(name="testnet", chain_id="pisco-1", lcd_url="https://pisco-lcd.terra.dev"),
    "localterra": NetworkConfig(name="localterra", chain_id="localterra", lcd_url="http://localhost:1317"),
}


def get_network(name: str) -> NetworkConfig:
    """
    Look up a preset by name. HUBCTL_LCD_URL replaces the preset's LCD url,
    e.g. to point at a private node.
    """
    if name not in NETWORKS:
        raise ValueError(f"invalid network: {name}, must be one of {'|'.join(NETWORKS)}")
    cfg = NETWORKS[name]
    url = os.environ.get(LCD_URL_ENV, "").strip()
    if url:
        cfg = replace(cfg, lcd_url=url)
    return cfg
