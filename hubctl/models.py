from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List

from .protobuf import (
    any_message,
    field_bytes,
    field_message,
    field_string,
    field_varint,
    repeated_message,
)
from .utils import canonical_json, sha256_hex

SIGN_MODE_DIRECT = 1
SECP256K1_PUBKEY_TYPE = "/cosmos.crypto.secp256k1.PubKey"


@dataclass
class Coin:
    denom: str
    amount: int

    def to_proto(self) -> bytes:
        return field_string(1, self.denom) + field_string(2, str(int(self.amount)))

    def to_dict(self) -> Dict[str, Any]:
        return {"denom": self.denom, "amount": str(int(self.amount))}


@dataclass
class Fee:
    gas_limit: int
    amount: List[Coin] = field(default_factory=list)

    def to_proto(self) -> bytes:
        return repeated_message(1, [c.to_proto() for c in self.amount]) + field_varint(2, self.gas_limit)

    def to_dict(self) -> Dict[str, Any]:
        return {"gas_limit": str(int(self.gas_limit)), "amount": [c.to_dict() for c in self.amount]}


@dataclass
class MsgExecuteContract:
    """
    cosmwasm.wasm.v1.MsgExecuteContract
    """
    sender: str
    contract: str
    msg: Dict[str, Any]
    funds: List[Coin] = field(default_factory=list)

    TYPE_URL = "/cosmwasm.wasm.v1.MsgExecuteContract"

    def to_proto(self) -> bytes:
        return (
            field_string(1, self.sender)
            + field_string(2, self.contract)
            + field_bytes(3, canonical_json(self.msg))
            + repeated_message(5, [c.to_proto() for c in self.funds])
        )

    def to_any(self) -> bytes:
        return any_message(self.TYPE_URL, self.to_proto())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "@type": self.TYPE_URL,
            "sender": self.sender,
            "contract": self.contract,
            "msg": self.msg,
            "funds": [c.to_dict() for c in self.funds],
        }


def encode_body(msgs: List[MsgExecuteContract], memo: str = "") -> bytes:
    """cosmos.tx.v1beta1.TxBody"""
    return repeated_message(1, [m.to_any() for m in msgs]) + field_string(2, memo)


def encode_auth_info(pubkey: bytes, sequence: int, fee: Fee) -> bytes:
    """cosmos.tx.v1beta1.AuthInfo with a single SIGN_MODE_DIRECT signer."""
    pubkey_any = any_message(SECP256K1_PUBKEY_TYPE, field_bytes(1, pubkey))
    mode_info = field_message(1, field_varint(1, SIGN_MODE_DIRECT))
    signer_info = (
        field_message(1, pubkey_any)
        + field_message(2, mode_info)
        + field_varint(3, sequence)
    )
    return field_message(1, signer_info) + field_message(2, fee.to_proto())


def encode_sign_doc(body_bytes: bytes, auth_info_bytes: bytes, chain_id: str, account_number: int) -> bytes:
    """cosmos.tx.v1beta1.SignDoc"""
    return (
        field_bytes(1, body_bytes)
        + field_bytes(2, auth_info_bytes)
        + field_string(3, chain_id)
        + field_varint(4, account_number)
    )


@dataclass
class Tx:
    """
    cosmos.tx.v1beta1.TxRaw
    """
    body_bytes: bytes
    auth_info_bytes: bytes
    signatures: List[bytes] = field(default_factory=list)

    def to_bytes(self) -> bytes:
        return (
            field_bytes(1, self.body_bytes)
            + field_bytes(2, self.auth_info_bytes)
            + b"".join(field_bytes(3, s, always=True) for s in self.signatures)
        )

    def txhash(self) -> str:
        return sha256_hex(self.to_bytes()).upper()


@dataclass
class AccountInfo:
    address: str
    account_number: int
    sequence: int

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AccountInfo":
        # vesting accounts wrap the base account one or two levels deep
        base = d
        while "address" not in base:
            if "base_account" in base:
                base = base["base_account"]
            elif "base_vesting_account" in base:
                base = base["base_vesting_account"]
            else:
                raise ValueError(f"unsupported account type: {d.get('@type')}")
        return AccountInfo(
            address=base["address"],
            account_number=int(base.get("account_number") or 0),
            sequence=int(base.get("sequence") or 0),
        )
