from typing import Dict, Any

from .models import MsgExecuteContract


def add_validator_msg(validator: str) -> Dict[str, Any]:
    return {"add_validator": {"validator": validator}}


def execute_add_validator(sender: str, hub: str, validator: str) -> MsgExecuteContract:
    return MsgExecuteContract(sender=sender, contract=hub, msg=add_validator_msg(validator))
