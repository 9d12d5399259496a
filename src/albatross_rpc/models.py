"""
Models - Typed views of the objects returned by an Albatross node.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .units import luna_to_nim


class NodeModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Slot(NodeModel):
    """Slot used to produce a micro block."""

    slot_number: int = 0
    validator: str = ""
    public_key: str = ""


class Slots(NodeModel):
    """Slot range assigned to one validator for the next epoch."""

    first_slot_number: int = Field(default=0, alias="FirstSlotNumber")
    num_slots: int = 0
    validator: str = ""
    public_key: str = ""


class Block(NodeModel):
    """
    A micro or macro block.

    ``transactions`` is left as raw JSON; decode it on demand with
    ``unwrap(list[Transaction], block)``.
    """

    number: int
    epoch: int = 0
    batch: int = 0
    timestamp: int = 0
    type: str = ""
    is_election_block: bool = False
    extra_data: list[int] = Field(default_factory=list)
    transactions: Any = None
    # Only returned for micro blocks
    producer: Optional[Slot] = Field(default=None, alias="slot")
    # Only returned for election blocks: slot distribution of the next epoch
    slots: Optional[list[Slots]] = None

    @field_validator("extra_data", mode="before")
    @classmethod
    def _decode_extra_data(cls, value: Any) -> Any:
        # Nodes may send the bytes base64 encoded instead of as a number array
        if isinstance(value, str):
            try:
                return list(base64.b64decode(value, validate=True))
            except binascii.Error as exc:
                raise ValueError(f"extraData is not valid base64: {exc}") from exc
        return value

    def get_error(self) -> None:
        return None

    def get_raw(self) -> Optional[str]:
        # An explicit null is a payload; an absent field is not
        if "transactions" not in self.model_fields_set:
            return None
        return json.dumps(self.transactions, separators=(",", ":"))


class Account(NodeModel):
    """Account state. Only basic account fields are decoded."""

    address: str
    balance: int = 0
    type: str = ""

    @property
    def balance_nim(self) -> str:
        return luna_to_nim(self.balance)


class ReturnAccount(NodeModel):
    """Key material of an account created through the RPC interface."""

    address: str
    public_key: str = ""
    private_key: str = Field(default="", alias="PrivateKey")


class Transaction(NodeModel):
    hash: str
    block_number: Optional[int] = None
    timestamp: Optional[int] = None
    confirmations: Optional[int] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    value: Optional[int] = None
    fee: Optional[int] = None
    data: Optional[str] = None
    flags: Optional[int] = None
    validity_start_height: Optional[int] = None
    network_id: Optional[int] = None

    @property
    def value_nim(self) -> Optional[str]:
        return luna_to_nim(self.value) if self.value is not None else None


__all__ = [
    "Account",
    "Block",
    "ReturnAccount",
    "Slot",
    "Slots",
    "Transaction",
]
