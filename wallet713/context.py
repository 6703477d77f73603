"""Private state a participant keeps while building a transaction."""

from __future__ import annotations

import json
import secrets
import string
from dataclasses import dataclass, field
from typing import Any

from .errors import ErrorKind, WalletError

_SECRET_KEY_SIZE = 32
_CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

KeyEntry = tuple[str, "int | None", int]


def _secret_key(value: bytes) -> bytes:
    data = bytes(value)
    if len(data) != _SECRET_KEY_SIZE:
        raise ValueError(f"a secret key is {_SECRET_KEY_SIZE} bytes, got {len(data)}")
    if not 0 < int.from_bytes(data, "big") < _CURVE_ORDER:
        raise ValueError("secret key out of range")
    return data


def _new_secret_nonce() -> bytes:
    scalar = secrets.randbelow(_CURVE_ORDER - 1) + 1
    return scalar.to_bytes(_SECRET_KEY_SIZE, "big")


def _uint(value: object, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    if not 0 <= value < 1 << bits:
        raise ValueError(f"{value} does not fit in {bits} bits")
    return value


def _text(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _hex_bytes(value: object) -> bytes:
    text = _text(value)
    if len(text) % 2 or any(ch not in string.hexdigits for ch in text):
        raise ValueError(f"invalid hex string {text!r}")
    return bytes.fromhex(text)


def _entries(value: object) -> list[KeyEntry]:
    if not isinstance(value, list):
        raise ValueError("expected a list of key entries")
    entries = []
    for item in value:
        if not isinstance(item, list) or len(item) != 3:
            raise ValueError(f"invalid key entry {item!r}")
        key_id, mmr_index, amount = item
        entries.append(
            (
                _text(key_id),
                None if mmr_index is None else _uint(mmr_index, 64),
                _uint(amount, 64),
            )
        )
    return entries


def _commits(value: object) -> list[str]:
    if not isinstance(value, list):
        raise ValueError("expected a list of commitments")
    return [_text(item) for item in value]


@dataclass
class Context:
    """Keys and selected outputs for one aggregate-signature transaction."""

    parent_key_id: str
    sec_key: bytes = field(repr=False)
    sec_nonce: bytes = field(repr=False)
    participant_id: int
    output_ids: list[KeyEntry] = field(default_factory=list)
    input_ids: list[KeyEntry] = field(default_factory=list)
    amount: int = 0
    fee: int = 0
    output_commits: list[str] = field(default_factory=list)
    input_commits: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, sec_key: bytes, parent_key_id: str, participant_id: int) -> "Context":
        """Start a context with a fresh secret nonce and nothing recorded."""
        return cls(
            parent_key_id=parent_key_id,
            sec_key=_secret_key(sec_key),
            sec_nonce=_new_secret_nonce(),
            participant_id=participant_id,
        )

    def add_output(self, output_id: str, mmr_index: int | None, amount: int) -> None:
        """Record an output that contributes to this participant's excess."""
        self.output_ids.append((output_id, mmr_index, amount))

    def get_outputs(self) -> list[KeyEntry]:
        """All recorded outputs."""
        return list(self.output_ids)

    def add_input(self, input_id: str, mmr_index: int | None, amount: int) -> None:
        """Record an input spent by this participant."""
        self.input_ids.append((input_id, mmr_index, amount))

    def get_inputs(self) -> list[KeyEntry]:
        """All recorded inputs."""
        return list(self.input_ids)

    def to_json(self) -> str:
        data: dict[str, Any] = {
            "parent_key_id": self.parent_key_id,
            "sec_key": self.sec_key.hex(),
            "sec_nonce": self.sec_nonce.hex(),
            "output_ids": [list(entry) for entry in self.output_ids],
            "input_ids": [list(entry) for entry in self.input_ids],
            "participant_id": self.participant_id,
            "amount": self.amount,
            "fee": self.fee,
            "output_commits": list(self.output_commits),
            "input_commits": list(self.input_commits),
        }
        return json.dumps(data)

    @classmethod
    def from_json(cls, text: str | bytes) -> "Context":
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return cls(
                parent_key_id=_text(data["parent_key_id"]),
                sec_key=_secret_key(_hex_bytes(data["sec_key"])),
                sec_nonce=_secret_key(_hex_bytes(data["sec_nonce"])),
                output_ids=_entries(data["output_ids"]),
                input_ids=_entries(data["input_ids"]),
                participant_id=_uint(data["participant_id"], 64),
                amount=_uint(data["amount"], 64),
                fee=_uint(data["fee"], 64),
                output_commits=_commits(data["output_commits"]),
                input_commits=_commits(data["input_commits"]),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise WalletError(ErrorKind.DESER, "CorruptedData") from exc