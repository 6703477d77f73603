"""Entries of the wallet's transaction log."""

from __future__ import annotations

import enum
import json
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import ErrorKind, WalletError


class TxLogEntryType(enum.Enum):
    """Kinds of transaction log entries, valued by their stored names."""

    CONFIRMED_COINBASE = "ConfirmedCoinbase"
    TX_RECEIVED = "TxReceived"
    TX_SENT = "TxSent"
    TX_RECEIVED_CANCELLED = "TxReceivedCancelled"
    TX_SENT_CANCELLED = "TxSentCancelled"

    def __str__(self) -> str:
        return _DISPLAY[self]


_DISPLAY = {
    TxLogEntryType.CONFIRMED_COINBASE: "Confirmed \nCoinbase",
    TxLogEntryType.TX_RECEIVED: "Received Tx",
    TxLogEntryType.TX_SENT: "Sent Tx",
    TxLogEntryType.TX_RECEIVED_CANCELLED: "Received Tx\n- Cancelled",
    TxLogEntryType.TX_SENT_CANCELLED: "Send Tx\n- Cancelled",
}

_TIMESTAMP = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _format_ts(moment: datetime) -> str:
    text = moment.astimezone(timezone.utc).isoformat()
    return text[: -len("+00:00")] + "Z" if text.endswith("+00:00") else text


def _parse_ts(text: object) -> datetime:
    if not isinstance(text, str):
        raise ValueError(f"expected a timestamp, got {text!r}")
    match = _TIMESTAMP.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r}")
    base, fraction, zone = match.groups()
    micros = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if zone == "Z" else zone
    return datetime.fromisoformat(f"{base}.{micros}{offset}").astimezone(timezone.utc)


def _uint(value: object, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    if not 0 <= value < 1 << bits:
        raise ValueError(f"{value} does not fit in {bits} bits")
    return value


def _opt_uint(value: object, bits: int) -> int | None:
    return None if value is None else _uint(value, bits)


def _text(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _opt_text(value: object) -> str | None:
    return None if value is None else _text(value)


@dataclass
class TxLogEntry:
    """A record of an event that added or removed funds."""

    parent_key_id: str
    tx_type: TxLogEntryType
    id: int
    tx_slate_id: uuid.UUID | None = None
    address: str | None = None
    creation_ts: datetime = field(default_factory=_now)
    confirmation_ts: datetime | None = None
    confirmed: bool = False
    num_inputs: int = 0
    num_outputs: int = 0
    amount_credited: int = 0
    amount_debited: int = 0
    fee: int | None = None
    excess: str | None = None
    stored_tx: str | None = None

    def update_confirmation_ts(self) -> None:
        """Set the confirmation time to now."""
        self.confirmation_ts = _now()

    def to_json(self) -> str:
        data: dict[str, Any] = {
            "parent_key_id": self.parent_key_id,
            "id": self.id,
            "tx_slate_id": None if self.tx_slate_id is None else str(self.tx_slate_id),
            "tx_type": self.tx_type.value,
            "address": self.address,
            "creation_ts": _format_ts(self.creation_ts),
            "confirmation_ts": (
                None if self.confirmation_ts is None else _format_ts(self.confirmation_ts)
            ),
            "confirmed": self.confirmed,
            "num_inputs": self.num_inputs,
            "num_outputs": self.num_outputs,
            "amount_credited": self.amount_credited,
            "amount_debited": self.amount_debited,
            "fee": self.fee,
            "excess": self.excess,
            "stored_tx": self.stored_tx,
        }
        return json.dumps(data)

    @classmethod
    def from_json(cls, text: str | bytes) -> "TxLogEntry":
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            slate_id = data.get("tx_slate_id")
            confirmation = data.get("confirmation_ts")
            confirmed = data["confirmed"]
            if not isinstance(confirmed, bool):
                raise ValueError("confirmed must be a boolean")
            return cls(
                parent_key_id=_text(data["parent_key_id"]),
                id=_uint(data["id"], 32),
                tx_slate_id=None if slate_id is None else uuid.UUID(_text(slate_id)),
                tx_type=TxLogEntryType(data["tx_type"]),
                address=_opt_text(data.get("address")),
                creation_ts=_parse_ts(data["creation_ts"]),
                confirmation_ts=None if confirmation is None else _parse_ts(confirmation),
                confirmed=confirmed,
                num_inputs=_uint(data["num_inputs"], 64),
                num_outputs=_uint(data["num_outputs"], 64),
                amount_credited=_uint(data["amount_credited"], 64),
                amount_debited=_uint(data["amount_debited"], 64),
                fee=_opt_uint(data.get("fee"), 64),
                excess=_opt_text(data.get("excess")),
                stored_tx=_opt_text(data.get("stored_tx")),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise WalletError(ErrorKind.DESER, "CorruptedData") from exc