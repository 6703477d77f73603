"""Outputs tracked by the wallet and their status."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass

from .errors import ErrorKind, WalletError


class OutputStatus(enum.Enum):
    """State of an output the wallet tracks."""

    UNCONFIRMED = "Unconfirmed"
    UNSPENT = "Unspent"
    LOCKED = "Locked"
    SPENT = "Spent"

    def __str__(self) -> str:
        return self.value


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


def _flag(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {value!r}")
    return value


@dataclass
class OutputData:
    """An output owned by the wallet."""

    root_key_id: str
    key_id: str
    n_child: int
    commit: str | None
    mmr_index: int | None
    value: int
    status: OutputStatus
    height: int
    lock_height: int
    is_coinbase: bool
    tx_log_entry: int | None

    def lock(self) -> None:
        """Lock the output so it is not used twice."""
        self.status = OutputStatus.LOCKED

    def num_confirmations(self, current_height: int) -> int:
        """Number of confirmations at the given chain height."""
        if self.height > current_height:
            return 0
        if self.status is OutputStatus.UNCONFIRMED or self.height == 0:
            return 0
        # an output at height n seen at block n has one confirmation
        return 1 + (current_height - self.height)

    def eligible_to_spend(self, current_height: int, minimum_confirmations: int) -> bool:
        """Whether the output may be spent at this height."""
        if self.status in (OutputStatus.SPENT, OutputStatus.LOCKED):
            return False
        if self.status is OutputStatus.UNCONFIRMED and self.is_coinbase:
            return False
        if self.lock_height > current_height:
            return False
        if (
            self.status is OutputStatus.UNSPENT
            and self.num_confirmations(current_height) >= minimum_confirmations
        ):
            return True
        return self.status is OutputStatus.UNCONFIRMED and minimum_confirmations == 0

    def mark_unspent(self) -> None:
        """Mark an unconfirmed output as unspent."""
        if self.status is OutputStatus.UNCONFIRMED:
            self.status = OutputStatus.UNSPENT

    def mark_spent(self) -> None:
        """Mark an unspent or locked output as spent."""
        if self.status in (OutputStatus.UNSPENT, OutputStatus.LOCKED):
            self.status = OutputStatus.SPENT

    def to_json(self) -> str:
        """Serialise to the JSON form stored by the wallet."""
        return json.dumps(
            {
                "root_key_id": self.root_key_id,
                "key_id": self.key_id,
                "n_child": self.n_child,
                "commit": self.commit,
                "mmr_index": self.mmr_index,
                "value": self.value,
                "status": self.status.value,
                "height": self.height,
                "lock_height": self.lock_height,
                "is_coinbase": self.is_coinbase,
                "tx_log_entry": self.tx_log_entry,
            }
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> "OutputData":
        """Read an output from its stored JSON form."""
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            commit = data.get("commit")
            mmr_index = data.get("mmr_index")
            tx_log_entry = data.get("tx_log_entry")
            return cls(
                root_key_id=_text(data["root_key_id"]),
                key_id=_text(data["key_id"]),
                n_child=_uint(data["n_child"], 32),
                commit=None if commit is None else _text(commit),
                mmr_index=None if mmr_index is None else _uint(mmr_index, 64),
                value=_uint(data["value"], 64),
                status=OutputStatus(data["status"]),
                height=_uint(data["height"], 64),
                lock_height=_uint(data["lock_height"], 64),
                is_coinbase=_flag(data["is_coinbase"]),
                tx_log_entry=None if tx_log_entry is None else _uint(tx_log_entry, 32),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise WalletError(ErrorKind.DESER, "CorruptedData") from exc


@dataclass
class OutputCommitMapping:
    """An output together with its commitment."""

    output: OutputData
    commit: str