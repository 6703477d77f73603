"""Arguments and small result records exchanged with the wallet API."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import ErrorKind, WalletError

_U64_LIMIT = 1 << 64


def parse_u64(value: object) -> int:
    """Read an unsigned 64-bit amount given as a number or a decimal string."""
    if isinstance(value, bool):
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    if isinstance(value, str):
        digits = value[1:] if value.startswith("+") else value
        if not (digits.isascii() and digits.isdigit()):
            raise ValueError(f"invalid unsigned integer {value!r}")
        number = int(digits)
    elif isinstance(value, int):
        number = value
    else:
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    if not 0 <= number < _U64_LIMIT:
        raise ValueError(f"{number} does not fit in 64 bits")
    return number


def _mapping(data: object) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a mapping, got {data!r}")
    return data


def _field(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _uint(value: object, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an unsigned integer, got {value!r}")
    if not 0 <= value < 1 << bits:
        raise ValueError(f"{value} does not fit in {bits} bits")
    return value


def _flag(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean, got {value!r}")
    return value


def _text(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


def _opt_text(value: object) -> str | None:
    return None if value is None else _text(value)


def _opt_u16(value: object) -> int | None:
    return None if value is None else _uint(value, 16)


@dataclass
class InitTxSendArgs:
    """Where and how to send a transaction once it is built."""

    dest: str
    method: str | None = None
    finalize: bool = False
    post_tx: bool = False
    fluff: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "method": self.method,
            "dest": self.dest,
            "finalize": self.finalize,
            "post_tx": self.post_tx,
            "fluff": self.fluff,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InitTxSendArgs":
        data = _mapping(data)
        return cls(
            method=_opt_text(data.get("method")),
            dest=_text(_field(data, "dest")),
            finalize=_flag(_field(data, "finalize")),
            post_tx=_flag(_field(data, "post_tx")),
            fluff=_flag(_field(data, "fluff")),
        )


@dataclass
class InitTxArgs:
    """Arguments for starting a send transaction."""

    src_acct_name: str | None = None
    amount: int = 0
    minimum_confirmations: int = 10
    max_outputs: int = 500
    num_change_outputs: int = 1
    selection_strategy_is_use_all: bool = True
    message: str | None = None
    target_slate_version: int | None = None
    estimate_only: bool | None = False
    send_args: InitTxSendArgs | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "src_acct_name": self.src_acct_name,
            "amount": str(self.amount),
            "minimum_confirmations": str(self.minimum_confirmations),
            "max_outputs": self.max_outputs,
            "num_change_outputs": self.num_change_outputs,
            "selection_strategy_is_use_all": self.selection_strategy_is_use_all,
            "message": self.message,
            "target_slate_version": self.target_slate_version,
            "estimate_only": self.estimate_only,
            "send_args": None if self.send_args is None else self.send_args.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InitTxArgs":
        data = _mapping(data)
        estimate_only = data.get("estimate_only")
        send_args = data.get("send_args")
        return cls(
            src_acct_name=_opt_text(data.get("src_acct_name")),
            amount=parse_u64(_field(data, "amount")),
            minimum_confirmations=parse_u64(_field(data, "minimum_confirmations")),
            max_outputs=_uint(_field(data, "max_outputs"), 32),
            num_change_outputs=_uint(_field(data, "num_change_outputs"), 32),
            selection_strategy_is_use_all=_flag(
                _field(data, "selection_strategy_is_use_all")
            ),
            message=_opt_text(data.get("message")),
            target_slate_version=_opt_u16(data.get("target_slate_version")),
            estimate_only=None if estimate_only is None else _flag(estimate_only),
            send_args=None if send_args is None else InitTxSendArgs.from_dict(send_args),
        )


@dataclass
class IssueInvoiceTxArgs:
    """Arguments for issuing an invoice."""

    dest_acct_name: str | None = None
    amount: int = 0
    message: str | None = None
    target_slate_version: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "dest_acct_name": self.dest_acct_name,
            "amount": str(self.amount),
            "message": self.message,
            "target_slate_version": self.target_slate_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IssueInvoiceTxArgs":
        data = _mapping(data)
        return cls(
            dest_acct_name=_opt_text(data.get("dest_acct_name")),
            amount=parse_u64(_field(data, "amount")),
            message=_opt_text(data.get("message")),
            target_slate_version=_opt_u16(data.get("target_slate_version")),
        )


@dataclass
class NodeHeightResult:
    """Last known chain height and whether it came from the node."""

    height: int
    updated_from_node: bool

    def to_dict(self) -> dict[str, Any]:
        return {"height": str(self.height), "updated_from_node": self.updated_from_node}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NodeHeightResult":
        data = _mapping(data)
        return cls(
            height=parse_u64(_field(data, "height")),
            updated_from_node=_flag(_field(data, "updated_from_node")),
        )


@dataclass
class WalletInfo:
    """Summary of the wallet's balances."""

    last_confirmed_height: int
    minimum_confirmations: int
    total: int
    amount_awaiting_finalization: int
    amount_awaiting_confirmation: int
    amount_immature: int
    amount_currently_spendable: int
    amount_locked: int

    def to_dict(self) -> dict[str, str]:
        return {f.name: str(getattr(self, f.name)) for f in dataclasses.fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WalletInfo":
        data = _mapping(data)
        return cls(
            **{f.name: parse_u64(_field(data, f.name)) for f in dataclasses.fields(cls)}
        )


@dataclass
class BlockFees:
    """Fees in a block, used to work out the coinbase amount."""

    fees: int
    height: int
    key_id: str | None = None


@dataclass
class AcctPathMapping:
    """A named account and its parent derivation path."""

    label: str
    path: str

    def to_json(self) -> str:
        return json.dumps({"label": self.label, "path": self.path})

    @classmethod
    def from_json(cls, text: str | bytes) -> "AcctPathMapping":
        try:
            data = _mapping(json.loads(text))
            return cls(label=_text(_field(data, "label")), path=_text(_field(data, "path")))
        except ValueError as exc:
            raise WalletError(ErrorKind.DESER, "CorruptedData") from exc


@dataclass
class TxWrapper:
    """A hex-encoded serialised transaction, as posted to a node."""

    tx_hex: str

    def to_dict(self) -> dict[str, str]:
        return {"tx_hex": self.tx_hex}


@dataclass(frozen=True, order=True)
class BlockIdentifier:
    """A block identified by its hash."""

    hash: str = field()