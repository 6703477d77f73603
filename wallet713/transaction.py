"""Transactions and their parts in the form exchanged between wallets."""

from __future__ import annotations

import enum
import string
from dataclasses import dataclass, field
from typing import Any, Mapping

from .args import parse_u64

COMMITMENT_SIZE = 33
BLINDING_FACTOR_SIZE = 32
SIGNATURE_SIZE = 64
_U64_MAX = (1 << 64) - 1


class OutputFeatures(enum.Enum):
    """Kind of an output or of the output an input spends."""

    PLAIN = "Plain"
    COINBASE = "Coinbase"


class KernelFeatures(enum.Enum):
    """Kind of a transaction kernel."""

    PLAIN = "Plain"
    COINBASE = "Coinbase"
    HEIGHT_LOCKED = "HeightLocked"


def _mapping(data: object) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a mapping, got {data!r}")
    return data


def _field(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None


def _hex(value: object, size: int | None = None) -> str:
    """Check a hex string, optionally of a fixed byte length, and normalise it."""
    if not isinstance(value, str):
        raise ValueError(f"expected a hex string, got {value!r}")
    if len(value) % 2 or any(ch not in string.hexdigits for ch in value):
        raise ValueError(f"invalid hex string {value!r}")
    if size is not None and len(value) != 2 * size:
        raise ValueError(f"expected {size} bytes of hex, got {len(value) // 2}")
    return value.lower()


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = _field(data, key)
    if not isinstance(value, list):
        raise ValueError(f"`{key}` must be a list")
    return value


def _output_features(value: object) -> OutputFeatures:
    try:
        return OutputFeatures(value)
    except ValueError:
        raise ValueError(f"unknown output features {value!r}") from None


def _kernel_features(value: object) -> KernelFeatures:
    try:
        return KernelFeatures(value)
    except ValueError:
        raise ValueError(f"unknown kernel features {value!r}") from None


@dataclass
class Input:
    """An input spending an earlier output."""

    features: OutputFeatures
    commit: str

    def to_dict(self) -> dict[str, Any]:
        return {"features": self.features.value, "commit": self.commit}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Input":
        data = _mapping(data)
        return cls(
            features=_output_features(_field(data, "features")),
            commit=_hex(_field(data, "commit"), COMMITMENT_SIZE),
        )


@dataclass
class Output:
    """An output with its commitment and range proof."""

    features: OutputFeatures
    commit: str
    proof: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "features": self.features.value,
            "commit": self.commit,
            "proof": self.proof,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Output":
        data = _mapping(data)
        return cls(
            features=_output_features(_field(data, "features")),
            commit=_hex(_field(data, "commit"), COMMITMENT_SIZE),
            proof=_hex(_field(data, "proof")),
        )


@dataclass
class TxKernel:
    """A kernel: fee, lock height, excess and the signature over them."""

    features: KernelFeatures
    fee: int
    lock_height: int
    excess: str
    excess_sig: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "features": self.features.value,
            "fee": str(self.fee),
            "lock_height": str(self.lock_height),
            "excess": self.excess,
            "excess_sig": self.excess_sig,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TxKernel":
        data = _mapping(data)
        return cls(
            features=_kernel_features(_field(data, "features")),
            fee=parse_u64(_field(data, "fee")),
            lock_height=parse_u64(_field(data, "lock_height")),
            excess=_hex(_field(data, "excess"), COMMITMENT_SIZE),
            excess_sig=_hex(_field(data, "excess_sig"), SIGNATURE_SIZE),
        )


@dataclass
class TransactionBody:
    """Inputs, outputs and kernels of a transaction."""

    inputs: list[Input] = field(default_factory=list)
    outputs: list[Output] = field(default_factory=list)
    kernels: list[TxKernel] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputs": [item.to_dict() for item in self.inputs],
            "outputs": [item.to_dict() for item in self.outputs],
            "kernels": [item.to_dict() for item in self.kernels],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransactionBody":
        data = _mapping(data)
        return cls(
            inputs=[Input.from_dict(item) for item in _list(data, "inputs")],
            outputs=[Output.from_dict(item) for item in _list(data, "outputs")],
            kernels=[TxKernel.from_dict(item) for item in _list(data, "kernels")],
        )


@dataclass
class Transaction:
    """A transaction: kernel offset and body."""

    offset: str
    body: TransactionBody = field(default_factory=TransactionBody)

    @classmethod
    def empty(cls) -> "Transaction":
        """A transaction with a zero offset and nothing in its body."""
        return cls(offset="00" * BLINDING_FACTOR_SIZE, body=TransactionBody())

    @property
    def inputs(self) -> list[Input]:
        return self.body.inputs

    @property
    def outputs(self) -> list[Output]:
        return self.body.outputs

    @property
    def kernels(self) -> list[TxKernel]:
        return self.body.kernels

    def fee(self) -> int:
        """Total fee over all kernels, saturating at the largest u64."""
        return min(sum(kernel.fee for kernel in self.body.kernels), _U64_MAX)

    def to_dict(self) -> dict[str, Any]:
        return {"offset": self.offset, "body": self.body.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        data = _mapping(data)
        return cls(
            offset=_hex(_field(data, "offset"), BLINDING_FACTOR_SIZE),
            body=TransactionBody.from_dict(_field(data, "body")),
        )


@dataclass
class CbData:
    """A built coinbase: its output, kernel and the key it was derived from."""

    output: Output
    kernel: TxKernel
    key_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "output": self.output.to_dict(),
            "kernel": self.kernel.to_dict(),
            "key_id": self.key_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CbData":
        data = _mapping(data)
        key_id = data.get("key_id")
        return cls(
            output=Output.from_dict(_field(data, "output")),
            kernel=TxKernel.from_dict(_field(data, "kernel")),
            key_id=None if key_id is None else _hex(key_id),
        )