"""Slates: the shared transaction state passed between the parties."""

from __future__ import annotations

import enum
import json
import string
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping

from .args import parse_u64
from .errors import ErrorKind, WalletError
from .transaction import Transaction

CURRENT_SLATE_VERSION = 2
GRIN_BLOCK_HEADER_VERSION = 2

PUBLIC_KEY_SIZE = 33
SIGNATURE_SIZE = 64


class SlateVersion(enum.Enum):
    """Known versions of the slate format."""

    V2 = 2

    @classmethod
    def from_number(cls, value: int) -> "SlateVersion":
        """The version with this number; unknown numbers raise."""
        if value == 2 and not isinstance(value, bool):
            return cls.V2
        raise WalletError(ErrorKind.SLATE_VERSION, value)

    @classmethod
    def default(cls) -> "SlateVersion":
        """The current slate version."""
        return cls.from_number(CURRENT_SLATE_VERSION)


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


def _hex(value: object, size: int) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a hex string, got {value!r}")
    if len(value) != 2 * size or any(ch not in string.hexdigits for ch in value):
        raise ValueError(f"expected {size} bytes of hex, got {value!r}")
    return value.lower()


def _opt_hex(value: object, size: int) -> str | None:
    return None if value is None else _hex(value, size)


def _opt_text(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {value!r}")
    return value


@dataclass
class VersionCompatInfo:
    """Version of a slate, the version it came from and its header version."""

    version: int
    orig_version: int
    block_header_version: int


@dataclass
class ParticipantData:
    """Public data one participant adds to a slate."""

    id: int
    public_blind_excess: str
    public_nonce: str
    part_sig: str | None = None
    message: str | None = None
    message_sig: str | None = None

    def is_complete(self) -> bool:
        """Whether this participant has added a partial signature."""
        return self.part_sig is not None


@dataclass
class ParticipantMessageData:
    """A participant's message with its public key and signature."""

    id: int
    public_key: str
    message: str | None = None
    message_sig: str | None = None


def _participant_to_dict(data: ParticipantData) -> dict[str, Any]:
    return {
        "id": str(data.id),
        "public_blind_excess": data.public_blind_excess,
        "public_nonce": data.public_nonce,
        "part_sig": data.part_sig,
        "message": data.message,
        "message_sig": data.message_sig,
    }


def _participant_from_dict(raw: object) -> ParticipantData:
    data = _mapping(raw)
    return ParticipantData(
        id=parse_u64(_field(data, "id")),
        public_blind_excess=_hex(_field(data, "public_blind_excess"), PUBLIC_KEY_SIZE),
        public_nonce=_hex(_field(data, "public_nonce"), PUBLIC_KEY_SIZE),
        part_sig=_opt_hex(data.get("part_sig"), SIGNATURE_SIZE),
        message=_opt_text(data.get("message")),
        message_sig=_opt_hex(data.get("message_sig"), SIGNATURE_SIZE),
    )


def _version_info_from_dict(raw: object) -> VersionCompatInfo:
    data = _mapping(raw)
    return VersionCompatInfo(
        version=_uint(_field(data, "version"), 16),
        orig_version=_uint(_field(data, "orig_version"), 16),
        block_header_version=_uint(_field(data, "block_header_version"), 16),
    )


def _v2_dict(slate: "Slate") -> dict[str, Any]:
    info = slate.version_info
    return {
        "version_info": {
            "version": info.version,
            "orig_version": info.orig_version,
            "block_header_version": info.block_header_version,
        },
        "num_participants": slate.num_participants,
        "id": str(slate.id),
        "tx": slate.tx.to_dict(),
        "amount": str(slate.amount),
        "fee": str(slate.fee),
        "height": str(slate.height),
        "lock_height": str(slate.lock_height),
        "participant_data": [_participant_to_dict(p) for p in slate.participant_data],
    }


@dataclass
class Slate:
    """The public transaction data the parties build up together."""

    version_info: VersionCompatInfo
    num_participants: int
    id: uuid.UUID
    tx: Transaction
    amount: int
    fee: int
    height: int
    lock_height: int
    participant_data: list[ParticipantData] = field(default_factory=list)

    @classmethod
    def blank(cls, num_participants: int) -> "Slate":
        """A new slate with a random id and an empty transaction."""
        return cls(
            version_info=VersionCompatInfo(
                version=CURRENT_SLATE_VERSION,
                orig_version=CURRENT_SLATE_VERSION,
                block_header_version=GRIN_BLOCK_HEADER_VERSION,
            ),
            num_participants=num_participants,
            id=uuid.uuid4(),
            tx=Transaction.empty(),
            amount=0,
            fee=0,
            height=0,
            lock_height=0,
        )

    def to_dict(self) -> dict[str, Any]:
        """The wire form of the slate in the version it originated from."""
        orig = self.version_info.orig_version
        if orig != 2:
            raise WalletError(ErrorKind.SLATE_VERSION, orig)
        return _v2_dict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Slate":
        """Read a slate from its wire form."""
        try:
            data = _mapping(data)
            participants = _field(data, "participant_data")
            if not isinstance(participants, list):
                raise ValueError("`participant_data` must be a list")
            slate_id = _field(data, "id")
            if not isinstance(slate_id, str):
                raise ValueError(f"invalid slate id {slate_id!r}")
            return cls(
                version_info=_version_info_from_dict(_field(data, "version_info")),
                num_participants=_uint(_field(data, "num_participants"), 64),
                id=uuid.UUID(slate_id),
                tx=Transaction.from_dict(_field(data, "tx")),
                amount=parse_u64(_field(data, "amount")),
                fee=parse_u64(_field(data, "fee")),
                height=parse_u64(_field(data, "height")),
                lock_height=parse_u64(_field(data, "lock_height")),
                participant_data=[_participant_from_dict(p) for p in participants],
            )
        except (ValueError, TypeError) as exc:
            raise WalletError(ErrorKind.SLATE_DESER) from exc

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str | bytes) -> "Slate":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise WalletError(ErrorKind.SLATE_DESER) from exc
        return cls.from_dict(data)


@dataclass(frozen=True)
class VersionedSlate:
    """A slate converted to the wire form of a particular version."""

    slate_version: SlateVersion
    data: dict[str, Any]

    @classmethod
    def into_version(cls, slate: Slate, version: SlateVersion) -> "VersionedSlate":
        """Convert a slate to the given version."""
        if version is SlateVersion.V2:
            return cls(SlateVersion.V2, _v2_dict(slate))
        raise WalletError(ErrorKind.SLATE_VERSION, version.value)

    def version(self) -> SlateVersion:
        """The version this slate is held in."""
        return self.slate_version

    def to_slate(self) -> Slate:
        """Convert back to the current slate."""
        return Slate.from_dict(self.data)