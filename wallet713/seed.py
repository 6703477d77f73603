"""The wallet seed and its password-encrypted form on disk."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import secrets
import string
from dataclasses import dataclass, field
from pathlib import Path

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .errors import ErrorKind, WalletError

log = logging.getLogger(__name__)

SEED_FILE = "wallet.seed"

_PBKDF2_ROUNDS = 100
_KEY_LEN = 32
_SALT_LEN = 8
_NONCE_LEN = 12


def _seed_path(data_file_dir: str | os.PathLike[str]) -> Path:
    return Path(data_file_dir) / SEED_FILE


def _derive_key(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        "sha512", password.encode("utf-8"), salt, _PBKDF2_ROUNDS, _KEY_LEN
    )


def _from_hex(text: str) -> bytes:
    if len(text) % 2 or any(ch not in string.hexdigits for ch in text):
        raise ValueError(f"invalid hex string {text!r}")
    return bytes.fromhex(text)


@dataclass(frozen=True)
class WalletSeed:
    """The raw seed bytes the wallet's keys are derived from."""

    data: bytes = field(repr=False)

    @classmethod
    def from_bytes(cls, data: bytes) -> "WalletSeed":
        return cls(bytes(data))

    @classmethod
    def init_new(cls, seed_length: int) -> "WalletSeed":
        """Create a fresh random seed of the given length in bytes."""
        return cls(secrets.token_bytes(seed_length))

    @classmethod
    def seed_file_exists(cls, data_file_dir: str | os.PathLike[str]) -> None:
        """Raise if a seed file already exists in the directory."""
        if _seed_path(data_file_dir).exists():
            raise WalletError(ErrorKind.WALLET_SEED_EXISTS)

    @classmethod
    def init_file(
        cls,
        data_file_dir: str | os.PathLike[str],
        seed_length: int,
        password: str,
        overwrite: bool = False,
    ) -> "WalletSeed":
        """Generate a new seed and store it, encrypted, in the directory."""
        try:
            os.makedirs(data_file_dir, exist_ok=True)
        except OSError as exc:
            raise WalletError(ErrorKind.IO) from exc

        path = _seed_path(data_file_dir)
        log.warning("Generating wallet seed file at: %s", path)
        if not overwrite:
            cls.seed_file_exists(data_file_dir)

        seed = cls.init_new(seed_length)
        encrypted = EncryptedWalletSeed.from_seed(seed, password)
        try:
            path.write_text(encrypted.to_json(), encoding="utf-8")
        except OSError as exc:
            raise WalletError(ErrorKind.IO) from exc
        return seed

    @classmethod
    def from_file(
        cls, data_file_dir: str | os.PathLike[str], password: str
    ) -> "WalletSeed":
        """Read and decrypt the seed stored in the directory."""
        try:
            os.makedirs(data_file_dir, exist_ok=True)
        except OSError as exc:
            raise WalletError(ErrorKind.IO) from exc

        path = _seed_path(data_file_dir)
        log.debug("Using wallet seed file at: %s", path)
        if not path.exists():
            log.error(
                "wallet seed file %s could not be opened. "
                "Initialise a new wallet first.",
                path,
            )
            raise WalletError(ErrorKind.WALLET_SEED_DOESNT_EXIST)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise WalletError(ErrorKind.IO) from exc
        return EncryptedWalletSeed.from_json(text).decrypt(password)


@dataclass(frozen=True)
class EncryptedWalletSeed:
    """A seed encrypted with a password, as stored on disk."""

    encrypted_seed: str
    salt: str
    nonce: str

    @classmethod
    def from_seed(cls, seed: WalletSeed, password: str) -> "EncryptedWalletSeed":
        """Encrypt a seed with a key derived from the password."""
        salt = secrets.token_bytes(_SALT_LEN)
        nonce = secrets.token_bytes(_NONCE_LEN)
        key = _derive_key(password, salt)
        try:
            sealed = ChaCha20Poly1305(key).encrypt(nonce, seed.data, None)
        except (ValueError, OverflowError) as exc:
            raise WalletError(ErrorKind.ENCRYPTION) from exc
        return cls(encrypted_seed=sealed.hex(), salt=salt.hex(), nonce=nonce.hex())

    def decrypt(self, password: str) -> WalletSeed:
        """Decrypt the seed; a wrong password raises an encryption error."""
        try:
            sealed = _from_hex(self.encrypted_seed)
            salt = _from_hex(self.salt)
            nonce = _from_hex(self.nonce)
        except ValueError as exc:
            raise WalletError(ErrorKind.ENCRYPTION) from exc

        key = _derive_key(password, salt)
        try:
            data = ChaCha20Poly1305(key).decrypt(nonce, sealed, None)
        except (InvalidTag, ValueError) as exc:
            raise WalletError(ErrorKind.ENCRYPTION) from exc
        return WalletSeed.from_bytes(data)

    def to_json(self) -> str:
        return json.dumps(
            {
                "encrypted_seed": self.encrypted_seed,
                "salt": self.salt,
                "nonce": self.nonce,
            },
            indent=2,
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> "EncryptedWalletSeed":
        try:
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            values = {name: data[name] for name in ("encrypted_seed", "salt", "nonce")}
            if not all(isinstance(value, str) for value in values.values()):
                raise ValueError("fields must be strings")
        except (ValueError, KeyError, TypeError) as exc:
            raise WalletError(ErrorKind.FORMAT) from exc
        return cls(**values)