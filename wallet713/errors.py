"""Wallet error kinds and the exception that carries them."""

from __future__ import annotations

import enum
import string


def _field_count(template: str) -> int:
    indices = {
        int(field)
        for _, field, _, _ in string.Formatter().parse(template)
        if field
    }
    return max(indices) + 1 if indices else 0


class ErrorKind(enum.Enum):
    """Every kind of failure the wallet reports, with its display template.

    A member's ``arity`` is the number of details a ``WalletError`` of that
    kind carries; kinds that wrap an underlying error take that error as
    their single detail without showing it.
    """

    def __new__(cls, template: str, arity: int | None = None) -> "ErrorKind":
        member = object.__new__(cls)
        member._value_ = len(cls.__members__) + 1
        member.template = template
        member.arity = _field_count(template) if arity is None else arity
        return member

    NOT_ENOUGH_FUNDS = ("Not enough funds. Required: {3}, Available: {1}", 4)
    FEE = "Fee Error: {0}"
    LIB_TX = ("LibTx Error", 1)
    KEYCHAIN = ("Keychain error", 1)
    TRANSACTION = ("Transaction error", 1)
    CLIENT_CALLBACK = "Client Callback Error: {0}"
    SECP = ("Secp error", 1)
    CALLBACK_IMPL = ("Trait Implementation error", 1)
    BACKEND = "Wallet store error: {0}"
    MNEMONIC = "BIP39 Mnemonic (word list) Error"
    ENCRYPTION = "Enc/Decryption error (check password?)"
    RESTORE = "Restore Error"
    FORMAT = "JSON format error"
    DESER = ("Ser/Deserialization error", 1)
    IO = "I/O error"
    NODE = "Node API error"
    WALLET_COMMS = "Wallet Communication Error: {0}"
    HYPER = "Hyper error"
    URI = "Uri parsing error"
    SIGNATURE = "Signature error: {0}"
    DUPLICATE_TRANSACTION_ID = "Duplicate transaction ID error"
    WALLET_SEED_EXISTS = "Wallet seed exists error"
    WALLET_SEED_DOESNT_EXIST = "Wallet seed doesn't exist error"
    WALLET_SEED_DECRYPTION = "Wallet seed decryption error"
    TRANSACTION_DOESNT_EXIST = "Transaction {0} doesn't exist"
    TRANSACTION_NOT_CANCELLABLE = "Transaction {0} cannot be cancelled"
    TRANSACTION_CANCELLATION_ERROR = "Cancellation Error: {0}"
    TRANSACTION_DUMP_ERROR = "Tx dump Error: {0}"
    TRANSACTION_ALREADY_CONFIRMED = "Transaction already confirmed"
    TRANSACTION_ALREADY_RECEIVED = "Transaction {0} has already been received"
    TRANSACTION_BUILDING_NOT_COMPLETED = "Transaction building not completed: {0}"
    INVALID_BIP32_DEPTH = "Invalid BIP32 Depth (must be 1 or greater)"
    ACCOUNT_LABEL_ALREADY_EXISTS = "Account Label '{0}' already exists"
    UNKNOWN_ACCOUNT_LABEL = "Unknown Account Label '{0}'"
    COMMITTED = ("Committed Error", 1)
    SLATE_VERSION_PARSE = "Can't parse slate version"
    SLATE_DESER = "Can't Deserialize slate"
    SLATE_VERSION = "Unknown Slate Version: {0}"
    NO_SEED = "No seed"
    NO_BACKEND = "No backend opened"
    NO_ADDRESS_BOOK = "No address book found"
    CONTACT_NOT_FOUND = "Contact '{0}' not found"
    ALREADY_LISTENING = "Already listening on {0}"
    NO_LISTENER = "No listener on {0}"
    INVALID_LISTENER_INTERFACE = "Invalid listener interface"
    TRANSACTION_NOT_STORED = "No transaction stored"
    TRANSACTION_PROOF_NOT_STORED = "No transaction proof stored"
    COMPATIBILITY = (
        "Incoming slate is not compatible with this wallet. "
        "Please upgrade the node or use a different one"
    )
    VERIFY_PROOF = "Unable to verify proof"
    GENERIC_ERROR = "Generic error: {0}"


class WalletError(Exception):
    """An error raised by the wallet, identified by its ``ErrorKind``."""

    def __init__(self, kind: ErrorKind, *args: object) -> None:
        if not isinstance(kind, ErrorKind):
            raise TypeError(f"expected an ErrorKind, got {kind!r}")
        if len(args) != kind.arity:
            raise TypeError(
                f"{kind.name} takes {kind.arity} detail(s), got {len(args)}"
            )
        super().__init__(kind, *args)
        self.kind = kind
        self.details = args

    def __str__(self) -> str:
        return self.kind.template.format(*self.details)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WalletError):
            return NotImplemented
        return self.kind is other.kind and self.details == other.details

    def __hash__(self) -> int:
        return hash(self.kind)