"""The wallet container and the storage interfaces it holds."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Any, Hashable, Protocol, runtime_checkable

from .args import AcctPathMapping
from .context import Context
from .errors import ErrorKind, WalletError
from .outputs import OutputData
from .transaction import Transaction
from .txlog import TxLogEntry


@runtime_checkable
class WalletBackendBatch(Protocol):
    """A set of writes to wallet storage, applied together on ``commit``."""

    def keychain(self) -> Any:
        """The keychain the batch derives keys with."""
        ...

    def save_output(self, out: OutputData) -> None:
        """Store an output."""
        ...

    def delete_output(self, id: str, mmr_index: int | None) -> None:
        """Remove an output."""
        ...

    def lock_output(self, out: OutputData) -> None:
        """Lock an output and store it."""
        ...

    def save_child_index(self, parent_key_id: str, index: int) -> None:
        """Store the next child index under a parent key."""
        ...

    def save_last_confirmed_height(self, height: int) -> None:
        """Store the last confirmed chain height."""
        ...

    def next_tx_log_id(self, parent_key_id: str) -> int:
        """Reserve the next transaction log id for an account."""
        ...

    def save_tx_log_entry(self, t: TxLogEntry) -> None:
        """Store a transaction log entry."""
        ...

    def save_acct_path(self, mapping: AcctPathMapping) -> None:
        """Store an account label and its path."""
        ...

    def save_private_context(
        self, slate_id: bytes, participant_id: int, ctx: Context
    ) -> None:
        """Store a participant's private transaction context."""
        ...

    def delete_private_context(self, slate_id: bytes, participant_id: int) -> None:
        """Remove a participant's private transaction context."""
        ...

    def store_tx(self, uuid: str, tx: Transaction) -> None:
        """Store a transaction for later reposting."""
        ...

    def store_tx_proof(self, uuid: str, tx_proof: Any) -> None:
        """Store a transaction proof."""
        ...

    def commit(self) -> None:
        """Apply every write in the batch."""
        ...


@runtime_checkable
class WalletBackend(Protocol):
    """Storage and keys of a wallet, together with its node client."""

    def has_seed(self) -> bool:
        """Whether the backend has a seed."""
        ...

    def get_seed(self) -> str:
        """The seed as a recovery phrase."""
        ...

    def set_seed(self, mnemonic: str | None, password: str, overwrite: bool) -> None:
        """Set a seed encrypted with the password; fails if one exists unless overwriting."""
        ...

    def connected(self) -> bool:
        """Whether the backend connection is established."""
        ...

    def connect(self) -> None:
        """Connect to the backend."""
        ...

    def disconnect(self) -> None:
        """Disconnect from the backend."""
        ...

    def set_password(self, password: str) -> None:
        """Set the password the seed is decrypted with."""
        ...

    def clear(self) -> None:
        """Clear out the backend."""
        ...

    def open_with_credentials(self) -> None:
        """Open the wallet with the stored credentials."""
        ...

    def close(self) -> None:
        """Close the wallet."""
        ...

    def restore(self) -> None:
        """Restore the wallet's outputs from the chain."""
        ...

    def check_repair(self, delete_unconfirmed: bool) -> None:
        """Check the wallet's outputs against the chain and repair them."""
        ...

    def get_parent_key_id(self) -> str:
        """The active account's parent key id."""
        ...

    def set_parent_key_id(self, id: str) -> None:
        """Set the active account's parent key id."""
        ...

    def set_parent_key_id_by_name(self, label: str) -> None:
        """Make the account with this label the active one."""
        ...

    def w2n_client(self) -> Any:
        """The client used to talk to the node."""
        ...

    def calc_commit_for_cache(self, amount: int, id: str) -> str | None:
        """The commitment to cache for an output, if caching is on."""
        ...

    def keychain(self) -> Any:
        """The wallet's keychain."""
        ...

    def next_child(self) -> str:
        """Derive the next child key id of the active account."""
        ...

    def get_output(self, id: str, mmr_index: int | None) -> OutputData:
        """An output by key id and MMR index."""
        ...

    def get_private_context(self, slate_id: bytes, participant_id: int) -> Context:
        """A participant's private transaction context."""
        ...

    def get_acct_path(self, label: str) -> AcctPathMapping | None:
        """The account with this label, if any."""
        ...

    def get_last_confirmed_height(self) -> int:
        """The last confirmed chain height."""
        ...

    def get_stored_tx(self, uuid: str) -> Transaction | None:
        """A stored transaction, if any."""
        ...

    def has_stored_tx_proof(self, uuid: str) -> bool:
        """Whether a transaction proof is stored."""
        ...

    def get_stored_tx_proof(self, uuid: str) -> Any:
        """A stored transaction proof, if any."""
        ...

    def get_tx_log_by_slate_id(self, slate_id: str) -> TxLogEntry | None:
        """The transaction log entry of a slate, if any."""
        ...

    def outputs(self) -> Iterator[OutputData]:
        """All stored outputs."""
        ...

    def tx_logs(self) -> Iterator[TxLogEntry]:
        """All transaction log entries."""
        ...

    def accounts(self) -> Iterator[AcctPathMapping]:
        """All accounts."""
        ...

    def batch(self) -> WalletBackendBatch:
        """Start a batch of writes."""
        ...


class Container:
    """Holds a wallet's configuration, backend, contacts and listeners.

    Use it as a context manager to hold its lock; the lock is reentrant.
    """

    def __init__(self, config: Any, backend: WalletBackend, address_book: Any) -> None:
        self.config = config
        self._backend = backend
        self.address_book = address_book
        self.account = "default"
        self.listeners: dict[Hashable, Any] = {}
        self._lock = threading.RLock()

    def __enter__(self) -> "Container":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()

    def raw_backend(self) -> WalletBackend:
        """The backend, whether or not it is connected."""
        return self._backend

    def backend(self) -> WalletBackend:
        """The backend; raises if it is not connected."""
        if not self._backend.connected():
            raise WalletError(ErrorKind.NO_BACKEND)
        return self._backend

    def listener(self, interface: Hashable) -> Any:
        """The listener running on an interface; raises if there is none."""
        try:
            return self.listeners[interface]
        except KeyError:
            raise WalletError(ErrorKind.NO_LISTENER, str(interface)) from None