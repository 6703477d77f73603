# wallet713

Data model, seed storage and node client for a Mimblewimble-style wallet, in plain Python.

## Modules

- `wallet713.errors`: `ErrorKind`, an enum of every failure the wallet reports, each with its message template, and `WalletError`, the exception that carries a kind and its details.
- `wallet713.outputs`: `OutputStatus` (`UNCONFIRMED`, `UNSPENT`, `LOCKED`, `SPENT`), `OutputData` and `OutputCommitMapping`. `OutputData` has `num_confirmations`, `eligible_to_spend`, `lock`, `mark_unspent` and `mark_spent`, and it round-trips through `to_json` and `from_json`.
- `wallet713.args`: `InitTxArgs`, `InitTxSendArgs`, `IssueInvoiceTxArgs`, `NodeHeightResult`, `WalletInfo`, `BlockFees`, `AcctPathMapping`, `TxWrapper` and `BlockIdentifier`. Amounts are written as decimal strings. `parse_u64` reads an amount given either as a string or as an integer and rejects anything outside the unsigned 64-bit range.
- `wallet713.seed`: `WalletSeed` and `EncryptedWalletSeed`. The seed is encrypted with ChaCha20-Poly1305 under a key derived from the password with PBKDF2-SHA512 (100 rounds, 8-byte salt, 12-byte nonce). It is stored as JSON in `wallet.seed` inside a data directory. A wrong password raises `WalletError` with `ErrorKind.ENCRYPTION`.
- `wallet713.node_client`: `NodeVersionInfo` and `HTTPNodeClient`. The client has these methods:
  - `get_version_info`. It caches a verified answer. A node that answers 404 is taken to be version `1.0.0` with header version 1, and a node that cannot be reached gives `None`.
  - `post_tx`. It can post with or without fluff.
  - `get_chain_height`.
  - `get_outputs_from_node`. It sends the commitments in batches of 120 per request.
  - `get_outputs_by_pmmr_index`.

  When the client is given an API secret, it sends it with HTTP basic auth as the user `grin`. Any failure is raised as `WalletError` with `ErrorKind.CLIENT_CALLBACK`.
- `wallet713.txlog`: `TxLogEntryType` and `TxLogEntry`. Timestamps are in UTC and are stored in RFC 3339 form.
- `wallet713.transaction`: `Input`, `Output`, `TxKernel`, `TransactionBody`, `Transaction` and `CbData`. It also has the `OutputFeatures` and `KernelFeatures` enums. Commitments, proofs and signatures are held as hex strings, and their lengths are checked when they are read.
- `wallet713.context`: `Context`, the private state a participant keeps while a transaction is built. It holds the secret key, a fresh secret nonce and the inputs and outputs recorded so far.
- `wallet713.slate`: `SlateVersion`, `VersionCompatInfo`, `ParticipantData`, `ParticipantMessageData`, `Slate` and `VersionedSlate`. Slates are read and written in the V2 JSON form.
- `wallet713.container`: the `WalletBackend` and `WalletBackendBatch` protocols, and `Container`. A container holds the configuration, a backend, an address book, the active account and the running listeners. Use it as a context manager to take its reentrant lock.
- `wallet713.api`: `check_middleware`, `ForeignCheckMiddlewareFn`, `VersionInfo` and `Foreign`.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Examples

Create an encrypted seed file, then read it back:

```python
from wallet713.seed import WalletSeed

password = "password"
seed = WalletSeed.init_file("/tmp/wallet_data", 32, password, False)
assert WalletSeed.from_file("/tmp/wallet_data", password) == seed
```

If `overwrite` is false and a seed file already exists, `init_file` raises `WalletError` with `ErrorKind.WALLET_SEED_EXISTS`.

Check whether an output can be spent:

```python
from wallet713.outputs import OutputData, OutputStatus

output = OutputData(
    root_key_id="0200000000000000000000000000000000",
    key_id="0300000000000000000000000000000000",
    n_child=0,
    commit=None,
    mmr_index=None,
    value=60_000_000_000,
    status=OutputStatus.UNSPENT,
    height=990,
    lock_height=0,
    is_coinbase=False,
    tx_log_entry=None,
)
if output.eligible_to_spend(1000, 10):  # 11 confirmations at height 1000
    output.lock()
```

Build a slate, write it out as JSON and read it back:

```python
from wallet713.slate import Slate, SlateVersion, VersionedSlate

slate = Slate.blank(2)
again = Slate.from_json(slate.to_json())
assert again.id == slate.id

versioned = VersionedSlate.into_version(slate, SlateVersion.V2)
assert versioned.to_slate().id == slate.id
```

Check that a slate is compatible with a node:

```python
from wallet713.api import ForeignCheckMiddlewareFn, check_middleware
from wallet713.node_client import NodeVersionInfo

node = NodeVersionInfo("2.0.0", 2, True)
check_middleware(ForeignCheckMiddlewareFn.RECEIVE_TX, node, slate)  # passes

old_node = NodeVersionInfo("1.0.0", 1, True)
check_middleware(ForeignCheckMiddlewareFn.RECEIVE_TX, old_node, slate)  # raises
```

An incompatible slate raises `WalletError` with the kind `ErrorKind.COMPATIBILITY`. Coinbases (`BUILD_COINBASE`) always pass.

Query a node:

```python
from wallet713.node_client import HTTPNodeClient

client = HTTPNodeClient("http://localhost:3413", None)
print(client.get_chain_height())
print(client.get_version_info())
```

Errors format their own messages:

```python
from wallet713.errors import ErrorKind, WalletError

str(WalletError(ErrorKind.CONTACT_NOT_FOUND, "alice"))  # "Contact 'alice' not found"
```

## What this package does not do

- It has no storage backend. `WalletBackend` and `WalletBackendBatch` are only protocols, and you supply the implementation that `Container` holds.
- It has no owner API. `Foreign` offers only `check_version`. It does not build coinbases, receive transactions or verify slate messages.
- It does no elliptic-curve work. Slates cannot be signed, finalised or verified, and a seed cannot be turned into a keychain or into a recovery phrase.
- It provides no listeners, no address book and no command-line program.

## Running the tests

```
pytest
```