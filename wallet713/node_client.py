"""Talking to a node over its HTTP API."""

from __future__ import annotations

import dataclasses
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

import requests

from .args import TxWrapper
from .errors import ErrorKind, WalletError

log = logging.getLogger(__name__)

_TIMEOUT = 30
_IDS_PER_REQUEST = 120
_API_USER = "grin"


@dataclass
class NodeVersionInfo:
    """Version of a node and the block header version it uses."""

    node_version: str
    block_header_version: int
    verified: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_version": self.node_version,
            "block_header_version": self.block_header_version,
            "verified": self.verified,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NodeVersionInfo":
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a mapping, got {data!r}")
        node_version = data.get("node_version")
        header = data.get("block_header_version")
        verified = data.get("verified")
        if not isinstance(node_version, str):
            raise ValueError("node_version must be a string")
        if isinstance(header, bool) or not isinstance(header, int) or not 0 <= header < 1 << 16:
            raise ValueError("block_header_version must be an unsigned 16-bit integer")
        if verified is not None and not isinstance(verified, bool):
            raise ValueError("verified must be a boolean")
        return cls(node_version, header, verified)


def _chunks(items: list[str], size: int) -> Iterator[list[str]]:
    iterator = iter(items)
    while chunk := list(itertools.islice(iterator, size)):
        yield chunk


class HTTPNodeClient:
    """A client for a node's HTTP API."""

    def __init__(self, node_url: str, node_api_secret: str | None = None) -> None:
        self.node_url = node_url
        self.node_api_secret = node_api_secret
        self._version_info: NodeVersionInfo | None = None

    def _auth(self) -> tuple[str, str] | None:
        if self.node_api_secret is None:
            return None
        return (_API_USER, self.node_api_secret)

    def _get(self, url: str) -> Any:
        response = requests.get(url, auth=self._auth(), timeout=_TIMEOUT)
        response.raise_for_status()
        return response.json()

    def get_version_info(self) -> NodeVersionInfo | None:
        """Ask the node for its version, caching the answer once verified.

        A node without a version endpoint is taken to be an old one; a node
        that cannot be reached gives ``None``.
        """
        if self._version_info is not None:
            return dataclasses.replace(self._version_info)
        url = f"{self.node_url}/v1/version"
        try:
            info = NodeVersionInfo.from_dict(self._get(url))
        except requests.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 404:
                return NodeVersionInfo("1.0.0", 1, False)
            log.error("Unable to contact Node to get version info: %s", exc)
            return None
        except (requests.RequestException, ValueError) as exc:
            log.error("Unable to contact Node to get version info: %s", exc)
            return None
        info.verified = True
        self._version_info = info
        return dataclasses.replace(info)

    def post_tx(self, tx: TxWrapper, fluff: bool = False) -> None:
        """Post a transaction to the node's pool."""
        url = f"{self.node_url}/v1/pool/push_tx"
        if fluff:
            url += "?fluff"
        try:
            response = requests.post(
                url, json=tx.to_dict(), auth=self._auth(), timeout=_TIMEOUT
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            log.error("Post TX Error: %s", exc)
            raise WalletError(
                ErrorKind.CLIENT_CALLBACK, f"Posting transaction to node: {exc}"
            ) from exc

    def get_chain_height(self) -> int:
        """Height of the node's chain tip."""
        url = f"{self.node_url}/v1/chain"
        try:
            height = self._get(url)["height"]
            if isinstance(height, bool) or not isinstance(height, int):
                raise ValueError(f"invalid height {height!r}")
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            log.error("Get chain height error: %s", exc)
            raise WalletError(
                ErrorKind.CLIENT_CALLBACK, f"Getting chain height from node: {exc}"
            ) from exc
        return height

    def get_outputs_from_node(
        self, wallet_outputs: Iterable[str]
    ) -> dict[str, tuple[str, int, int]]:
        """Look up outputs by commitment (hex).

        Returns a map from commitment to (commitment hex, height, MMR index)
        for every output the node knows.
        """
        ids = list(wallet_outputs)
        found: dict[str, tuple[str, int, int]] = {}
        try:
            for chunk in _chunks(ids, _IDS_PER_REQUEST):
                url = f"{self.node_url}/v1/chain/outputs/byids?id={','.join(chunk)}"
                for out in self._get(url):
                    commit = out["commit"]
                    if not isinstance(commit, str):
                        raise ValueError(f"invalid commitment {commit!r}")
                    found[commit] = (commit, int(out["height"]), int(out["mmr_index"]))
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            log.error("Outputs by id failed: %s", exc)
            raise WalletError(
                ErrorKind.CLIENT_CALLBACK, f"Getting outputs by id: {exc}"
            ) from exc
        return found

    def get_outputs_by_pmmr_index(
        self, start_height: int, max_outputs: int
    ) -> tuple[int, int, list[tuple[str, str, bool, int, int]]]:
        """Walk the output set in MMR index order.

        Returns (highest index, last index retrieved, outputs), each output
        being (commitment, range proof, is coinbase, block height, MMR index).
        """
        url = (
            f"{self.node_url}/v1/txhashset/outputs"
            f"?start_index={start_height}&max={max_outputs}"
        )
        try:
            listing = self._get(url)
            outputs = []
            for out in listing["outputs"]:
                output_type = out["output_type"]
                if output_type not in ("Coinbase", "Transaction"):
                    raise ValueError(f"unknown output type {output_type!r}")
                proof = out.get("proof")
                height = out.get("block_height")
                if proof is None or height is None:
                    raise ValueError("output lacks a range proof or block height")
                outputs.append(
                    (
                        out["commit"],
                        proof,
                        output_type == "Coinbase",
                        int(height),
                        int(out["mmr_index"]),
                    )
                )
            return int(listing["highest_index"]), int(listing["last_retrieved_index"]), outputs
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            log.error(
                "get_outputs_by_pmmr_index: error contacting %s. Error: %s",
                self.node_url,
                exc,
            )
            raise WalletError(
                ErrorKind.CLIENT_CALLBACK, f"outputs by pmmr index: {exc}"
            ) from exc