"""The foreign API offered to other wallets and to mining nodes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable

from .container import Container
from .errors import ErrorKind, WalletError
from .node_client import NodeVersionInfo
from .slate import CURRENT_SLATE_VERSION, GRIN_BLOCK_HEADER_VERSION, Slate, SlateVersion

FOREIGN_API_VERSION = 2


class ForeignCheckMiddlewareFn(enum.Enum):
    """Foreign API calls the middleware check is run for."""

    CHECK_VERSION = "check_version"
    BUILD_COINBASE = "build_coinbase"
    VERIFY_SLATE_MESSAGES = "verify_slate_messages"
    RECEIVE_TX = "receive_tx"


ForeignCheckMiddleware = Callable[
    [ForeignCheckMiddlewareFn, "NodeVersionInfo | None", "Slate | None"], None
]


def check_middleware(
    name: ForeignCheckMiddlewareFn,
    node_version_info: NodeVersionInfo | None,
    slate: Slate | None,
) -> None:
    """Raise if the slate is not compatible with the node's header version.

    Coinbases may always be built.
    """
    if name is ForeignCheckMiddlewareFn.BUILD_COINBASE:
        return
    header_version = 1
    if node_version_info is not None:
        header_version = node_version_info.block_header_version
    if slate is None:
        return
    info = slate.version_info
    if (
        info.version < CURRENT_SLATE_VERSION
        or (header_version == 1 and info.block_header_version != 1)
        or (header_version > 1 and info.block_header_version < GRIN_BLOCK_HEADER_VERSION)
    ):
        raise WalletError(ErrorKind.COMPATIBILITY)


@dataclass
class VersionInfo:
    """The foreign API version and the slate versions it accepts."""

    foreign_api_version: int
    supported_slate_versions: list[SlateVersion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "foreign_api_version": self.foreign_api_version,
            "supported_slate_versions": [v.name for v in self.supported_slate_versions],
        }


class Foreign:
    """Foreign API over a shared wallet container."""

    def __init__(self, container: Container) -> None:
        self.container = container
        self.middleware: ForeignCheckMiddleware | None = check_middleware

    def check_version(self) -> VersionInfo:
        """The API version and supported slate versions."""
        with self.container as c:
            backend = c.backend()
            if self.middleware is not None:
                self.middleware(
                    ForeignCheckMiddlewareFn.CHECK_VERSION,
                    backend.w2n_client().get_version_info(),
                    None,
                )
        return VersionInfo(
            foreign_api_version=FOREIGN_API_VERSION,
            supported_slate_versions=[SlateVersion.V2],
        )