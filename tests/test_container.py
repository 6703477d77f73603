import threading

import pytest

from wallet713.container import Container
from wallet713.errors import ErrorKind, WalletError


class FakeBackend:
    def __init__(self, is_connected):
        self.is_connected = is_connected

    def connected(self):
        return self.is_connected


def make(is_connected=True):
    return Container({"name": "cfg"}, FakeBackend(is_connected), ["book"])


def test_defaults():
    container = make()
    assert container.account == "default"
    assert container.listeners == {}
    assert container.config == {"name": "cfg"}
    assert container.address_book == ["book"]


def test_raw_backend_ignores_connection():
    container = make(is_connected=False)
    assert container.raw_backend().is_connected is False


def test_backend_when_connected():
    container = make()
    assert container.backend() is container.raw_backend()


def test_backend_when_disconnected_raises():
    container = make(is_connected=False)
    with pytest.raises(WalletError) as info:
        container.backend()
    assert info.value.kind is ErrorKind.NO_BACKEND
    assert str(info.value) == "No backend opened"


def test_backend_follows_connection_state():
    container = make(is_connected=False)
    container.raw_backend().is_connected = True
    assert container.backend().is_connected is True


def test_listener_missing_raises():
    container = make()
    with pytest.raises(WalletError) as info:
        container.listener("grinbox")
    assert info.value.kind is ErrorKind.NO_LISTENER
    assert str(info.value) == "No listener on grinbox"


def test_listener_present():
    container = make()
    marker = object()
    container.listeners["keybase"] = marker
    assert container.listener("keybase") is marker


def test_lock_is_reentrant_and_exclusive():
    container = make()
    acquired = []

    def other():
        with container:
            acquired.append(True)

    with container:
        with container as inner:
            assert inner is container
            thread = threading.Thread(target=other)
            thread.start()
            thread.join(timeout=0.2)
            assert acquired == []
    thread.join(timeout=5)
    assert acquired == [True]