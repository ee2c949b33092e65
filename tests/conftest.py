import json
import logging
import threading

import pytest

from oguwatcher import create_app
from oguwatcher.config import TestingConfig
from oguwatcher.models.registry import Registry
from oguwatcher.services.broadcaster import Broadcaster
from oguwatcher.services.dispatcher import Dispatcher

FLUSH_TIMEOUT = 2.0


class FakeSocket:
    """Stands in for a simple_websocket.Server: records every frame sent"""

    def __init__(self, fail_on_send: bool = False) -> None:
        self.connected = True
        self.sent: list = []
        self.fail_on_send = fail_on_send

    def send(self, data) -> None:
        if self.fail_on_send:
            raise ConnectionResetError("peer went away")
        self.sent.append(data)

    def texts(self) -> list:
        return [json.loads(frame) for frame in self.sent if isinstance(frame, str)]

    def camera_lists(self) -> list:
        return [msg["cameras"] for msg in self.texts() if msg["type"] == "camera-list"]

    def clear(self) -> None:
        self.sent.clear()


class StalledSocket(FakeSocket):
    """A peer that stops reading: send() blocks until released"""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.released = threading.Event()

    def send(self, data) -> None:
        self.entered.set()
        self.released.wait(10)
        super().send(data)


class Relay:
    """Registry + broadcaster + dispatcher wired the way create_app wires them"""

    def __init__(self) -> None:
        self.registry = Registry()
        self.broadcaster = Broadcaster(self.registry)
        self.dispatcher = Dispatcher(self.registry, self.broadcaster)
        self.connections: list = []

    def connect(self, fail_on_send: bool = False):
        ws = FakeSocket(fail_on_send=fail_on_send)
        connection = self.dispatcher.open_connection(ws, "10.0.0.9")
        self.connections.append(connection)
        return connection, ws

    def flush(self) -> None:
        """Wait for every connection's writer to go idle"""
        for connection in self.connections:
            assert connection.outbox.flush(FLUSH_TIMEOUT)

    def send(self, connection, message) -> None:
        if isinstance(message, dict):
            message = json.dumps(message)
        self.dispatcher.handle_message(connection, message)
        self.flush()

    def close(self, connection) -> None:
        self.dispatcher.close_connection(connection)
        self.flush()

    def camera(self, camera_id: str, name: str = None):
        connection, ws = self.connect()
        payload = {"type": "camera-init", "cameraId": camera_id}
        if name is not None:
            payload["name"] = name
        self.send(connection, payload)
        return connection, ws

    def viewer(self):
        connection, ws = self.connect()
        self.send(connection, {"type": "viewer-init"})
        return connection, ws

    def shutdown(self) -> None:
        for connection in self.connections:
            connection.outbox.close()


@pytest.fixture
def relay():
    relay = Relay()
    yield relay
    relay.shutdown()


@pytest.fixture
def fake_socket():
    """The FakeSocket class, for tests that wire connections by hand"""
    return FakeSocket


@pytest.fixture
def stalled_socket():
    ws = StalledSocket()
    yield ws
    ws.released.set()


@pytest.fixture
def relay_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="oguwatcher")
    return caplog


@pytest.fixture
def app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
