import asyncio
import json

import pytest

from dispatcher import SignalingDispatcher
from registry import RoomRegistry
from session import ConnectionSession


class FakeConnection:
    """Stands in for a websocket: records every frame sent to it."""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("connection is closed")
        self.sent.append(text)

    @property
    def messages(self):
        return [json.loads(text) for text in self.sent]


class Peer:
    """A fake client: its session plus a shortcut for sending through the dispatcher."""

    def __init__(self, dispatcher, fail=False):
        self.dispatcher = dispatcher
        self.connection = FakeConnection(fail=fail)
        self.session = ConnectionSession(self.connection)

    def send(self, payload):
        raw = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
        asyncio.run(self.dispatcher.dispatch(raw, self.session))

    def join(self, uid, room_id):
        self.send({"cmd": "join-event", "uid": uid, "roomId": room_id})

    def leave(self, uid, room_id):
        self.send({"cmd": "leave-event", "uid": uid, "roomId": room_id})

    def disconnect(self):
        asyncio.run(self.dispatcher.disconnect(self.session))

    @property
    def received(self):
        return self.connection.messages

    def clear(self):
        self.connection.sent.clear()


@pytest.fixture
def registry():
    return RoomRegistry(capacity=2)


@pytest.fixture
def dispatcher(registry):
    return SignalingDispatcher(registry)


@pytest.fixture
def make_peer(dispatcher):
    def factory(fail=False):
        return Peer(dispatcher, fail=fail)
    return factory


class YieldingConnection(FakeConnection):
    """Gives control back to the event loop on every send, like a real transport."""

    async def send_text(self, text):
        await asyncio.sleep(0)
        self.sent.append(text)


class StalledConnection(FakeConnection):
    """A peer that stopped reading: sends block until `release` is set."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def send_text(self, text):
        await self.release.wait()
        self.sent.append(text)
