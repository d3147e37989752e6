import uuid
from enum import Enum
from typing import Any, Optional, Union

from logging_config import get_logger

logger = get_logger(__name__)

PeerId = Union[str, int, float]


class ParticipantState(str, Enum):
    UNJOINED = "unjoined"
    JOINED = "joined"


class ConnectionSession:
    """One websocket connection and the room membership it currently holds.

    `connection` only needs an awaitable `send_text(str)`, which both a
    Starlette WebSocket and the test doubles provide.
    """

    def __init__(self, connection: Any, connection_id: Optional[str] = None):
        self.connection = connection
        self.connection_id = connection_id or uuid.uuid4().hex
        self.state = ParticipantState.UNJOINED
        self.uid: Optional[PeerId] = None
        self.room_id: Optional[PeerId] = None

    @property
    def is_joined(self) -> bool:
        return self.state is ParticipantState.JOINED

    def mark_joined(self, room_id: PeerId, uid: PeerId):
        self.state = ParticipantState.JOINED
        self.room_id = room_id
        self.uid = uid

    def mark_unjoined(self):
        self.state = ParticipantState.UNJOINED
        self.room_id = None
        self.uid = None

    async def send_text(self, text: str) -> bool:
        # A failed send means the transport is gone; its own close handler cleans up
        try:
            await self.connection.send_text(text)
            return True
        except Exception as e:
            logger.warning(f"Error sending to connection {self.connection_id}: {e}")
            return False

    def __repr__(self):
        return f"ConnectionSession({self.connection_id[:8]}, {self.state.value}, room={self.room_id}, uid={self.uid})"
