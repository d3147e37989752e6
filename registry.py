import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from constants import ROOM_CAPACITY
from errors import RoomFull
from logging_config import get_logger
from session import ConnectionSession, PeerId

logger = get_logger(__name__)


@dataclass(eq=False)
class Participant:
    uid: PeerId
    room_id: PeerId
    session: ConnectionSession


@dataclass
class Room:
    room_id: PeerId
    # dicts keep insertion order, so peers are notified in join order
    participants: Dict[PeerId, Participant] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.participants)


class RoomRegistry:
    """In-memory map of room id to its participants.

    Methods are synchronous and do not lock on their own. Callers that read and
    then mutate (capacity check then insert, list then notify) hold `lock`.
    """

    def __init__(self, capacity: int = ROOM_CAPACITY):
        self.capacity = capacity
        self.rooms: Dict[PeerId, Room] = {}
        self.lock = asyncio.Lock()
        logger.info(f"Initializing RoomRegistry with room capacity {capacity}")

    def ensure_room(self, room_id: PeerId) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id)
            self.rooms[room_id] = room
            logger.debug(f"Room {room_id} created")
        return room

    def get_room(self, room_id: PeerId) -> Optional[Room]:
        return self.rooms.get(room_id)

    def list_rooms(self) -> List[Room]:
        return list(self.rooms.values())

    def can_admit(self, room_id: PeerId, uid: PeerId) -> bool:
        room = self.rooms.get(room_id)
        if room is None:
            return True
        # an existing uid is a reconnect and replaces its own slot
        return uid in room.participants or room.size < self.capacity

    def add_participant(self, room_id: PeerId, uid: PeerId, session: ConnectionSession) -> Participant:
        if not self.can_admit(room_id, uid):
            raise RoomFull(room_id, self.capacity)
        room = self.ensure_room(room_id)

        participant = Participant(uid=uid, room_id=room_id, session=session)
        room.participants[uid] = participant
        logger.debug(f"User {uid} added to room {room_id} ({room.size}/{self.capacity})")
        return participant

    def remove_participant(
        self, room_id: PeerId, uid: PeerId, session: Optional[ConnectionSession] = None
    ) -> Optional[Participant]:
        """Remove `uid` from the room. The room itself is kept even when it empties.

        When `session` is given the entry is only removed if it still belongs to
        that session, so a stale connection can't evict a newer one.
        """
        room = self.rooms.get(room_id)
        if room is None:
            return None
        participant = room.participants.get(uid)
        if participant is None:
            return None
        if session is not None and participant.session is not session:
            logger.debug(f"User {uid} in room {room_id} is owned by another connection, not removing")
            return None
        del room.participants[uid]
        logger.debug(f"User {uid} removed from room {room_id} ({room.size}/{self.capacity})")
        return participant

    def get_participant(self, room_id: PeerId, uid: PeerId) -> Optional[Participant]:
        room = self.rooms.get(room_id)
        if room is None:
            return None
        return room.participants.get(uid)

    def list_participants(self, room_id: PeerId) -> List[Tuple[PeerId, Participant]]:
        room = self.rooms.get(room_id)
        if room is None:
            return []
        return list(room.participants.items())
