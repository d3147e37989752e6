import json
from typing import List, Optional, Tuple, Union

from errors import MalformedMessage, ParticipantNotFound, RoomFull, RoomNotFound, SignalingError
from logging_config import get_logger
from registry import RoomRegistry
from schemas.signaling import SignalingMessage, parse_message
from session import ConnectionSession, PeerId
from signaling_events import (
    MEMBER_FULL_TEXT,
    SIGNALING_TYPE_ANSWER,
    SIGNALING_TYPE_CANDIDATE,
    SIGNALING_TYPE_JOIN,
    SIGNALING_TYPE_LEAVE,
    SIGNALING_TYPE_MEMBER_FULL,
    SIGNALING_TYPE_NEW_PEER,
    SIGNALING_TYPE_OFFER,
    SIGNALING_TYPE_PEER_LEAVE,
    SIGNALING_TYPE_RESP_JOIN,
)

logger = get_logger(__name__)

# (recipient, text frame) pairs produced under the registry lock and sent after it is released
Outbound = List[Tuple[ConnectionSession, str]]


def _frame(session: ConnectionSession, payload: dict) -> Tuple[ConnectionSession, str]:
    return session, json.dumps(payload)


class SignalingDispatcher:
    """Routes inbound signaling frames to the right peers of a room.

    join and leave synthesize presence messages. offer, answer and candidate
    are opaque to the relay and forwarded verbatim to `remoteUid`.

    Handlers only touch the registry and return the frames to send, so a peer
    that stops reading never holds the registry lock.
    """

    def __init__(self, registry: RoomRegistry, leave_on_disconnect: bool = True):
        self.registry = registry
        self.leave_on_disconnect = leave_on_disconnect
        self._handlers = {
            SIGNALING_TYPE_JOIN: self.handle_join,
            SIGNALING_TYPE_LEAVE: self.handle_leave,
            SIGNALING_TYPE_OFFER: self.handle_relay,
            SIGNALING_TYPE_ANSWER: self.handle_relay,
            SIGNALING_TYPE_CANDIDATE: self.handle_relay,
        }

    async def dispatch(self, raw: Union[str, bytes], session: ConnectionSession):
        """Handle one inbound frame. Protocol errors are logged and the frame is dropped."""
        try:
            message = parse_message(raw)
        except MalformedMessage as e:
            logger.warning(f"Dropping malformed message from connection {session.connection_id}: {e}")
            return

        handler = self._handlers.get(message.cmd)
        if handler is None:
            logger.debug(f"Ignoring unknown command {message.cmd!r} from connection {session.connection_id}")
            return

        try:
            async with self.registry.lock:
                outbound = handler(message, session)
        except SignalingError as e:
            logger.error(f"handle {message.cmd} error: {e}")
            return

        await self._deliver(outbound)

    def handle_join(self, message: SignalingMessage, session: ConnectionSession) -> Outbound:
        room_id, uid = message.roomId, message.uid
        logger.info(f"User {uid} joining room {room_id} (connection {session.connection_id})")

        # checked up front so a rejected room switch keeps the current membership
        if not self.registry.can_admit(room_id, uid):
            error = RoomFull(room_id, self.registry.capacity)
            logger.error(f"Join rejected for user {uid}: {error}, please use another room")
            return [_frame(session, {
                "cmd": SIGNALING_TYPE_MEMBER_FULL,
                "roomId": room_id,
                "message": MEMBER_FULL_TEXT.format(capacity=self.registry.capacity),
            })]

        outbound: Outbound = []
        # one room per connection: switching rooms or uids leaves the old one first
        if session.is_joined and (session.room_id, session.uid) != (room_id, uid):
            logger.info(f"Connection {session.connection_id} leaves room {session.room_id} before joining {room_id}")
            outbound.extend(self._leave(session.room_id, session.uid, session))

        previous = self.registry.get_participant(room_id, uid)
        self.registry.add_participant(room_id, uid, session)
        if previous is not None and previous.session is not session:
            logger.warning(f"User {uid} in room {room_id} reconnected, replacing connection {previous.session.connection_id}")
            previous.session.mark_unjoined()
        session.mark_joined(room_id, uid)

        for remote_uid, remote in self.registry.list_participants(room_id):
            if remote_uid == uid:
                continue
            new_peer = {"cmd": SIGNALING_TYPE_NEW_PEER, "remoteUid": uid}
            logger.info(f"new-peer: {new_peer} -> {remote_uid}")
            outbound.append(_frame(remote.session, new_peer))

            resp = {"cmd": SIGNALING_TYPE_RESP_JOIN, "remoteUid": remote_uid}
            logger.info(f"resp-join: {resp} -> {uid}")
            outbound.append(_frame(session, resp))
        return outbound

    def handle_leave(self, message: SignalingMessage, session: ConnectionSession) -> Outbound:
        logger.info(f"User {message.uid} trying to leave room {message.roomId}")
        if self.registry.get_room(message.roomId) is None:
            raise RoomNotFound(message.roomId)
        if self.registry.get_participant(message.roomId, message.uid) is None:
            raise ParticipantNotFound(message.roomId, message.uid)
        return self._leave(message.roomId, message.uid)

    def handle_relay(self, message: SignalingMessage, session: ConnectionSession) -> Outbound:
        room_id, uid, remote_uid = message.roomId, message.uid, message.remoteUid
        logger.debug(f"{message.cmd} from {uid}, transfer to remoteUid {remote_uid} in room {room_id}")

        if self.registry.get_room(room_id) is None:
            raise RoomNotFound(room_id)
        if self.registry.get_participant(room_id, uid) is None:
            raise ParticipantNotFound(room_id, uid)
        remote = self.registry.get_participant(room_id, remote_uid)
        if remote is None:
            raise ParticipantNotFound(room_id, remote_uid)

        return [(remote.session, message.raw)]

    async def disconnect(self, session: ConnectionSession):
        """Connection closed. Treated as a leave unless `leave_on_disconnect` is off."""
        if not session.is_joined:
            return
        if not self.leave_on_disconnect:
            logger.info(f"Connection {session.connection_id} closed, keeping user {session.uid} in room {session.room_id}")
            return
        async with self.registry.lock:
            logger.info(f"Connection {session.connection_id} closed, user {session.uid} leaves room {session.room_id}")
            outbound = self._leave(session.room_id, session.uid, session)
        await self._deliver(outbound)

    def _leave(self, room_id: PeerId, uid: PeerId, session: Optional[ConnectionSession] = None) -> Outbound:
        participant = self.registry.remove_participant(room_id, uid, session)
        if participant is None:
            return []
        participant.session.mark_unjoined()

        outbound: Outbound = []
        for remote_uid, remote in self.registry.list_participants(room_id):
            logger.info(f"notify peer {remote_uid}: user {uid} left room {room_id}")
            outbound.append(_frame(remote.session, {
                "cmd": SIGNALING_TYPE_PEER_LEAVE,
                "remoteUid": uid,
                "roomId": room_id,
            }))
        return outbound

    async def _deliver(self, outbound: Outbound):
        for recipient, text in outbound:
            await recipient.send_text(text)
