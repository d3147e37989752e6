class SignalingError(Exception):
    """Base class for protocol errors. The dispatcher logs these and drops the message."""


class MalformedMessage(SignalingError):
    pass


class RoomNotFound(SignalingError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"can not find room: {room_id}")


class ParticipantNotFound(SignalingError):
    def __init__(self, room_id, uid):
        self.room_id = room_id
        self.uid = uid
        super().__init__(f"can not find user {uid} in room {room_id}")


class RoomFull(SignalingError):
    def __init__(self, room_id, capacity: int):
        self.room_id = room_id
        self.capacity = capacity
        super().__init__(f"room {room_id} already has {capacity} participants")
