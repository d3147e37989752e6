from pydantic import BaseModel
from typing import Union


class RoomSummary(BaseModel):
    room_id: Union[str, int, float]
    participant_count: int


class RoomListResponse(BaseModel):
    rooms: list[RoomSummary]


class RoomDetailsResponse(BaseModel):
    room_id: Union[str, int, float]
    participants: list[Union[str, int, float]]
    participant_count: int
    capacity: int
    is_full: bool
