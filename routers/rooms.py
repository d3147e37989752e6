from fastapi import APIRouter, HTTPException, Request
from schemas.rooms import RoomDetailsResponse, RoomListResponse, RoomSummary
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


def _find_room(registry, room_id: str):
    # room ids arrive over the wire as strings or numbers, the path is always a string
    room = registry.get_room(room_id)
    for number_type in (int, float):
        if room is not None:
            break
        try:
            room = registry.get_room(number_type(room_id))
        except ValueError:
            continue
    return room


@rooms_router.get("/", response_model=RoomListResponse)
async def list_rooms(request: Request):
    registry = request.app.state.registry
    rooms = [RoomSummary(room_id=room.room_id, participant_count=room.size) for room in registry.list_rooms()]
    logger.debug(f"Room list requested: {len(rooms)} rooms")
    return RoomListResponse(rooms=rooms)


@rooms_router.get("/{room_id}", response_model=RoomDetailsResponse)
async def get_room_details(room_id: str, request: Request):
    """
    Get the current membership of a room.

    Returns:
    - room_id: Room identifier as the clients sent it
    - participants: uids in join order
    - participant_count: Number of joined participants
    - capacity: Maximum participants per room
    - is_full: Whether another uid would be rejected
    """
    registry = request.app.state.registry
    room = _find_room(registry, room_id)
    if room is None:
        logger.info(f"Room details failed: Room {room_id} not found")
        raise HTTPException(status_code=404, detail="Room not found")

    return RoomDetailsResponse(
        room_id=room.room_id,
        participants=list(room.participants),
        participant_count=room.size,
        capacity=registry.capacity,
        is_full=room.size >= registry.capacity,
    )
