import uuid

from fastapi import APIRouter, Depends, Response

from backend import RedisBackend, get_redis_backend
from constants import AccessConfig
from dependencies import get_access_config, require_room_access
from schemas.access import AuthContext
from schemas.rooms import CreateRoomRequest, CreateRoomResponse, RoomMembersResponse, RoomTTLResponse
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/api/room", tags=["rooms"])


@rooms_router.post("/create", response_model=CreateRoomResponse, status_code=201)
def create_room(room: CreateRoomRequest, backend: RedisBackend = Depends(get_redis_backend)):
    room_id = uuid.uuid4().hex
    backend.create_room(room_id, ttl=room.expiry_seconds)
    logger.info(f"Room {room_id} created, expires in {room.expiry_seconds}s")
    return CreateRoomResponse(roomId=room_id, expires_in=room.expiry_seconds)


@rooms_router.get("/ttl", response_model=RoomTTLResponse)
def get_room_ttl(
    auth: AuthContext = Depends(require_room_access),
    backend: RedisBackend = Depends(get_redis_backend),
):
    ttl = backend.get_ttl(auth.room_id)
    return RoomTTLResponse(ttl=ttl or 0)


@rooms_router.get("/members", response_model=RoomMembersResponse)
def get_room_members(
    auth: AuthContext = Depends(require_room_access),
    backend: RedisBackend = Depends(get_redis_backend),
    config: AccessConfig = Depends(get_access_config),
):
    members = backend.member_count(auth.room_id)
    return RoomMembersResponse(
        roomId=auth.room_id,
        members=members,
        capacity=config.capacity,
        is_full=members >= config.capacity,
    )


@rooms_router.delete("")
def destroy_room(
    response: Response,
    auth: AuthContext = Depends(require_room_access),
    backend: RedisBackend = Depends(get_redis_backend),
    config: AccessConfig = Depends(get_access_config),
):
    # Drops the meta key and the connected set together, invalidating every token.
    backend.delete_room(auth.room_id)
    response.delete_cookie(config.cookie_name, path="/")
    logger.info(f"Room {auth.room_id} destroyed by token {auth.token[:6]}...")
    return {"message": "Room destroyed"}
