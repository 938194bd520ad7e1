from pydantic import BaseModel, Field

from constants import DEFAULT_ROOM_TTL_SECONDS


class CreateRoomRequest(BaseModel):
    expiry_seconds: int = Field(DEFAULT_ROOM_TTL_SECONDS, gt=0)

class CreateRoomResponse(BaseModel):
    roomId: str
    expires_in: int

class EnterRoomResponse(BaseModel):
    roomId: str
    status: str

class RoomTTLResponse(BaseModel):
    ttl: int

class RoomMembersResponse(BaseModel):
    roomId: str
    members: int
    capacity: int
    is_full: bool
