from typing import Optional

from backend import RedisBackend
from errors import BadRequest, Unauthorized
from schemas.access import AuthContext
from logging_config import get_logger

logger = get_logger(__name__)


class AccessAuthorizer:
    """Checks that a token is a current member of a room's connected set.

    Read-only: never writes and never refreshes any TTL.
    """

    def __init__(self, backend: RedisBackend):
        self.backend = backend

    def authorize(self, room_id: Optional[str], token: Optional[str]) -> AuthContext:
        if not room_id or not token:
            raise BadRequest("Missing roomId or token")

        if not self.backend.room_exists(room_id):
            logger.warning(f"Authorization for room {room_id} failed: room does not exist")
            raise Unauthorized("Room does not exist")

        if not self.backend.is_member(room_id, token):
            logger.warning(f"Authorization for room {room_id} failed: invalid token")
            raise Unauthorized("Invalid token")

        return AuthContext(room_id=room_id, token=token)
