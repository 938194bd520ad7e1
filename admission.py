import secrets
from typing import Callable, Optional

from backend import RedisBackend
from constants import AccessConfig
from schemas.access import AdmissionResult, AdmissionStatus
from logging_config import get_logger

logger = get_logger(__name__)


def generate_token() -> str:
    # ~128-bit token, URL-safe
    return secrets.token_urlsafe(16)


class AdmissionController:
    """Decides whether a visitor may enter a room, minting a token on first entry.

    Steps run in order and the first decisive one wins:

    1. the room meta key is missing -> ROOM_NOT_FOUND, nothing written
    2. the presented token is already in the connected set -> REUSED, nothing written
    3. the connected set is at capacity -> ROOM_FULL, nothing written
    4. a fresh token is added to the set and the set's expiry is aligned with
       the room's remaining TTL -> ADMITTED

    Steps 3 and 4 are a plain read-then-write unless ``strict_capacity`` is set,
    in which case the add is a single conditional transaction.

    Redis failures surface as StoreError and are never turned into a verdict.
    """

    def __init__(self, backend: RedisBackend, config: AccessConfig,
                 token_factory: Callable[[], str] = generate_token):
        self.backend = backend
        self.config = config
        self.token_factory = token_factory

    def admit(self, room_id: str, presented_token: Optional[str] = None) -> AdmissionResult:
        if not self.backend.room_exists(room_id):
            logger.warning(f"Admission to room {room_id} rejected: room not found")
            return AdmissionResult(status=AdmissionStatus.ROOM_NOT_FOUND, room_id=room_id)

        if presented_token and self.backend.is_member(room_id, presented_token):
            logger.info(f"Admission to room {room_id}: reusing existing token {presented_token[:6]}...")
            return AdmissionResult(status=AdmissionStatus.REUSED, room_id=room_id, token=presented_token)

        # Read before writing so the token and its expiry land in one transaction
        ttl = self.backend.get_ttl(room_id)
        set_ttl = ttl if ttl and ttl > 0 else self.config.fallback_ttl_seconds

        token = self.token_factory()
        if self.config.strict_capacity:
            added = self.backend.add_member_if_under_capacity(room_id, token, set_ttl, self.config.capacity)
        else:
            added = self._check_then_add(room_id, token, set_ttl)
        if not added:
            logger.warning(f"Admission to room {room_id} rejected: room is full (capacity {self.config.capacity})")
            return AdmissionResult(status=AdmissionStatus.ROOM_FULL, room_id=room_id)

        logger.info(f"Admission to room {room_id}: admitted new token {token[:6]}...")
        return AdmissionResult(status=AdmissionStatus.ADMITTED, room_id=room_id, token=token)

    def _check_then_add(self, room_id: str, token: str, ttl: int) -> bool:
        # Not atomic: concurrent admissions near capacity may over-admit slightly
        if self.backend.member_count(room_id) >= self.config.capacity:
            return False
        self.backend.add_member(room_id, token, ttl)
        return True
