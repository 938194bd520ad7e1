import functools
from typing import Optional

from fastapi import Depends, Query, Request

from admission import AdmissionController
from authorizer import AccessAuthorizer
from backend import RedisBackend, get_redis_backend
from constants import AccessConfig
from schemas.access import AuthContext


@functools.lru_cache(maxsize=1)
def get_access_config() -> AccessConfig:
    return AccessConfig.from_env()


def get_admission_controller(
    backend: RedisBackend = Depends(get_redis_backend),
    config: AccessConfig = Depends(get_access_config),
) -> AdmissionController:
    return AdmissionController(backend, config)


def get_access_authorizer(backend: RedisBackend = Depends(get_redis_backend)) -> AccessAuthorizer:
    return AccessAuthorizer(backend)


def require_room_access(
    request: Request,
    room_id: Optional[str] = Query(None, alias="roomId"),
    authorizer: AccessAuthorizer = Depends(get_access_authorizer),
    config: AccessConfig = Depends(get_access_config),
) -> AuthContext:
    """Gate for every per-room operation: roomId from the query, token from the auth cookie."""
    return authorizer.authorize(room_id, request.cookies.get(config.cookie_name))
