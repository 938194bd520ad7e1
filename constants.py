import os

from pydantic import BaseModel

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

AUTH_COOKIE_NAME = "x-auth-token"
DEFAULT_ROOM_CAPACITY = 3
DEFAULT_ROOM_TTL_SECONDS = 60 * 10


class AccessConfig(BaseModel):
    capacity: int = DEFAULT_ROOM_CAPACITY
    # Applied to the connected set when the room meta key reports no TTL
    fallback_ttl_seconds: int = DEFAULT_ROOM_TTL_SECONDS
    secure_cookie: bool = False
    strict_capacity: bool = False
    cookie_name: str = AUTH_COOKIE_NAME

    @classmethod
    def from_env(cls) -> "AccessConfig":
        return cls(
            capacity=int(os.getenv("ROOM_CAPACITY", DEFAULT_ROOM_CAPACITY)),
            fallback_ttl_seconds=int(os.getenv("ROOM_FALLBACK_TTL_SECONDS", DEFAULT_ROOM_TTL_SECONDS)),
            secure_cookie=ENVIRONMENT == "production",
            strict_capacity=os.getenv("ROOM_STRICT_CAPACITY", "false").lower() in ("1", "true", "yes"),
        )
