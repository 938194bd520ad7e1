import functools
from datetime import datetime
from typing import Optional

import redis

from constants import REDIS_HOST, REDIS_PORT, REDIS_PASSWORD
from errors import StoreError
from redis_keys import connected_key, meta_key
from logging_config import get_logger

logger = get_logger(__name__)


def create_redis_client() -> redis.Redis:
    try:
        client = redis.Redis(host=REDIS_HOST, port=REDIS_PORT, password=REDIS_PASSWORD, decode_responses=True)
        # Test connection
        client.ping()
        logger.info(f"Redis client connected successfully to {REDIS_HOST}:{REDIS_PORT}")
    except redis.exceptions.RedisError as e:
        logger.error(f"Failed to connect to Redis at {REDIS_HOST}:{REDIS_PORT}: {e}", exc_info=True)
        raise StoreError(f"Redis unavailable at {REDIS_HOST}:{REDIS_PORT}") from e
    return client


def store_operation(func):
    """Re-raise redis failures from a backend method as StoreError."""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except redis.exceptions.RedisError as e:
            logger.error(f"Redis operation {func.__name__} failed: {e}", exc_info=True)
            raise StoreError(f"{func.__name__} failed: {e}") from e
    return wrapper


class RedisBackend:
    """Thin wrapper over the room keys. Each method is one store primitive."""

    def __init__(self, redis_client: redis.Redis):
        self.redis_client = redis_client

    @store_operation
    def room_exists(self, room_id: str) -> bool:
        exists = self.redis_client.exists(meta_key(room_id)) > 0
        logger.debug(f"Room {room_id} exists: {exists}")
        return exists

    @store_operation
    def is_member(self, room_id: str, token: str) -> bool:
        return bool(self.redis_client.sismember(connected_key(room_id), token))

    @store_operation
    def member_count(self, room_id: str) -> int:
        count = self.redis_client.scard(connected_key(room_id))
        logger.debug(f"Room {room_id} has {count} connected tokens")
        return count

    @store_operation
    def add_member(self, room_id: str, token: str, ttl: int):
        """Add the token and set the connected set's expiry in one MULTI/EXEC."""
        key = connected_key(room_id)
        pipe = self.redis_client.pipeline(transaction=True)
        pipe.sadd(key, token)
        pipe.expire(key, ttl)
        added, _ = pipe.execute()
        logger.debug(f"Token {token[:6]}... added to room {room_id}: {bool(added)}")

    @store_operation
    def add_member_if_under_capacity(self, room_id: str, token: str, ttl: int, capacity: int) -> bool:
        """Add the token only if the set holds fewer than capacity members.

        Runs as a WATCH/MULTI transaction on the connected set, so concurrent
        admissions cannot push the set past capacity. The expiry is set in the
        same transaction.
        """
        key = connected_key(room_id)

        def add_if_room(pipe):
            if pipe.scard(key) >= capacity:
                return False
            pipe.multi()
            pipe.sadd(key, token)
            pipe.expire(key, ttl)
            return True

        added = self.redis_client.transaction(add_if_room, key, value_from_callable=True)
        logger.debug(f"Conditional add to room {room_id} (capacity {capacity}): {added}")
        return added

    @store_operation
    def get_ttl(self, room_id: str) -> Optional[int]:
        """Remaining lifetime of the room meta key, None if unset or missing."""
        ttl = self.redis_client.ttl(meta_key(room_id))
        if ttl is None or ttl < 0:
            return None
        return ttl

    @store_operation
    def create_room(self, room_id: str, ttl: int):
        logger.info(f"Creating room {room_id} with TTL {ttl} seconds")
        key = meta_key(room_id)
        self.redis_client.hset(key, mapping={"created_at": datetime.now().isoformat()})
        self.redis_client.expire(key, ttl)
        return room_id

    @store_operation
    def delete_room(self, room_id: str):
        logger.info(f"Deleting room {room_id}")
        deleted = self.redis_client.delete(meta_key(room_id), connected_key(room_id))
        logger.debug(f"Room {room_id} deleted: {deleted} keys removed")
        return deleted

    @store_operation
    def ping(self) -> bool:
        return bool(self.redis_client.ping())


@functools.lru_cache(maxsize=1)
def get_redis_backend() -> RedisBackend:
    return RedisBackend(create_redis_client())
