REDIS_META_KEY = "meta:{slug}" # room id - room metadata, its TTL is the room's lifetime
REDIS_CONNECTED_KEY = "connected:{slug}" # room id - set of admitted tokens


def meta_key(room_id: str) -> str:
    return REDIS_META_KEY.format(slug=room_id)


def connected_key(room_id: str) -> str:
    return REDIS_CONNECTED_KEY.format(slug=room_id)

# **Lifetime**
# - `meta:{id}` is created with an expiry by the room owner and never touched by admission.
# - `connected:{id}` gets the remaining TTL of `meta:{id}` copied onto it on every admission,
#   so the member set never outlives its room.
