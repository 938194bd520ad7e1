from unittest.mock import MagicMock

import redis

from backend import RedisBackend, get_redis_backend
from redis_keys import connected_key


def enter(client, room_id):
    return client.get(f"/room/{room_id}", follow_redirects=False)


def test_entry_sets_auth_cookie(client, live_room, fake_redis):
    response = enter(client, live_room)

    assert response.status_code == 200
    assert response.json() == {"roomId": live_room, "status": "admitted"}
    set_cookie = response.headers["set-cookie"].lower()
    assert "x-auth-token=" in set_cookie
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "path=/" in set_cookie
    assert "secure" not in set_cookie
    assert fake_redis.sismember(connected_key(live_room), client.cookies["x-auth-token"])


def test_returning_visitor_reuses_cookie(client, live_room, fake_redis):
    enter(client, live_room)
    token = client.cookies["x-auth-token"]

    response = enter(client, live_room)

    assert response.json()["status"] == "reused"
    assert client.cookies["x-auth-token"] == token
    assert fake_redis.scard(connected_key(live_room)) == 1


def test_full_room_redirects_with_reason(client, live_room):
    for _ in range(3):
        client.cookies.clear()
        assert enter(client, live_room).status_code == 200
    client.cookies.clear()

    response = enter(client, live_room)

    assert response.status_code == 307
    assert response.headers["location"] == "/?error=room-full"


def test_missing_room_redirects_with_reason(client):
    response = enter(client, "r2")

    assert response.status_code == 307
    assert response.headers["location"] == "/?error=room-not-found"


def test_room_without_id_redirects_home(client):
    response = client.get("/room", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/"


def test_create_room_then_enter(client):
    created = client.post("/api/room/create", json={"expiry_seconds": 90})
    assert created.status_code == 201
    room_id = created.json()["roomId"]

    assert enter(client, room_id).status_code == 200
    ttl = client.get("/api/room/ttl", params={"roomId": room_id})
    assert ttl.status_code == 200
    assert 0 < ttl.json()["ttl"] <= 90


def test_members_endpoint_requires_membership(client, live_room):
    denied = client.get("/api/room/members", params={"roomId": live_room})
    assert denied.status_code == 401
    assert denied.json() == {"error": "Unauthorized"}

    enter(client, live_room)
    allowed = client.get("/api/room/members", params={"roomId": live_room})
    assert allowed.status_code == 200
    assert allowed.json() == {"roomId": live_room, "members": 1, "capacity": 3, "is_full": False}


def test_authorization_failures_share_one_body(client, live_room):
    client.cookies.set("x-auth-token", "forged")
    missing_room = client.get("/api/room/ttl", params={"roomId": "r2"})
    bad_token = client.get("/api/room/ttl", params={"roomId": live_room})
    client.cookies.clear()
    no_token = client.get("/api/room/ttl", params={"roomId": live_room})

    for response in (missing_room, bad_token, no_token):
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


def test_destroy_room_invalidates_tokens(client, live_room, fake_redis):
    enter(client, live_room)
    token = client.cookies["x-auth-token"]

    response = client.delete("/api/room", params={"roomId": live_room})

    assert response.status_code == 200
    assert not fake_redis.exists(connected_key(live_room))
    client.cookies.set("x-auth-token", token)
    assert client.get("/api/room/ttl", params={"roomId": live_room}).status_code == 401


def test_store_outage_is_503_not_a_redirect(client):
    from app import app

    broken = MagicMock()
    broken.exists.side_effect = redis.exceptions.ConnectionError("down")
    app.dependency_overrides[get_redis_backend] = lambda: RedisBackend(broken)

    response = enter(client, "r1")

    assert response.status_code == 503
    assert response.json() == {"error": "Store unavailable"}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_secure_cookie_outside_development(client, config, live_room):
    config.secure_cookie = True

    response = enter(client, live_room)

    assert response.status_code == 200
    assert "secure" in response.headers["set-cookie"].lower()


def test_access_config_from_env(monkeypatch):
    import constants

    monkeypatch.setenv("ROOM_CAPACITY", "5")
    monkeypatch.setenv("ROOM_FALLBACK_TTL_SECONDS", "120")
    monkeypatch.setenv("ROOM_STRICT_CAPACITY", "true")
    monkeypatch.setattr(constants, "ENVIRONMENT", "production")

    config = constants.AccessConfig.from_env()

    assert config.capacity == 5
    assert config.fallback_ttl_seconds == 120
    assert config.strict_capacity
    assert config.secure_cookie
    assert config.cookie_name == "x-auth-token"


def test_access_config_defaults(monkeypatch):
    import constants

    for name in ("ROOM_CAPACITY", "ROOM_FALLBACK_TTL_SECONDS", "ROOM_STRICT_CAPACITY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(constants, "ENVIRONMENT", "development")

    config = constants.AccessConfig.from_env()

    assert (config.capacity, config.fallback_ttl_seconds) == (3, 600)
    assert not config.strict_capacity
    assert not config.secure_cookie
