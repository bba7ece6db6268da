import asyncio
import uuid


def test_register_and_unregister(registry, make_socket):
    first = registry.register(make_socket())
    second = registry.register(make_socket())

    assert first != second
    assert registry.session_count == 2

    registry.unregister(first)
    registry.unregister(first)

    assert registry.session_count == 1


def test_bind_user_shows_in_stats(registry, make_socket):
    session_id = registry.register(make_socket())
    registry.register(make_socket())

    registry.bind_user(session_id, uuid.uuid4())
    registry.bind_user("unknown", uuid.uuid4())

    assert registry.stats() == {"totalConnections": 2, "authenticatedConnections": 1}


def test_broadcast_reaches_every_session(registry, make_socket):
    sockets = [make_socket() for _ in range(3)]
    for socket in sockets:
        registry.register(socket)

    delivered = asyncio.run(registry.broadcast({"type": "price_alert"}))

    assert delivered == 3
    assert all(socket.sent == [{"type": "price_alert"}] for socket in sockets)


def test_disconnected_session_is_dropped_without_send(registry, make_socket):
    closed = make_socket(connected=False)
    session_id = registry.register(closed)

    assert asyncio.run(registry.send_to(session_id, {"type": "pong"})) is False
    assert closed.sent == []
    assert registry.session_count == 0


def test_send_to_unknown_session(registry):
    assert asyncio.run(registry.send_to("missing", {"type": "pong"})) is False


def test_socket_greets_and_answers_ping(client):
    with client.websocket_connect("/ws") as ws:
        greeting = ws.receive_json()
        assert greeting["type"] == "connected"
        assert greeting["data"]["sessionId"]

        ws.send_json({"type": "ping"})
        assert ws.receive_json()["type"] == "pong"


def test_socket_auth_binds_user(client, container, auth_headers, user_id):
    token = auth_headers(user_id)["Authorization"].removeprefix("Bearer ")

    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.send_json({"type": "auth", "token": token})
        reply = ws.receive_json()

        assert reply["type"] == "auth_ok"
        assert reply["data"]["userId"] == str(user_id)
        assert container.registry().stats()["authenticatedConnections"] == 1


def test_socket_rejects_bad_token_and_unknown_types(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()

        ws.send_json({"type": "auth", "token": "not-a-jwt"})
        assert ws.receive_json()["type"] == "error"

        ws.send_json({"type": "subscribe"})
        reply = ws.receive_json()
        assert reply["type"] == "error"
        assert "subscribe" in reply["data"]["message"]

        ws.send_text("{not json")
        assert ws.receive_json()["type"] == "error"


def test_socket_unregisters_on_disconnect(client, container):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        assert container.registry().session_count == 1

    assert container.registry().session_count == 0
