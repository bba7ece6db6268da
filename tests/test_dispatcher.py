import asyncio
from datetime import datetime

import pytest

from price_alerts.catalog import ProductCatalog
from price_alerts.services import (Channel, Delivered, NotificationDispatcher,
                                   Suppressed, SuppressionReason)


class _EmptyCatalog(ProductCatalog):
    def get_product(self, product_id):
        return None


@pytest.fixture
def alert(store, product, user_id):
    return store.create_alert(user_id, product.id, 90000)


@pytest.fixture
def dispatcher(store, catalog, registry, email_transport, noon_clock):
    return NotificationDispatcher(store, catalog, registry, email_transport, clock=noon_clock)


def test_no_preferences_suppresses(dispatcher, registry, make_socket, email_transport, alert):
    socket = make_socket()
    registry.register(socket)

    outcome = asyncio.run(dispatcher.dispatch(alert, 85000))

    assert outcome == Suppressed(SuppressionReason.NO_PREFERENCES)
    assert socket.sent == []
    assert email_transport.user_messages == []


def test_quiet_hours_suppress_every_channel(
    store, catalog, registry, make_socket, email_transport, alert, user_id
):
    store.upsert_preferences(user_id, {"quiet_hours_start": "22:00", "quiet_hours_end": "06:00"})
    socket = make_socket()
    registry.register(socket)
    dispatcher = NotificationDispatcher(
        store, catalog, registry, email_transport, clock=lambda: datetime(2026, 3, 2, 23, 30)
    )

    outcome = asyncio.run(dispatcher.dispatch(alert, 85000))

    assert outcome == Suppressed(SuppressionReason.QUIET_HOURS)
    assert socket.sent == []
    assert email_transport.user_messages == []


def test_push_only_broadcasts_price_alert(
    dispatcher, store, registry, make_socket, email_transport, alert, product, user_id
):
    store.upsert_preferences(user_id, {"notification_email": False})
    sockets = [make_socket(), make_socket()]
    for socket in sockets:
        registry.register(socket)

    outcome = asyncio.run(dispatcher.dispatch(alert, 85000))

    assert outcome == Delivered([Channel.PUSH])
    assert email_transport.user_messages == []
    for socket in sockets:
        assert len(socket.sent) == 1
        message = socket.sent[0]
        assert message["type"] == "price_alert"
        assert "timestamp" in message
        assert message["data"] == {
            "alertId": str(alert.id),
            "productId": str(product.id),
            "productName": "Noise-cancelling headphones",
            "targetPrice": 90000,
            "currentPrice": 85000,
            "currency": "USD",
            "alertType": "below",
            "threshold": None,
        }


def test_push_and_email_both_attempted(
    dispatcher, store, registry, make_socket, email_transport, alert, user_id
):
    store.get_or_create_preferences(user_id)
    socket = make_socket()
    registry.register(socket)

    outcome = asyncio.run(dispatcher.dispatch(alert, 85000))

    assert outcome == Delivered([Channel.PUSH, Channel.EMAIL])
    assert len(socket.sent) == 1
    [(recipient, message)] = email_transport.user_messages
    assert recipient == user_id
    assert "Noise-cancelling headphones" in message.subject


def test_all_channels_disabled_delivers_nothing(dispatcher, store, alert, user_id):
    store.upsert_preferences(user_id, {"notification_email": False, "notification_push": False})

    assert asyncio.run(dispatcher.dispatch(alert, 85000)) == Delivered([])


def test_failed_session_is_dropped_and_others_still_receive(
    dispatcher, store, registry, make_socket, alert, user_id
):
    store.upsert_preferences(user_id, {"notification_email": False})
    healthy = make_socket()
    broken = make_socket(fail=True)
    registry.register(broken)
    registry.register(healthy)

    outcome = asyncio.run(dispatcher.dispatch(alert, 85000))

    assert outcome == Delivered([Channel.PUSH])
    assert len(healthy.sent) == 1
    assert registry.session_count == 1


def test_email_failure_is_swallowed(store, catalog, registry, alert, user_id, noon_clock):
    class _BrokenEmail:
        def send_to_user(self, user_id, message):
            raise RuntimeError("smtp down")

    store.upsert_preferences(user_id, {"notification_push": False})
    dispatcher = NotificationDispatcher(store, catalog, registry, _BrokenEmail(), clock=noon_clock)

    assert asyncio.run(dispatcher.dispatch(alert, 85000)) == Delivered([Channel.EMAIL])


def test_unknown_product_uses_id_as_name(
    store, registry, make_socket, email_transport, alert, user_id, noon_clock
):
    store.upsert_preferences(user_id, {"notification_email": False})
    socket = make_socket()
    registry.register(socket)
    dispatcher = NotificationDispatcher(
        store, _EmptyCatalog(), registry, email_transport, clock=noon_clock
    )

    asyncio.run(dispatcher.dispatch(alert, 85000))

    assert socket.sent[0]["data"]["productName"] == str(alert.product_id)


def test_slow_catalog_does_not_stall_the_event_loop(
    store, slow_catalog, registry, make_socket, email_transport, alert, user_id, noon_clock,
    run_with_ticker,
):
    store.upsert_preferences(user_id, {"notification_email": False})
    socket = make_socket()
    registry.register(socket)
    dispatcher = NotificationDispatcher(
        store, slow_catalog, registry, email_transport, clock=noon_clock
    )

    outcome, stall = run_with_ticker(dispatcher.dispatch(alert, 85000))

    assert outcome == Delivered([Channel.PUSH])
    assert socket.sent[0]["data"]["productName"] == "Noise-cancelling headphones"
    assert slow_catalog.calls == 1
    assert stall < 0.2
