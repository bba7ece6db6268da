import uuid
from types import SimpleNamespace

import pytest

from price_alerts.services import AlertEvaluator, should_trigger


def _rule(alert_type, target_price, threshold=None):
    return SimpleNamespace(alert_type=alert_type, target_price=target_price, threshold=threshold)


@pytest.mark.parametrize(
    "current, expected",
    [(85000, True), (90000, True), (90001, False)],
)
def test_below_triggers_at_or_under_target(current, expected):
    assert should_trigger(_rule("below", 90000), current) is expected


@pytest.mark.parametrize(
    "current, expected",
    [(95000, True), (90000, True), (89999, False)],
)
def test_above_triggers_at_or_over_target(current, expected):
    assert should_trigger(_rule("above", 90000), current) is expected


@pytest.mark.parametrize(
    "current, expected",
    [(1100, True), (900, True), (1099, False), (901, False), (1000, False)],
)
def test_percentage_triggers_on_distance_either_way(current, expected):
    assert should_trigger(_rule("percentage", 1000, threshold=10), current) is expected


def test_percentage_without_threshold_never_triggers():
    assert should_trigger(_rule("percentage", 1000), 1) is False
    assert should_trigger(_rule("percentage", 1000), 100000) is False


def test_percentage_with_zero_target_never_triggers():
    assert should_trigger(_rule("percentage", 0, threshold=5), 100) is False


def test_unknown_type_never_triggers():
    assert should_trigger(_rule("sideways", 1000), 1000) is False


def test_evaluator_returns_only_active_triggered_alerts(store, product, user_id):
    hit = store.create_alert(user_id, product.id, 90000)
    store.create_alert(uuid.uuid4(), product.id, 80000)  # not reached at 85000
    inactive = store.create_alert(uuid.uuid4(), product.id, 90000)
    store.update_alert(inactive.id, inactive.user_id, {"is_active": False})

    triggered = AlertEvaluator(store).triggered_alerts(product.id, 85000)

    assert [a.id for a in triggered] == [hit.id]


def test_evaluator_keeps_creation_order(store, product):
    created = [store.create_alert(uuid.uuid4(), product.id, 90000) for _ in range(3)]

    triggered = AlertEvaluator(store).triggered_alerts(product.id, 85000)

    expected = sorted(created, key=lambda a: (a.created_at, a.id))
    assert [a.id for a in triggered] == [a.id for a in expected]


def test_evaluator_leaves_alerts_active(store, product, user_id):
    alert = store.create_alert(user_id, product.id, 90000)

    AlertEvaluator(store).triggered_alerts(product.id, 85000)

    assert store.get_alert(alert.id, user_id).is_active is True
