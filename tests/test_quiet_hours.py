from datetime import datetime

import pytest

from price_alerts.services import is_in_quiet_hours


def _at(hour, minute):
    return datetime(2026, 3, 2, hour, minute)


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (23, 30, True),
        (22, 0, True),
        (0, 0, True),
        (5, 0, True),
        (6, 0, True),
        (6, 1, False),
        (12, 0, False),
        (21, 59, False),
    ],
)
def test_window_wrapping_midnight(hour, minute, expected):
    assert is_in_quiet_hours("22:00", "06:00", _at(hour, minute)) is expected


@pytest.mark.parametrize(
    "hour, minute, expected",
    [(9, 0, True), (13, 15, True), (17, 0, True), (8, 59, False), (17, 1, False)],
)
def test_window_within_one_day(hour, minute, expected):
    assert is_in_quiet_hours("09:00", "17:00", _at(hour, minute)) is expected


def test_missing_bound_means_no_quiet_hours():
    assert is_in_quiet_hours(None, "06:00", _at(3, 0)) is False
    assert is_in_quiet_hours("22:00", None, _at(23, 0)) is False
    assert is_in_quiet_hours(None, None, _at(23, 0)) is False


def test_single_minute_window():
    assert is_in_quiet_hours("10:00", "10:00", _at(10, 0)) is True
    assert is_in_quiet_hours("10:00", "10:00", _at(10, 1)) is False


def test_single_digit_hours_are_accepted():
    assert is_in_quiet_hours("7:30", "9:00", _at(8, 0)) is True
