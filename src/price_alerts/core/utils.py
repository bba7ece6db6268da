"""Shared helpers: timestamps, wall-clock parsing and price formatting."""
import re
from datetime import datetime, time, timezone

HHMM_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"
_HHMM_RE = re.compile(HHMM_PATTERN)

MINOR_UNITS = 100


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def is_hhmm(value: str) -> bool:
    return bool(_HHMM_RE.match(value))


def parse_hhmm(value: str) -> int:
    """Convert an "HH:MM" string to minutes since midnight.

    Missing parts count as zero ("7" -> 07:00), mirroring how the stored
    values have always been read.
    """
    hours_str, _, minutes_str = value.strip().partition(":")
    hours = int(hours_str or "0")
    minutes = int(minutes_str or "0")
    return hours * 60 + minutes


def minutes_since_midnight(moment: datetime | time) -> int:
    return moment.hour * 60 + moment.minute


def format_price(amount_minor: int, currency: str) -> str:
    """Render a minor-unit amount, e.g. (85000, "USD") -> "USD 850.00"."""
    return f"{currency} {amount_minor / MINOR_UNITS:,.2f}"
