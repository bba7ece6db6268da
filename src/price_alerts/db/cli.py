"""Migration commands for the alert schema (``poetry run migrate`` and friends).

Revisions live in ``alembic/versions``; ``0001_initial`` creates the product,
price_alert, notification_preferences and anonymous_price_alert tables with
the one-active-alert partial indexes. The database URL comes from
``DATABASE_URL`` through the application settings (see ``alembic/env.py``).
"""
import subprocess
import sys
from pathlib import Path

# .../src/price_alerts/db/cli.py -> project root (where alembic.ini lives)
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


def _run_alembic(*args: str) -> None:
    subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=_PROJECT_ROOT,
        check=True,
    )


def generate() -> None:
    """Autogenerate a revision from the SQLModel tables.

    Usage: ``poetry run generate -m "add alert snooze"``. Review the partial
    unique indexes by hand; autogenerate does not always render their WHERE
    clause.
    """
    _run_alembic("revision", "--autogenerate", *sys.argv[1:])


def migrate() -> None:
    """Upgrade the alert schema to head, or to the revision given (e.g. ``0001_initial``)."""
    revision = sys.argv[1] if len(sys.argv) > 1 else "head"
    _run_alembic("upgrade", revision, *sys.argv[2:])


def downgrade() -> None:
    """Step the alert schema back one revision, or to the one given (``base`` drops everything)."""
    revision = sys.argv[1] if len(sys.argv) > 1 else "-1"
    _run_alembic("downgrade", revision)
