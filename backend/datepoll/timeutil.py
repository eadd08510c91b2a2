"""UTC normalisation helpers shared by models, schemas and the engine."""
from datetime import datetime
from typing import Optional

import pytz


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return ``value`` as an aware UTC datetime.

    SQLite hands back naive datetimes for ``DateTime(timezone=True)`` columns;
    everything is written as UTC, so a naive value is read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def now_in(timezone_name: str) -> datetime:
    """Current wall-clock time in the given IANA timezone."""
    return datetime.now(pytz.timezone(timezone_name))
