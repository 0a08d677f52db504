from __future__ import annotations

from datetime import datetime, timezone, timedelta
from typing import Optional

__all__ = [
    "utc_now",
    "utc_iso",
    "parse_iso",
    "days_ago",
]


def utc_now() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def utc_iso(dt: Optional[datetime] = None) -> str:
    """RFC3339 / ISO8601 with trailing Z."""
    dt = dt or utc_now()
    return dt.isoformat().replace("+00:00", "Z")


def parse_iso(s: str) -> Optional[datetime]:
    """Parse ISO string to aware datetime (UTC). Returns None on failure."""
    if not s:
        return None
    try:
        s = s.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt
    except ValueError:
        return None


def days_ago(n: int) -> datetime:
    """Exactly `n` days (n * 24h) before now, UTC."""
    return utc_now() - timedelta(days=max(0, n))
