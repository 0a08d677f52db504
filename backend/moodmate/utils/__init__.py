from .time import utc_now, utc_iso, parse_iso, days_ago
from .text import truncate, squash_ws, strip_control

__all__ = [
    "utc_now", "utc_iso", "parse_iso", "days_ago",
    "truncate", "squash_ws", "strip_control",
]
