from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from moodmate.adapters.supabase_client import supa
from moodmate.core.config import get_settings
from moodmate.utils.time import days_ago, parse_iso, utc_iso

log = logging.getLogger("moodmate.analytics.agg")

MOODS = ("positive", "neutral", "negative")


def summarize_moods(rows: Iterable[Dict[str, Any]], days: int = 30) -> Dict[str, Any]:
    """
    Dashboard numbers from ChatLog rows: overall distribution, per-day
    counts (YYYY-MM-DD -> {mood: n}) and the most common mood.
    Rows with an unknown mood are skipped.

    active_days counts distinct days with at least one chat; avg_per_day is
    total over active_days, one decimal.
    """
    dist: Dict[str, int] = {m: 0 for m in MOODS}
    daily: Dict[str, Dict[str, int]] = {}
    total = 0
    for r in rows:
        mood = (r.get("detected_mood") or "").lower()
        if mood not in dist:
            continue
        total += 1
        dist[mood] += 1
        ts = parse_iso(str(r.get("created_at") or ""))
        if ts is None:
            continue
        day = ts.strftime("%Y-%m-%d")
        bucket = daily.setdefault(day, {m: 0 for m in MOODS})
        bucket[mood] += 1

    most_common: Optional[str] = None
    if total:
        # ties resolve in MOODS order
        most_common = max(MOODS, key=lambda m: dist[m])
    active_days = len(daily)
    avg_per_day = round(total / active_days, 1) if active_days else 0.0
    return {
        "total": total,
        "distribution": dist,
        "daily": dict(sorted(daily.items())),
        "most_common": most_common,
        "active_days": active_days,
        "avg_per_day": avg_per_day,
        "days": days,
    }


def fetch_user_logs(user_id: str, days: int = 30, limit: int = 2000) -> List[Dict[str, Any]]:
    """
    ChatLog rows for a user over the last `days` days, newest first.
    Best-effort; empty list on failure.
    """
    try:
        res = (
            supa()
            .table(get_settings().CHATLOG_TABLE)
            .select("user_message,bot_response,detected_mood,created_at")
            .eq("user_id", user_id)
            .gte("created_at", utc_iso(days_ago(days)))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return list(getattr(res, "data", []) or [])
    except Exception as e:
        log.warning("fetch_user_logs failed: %s", e)
        return []


def mood_summary(user_id: str, days: int = 30) -> Dict[str, Any]:
    return summarize_moods(fetch_user_logs(user_id, days=days), days=days)


def recent_exchanges(user_id: str, n: int = 20) -> List[Dict[str, Any]]:
    """Last N exchanges for a user (dashboard session list)."""
    try:
        res = (
            supa()
            .table(get_settings().CHATLOG_TABLE)
            .select("user_message,bot_response,detected_mood,created_at")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(n)
            .execute()
        )
        return list(getattr(res, "data", []) or [])
    except Exception as e:
        log.warning("recent_exchanges failed: %s", e)
        return []
