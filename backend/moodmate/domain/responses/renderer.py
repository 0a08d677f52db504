# backend/moodmate/domain/responses/renderer.py
"""
Turn raw model text into display text.

- default mode: raw text verbatim
- mood_check / affirmations: strip optional ``` fences, parse JSON, validate
  the shape, reflow into a fixed layout; any ParseError -> static fallback
- full upstream outage: canned_reply(mood) picks a hand-written line
"""
from __future__ import annotations

import json
import logging
import random
import re
from typing import Any, Dict, List, Optional

from moodmate import modes
from moodmate.core.errors import ParseError
from moodmate.utils.text import truncate

log = logging.getLogger("moodmate.responses")

__all__ = [
    "MOOD_CHECK_FALLBACK",
    "AFFIRMATIONS_FALLBACK",
    "MISSING_KEY_APOLOGY",
    "CANNED_REPLIES",
    "strip_code_fence",
    "parse_structured",
    "render",
    "canned_reply",
]

MISSING_KEY_APOLOGY = (
    "I'm sorry, I'm having trouble connecting to my AI service right now. Please try again later."
)

MOOD_CHECK_FALLBACK = """Thanks for checking in with yourself. Whatever you're feeling right now is valid.

A few questions to reflect on:
1. What emotion is strongest for you right now?
2. What has taken up most of your energy today?
3. What is one thing you need a little more of this week?

Coping ideas to try:
1. Take five slow breaths, making each exhale longer than the inhale.
2. Write down one worry and one small thing you can do about it.

Checking in is already a caring step. I'm here whenever you want to talk it through."""

AFFIRMATIONS_FALLBACK = """Here are some affirmations for you:

1. I am allowed to take things one step at a time.
   Small steps still move you forward, even on hard days.
2. My feelings are valid and they will not last forever.
   Emotions come and go, and naming them helps them pass.
3. I deserve the same kindness I give to others.
   Treating yourself gently builds resilience.

Come back to these whenever you need them."""

CANNED_REPLIES: Dict[str, List[str]] = {
    "negative": [
        "I'm really sorry you're going through this. Your feelings matter, and I'm here to listen whenever you're ready to share more.",
        "That sounds really hard. Be gentle with yourself right now; even taking a slow breath is a good place to start.",
        "Thank you for telling me how you feel. You don't have to carry this alone, and I'm here to keep talking with you.",
    ],
    "neutral": [
        "Thanks for sharing that with me. How has the rest of your day been going?",
        "I'm here and listening. Tell me a bit more about what's on your mind.",
        "I appreciate you checking in. What would feel most helpful to talk about right now?",
    ],
    "positive": [
        "That's lovely to hear! What do you think helped things go well?",
        "I'm glad you're feeling good. Moments like this are worth noticing and savoring.",
        "It sounds like things are going well for you. What would help you keep this going?",
    ],
}

_EXTERNAL_LINE = "I found some {what} for you based on your message. I'm here to listen and support you."

_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL)


def strip_code_fence(raw: str) -> str:
    """Remove one surrounding ``` / ```json fence if present."""
    t = (raw or "").strip()
    m = _FENCE_RE.match(t)
    return m.group(1).strip() if m else t


def _non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and bool(v.strip())


def _str_list(v: Any, n_min: int, n_max: int, what: str) -> List[str]:
    if not isinstance(v, list) or not (n_min <= len(v) <= n_max):
        raise ParseError(f"'{what}' must be a list of {n_min}-{n_max} items")
    if not all(_non_empty_str(x) for x in v):
        raise ParseError(f"'{what}' items must be non-empty strings")
    return [x.strip() for x in v]


def _parse_mood_check(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError("mood_check reply is not a JSON object")
    for key in ("acknowledgement", "summary"):
        if not _non_empty_str(data.get(key)):
            raise ParseError(f"missing '{key}'")
    return {
        "acknowledgement": data["acknowledgement"].strip(),
        "questions": _str_list(data.get("questions"), 3, 3, "questions"),
        "coping": _str_list(data.get("coping"), 2, 2, "coping"),
        "summary": data["summary"].strip(),
    }


def _parse_affirmations(data: Any) -> List[Dict[str, str]]:
    if not isinstance(data, list) or not (3 <= len(data) <= 5):
        raise ParseError("affirmations reply must be a JSON array of 3-5 items")
    out: List[Dict[str, str]] = []
    for item in data:
        if not isinstance(item, dict):
            raise ParseError("affirmation item is not an object")
        if not (_non_empty_str(item.get("affirmation")) and _non_empty_str(item.get("explanation"))):
            raise ParseError("affirmation item missing 'affirmation' or 'explanation'")
        out.append({"affirmation": item["affirmation"].strip(), "explanation": item["explanation"].strip()})
    return out


def parse_structured(raw: str, mode: str) -> Any:
    """
    Parse a structured-mode reply. Raises ParseError on invalid JSON or
    wrong shape.
    """
    text = strip_code_fence(raw)
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"invalid JSON: {e}") from e
    if mode == "mood_check":
        return _parse_mood_check(data)
    if mode == "affirmations":
        return _parse_affirmations(data)
    raise ParseError(f"mode '{mode}' has no structured reply")


def _numbered(items: List[str]) -> str:
    return "\n".join(f"{i}. {x}" for i, x in enumerate(items, 1))


def _format_mood_check(d: Dict[str, Any]) -> str:
    return (
        f"{d['acknowledgement']}\n\n"
        f"A few questions to reflect on:\n{_numbered(d['questions'])}\n\n"
        f"Coping ideas to try:\n{_numbered(d['coping'])}\n\n"
        f"{d['summary']}"
    )


def _format_affirmations(items: List[Dict[str, str]]) -> str:
    lines = ["Here are some affirmations for you:", ""]
    for i, it in enumerate(items, 1):
        lines.append(f"{i}. {it['affirmation']}")
        lines.append(f"   {it['explanation']}")
    return "\n".join(lines)


_FALLBACKS = {"mood_check": MOOD_CHECK_FALLBACK, "affirmations": AFFIRMATIONS_FALLBACK}


def render(raw: str, mode: str) -> str:
    if not modes.is_structured(mode):
        return raw
    try:
        data = parse_structured(raw, mode)
    except ParseError as e:
        log.warning("structured reply unusable (mode=%s): %s | raw=%r", mode, e, truncate(raw or "", 200))
        return _FALLBACKS[mode]
    if mode == "mood_check":
        return _format_mood_check(data)
    return _format_affirmations(data)


def canned_reply(mood: str, external_type: Optional[str] = None, rng: Optional[random.Random] = None) -> str:
    """Hand-written reply for when the model could not be reached."""
    if external_type == "news":
        return _EXTERNAL_LINE.format(what="top news")
    if external_type == "spotify_genres":
        return _EXTERNAL_LINE.format(what="music options")
    choices = CANNED_REPLIES.get(mood) or CANNED_REPLIES["neutral"]
    return (rng or random).choice(choices)
