# backend/moodmate/domain/prompts/builder.py
from __future__ import annotations

from typing import List, Optional, Sequence

from moodmate import modes
from moodmate.schemas.chat import ChatTurn
from moodmate.utils.text import squash_ws, strip_control, truncate

__all__ = ["build_prompt", "render_transcript"]

MAX_TURN_CHARS = 400
DEFAULT_WORD_BUDGET = 150

_PERSONA = (
    "You are a compassionate and empathetic mood companion. You are not a clinician: "
    "never diagnose conditions or give medical advice."
)

_DEFAULT_ROLE = """Your role is to:
1. Listen actively and provide emotional support
2. Offer helpful suggestions for improving mental well-being
3. Be encouraging and understanding
4. Keep responses conversational and warm
5. Suggest coping strategies when appropriate"""

_MOOD_CHECK_SCHEMA = """Return ONLY a JSON object, with no markdown and no text before or after it, using exactly these keys:
{
  "acknowledgement": "one or two sentences reflecting how the user seems to feel",
  "questions": ["reflection question 1", "reflection question 2", "reflection question 3"],
  "coping": ["coping step 1", "coping step 2"],
  "summary": "one encouraging closing sentence"
}
"questions" must have exactly 3 strings and "coping" exactly 2 strings."""

_AFFIRMATIONS_SCHEMA = """Return ONLY a JSON array, with no markdown and no text before or after it, of 3 to 5 objects shaped like:
[
  {"affirmation": "a first-person affirmation of 6 to 12 words", "explanation": "one sentence on why it fits the user right now"}
]"""


def _clean(text: str) -> str:
    return squash_ws(strip_control(text or ""))


def render_transcript(history: Sequence[ChatTurn], limit: int = 5) -> str:
    turns = list(history or [])[-limit:] if limit > 0 else []
    lines: List[str] = []
    for t in turns:
        content = truncate(_clean(t.content), MAX_TURN_CHARS)
        if content:
            lines.append(f"{t.role}: {content}")
    return "\n".join(lines) if lines else "(no earlier messages)"


def _context_block(message: str, mood: str, transcript: str) -> str:
    parts = [
        f"Current user mood detected: {mood}",
        f"Recent conversation:\n{transcript}",
    ]
    if message:
        parts.append(f'User\'s current message: "{message}"')
    else:
        parts.append("The user did not type a message; work from the recent conversation above.")
    return "\n\n".join(parts)


def build_prompt(
    message: str,
    mood: str,
    recent_history: Optional[Sequence[ChatTurn]] = None,
    mode: str = modes.DEFAULT_MODE,
    *,
    history_limit: int = 5,
    word_budget: int = DEFAULT_WORD_BUDGET,
) -> str:
    """
    Render the prompt for one of the three modes.

    An empty `message` (action buttons send "") drops the current-message
    line entirely; the model is told to rely on the transcript instead.
    """
    mode = modes.normalize(mode)
    msg = _clean(message)
    ctx = _context_block(msg, mood, render_transcript(recent_history or [], history_limit))

    if mode == "mood_check":
        return "\n\n".join([
            _PERSONA,
            "The user asked for a mood check-in. Gently reflect how they seem to be doing, "
            "ask three open reflection questions, and suggest two small, practical coping steps.",
            ctx,
            _MOOD_CHECK_SCHEMA,
        ])

    if mode == "affirmations":
        return "\n\n".join([
            _PERSONA,
            "The user asked for affirmations. Write personal, believable affirmations that fit "
            "their mood and what they have shared; avoid generic slogans.",
            ctx,
            _AFFIRMATIONS_SCHEMA,
        ])

    return "\n\n".join([
        f"{_PERSONA} {_DEFAULT_ROLE}",
        ctx,
        "Respond as a caring companion would, acknowledging their feelings and providing helpful "
        f"support. Keep your response under {word_budget} words.",
    ])
