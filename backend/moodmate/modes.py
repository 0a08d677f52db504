# -*- coding: utf-8 -*-
"""
modes.py: chat modes registry

Stable contract used elsewhere:
  - DEFAULT_MODE
  - available()   -> list[{id, emoji, name, description}]
  - config(id)    -> ModeSpec for that mode or default
  - normalize(id) -> a valid mode id (unknown / empty -> DEFAULT_MODE)

`structured` modes ask the model for JSON and go through the renderer's
parse step; `default` is free-form prose.
"""

from __future__ import annotations

from typing import Dict, List, Optional, TypedDict


class ModeSpec(TypedDict):
    emoji: str
    name: str
    description: str
    structured: bool


MODES: Dict[str, ModeSpec] = {
    "default": {
        "emoji": "💬",
        "name": "Chat",
        "description": "Open conversation with a supportive companion.",
        "structured": False,
    },
    "mood_check": {
        "emoji": "🌡️",
        "name": "Mood check-in",
        "description": "A short check-in: reflection questions and two coping ideas.",
        "structured": True,
    },
    "affirmations": {
        "emoji": "🌿",
        "name": "Affirmations",
        "description": "Three to five personal affirmations with why they fit.",
        "structured": True,
    },
}

DEFAULT_MODE: str = "default"


def available() -> List[dict]:
    """Return a lightweight list for UI selectors."""
    return [
        {"id": k, "emoji": v["emoji"], "name": v["name"], "description": v["description"]}
        for k, v in MODES.items()
    ]


def config(mode: str) -> ModeSpec:
    """Return the full config for a mode ID, falling back to DEFAULT_MODE."""
    if mode in MODES:
        return MODES[mode]
    return MODES[DEFAULT_MODE]


def is_structured(mode: str) -> bool:
    return config(mode)["structured"]


def normalize(mode: Optional[str]) -> str:
    m = (mode or "").strip().lower()
    return m if m in MODES else DEFAULT_MODE


__all__ = ["MODES", "DEFAULT_MODE", "available", "config", "is_structured", "normalize"]
