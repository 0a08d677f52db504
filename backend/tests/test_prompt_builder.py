from __future__ import annotations

import os
import sys

THIS_DIR = os.path.dirname(__file__)
PKG_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PKG_ROOT not in sys.path:
    sys.path.insert(0, PKG_ROOT)

import pytest

from moodmate.domain.prompts.builder import build_prompt, render_transcript
from moodmate.schemas.chat import ChatTurn

HISTORY = [
    ChatTurn(role="user", content="Work has been a lot lately."),
    ChatTurn(role="bot", content="That sounds tiring. What part weighs on you most?"),
    ChatTurn(role="user", content="The deadlines, mostly."),
]


def test_default_prompt_has_mood_history_and_message():
    p = build_prompt("I can't sleep", "negative", HISTORY, "default")
    assert "Current user mood detected: negative" in p
    assert "user: The deadlines, mostly." in p
    assert "bot: That sounds tiring." in p
    assert 'User\'s current message: "I can\'t sleep"' in p
    assert "under 150 words" in p
    assert "JSON" not in p


def test_mood_check_prompt_asks_for_fixed_json_keys():
    p = build_prompt("", "neutral", HISTORY, "mood_check")
    for key in ('"acknowledgement"', '"questions"', '"coping"', '"summary"'):
        assert key in p
    assert "ONLY a JSON object" in p
    assert "exactly 3" in p and "exactly 2" in p


def test_affirmations_prompt_asks_for_json_array():
    p = build_prompt("", "positive", HISTORY, "affirmations")
    assert "ONLY a JSON array" in p
    assert "3 to 5" in p
    assert "6 to 12 words" in p


@pytest.mark.parametrize("mode", ["default", "mood_check", "affirmations"])
def test_empty_message_drops_current_message_line(mode):
    p = build_prompt("", "neutral", HISTORY, mode)
    assert "current message" not in p.lower()
    assert '""' not in p
    assert "work from the recent conversation" in p


def test_whitespace_only_message_counts_as_empty():
    p = build_prompt("   \n ", "neutral", [], "mood_check")
    assert "current message" not in p.lower()


def test_unknown_mode_falls_back_to_default():
    assert build_prompt("hi", "neutral", [], "poetry") == build_prompt("hi", "neutral", [], "default")


def test_empty_history_placeholder():
    p = build_prompt("hi", "neutral", [], "default")
    assert "(no earlier messages)" in p


def test_transcript_keeps_last_turns_only():
    turns = [ChatTurn(role="user", content=f"message {i}") for i in range(7)]
    out = render_transcript(turns, limit=5)
    assert "message 1" not in out
    assert out.splitlines() == [f"user: message {i}" for i in range(2, 7)]


def test_transcript_squashes_whitespace_and_truncates():
    long = "word " * 200
    out = render_transcript([ChatTurn(role="user", content="a\n\n  b"), ChatTurn(role="bot", content=long)])
    lines = out.splitlines()
    assert lines[0] == "user: a b"
    assert len(lines[1]) < 420
    assert lines[1].endswith("…")
