# backend/tests/test_mood_classifier.py
from __future__ import annotations

import os
import sys

THIS_DIR = os.path.dirname(__file__)
PKG_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PKG_ROOT not in sys.path:
    sys.path.insert(0, PKG_ROOT)

import pytest

from moodmate.domain.mood.classifier import (
    NEGATIVE_KEYWORDS,
    POSITIVE_KEYWORDS,
    classify,
    keyword_hits,
    sentiment_score,
)
from moodmate.schemas.chat import ChatTurn

LABELS = {"positive", "neutral", "negative"}


def _fixed(score: float):
    return lambda _text: score


def test_keyword_list_sizes():
    assert len(NEGATIVE_KEYWORDS) == 28
    assert len(POSITIVE_KEYWORDS) == 21


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "hello there",
    "I feel so lonely today",
    "What a wonderful, happy day!",
    "ok.",
    "🙂🙂🙂",
    "x" * 5000,
])
def test_always_returns_a_label(text):
    assert classify(text, []) in LABELS


def test_none_inputs_are_neutral():
    assert classify(None, None) == "neutral"  # type: ignore[arg-type]


def test_lonely_is_negative():
    assert classify("I feel so lonely today", []) == "negative"


def test_negative_keyword_beats_positive_score():
    assert classify("I feel so lonely today", [], scorer=_fixed(25.0)) == "negative"


def test_positive_keyword_beats_negative_score():
    assert classify("I'm grateful for today", [], scorer=_fixed(-25.0)) == "positive"


class TestBothKeywordClasses:
    """Both keyword classes present -> the numeric score decides."""

    MSG = "I'm grateful but also really lonely"

    def test_keywords_detected_on_both_sides(self):
        neg, pos = keyword_hits(self.MSG)
        assert neg == ["lonely"]
        assert pos == ["grateful"]

    def test_high_score_is_positive(self):
        assert classify(self.MSG, [], scorer=_fixed(3.0)) == "positive"

    def test_low_score_is_negative(self):
        assert classify(self.MSG, [], scorer=_fixed(-3.0)) == "negative"

    @pytest.mark.parametrize("score", [-1.0, 0.0, 1.0])
    def test_small_score_is_neutral(self, score):
        assert classify(self.MSG, [], scorer=_fixed(score)) == "neutral"

    def test_lexicon_positive(self):
        msg = "I'm grateful but also lonely, yet today was wonderful, amazing and happy"
        assert classify(msg, []) == "positive"

    def test_lexicon_negative(self):
        msg = "I'm grateful but also lonely, miserable, hopeless and awful"
        assert classify(msg, []) == "negative"


def test_neither_keyword_class_uses_score():
    assert classify("the meeting is at noon", [], scorer=_fixed(4.0)) == "positive"
    assert classify("the meeting is at noon", [], scorer=_fixed(-4.0)) == "negative"
    assert classify("the meeting is at noon", [], scorer=_fixed(0.5)) == "neutral"


def test_keywords_match_whole_words_only():
    neg, pos = keyword_hits("The saddle was goodish")
    assert neg == [] and pos == []


def test_keywords_only_read_the_message_not_history():
    history = [ChatTurn(role="user", content="I am so lonely")]
    assert classify("the meeting is at noon", history, scorer=_fixed(0.0)) == "neutral"


def test_score_covers_message_and_last_five_turns():
    seen = []

    def scorer(text):
        seen.append(text)
        return 0.0

    history = [ChatTurn(role="user", content=f"turn{i}") for i in range(8)]
    classify("now", history, scorer=scorer)
    text = seen[0]
    assert text.startswith("now")
    assert "turn2" not in text
    for i in range(3, 8):
        assert f"turn{i}" in text


def test_history_accepts_log_rows():
    seen = []
    classify("hi", [{"user_message": "from the log"}], scorer=lambda t: seen.append(t) or 0.0)
    assert "from the log" in seen[0]


def test_scorer_failure_degrades_to_neutral():
    def boom(_text):
        raise RuntimeError("lexicon missing")

    assert classify("the meeting is at noon", [], scorer=boom) == "neutral"


def test_sentiment_score_sign_and_negation():
    assert sentiment_score("happy") > 0
    assert sentiment_score("not happy") < 0
    assert sentiment_score("terrible") < 0
    assert sentiment_score("") == 0.0
