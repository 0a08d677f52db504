# backend/moodmate/domain/mood/classifier.py
"""
Mood classifier: keyword evidence first, lexical sentiment score second.

Public API:
- classify(message, history, *, window=5, scorer=None) -> MoodLabel
- sentiment_score(text) -> float
- keyword_hits(message) -> (negative_hits, positive_hits)
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from moodmate.schemas.chat import ChatTurn, MoodLabel

log = logging.getLogger("moodmate.mood")

__all__ = [
    "NEGATIVE_KEYWORDS",
    "POSITIVE_KEYWORDS",
    "classify",
    "sentiment_score",
    "keyword_hits",
]

NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "lonely", "alone", "sad", "depressed", "hopeless", "anxious", "anxiety",
    "overwhelmed", "stressed", "worried", "scared", "afraid", "tired",
    "exhausted", "empty", "worthless", "helpless", "miserable", "upset",
    "angry", "frustrated", "hurt", "crying", "cry", "broken", "lost",
    "panic", "nervous",
)

POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "happy", "grateful", "thankful", "hopeful", "excited", "joyful", "calm",
    "peaceful", "relaxed", "proud", "confident", "motivated", "optimistic",
    "content", "glad", "blessed", "loved", "good", "great", "amazing", "better",
)

# thresholds on the summed lexical score
POSITIVE_THRESHOLD = 1.0
NEGATIVE_THRESHOLD = -1.0

_TOKEN_RE = re.compile(r"[a-z']+")
_NEGATORS = {
    "not", "no", "never", "dont", "don't", "isnt", "isn't", "wasnt", "wasn't",
    "cant", "can't", "cannot", "wont", "won't", "aint", "ain't", "nothing",
    "neither", "nor", "without", "didnt", "didn't", "doesnt", "doesn't",
}


def _compile(words: Iterable[str]) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")


_NEG_RX = _compile(NEGATIVE_KEYWORDS)
_POS_RX = _compile(POSITIVE_KEYWORDS)


@lru_cache(maxsize=1)
def _lexicon() -> Dict[str, float]:
    from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

    return dict(SentimentIntensityAnalyzer().lexicon)


def sentiment_score(text: str) -> float:
    """
    Sum of word valences (VADER lexicon, roughly -4..+4 per word).
    A word directly preceded by a negator counts with flipped sign.
    """
    lex = _lexicon()
    score = 0.0
    prev = ""
    for tok in _TOKEN_RE.findall((text or "").lower()):
        val = lex.get(tok)
        if val is not None:
            score += -val if prev in _NEGATORS else val
        prev = tok
    return score


def keyword_hits(message: str) -> Tuple[List[str], List[str]]:
    t = (message or "").lower()
    return _NEG_RX.findall(t), _POS_RX.findall(t)


def _turn_text(turn: object) -> str:
    if isinstance(turn, ChatTurn):
        return turn.content
    if isinstance(turn, dict):
        return str(turn.get("content") or turn.get("user_message") or turn.get("bot_response") or "")
    return str(turn or "")


def classify(
    message: str,
    history: Optional[Sequence[object]] = None,
    *,
    window: int = 5,
    scorer: Optional[Callable[[str], float]] = None,
) -> MoodLabel:
    """
    Decide positive / neutral / negative for a message.

    Keyword evidence on the raw message wins when only one class is present;
    otherwise the lexical score of message + last `window` turns decides.
    """
    recent = list(history or [])[-window:] if window > 0 else []
    text = " ".join([message or ""] + [_turn_text(t) for t in recent])

    try:
        score = (scorer or sentiment_score)(text)
    except Exception as e:
        log.warning("sentiment scorer failed, treating as 0: %s", e)
        score = 0.0

    neg, pos = keyword_hits(message)
    if neg and not pos:
        return "negative"
    if pos and not neg:
        return "positive"
    if score > POSITIVE_THRESHOLD:
        return "positive"
    if score < NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"
