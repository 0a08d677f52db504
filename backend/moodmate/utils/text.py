from __future__ import annotations

import re

__all__ = [
    "truncate",
    "squash_ws",
    "strip_control",
]

_CTRL_RE = re.compile(r"[\x00-\x08\x0b-\x0c\x0e-\x1f]")
_WS_RE = re.compile(r"\s+")


def truncate(text: str, max_len: int, ellipsis: str = "…") -> str:
    if not text or max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    cut = max_len - len(ellipsis)
    return (text[:cut].rsplit(" ", 1)[0] if cut > 4 else text[:cut]) + ellipsis


def squash_ws(s: str) -> str:
    """Collapse whitespace to single spaces; trim ends."""
    return _WS_RE.sub(" ", (s or "")).strip()


def strip_control(s: str) -> str:
    """Remove non-printing control chars (keeps tabs/newlines)."""
    return _CTRL_RE.sub("", s or "")
