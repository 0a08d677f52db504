from .chatlog import ChatLogRecord, ChatLogSink
from .aggregations import summarize_moods, mood_summary, recent_exchanges

__all__ = [
    "ChatLogRecord",
    "ChatLogSink",
    "summarize_moods",
    "mood_summary",
    "recent_exchanges",
]
