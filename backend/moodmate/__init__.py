"""MoodMate: mental-health companion chat backend."""

__version__ = "0.1.0"
