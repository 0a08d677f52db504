# backend/moodmate/domain/external/service.py
from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional, Union

import httpx

from moodmate.adapters.news_client import fetch_trending_news
from moodmate.adapters.spotify_client import SpotifyClient
from moodmate.core.config import Settings, get_settings
from moodmate.core.errors import MoodMateError
from moodmate.schemas.chat import MusicContent, NewsContent

log = logging.getLogger("moodmate.external")

__all__ = ["DEFAULT_GENRES", "MOOD_GENRES", "detect_trigger", "genres_for_mood", "ExternalContentService"]

NEWS_TRIGGERS = ("news", "bored")
MUSIC_TRIGGERS = ("music", "song")
DEFAULT_GENRES = ["pop", "chill", "rock", "jazz", "classical"]
FALLBACK_GENRE = "chill"

# seed genres per mood for the playlist endpoint; first entry is the search term
MOOD_GENRES: Dict[str, List[str]] = {
    "happy": ["pop", "dance", "party"],
    "sad": ["acoustic", "piano", "ambient"],
    "anxious": ["ambient", "chill", "study"],
    "angry": ["rock", "metal", "punk"],
    "calm": ["ambient", "classical", "meditation"],
    "energetic": ["edm", "workout", "electronic"],
}
FALLBACK_MOOD = "calm"
# detected chat moods reuse the closest seed set
_MOOD_ALIASES = {"positive": "happy", "negative": "sad", "neutral": "calm"}

Trigger = Literal["news", "music"]


def detect_trigger(message: str, *, music_enabled: bool = True) -> Optional[Trigger]:
    """Substring test on the lowercased raw message; music wins over news."""
    t = (message or "").lower()
    if music_enabled and any(k in t for k in MUSIC_TRIGGERS):
        return "music"
    if any(k in t for k in NEWS_TRIGGERS):
        return "news"
    return None


def _genre_for(message: str) -> str:
    t = (message or "").lower()
    for g in DEFAULT_GENRES:
        if g in t:
            return g
    return FALLBACK_GENRE


def genres_for_mood(mood: Optional[str]) -> List[str]:
    """Seed genres for a mood name; unknown or empty moods get the calm set."""
    m = (mood or "").strip().lower()
    m = _MOOD_ALIASES.get(m, m)
    return list(MOOD_GENRES.get(m) or MOOD_GENRES[FALLBACK_MOOD])


class ExternalContentService:
    """
    Optional enrichment for a reply. Always returns a well-formed payload
    (possibly carrying `error`) or None; never raises.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    async def news(self) -> NewsContent:
        s = self.settings
        return await fetch_trending_news(s.NEWSAPI_KEY, timeout_s=s.NEWS_TIMEOUT_S, transport=self._transport)

    async def music(
        self,
        message: str = "",
        genre: Optional[str] = None,
        mood: Optional[str] = None,
    ) -> MusicContent:
        """
        Playlists for an explicit genre, else for a mood's first seed genre,
        else for a genre named in the message.
        """
        s = self.settings
        genres = list(DEFAULT_GENRES)
        if not genre and mood:
            genres = genres_for_mood(mood)
            genre = genres[0]
        client = SpotifyClient(
            s.SPOTIFY_CLIENT_ID,
            s.SPOTIFY_CLIENT_SECRET,
            timeout_s=s.NEWS_TIMEOUT_S,
            transport=self._transport,
        )
        try:
            playlists = await client.search_playlists(genre or _genre_for(message))
        except MoodMateError as e:
            log.warning("spotify lookup failed: %s", e)
            return MusicContent(genres=genres, error=str(e))
        return MusicContent(genres=genres, playlists=playlists)

    async def maybe_fetch(self, message: str) -> Optional[Union[NewsContent, MusicContent]]:
        trigger = detect_trigger(message, music_enabled=self.settings.MUSIC_TRIGGER_ENABLED)
        if trigger is None:
            return None
        try:
            if trigger == "music":
                return await self.music(message)
            return await self.news()
        except Exception as e:
            # enrichment must never take the reply down with it
            log.exception("external content fetch crashed: %s", e)
            if trigger == "music":
                return MusicContent(genres=list(DEFAULT_GENRES), error="Music lookup failed")
            return NewsContent(error="NewsAPI error")
