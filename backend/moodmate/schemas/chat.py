from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

MoodLabel = Literal["positive", "neutral", "negative"]
ModeId = Literal["default", "mood_check", "affirmations"]


class ChatTurn(BaseModel):
    role: Literal["user", "bot"] = "user"
    content: str = ""
    timestamp: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_log_rows(cls, data: Any) -> Any:
        # dashboard replays ChatLog rows ({user_message, bot_response}) as history
        if not isinstance(data, dict):
            return data
        out = dict(data)
        if not out.get("content"):
            out["content"] = out.get("user_message") or out.get("bot_response") or ""
        role = out.get("role")
        if role == "assistant":
            out["role"] = "bot"
        elif role not in ("user", "bot"):
            only_bot = bool(out.get("bot_response")) and not out.get("user_message")
            out["role"] = "bot" if only_bot else "user"
        if out.get("timestamp") is None and out.get("created_at"):
            out["timestamp"] = out["created_at"]
        return out


class ChatIn(BaseModel):
    message: Optional[str] = None
    chatHistory: List[ChatTurn] = Field(default_factory=list)
    mode: Optional[str] = None


class ModeRequest(BaseModel):
    message: str = ""
    history: List[ChatTurn] = Field(default_factory=list)
    user_id: Optional[str] = None
    mode: ModeId = "default"


class Article(BaseModel):
    title: str
    url: str
    source: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class Playlist(BaseModel):
    id: str
    name: str
    url: Optional[str] = None
    image: Optional[str] = None


class NewsContent(BaseModel):
    type: Literal["news"] = "news"
    articles: List[Article] = Field(default_factory=list)
    error: Optional[str] = None


class MusicContent(BaseModel):
    type: Literal["spotify_genres"] = "spotify_genres"
    genres: List[str] = Field(default_factory=list)
    playlists: List[Playlist] = Field(default_factory=list)
    error: Optional[str] = None


ExternalContent = Annotated[Union[NewsContent, MusicContent], Field(discriminator="type")]


class BotReply(BaseModel):
    botResponse: str
    detectedMood: MoodLabel
    external: Optional[ExternalContent] = None


# HTTP response body is the reply itself
ChatOut = BotReply


class ModeInfo(BaseModel):
    id: str
    emoji: str
    name: str
    description: str


class MoodSummaryOut(BaseModel):
    total: int = 0
    distribution: dict[str, int] = Field(default_factory=dict)
    daily: dict[str, dict[str, int]] = Field(default_factory=dict)
    most_common: Optional[MoodLabel] = None
    active_days: int = 0
    avg_per_day: float = 0.0
    days: int = 30
