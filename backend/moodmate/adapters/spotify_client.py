# backend/moodmate/adapters/spotify_client.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from moodmate.core.errors import ConfigError, UpstreamError
from moodmate.schemas.chat import Playlist

log = logging.getLogger("moodmate.spotify")

TOKEN_URL = "https://accounts.spotify.com/api/token"
SEARCH_URL = "https://api.spotify.com/v1/search"

__all__ = ["SpotifyClient", "normalize_playlists"]


def normalize_playlists(raw: Any) -> List[Playlist]:
    out: List[Playlist] = []
    for p in raw or []:
        if not isinstance(p, dict) or not p.get("id") or not p.get("name"):
            continue
        images = p.get("images") or []
        out.append(
            Playlist(
                id=p["id"],
                name=p["name"],
                url=(p.get("external_urls") or {}).get("spotify"),
                image=images[0].get("url") if images and isinstance(images[0], dict) else None,
            )
        )
    return out


class SpotifyClient:
    """
    Client-credentials flow: one token exchange, then one search call.
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        *,
        timeout_s: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout_s = timeout_s
        self._transport = transport

    async def _token(self, client: httpx.AsyncClient) -> str:
        if not self.client_id or not self.client_secret:
            raise ConfigError("Missing Spotify credentials")
        resp = await client.post(
            TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
        )
        if not resp.is_success:
            raise UpstreamError("Spotify token exchange failed", status=resp.status_code)
        token = (resp.json() or {}).get("access_token")
        if not token:
            raise UpstreamError("Spotify token missing from response", status=resp.status_code)
        return token

    async def search_playlists(self, genre: str, limit: int = 8) -> List[Playlist]:
        """Raises ConfigError / UpstreamError; callers decide how to degrade."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                token = await self._token(client)
                resp = await client.get(
                    SEARCH_URL,
                    params={"q": genre, "type": "playlist", "limit": limit},
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Spotify request failed: {type(e).__name__}") from e
        if not resp.is_success:
            raise UpstreamError("Spotify API error", status=resp.status_code)
        try:
            data = resp.json() or {}
        except ValueError as e:
            raise UpstreamError("Spotify API returned non-JSON body") from e
        return normalize_playlists((data.get("playlists") or {}).get("items"))
