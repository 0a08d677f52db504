# backend/moodmate/adapters/news_client.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from moodmate.schemas.chat import Article, NewsContent

log = logging.getLogger("moodmate.news")

NEWSAPI_URL = "https://newsapi.org/v2/top-headlines"
DEFAULT_COUNTRY = "us"
DEFAULT_PAGE_SIZE = 6

__all__ = ["fetch_trending_news", "normalize_articles"]


def normalize_articles(raw: Any) -> List[Article]:
    """
    Keep entries with both title and url; flatten `source.name` -> `source`
    and rename `urlToImage` -> `image`.
    """
    out: List[Article] = []
    for a in raw or []:
        if not isinstance(a, dict) or not a.get("title") or not a.get("url"):
            continue
        source = a.get("source")
        out.append(
            Article(
                title=a["title"],
                url=a["url"],
                source=source.get("name") if isinstance(source, dict) else None,
                description=a.get("description"),
                image=a.get("urlToImage"),
            )
        )
    return out


async def fetch_trending_news(
    api_key: Optional[str],
    *,
    timeout_s: float = 8.0,
    country: str = DEFAULT_COUNTRY,
    page_size: int = DEFAULT_PAGE_SIZE,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> NewsContent:
    """
    Top headlines from NewsAPI. Never raises: failures come back as
    NewsContent(error=...).
    """
    if not api_key:
        return NewsContent(error="Missing NewsAPI key")

    params: Dict[str, Any] = {"country": country, "pageSize": page_size, "apiKey": api_key}
    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            resp = await client.get(NEWSAPI_URL, params=params)
        if not resp.is_success:
            log.warning("newsapi status=%s", resp.status_code)
            return NewsContent(error="NewsAPI error")
        data = resp.json() or {}
    except (httpx.HTTPError, ValueError) as e:
        log.warning("newsapi request failed: %s", e)
        return NewsContent(error="NewsAPI error")

    return NewsContent(articles=normalize_articles(data.get("articles")))
