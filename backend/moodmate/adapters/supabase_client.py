# backend/moodmate/adapters/supabase_client.py
from __future__ import annotations

import threading
from typing import Optional

from supabase import Client, create_client

try:  # supabase>=2.6
    from supabase.lib.client_options import SyncClientOptions as ClientOptions  # type: ignore
except ImportError:  # pragma: no cover
    ClientOptions = None  # type: ignore

from moodmate.core.config import get_settings
from moodmate.core.errors import ConfigError

__all__ = ["supa", "supa_readonly", "supa_reset", "supa_ping"]

_client_lock = threading.Lock()
_client: Optional[Client] = None

_ro_client_lock = threading.Lock()
_ro_client: Optional[Client] = None


def _build_client(url: str, key: str, *, timeout_s: float, schema: str) -> Client:
    """
    Build a Supabase Client with timeouts when the installed SDK supports
    ClientOptions; otherwise the SDK defaults apply.
    """
    if ClientOptions is not None:
        opts = ClientOptions(
            postgrest_client_timeout=timeout_s,
            storage_client_timeout=timeout_s,
            headers={"X-Client-Info": "moodmate-backend"},
            schema=schema or "public",
        )
        return create_client(url, key, options=opts)
    return create_client(url, key)


def _url_and_key(*, readonly: bool) -> tuple[str, str]:
    s = get_settings()
    url = str(s.SUPABASE_URL or "").rstrip("/")
    key = (s.SUPABASE_ANON_KEY if readonly else s.SUPABASE_SERVICE_ROLE) or ""
    if not url or not key:
        kind = "SUPABASE_URL/ANON_KEY" if readonly else "SUPABASE_URL/SERVICE_ROLE"
        raise ConfigError(f"Missing Supabase settings for {'read-only' if readonly else 'service'} client ({kind})")
    return url, key


def supa() -> Client:
    """
    Thread-safe singleton Supabase client using the service-role key
    (server-side writes to the chat log).
    """
    global _client
    if _client is not None:
        return _client
    with _client_lock:
        if _client is None:
            s = get_settings()
            url, key = _url_and_key(readonly=False)
            _client = _build_client(url, key, timeout_s=s.SUPABASE_TIMEOUT_S, schema=s.SUPABASE_SCHEMA)
    return _client


def supa_readonly() -> Client:
    """Read-only singleton using the anon key (health checks)."""
    global _ro_client
    if _ro_client is not None:
        return _ro_client
    with _ro_client_lock:
        if _ro_client is None:
            s = get_settings()
            url, key = _url_and_key(readonly=True)
            _ro_client = _build_client(url, key, timeout_s=s.SUPABASE_TIMEOUT_S, schema=s.SUPABASE_SCHEMA)
    return _ro_client


def supa_reset() -> None:
    """Reset cached clients (tests, key rotation)."""
    global _client, _ro_client
    with _client_lock:
        _client = None
    with _ro_client_lock:
        _ro_client = None


def supa_ping(readonly: bool = True, table: Optional[str] = None) -> bool:
    """
    Trivial select on the chat log table. True when the round-trip works.
    """
    try:
        client = supa_readonly() if readonly else supa()
        client.table(table or get_settings().CHATLOG_TABLE).select("*").limit(1).execute()
        return True
    except Exception:
        return False
