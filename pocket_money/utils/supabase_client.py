"""Supabase client factories (anon + service-role)."""

from functools import lru_cache

import httpx
from supabase.lib.client_options import SyncClientOptions

from pocket_money.config import settings
from supabase import Client, create_client


def _create(key: str) -> Client:
    """Build a sync client sharing the configured timeout and pool limits."""
    timeout_seconds = max(1, settings.supabase_postgrest_timeout_seconds)
    max_connections = max(5, settings.supabase_http_max_connections)
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=min(
            max_connections, max(2, settings.supabase_http_max_keepalive_connections)
        ),
    )
    options = SyncClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=timeout_seconds,
        storage_client_timeout=timeout_seconds,
        function_client_timeout=min(timeout_seconds, 30),
        httpx_client=httpx.Client(timeout=httpx.Timeout(timeout_seconds), limits=limits),
    )
    return create_client(settings.supabase_url, key, options=options)


def create_anon_client() -> Client:
    """Return a fresh anon-key client.

    Code exchanges and sign-ins store the resulting session on the client, so
    they must run on a client owned by the current request.
    """
    return _create(settings.supabase_anon_key)


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Return the shared anon-key client (RLS enforced).

    Only stateless calls such as ``auth.get_user(token)`` belong here; never
    store a session on it.
    """
    return create_anon_client()


@lru_cache(maxsize=1)
def get_service_client() -> Client:
    """Return the service-role Supabase client (bypasses RLS).

    Use this only behind authenticated routes, for scheduled jobs and for
    admin operations.
    """
    return _create(settings.supabase_service_key)
