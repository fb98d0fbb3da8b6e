"""FastAPI dependency injection helpers."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Header

from pocket_money.services.factory import build_service
from pocket_money.services.pocket_money_service import PocketMoneyService
from pocket_money.session import ROLE_KID, ROLE_PARENT, fetch_profile
from pocket_money.utils.errors import ForbiddenError, UnauthorizedError
from pocket_money.utils.supabase_client import (
    create_anon_client,
    get_service_client,
    get_supabase_client,
)
from supabase import Client


def get_service() -> PocketMoneyService:
    """Return the pocket money service bound to the configured store."""
    return build_service()


def get_auth_client() -> Client:
    """Return the shared anon-key client used for token validation."""
    return get_supabase_client()


def get_request_auth_client() -> Client:
    """Return an anon-key client owned by the current request."""
    return create_anon_client()


def get_db_client() -> Client:
    """Return the privileged Supabase client used behind authenticated routes."""
    return get_service_client()


def get_authenticated_user(
    authorization: str = Header(None),
    client: Client = Depends(get_auth_client),
) -> Any:
    """Extract and validate a Supabase JWT from the Authorization header.

    Raises:
        UnauthorizedError: 401 if the header is missing, malformed, or
            the token cannot be validated.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")

    token = authorization.split(" ", 1)[1]
    try:
        response = client.auth.get_user(token)
        if not response or not response.user:
            raise UnauthorizedError("Invalid token")
        return response.user
    except UnauthorizedError:
        raise
    except Exception as exc:
        raise UnauthorizedError("Invalid or expired token") from exc


def get_current_user_id(user: Any) -> str:
    """Extract a stable user id string from the Supabase user object."""
    return str(user.id)


def _require_role(user: Any, client: Client, roles: tuple[str, ...]) -> Any:
    profile = fetch_profile(client, get_current_user_id(user))
    if not profile or profile.get("role") not in roles:
        raise ForbiddenError()
    return user


def get_parent_user(
    user: Any = Depends(get_authenticated_user),
    client: Client = Depends(get_db_client),
) -> Any:
    """Return the authenticated user if their profile role is ``parent``."""
    return _require_role(user, client, (ROLE_PARENT,))


def get_family_user(
    user: Any = Depends(get_authenticated_user),
    client: Client = Depends(get_db_client),
) -> Any:
    """Return the authenticated user if they are the parent or the kid."""
    return _require_role(user, client, (ROLE_PARENT, ROLE_KID))
