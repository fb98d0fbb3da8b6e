"""Authentication endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import RedirectResponse

from pocket_money.dependencies import (
    get_authenticated_user,
    get_db_client,
    get_request_auth_client,
)
from pocket_money.session import ROLE_KID, ROLE_PARENT, fetch_profile
from supabase import Client

router = APIRouter()
logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login"
ACCESS_TOKEN_COOKIE = "sb-access-token"
SESSION_COOKIES = (ACCESS_TOKEN_COOKIE, "sb-refresh-token")


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _local_path(candidate: str) -> str:
    """Return ``candidate`` if it is a same-site path, else ``/``."""
    if candidate.startswith("/") and not candidate.startswith(("//", "/\\")):
        return candidate
    return "/"


@router.get("/callback")
def auth_callback(
    code: str | None = Query(default=None),
    next_path: str = Query(default="/", alias="next"),
    client: Client = Depends(get_request_auth_client),
) -> RedirectResponse:
    """Exchange an OAuth code for a session and send the user to their home page."""
    if not code:
        return _redirect(f"{LOGIN_PATH}?error=No authentication code provided")

    try:
        response = client.auth.exchange_code_for_session({"auth_code": code})
    except Exception:
        logger.exception("Auth callback error")
        return _redirect(f"{LOGIN_PATH}?error=Authentication failed")

    if not response.session or not response.user:
        return _redirect(f"{LOGIN_PATH}?error=Authentication failed")

    # The client now carries this user's session, so the lookup runs under RLS.
    profile = fetch_profile(client, str(response.user.id))
    role = profile.get("role") if profile else None
    if role == ROLE_PARENT:
        return _redirect("/parent")
    if role == ROLE_KID:
        return _redirect("/kid")
    return _redirect(_local_path(next_path))


def _presented_token(request: Request, authorization: str | None) -> str | None:
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1] or None
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


@router.post("/logout")
def auth_logout(
    request: Request,
    authorization: str | None = Header(None),
    admin_client: Client = Depends(get_db_client),
) -> RedirectResponse:
    """Revoke the caller's own token, if any, and clear session cookies."""
    token = _presented_token(request, authorization)
    if token:
        try:
            admin_client.auth.admin.sign_out(token)
        except Exception:
            # Local cookies are cleared either way.
            logger.exception("Logout error")

    response = _redirect(f"{LOGIN_PATH}?message=Successfully logged out")
    for cookie in SESSION_COOKIES:
        response.delete_cookie(cookie, path="/")
    return response


@router.get("/logout")
def auth_logout_link(
    request: Request,
    authorization: str | None = Header(None),
    admin_client: Client = Depends(get_db_client),
) -> RedirectResponse:
    """Allow plain logout links."""
    return auth_logout(request, authorization, admin_client)


@router.get("/session")
def auth_session(user: Any = Depends(get_authenticated_user)) -> dict:
    """Return the currently authenticated user."""
    return {"user": user}
