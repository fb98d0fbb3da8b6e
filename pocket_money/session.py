"""Signed-in user and profile state with explicit change notification."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from postgrest import APIError

from pocket_money.store.supabase_store import NO_ROWS_CODE
from pocket_money.utils.errors import BackendError
from supabase import Client

PROFILES_TABLE = "profiles"
ROLE_PARENT = "parent"
ROLE_KID = "kid"
logger = logging.getLogger(__name__)

Listener = Callable[["SessionContext"], None]


@dataclass
class AuthResult:
    """Outcome of an auth action; exactly one of the fields is set."""

    data: Any = None
    error: Exception | None = None


def fetch_profile(client: Client, user_id: str) -> dict[str, Any] | None:
    """Return the ``profiles`` row for ``user_id`` or None when it is missing."""
    try:
        rows = (
            client.table(PROFILES_TABLE).select("*").eq("id", user_id).limit(1).execute().data
        )
    except APIError as exc:
        if getattr(exc, "code", None) == NO_ROWS_CODE:
            return None
        message = getattr(exc, "message", None) or "Database request failed"
        raise BackendError(str(message), backend_code=getattr(exc, "code", None)) from exc
    return rows[0] if rows else None


class SessionContext:
    """Holds the current user and profile for one client.

    Components receive the context explicitly and ``subscribe`` to be told
    about changes instead of reading module-level state.
    """

    def __init__(self, client: Client) -> None:
        self.client = client
        self._user: Any = None
        self._profile: dict[str, Any] | None = None
        self._loading = True
        self._listeners: list[Listener] = []
        self._auth_subscription: Any = None

    @property
    def user(self) -> Any:
        return self._user

    @property
    def profile(self) -> dict[str, Any] | None:
        return self._profile

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_parent(self) -> bool:
        return bool(self._profile and self._profile.get("role") == ROLE_PARENT)

    @property
    def is_kid(self) -> bool:
        return bool(self._profile and self._profile.get("role") == ROLE_KID)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_user(self, user: Any) -> None:
        self._user = user
        self._notify()

    def set_profile(self, profile: dict[str, Any] | None) -> None:
        self._profile = profile
        self._notify()

    def set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._notify()

    def initialize(self) -> None:
        """Load the current session and follow later auth state changes."""
        self.set_loading(True)
        try:
            session = self.client.auth.get_session()
            if session is not None and session.user is not None:
                self.set_user(session.user)
                self.load_profile(str(session.user.id))

            if self._auth_subscription is None:
                self._auth_subscription = self.client.auth.on_auth_state_change(
                    self._on_auth_state_change
                )
        finally:
            self.set_loading(False)

    def close(self) -> None:
        """Stop following auth state changes."""
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None

    def load_profile(self, user_id: str) -> None:
        """Populate the profile; a missing row is expected for new sign-ups."""
        profile = fetch_profile(self.client, user_id)
        if profile is None:
            logger.warning("Profile not found for user %s", user_id)
            return
        self.set_profile(profile)

    def sign_up(self, email: str, password: str, full_name: str, role: str) -> AuthResult:
        return self._run_auth_action(
            "Sign up",
            lambda: self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": full_name, "role": role}},
                }
            ),
        )

    def sign_in(self, email: str, password: str) -> AuthResult:
        return self._run_auth_action(
            "Sign in",
            lambda: self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            ),
        )

    def sign_out(self) -> AuthResult:
        result = self._run_auth_action("Sign out", self.client.auth.sign_out)
        if result.error is None:
            self._user = None
            self._profile = None
            self._notify()
        return result

    def _run_auth_action(self, label: str, action: Callable[[], Any]) -> AuthResult:
        self.set_loading(True)
        try:
            return AuthResult(data=action())
        except Exception as exc:
            logger.error("%s failed: %s", label, exc)
            return AuthResult(error=exc)
        finally:
            self.set_loading(False)

    def _on_auth_state_change(self, event: str, session: Any) -> None:
        logger.debug("Auth state change: %s", event)
        if session is not None and getattr(session, "user", None) is not None:
            self.set_user(session.user)
            self.load_profile(str(session.user.id))
        else:
            self._user = None
            self._profile = None
            self._notify()
        self.set_loading(False)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session listener %r failed", listener)
