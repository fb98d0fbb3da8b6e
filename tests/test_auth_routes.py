"""Auth callback, logout and session endpoint tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from urllib.parse import unquote

import pytest
from fastapi.testclient import TestClient

from pocket_money.dependencies import get_auth_client, get_db_client, get_request_auth_client
from pocket_money.main import app


class FakeAuth:
    """Mimics gotrue: a successful code exchange stores the session on the client."""

    def __init__(self, role: str | None = None, fail: bool = False) -> None:
        self.role = role
        self.fail = fail
        self.session: SimpleNamespace | None = None

    def exchange_code_for_session(self, params: dict[str, Any]) -> SimpleNamespace:
        if self.fail:
            raise RuntimeError("invalid flow state")
        self.session = SimpleNamespace(access_token=f"token-for-{params['auth_code']}")
        user = SimpleNamespace(id="user-1")
        return SimpleNamespace(session=self.session, user=user)

    def get_user(self, token: str) -> SimpleNamespace | None:
        if token != "good":
            raise RuntimeError("bad jwt")
        return SimpleNamespace(user={"id": "user-1", "email": "parent@example.com"})


class FakeAdminAuth:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.revoked: list[str] = []

    def sign_out(self, jwt: str) -> None:
        if self.fail:
            raise RuntimeError("network down")
        self.revoked.append(jwt)


class FakeQuery:
    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows

    def __getattr__(self, _: str):
        return lambda *args, **kwargs: self

    def execute(self) -> SimpleNamespace:
        return SimpleNamespace(data=self.rows)


class FakeClient:
    def __init__(self, role: str | None = None, fail: bool = False) -> None:
        self.auth = FakeAuth(role=role, fail=fail)
        self.auth.admin = FakeAdminAuth(fail=fail)

    def table(self, _: str) -> FakeQuery:
        rows = [{"id": "user-1", "role": self.auth.role}] if self.auth.role else []
        return FakeQuery(rows)


@pytest.fixture
def auth_client(client: TestClient):
    """Install fake Supabase clients; returns the shared and admin fakes."""
    shared = FakeClient()
    admin = FakeClient()
    created: list[FakeClient] = []

    def install(role: str | None = None, fail: bool = False) -> TestClient:
        def per_request() -> FakeClient:
            created.append(FakeClient(role=role, fail=fail))
            return created[-1]

        admin.auth.admin.fail = fail
        app.dependency_overrides[get_auth_client] = lambda: shared
        app.dependency_overrides[get_request_auth_client] = per_request
        app.dependency_overrides[get_db_client] = lambda: admin
        return client

    install.shared = shared
    install.admin = admin
    install.created = created
    return install


@pytest.mark.parametrize(
    ("role", "location"),
    [("parent", "/parent"), ("kid", "/kid"), (None, "/welcome")],
)
def test_callback_redirects_by_role(auth_client, role: str | None, location: str) -> None:
    """Parents and kids land on their own pages; others go to ``next``."""
    client = auth_client(role=role)

    response = client.get(
        "/auth/callback",
        params={"code": "abc", "next": "/welcome"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert unquote(response.headers["location"]) == location


@pytest.mark.parametrize(
    "target",
    ["https://evil.example/", "//evil.example", "/\\evil.example", "welcome"],
)
def test_callback_ignores_offsite_next(auth_client, target: str) -> None:
    """Only same-site paths are accepted as the post-login destination."""
    client = auth_client()

    response = client.get(
        "/auth/callback",
        params={"code": "abc", "next": target},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_callback_session_stays_on_request_client(auth_client) -> None:
    """Each exchange runs on its own client; the shared client never holds a session."""
    client = auth_client(role="parent")

    client.get("/auth/callback", params={"code": "alice"}, follow_redirects=False)
    client.get("/auth/callback", params={"code": "bob"}, follow_redirects=False)

    first, second = auth_client.created
    assert first is not second
    assert first.auth.session.access_token == "token-for-alice"
    assert second.auth.session.access_token == "token-for-bob"
    assert auth_client.shared.auth.session is None


def test_callback_without_code(auth_client) -> None:
    """Missing code sends the user back to login."""
    client = auth_client()

    response = client.get("/auth/callback", follow_redirects=False)

    assert response.status_code == 303
    location = unquote(response.headers["location"])
    assert location == "/auth/login?error=No authentication code provided"


def test_callback_exchange_failure(auth_client) -> None:
    """Auth errors redirect instead of surfacing a 500."""
    client = auth_client(fail=True)

    response = client.get("/auth/callback", params={"code": "abc"}, follow_redirects=False)

    assert response.status_code == 303
    assert unquote(response.headers["location"]) == "/auth/login?error=Authentication failed"


@pytest.mark.parametrize("fail", [False, True])
def test_logout_clears_cookies_and_redirects(auth_client, fail: bool) -> None:
    """Logout always clears cookies, even if revoking the token fails."""
    client = auth_client(fail=fail)

    response = client.post(
        "/auth/logout",
        headers={"Authorization": "Bearer token-a"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert unquote(response.headers["location"]) == "/auth/login?message=Successfully logged out"
    cookies = response.headers.get_list("set-cookie")
    assert any(cookie.startswith("sb-access-token=") for cookie in cookies)
    assert any(cookie.startswith("sb-refresh-token=") for cookie in cookies)


def test_anonymous_logout_revokes_nothing(auth_client) -> None:
    """A logout without credentials cannot end anyone else's session."""
    client = auth_client(role="parent")
    client.get("/auth/callback", params={"code": "alice"}, follow_redirects=False)

    response = client.get("/auth/logout", follow_redirects=False)

    assert response.status_code == 303
    assert auth_client.admin.auth.admin.revoked == []
    assert auth_client.created[0].auth.session.access_token == "token-for-alice"


def test_logout_revokes_only_presented_token(auth_client) -> None:
    """Bearer header or session cookie identifies the token to revoke."""
    client = auth_client()

    client.post(
        "/auth/logout",
        headers={"Authorization": "Bearer token-a"},
        follow_redirects=False,
    )
    client.cookies.set("sb-access-token", "token-b")
    client.get("/auth/logout", follow_redirects=False)

    assert auth_client.admin.auth.admin.revoked == ["token-a", "token-b"]


def test_session_requires_bearer_token(auth_client) -> None:
    """Valid tokens return the user; anything else is a 401."""
    client = auth_client()

    assert client.get("/auth/session").status_code == 401
    assert (
        client.get("/auth/session", headers={"Authorization": "Bearer bad"}).status_code == 401
    )

    response = client.get("/auth/session", headers={"Authorization": "Bearer good"})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == "user-1"
