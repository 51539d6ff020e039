"""HTTP-level tests for the payment session + CSRF gate."""

import pytest
from fastapi import APIRouter, Depends, FastAPI
from fastapi.testclient import TestClient

from villatours.web.cookies import CSRF_COOKIE, SESSION_COOKIE, CookieSettings
from villatours.web.csrf import PaymentContextDep, payment_gate
from villatours.web.deps import get_app, get_csrf_gate
from villatours.web.error_handlers import register_error_handlers
from villatours.web.routers import payments_router


class StubApp:
    """Stands in for App on the routes that touch the session only."""

    def __init__(self) -> None:
        self.cleared: list[object] = []

    async def clear_order(self, session: object) -> None:
        self.cleared.append(session)


def set_cookie_headers(response) -> list[str]:
    return response.headers.get_list("set-cookie")


@pytest.fixture
def stub_app():
    return StubApp()


@pytest.fixture
def client(gate, stub_app):
    api = FastAPI()
    api.state.cookie_settings = CookieSettings(secure=False, domain=None, session_max_age=3600)
    api.dependency_overrides[get_csrf_gate] = lambda: gate
    api.dependency_overrides[get_app] = lambda: stub_app

    protected = APIRouter(dependencies=[Depends(payment_gate)])

    @protected.post("/some-protected-path")
    async def protected_endpoint(context: PaymentContextDep) -> dict[str, str]:
        return {"session": context.require_session().id}

    api.include_router(payments_router, prefix="/api/payments")
    api.include_router(protected, prefix="/api/payments")
    register_error_handlers(api)
    return TestClient(api, raise_server_exceptions=False)


def fetch_token(client) -> str:
    response = client.get("/api/payments/csrf-token")
    assert response.status_code == 200
    return response.json()["csrf_token"]


class TestCsrfTokenEndpoint:
    def test_fresh_session_gets_token(self, client, store):
        response = client.get("/api/payments/csrf-token")

        assert response.status_code == 200
        token = response.json()["csrf_token"]
        assert token
        assert [s.csrf_token for s in store.sessions.values()] == [token]
        assert response.cookies[CSRF_COOKIE] == token
        assert SESSION_COOKIE in response.cookies

    def test_session_cookie_attributes(self, client):
        response = client.get("/api/payments/csrf-token")

        session_header = next(h for h in set_cookie_headers(response) if h.startswith(f"{SESSION_COOKIE}="))
        assert "HttpOnly" in session_header
        assert "Max-Age=3600" in session_header
        assert "samesite=lax" in session_header.lower()

    def test_token_stable_across_requests(self, client):
        first = fetch_token(client)
        response = client.get("/api/payments/csrf-token")

        assert response.json()["csrf_token"] == first
        assert set_cookie_headers(response) == []

    def test_store_unavailable_returns_500(self, client, store):
        store.available = False

        response = client.get("/api/payments/csrf-token")

        assert response.status_code == 500
        assert response.json()["type"] == "session_unavailable"


class TestProtectedRoutes:
    def test_valid_header_token_reaches_handler(self, client):
        token = fetch_token(client)

        response = client.post("/api/payments/some-protected-path", headers={"X-CSRF-Token": token})

        assert response.status_code == 200

    def test_body_token_reaches_handler(self, client):
        token = fetch_token(client)

        response = client.post("/api/payments/some-protected-path", json={"_csrf": token})

        assert response.status_code == 200

    def test_form_body_token_reaches_handler(self, client):
        token = fetch_token(client)

        response = client.post("/api/payments/some-protected-path", data={"_csrf": token})

        assert response.status_code == 200

    def test_mismatched_token_rejected(self, client, store):
        fetch_token(client)
        (session,) = store.sessions.values()
        session.csrf_token = "xyz"

        response = client.post("/api/payments/some-protected-path", headers={"X-CSRF-Token": "abc"})

        assert response.status_code == 403
        assert response.json() == {"message": "Invalid or missing CSRF token", "type": "csrf_mismatch"}
        assert store.sessions[session.id].csrf_token == "xyz"

    def test_missing_token_rejected(self, client):
        fetch_token(client)

        response = client.post("/api/payments/some-protected-path")

        assert response.status_code == 403

    def test_no_session_rejected(self, client):
        response = client.post("/api/payments/some-protected-path", headers={"X-CSRF-Token": "abc"})

        assert response.status_code == 403


class TestExemptRoutes:
    def test_clear_order_without_token_or_cookie(self, client, stub_app):
        response = client.post("/api/payments/clear-order")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Order cleared"}
        assert len(stub_app.cleared) == 1

    def test_clear_order_ignores_wrong_token(self, client):
        fetch_token(client)

        response = client.post("/api/payments/clear-order", headers={"X-CSRF-Token": "wrong"})

        assert response.status_code == 200

    def test_clear_order_with_store_down_gets_no_session(self, client, store, stub_app):
        store.available = False

        response = client.post("/api/payments/clear-order")

        assert response.status_code == 200
        assert stub_app.cleared == [None]


class TestLogout:
    def test_logout_destroys_session_and_clears_cookies(self, client, store):
        fetch_token(client)
        (session_id,) = store.sessions

        response = client.post("/api/payments/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Session cleared"}
        assert session_id not in store.sessions
        cleared = {h.split("=", 1)[0] for h in set_cookie_headers(response) if "Max-Age=0" in h}
        assert cleared == {SESSION_COOKIE, CSRF_COOKIE}

    def test_old_cookie_after_logout_gets_new_session(self, client, store):
        first_token = fetch_token(client)
        old_cookie = client.cookies.get(SESSION_COOKIE)
        client.post("/api/payments/logout")

        client.cookies.clear()
        client.cookies.set(SESSION_COOKIE, old_cookie)
        response = client.get("/api/payments/csrf-token")

        assert response.status_code == 200
        assert response.json()["csrf_token"] != first_token
        assert SESSION_COOKIE in response.cookies
        assert len(store.sessions) == 1

    def test_failed_destroy_keeps_cookies(self, client, store):
        fetch_token(client)
        store.fail_destroy = True

        response = client.post("/api/payments/logout")

        assert response.status_code == 500
        assert response.json()["type"] == "logout_failed"
        assert set_cookie_headers(response) == []
        assert len(store.sessions) == 1
