"""
Auth gate tests: login, logout, protected and manager-only routes
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.config import get_settings
from app.db.session import get_db
from app.main import app
from app.models.security import Security


class _UntouchableSession:
    """Fails the test if a handler touches the database"""

    def __getattr__(self, name):
        raise AssertionError(f"database accessed: {name}")


@pytest.mark.asyncio
async def test_login_page(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert 'name="username"' in response.text


@pytest.mark.asyncio
async def test_login_success_sets_session_cookie(client: AsyncClient, db_session, member):
    response = await client.post("/login", data={"username": member.username, "password": member.password})

    assert response.status_code == 303
    assert response.headers["location"].endswith("/dashboard")

    cookie = response.headers["set-cookie"].lower()
    assert cookie.startswith(get_settings().session_cookie_name + "=")
    assert "httponly" in cookie
    assert "samesite=lax" in cookie
    assert "max-age=28800" in cookie

    result = await db_session.execute(select(Security.last_login).where(Security.user_id == member.id))
    assert result.scalar_one() is not None


@pytest.mark.asyncio
async def test_login_then_dashboard(client: AsyncClient, member):
    await client.post("/login", data={"username": member.username, "password": member.password})
    token = client.cookies.get(get_settings().session_cookie_name)
    assert token

    response = await client.get("/dashboard")
    assert response.status_code == 200
    assert "Your projects" in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["wrong-password", ""])
async def test_login_failure_rerenders_with_message(client: AsyncClient, member, password):
    response = await client.post("/login", data={"username": member.username, "password": password})

    assert response.status_code == 200
    assert "Invalid username or password" in response.text
    assert "set-cookie" not in response.headers


@pytest.mark.asyncio
async def test_unknown_user_cannot_log_in(client: AsyncClient):
    response = await client.post("/login", data={"username": "nobody", "password": "whatever123"})

    assert "Invalid username or password" in response.text


@pytest.mark.asyncio
async def test_unauthenticated_dashboard_renders_login_without_database(client: AsyncClient):
    async def untouchable_db():
        yield _UntouchableSession()

    app.dependency_overrides[get_db] = untouchable_db

    response = await client.get("/dashboard")

    assert response.status_code == 200
    assert "Please log in to access this page" in response.text
    assert 'name="password"' in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/dashboard", "/add", "/stats", "/search?q=x", "/log-words/1", "/edit/1"])
async def test_protected_pages_require_login(client: AsyncClient, path):
    response = await client.get(path)

    assert response.status_code == 200
    assert "Please log in to access this page" in response.text


@pytest.mark.asyncio
async def test_invalid_cookie_is_anonymous(client: AsyncClient):
    client.cookies.set(get_settings().session_cookie_name, "forged.token")

    response = await client.get("/dashboard")

    assert "Please log in to access this page" in response.text


@pytest.mark.asyncio
async def test_api_requires_login_with_json_401(client: AsyncClient):
    response = await client.get("/api/stats")

    assert response.status_code == 401
    assert response.json()["code"] == "NOT_AUTHENTICATED"


@pytest.mark.asyncio
async def test_member_gets_forbidden_on_manager_routes(client: AsyncClient, login, member, other_member):
    login(member)

    for method, path in [
        ("GET", "/manage-users"),
        ("GET", "/add-user"),
        ("GET", f"/edit-user/{other_member.id}"),
        ("POST", f"/delete-user/{other_member.id}"),
    ]:
        response = await client.request(method, path)
        assert response.status_code == 403
        assert "Manager permissions required" in response.text


@pytest.mark.asyncio
async def test_manager_sees_manage_users(client: AsyncClient, login, manager, member):
    login(manager)

    response = await client.get("/manage-users")

    assert response.status_code == 200
    assert member.username in response.text


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient, login, member):
    login(member)

    response = await client.get("/logout")

    assert response.status_code == 303
    assert response.headers["location"].endswith("/")
    cookie = response.headers["set-cookie"].lower()
    assert cookie.startswith(get_settings().session_cookie_name + "=")
    assert "max-age=0" in cookie


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.json() == {"status": "ok"}
