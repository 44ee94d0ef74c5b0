"""
Manager routes: listing, adding, editing and deleting users
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.progress_log import ProgressLog
from app.models.project import Project
from app.models.security import Security
from app.models.user import User
from app.services.users import authenticate, get_user_by_username


def user_form(**overrides) -> dict:
    data = {
        "username": "new.writer",
        "email": "writer@example.com",
        "first_name": "Nora",
        "last_name": "Quill",
        "role": "member",
        "password": "long-enough-password",
    }
    data.update(overrides)
    return data


@pytest.fixture
def as_manager(login, manager):
    login(manager)
    return manager


@pytest.mark.asyncio
async def test_list_users_shows_everyone(client: AsyncClient, as_manager, member, other_member):
    response = await client.get("/manage-users")

    assert response.status_code == 200
    for account in (as_manager, member, other_member):
        assert account.username in response.text


@pytest.mark.asyncio
async def test_add_user_can_log_in(client: AsyncClient, db_session, as_manager):
    response = await client.post("/add-user", data=user_form())

    assert response.status_code == 303
    assert response.headers["location"].endswith("/manage-users")

    user = await authenticate(db_session, "new.writer", "long-enough-password")
    assert user is not None
    assert user.role == "member"
    assert user.display_name == "Nora Quill"


@pytest.mark.asyncio
async def test_add_user_stores_only_a_hash(client: AsyncClient, db_session, as_manager):
    await client.post("/add-user", data=user_form())

    user = await get_user_by_username(db_session, "new.writer")
    result = await db_session.execute(select(Security.hashed_password).where(Security.user_id == user.id))
    hashed = result.scalar_one()
    assert hashed != "long-enough-password"
    assert hashed.startswith("$2")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"password": ""}, "Password"),
        ({"password": "short"}, "Password"),
        ({"email": "not-an-email"}, "Email"),
        ({"role": "owner"}, "Role"),
        ({"username": ""}, "Username"),
    ],
)
async def test_add_user_rejects_invalid_form(client: AsyncClient, db_session, as_manager, overrides, message):
    response = await client.post("/add-user", data=user_form(**overrides))

    assert response.status_code == 400
    assert message in response.text
    assert await get_user_by_username(db_session, "new.writer") is None


@pytest.mark.asyncio
async def test_add_user_duplicate_username(client: AsyncClient, db_session, as_manager, member):
    response = await client.post("/add-user", data=user_form(username=member.username))

    assert response.status_code == 400
    assert "Username already taken" in response.text
    result = await db_session.execute(select(func.count(User.id)).where(User.username == member.username))
    assert result.scalar_one() == 1


@pytest.mark.asyncio
async def test_edit_user_page(client: AsyncClient, as_manager, member):
    response = await client.get(f"/edit-user/{member.id}")

    assert response.status_code == 200
    assert member.username in response.text


@pytest.mark.asyncio
async def test_edit_unknown_user_redirects(client: AsyncClient, as_manager):
    response = await client.get("/edit-user/999999")

    assert response.status_code == 303
    assert response.headers["location"].endswith("/manage-users")


@pytest.mark.asyncio
async def test_edit_user_promotes_and_keeps_password(client: AsyncClient, db_session, as_manager, member):
    response = await client.post(
        f"/edit-user/{member.id}",
        data=user_form(username=member.username, role="manager", password=""),
    )

    assert response.status_code == 303
    user = await authenticate(db_session, member.username, member.password)
    assert user is not None
    assert user.role == "manager"


@pytest.mark.asyncio
async def test_edit_user_changes_password(client: AsyncClient, db_session, as_manager, member):
    await client.post(
        f"/edit-user/{member.id}",
        data=user_form(username=member.username, password="a-brand-new-secret"),
    )

    assert await authenticate(db_session, member.username, member.password) is None
    assert await authenticate(db_session, member.username, "a-brand-new-secret") is not None


@pytest.mark.asyncio
async def test_edit_user_duplicate_username(client: AsyncClient, db_session, as_manager, member, other_member):
    response = await client.post(f"/edit-user/{member.id}", data=user_form(username=other_member.username))

    assert response.status_code == 400
    assert "Username already taken" in response.text
    user = await get_user_by_username(db_session, member.username)
    assert user is not None
    assert user.id == member.id


@pytest.mark.asyncio
async def test_manager_cannot_delete_self(client: AsyncClient, db_session, as_manager):
    response = await client.post(f"/delete-user/{as_manager.id}")

    assert response.status_code == 400
    assert "You cannot delete your own account" in response.text
    assert await get_user_by_username(db_session, as_manager.username) is not None


@pytest.mark.asyncio
async def test_delete_user_removes_their_projects(
    client: AsyncClient, db_session, as_manager, member, other_member, make_project
):
    doomed = await make_project(member, current_words=400)
    survivor = await make_project(other_member, current_words=200)

    response = await client.post(f"/delete-user/{member.id}")

    assert response.status_code == 303
    assert await get_user_by_username(db_session, member.username) is None

    result = await db_session.execute(select(Project.id))
    assert result.scalars().all() == [survivor]
    result = await db_session.execute(select(func.count(ProgressLog.id)).where(ProgressLog.project_id == doomed))
    assert result.scalar_one() == 0
    result = await db_session.execute(select(func.count(Security.user_id)).where(Security.user_id == member.id))
    assert result.scalar_one() == 0


@pytest.mark.asyncio
async def test_deleted_user_session_is_rejected(client: AsyncClient, login, as_manager, member):
    await client.post(f"/delete-user/{member.id}")
    login(member)

    response = await client.get("/dashboard")

    assert "Please log in to access this page" in response.text
