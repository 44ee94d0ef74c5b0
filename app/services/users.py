"""User accounts: authentication, manager administration, initial seeding."""
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import SelfDeletionError, UserNotFoundError, ValidationError
from app.core.logging_config import logger
from app.core.security import hash_password, verify_password
from app.models.goal import Goal
from app.models.progress_log import ProgressLog
from app.models.project import Project
from app.models.security import Security
from app.models.user import ROLE_MANAGER, User
from app.schemas.forms import UserForm


@dataclass
class UserRow:
    """A user as listed on the management page."""

    user: User
    last_login: datetime | None


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> User | None:
    """Return the user when the password matches the stored hash; stamps last_login."""
    result = await db.execute(
        select(User, Security)
        .join(Security, Security.user_id == User.id)
        .where(User.username == (username or "").strip())
    )
    row = result.first()
    if row is None:
        return None

    user, security = row
    if not verify_password(password or "", security.hashed_password):
        return None

    security.last_login = datetime.now(timezone.utc)
    await db.flush()
    return user


async def create_user(
    db: AsyncSession,
    username: str,
    password: str,
    role: str,
    email: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
) -> User:
    """Insert User and its Security row. Caller commits."""
    if await get_user_by_username(db, username):
        raise ValidationError("Username already taken")

    user = User(username=username, email=email, first_name=first_name, last_name=last_name, role=role)
    db.add(user)
    await db.flush()
    db.add(Security(user_id=user.id, hashed_password=hash_password(password)))
    await db.flush()
    logger.info("User created id=%s username=%s role=%s", user.id, username, role)
    return user


async def list_users(db: AsyncSession) -> list[UserRow]:
    result = await db.execute(
        select(User, Security.last_login)
        .outerjoin(Security, Security.user_id == User.id)
        .order_by(User.created_at.desc(), User.id.desc())
    )
    return [UserRow(user=user, last_login=last_login) for user, last_login in result.all()]


async def update_user(db: AsyncSession, user_id: int, form: UserForm) -> User:
    """Apply an edit-user form; a password in the form replaces the stored hash."""
    user = await get_user(db, user_id)

    if form.username != user.username:
        other = await get_user_by_username(db, form.username)
        if other is not None and other.id != user.id:
            raise ValidationError("Username already taken")

    user.username = form.username
    user.email = form.email
    user.first_name = form.first_name
    user.last_name = form.last_name
    user.role = form.role

    if form.password:
        result = await db.execute(select(Security).where(Security.user_id == user.id))
        security = result.scalar_one_or_none()
        if security is None:
            db.add(Security(user_id=user.id, hashed_password=hash_password(form.password)))
        else:
            security.hashed_password = hash_password(form.password)

    await db.flush()
    return user


async def delete_user(db: AsyncSession, acting_user_id: int, user_id: int) -> None:
    """Delete a user and everything they own. Managers cannot delete themselves."""
    if user_id == acting_user_id:
        raise SelfDeletionError()

    user = await get_user(db, user_id)
    project_ids = select(Project.id).where(Project.user_id == user.id)
    await db.execute(
        delete(ProgressLog)
        .where(ProgressLog.project_id.in_(project_ids))
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(Goal)
        .where(Goal.project_id.in_(project_ids))
        .execution_options(synchronize_session=False)
    )
    await db.execute(delete(Project).where(Project.user_id == user.id))
    await db.execute(delete(Security).where(Security.user_id == user.id))
    await db.execute(delete(User).where(User.id == user.id))
    logger.info("User deleted id=%s by=%s", user_id, acting_user_id)


async def seed_initial_manager(db: AsyncSession) -> User | None:
    """Create the first manager account when the users table is empty."""
    settings = get_settings()
    count = (await db.execute(select(func.count(User.id)))).scalar_one()
    if count:
        return None
    if not settings.initial_manager_password:
        logger.warning(
            "No users exist and INITIAL_MANAGER_PASSWORD is not set; nobody can log in yet"
        )
        return None

    user = await create_user(
        db,
        username=settings.initial_manager_username,
        password=settings.initial_manager_password,
        role=ROLE_MANAGER,
    )
    await db.commit()
    return user
