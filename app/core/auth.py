"""Per-request authentication context and the route guards built on it."""
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import ForbiddenError, NotAuthenticatedError
from app.core.logging_config import logger, set_user_id
from app.core.security import verify_session_token
from app.db.session import get_db
from app.models.user import ROLE_MANAGER, User


@dataclass(frozen=True)
class AuthContext:
    """Identity and role of the logged-in user for one request."""

    user_id: int
    username: str
    display_name: str
    role: str

    @property
    def is_manager(self) -> bool:
        return self.role == ROLE_MANAGER


async def get_auth_context(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthContext | None:
    """Resolve the session cookie; None means anonymous. No cookie, no query."""
    token = request.cookies.get(get_settings().session_cookie_name)
    user_id = verify_session_token(token)
    if user_id is None:
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None

    set_user_id(str(user.id))
    return AuthContext(
        user_id=user.id,
        username=user.username,
        display_name=user.display_name,
        role=user.role,
    )


async def require_user(
    auth: Annotated[AuthContext | None, Depends(get_auth_context)],
) -> AuthContext:
    if auth is None:
        raise NotAuthenticatedError()
    return auth


async def require_manager(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_user)],
) -> AuthContext:
    if not auth.is_manager:
        logger.warning("Forbidden: user=%s requested %s", auth.user_id, request.url.path)
        raise ForbiddenError()
    return auth
