"""Auth routes: login page, login, logout. Session-based auth via signed cookie."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.logging_config import logger
from app.core.security import create_session_token
from app.core.templating import templates
from app.db.session import get_db, transaction
from app.services.users import authenticate

router = APIRouter()

INVALID_LOGIN = "Invalid username or password"


def render_login(request: Request, error_message: str | None = None, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"auth": None, "error_message": error_message},
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse)
async def login_page(request: Request):
    """Show login form."""
    return render_login(request)


@router.post("/login")
async def login_post(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Check credentials, set the session cookie and go to the dashboard."""
    try:
        async with transaction(db):
            user = await authenticate(db, username, password)
    except SQLAlchemyError:
        logger.exception("Login failed with a database error")
        return render_login(request, "An error occurred. Please try again.")

    if user is None:
        logger.warning("Auth login failed: username=%s", username)
        return render_login(request, INVALID_LOGIN)

    logger.info("Auth login success: username=%s role=%s", user.username, user.role)
    settings = get_settings()
    response = RedirectResponse(request.url_for("dashboard"), status_code=303)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user.id),
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


@router.get("/logout")
async def logout(request: Request):
    """Clear the session cookie and return to the login page."""
    response = RedirectResponse(request.url_for("login_page"), status_code=303)
    # path must match the one used in set_cookie()
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    return response
