"""Manager-only routes: list, add, edit and delete user accounts."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthContext, require_manager
from app.core.exceptions import ValidationError
from app.core.logging_config import logger
from app.core.templating import templates
from app.db.session import get_db, transaction
from app.models.user import ROLES
from app.schemas.forms import NewUserForm, UserForm, validate_form
from app.services.users import create_user, delete_user, get_user, list_users, update_user

router = APIRouter()


def _to_manage_users(request: Request) -> RedirectResponse:
    return RedirectResponse(request.url_for("manage_users"), status_code=303)


def _user_form_page(request, auth, name, context, status_code=200):
    return templates.TemplateResponse(
        request,
        name,
        {"auth": auth, "roles": ROLES, **context},
        status_code=status_code,
    )


@router.get("/manage-users", response_class=HTMLResponse)
async def manage_users(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    try:
        users = await list_users(db)
    except SQLAlchemyError:
        logger.exception("Listing users failed")
        users = []
    return templates.TemplateResponse(request, "manage_users.html", {"auth": auth, "users": users})


@router.get("/add-user", response_class=HTMLResponse)
async def add_user_get(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_manager)],
):
    return _user_form_page(request, auth, "add_user.html", {"values": {}, "errors": []})


@router.post("/add-user")
async def add_user_post(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    data = await request.form()
    form = validate_form(NewUserForm, data)
    errors = form.errors
    if form.ok:
        try:
            async with transaction(db):
                await create_user(
                    db,
                    username=form.value.username,
                    password=form.value.password,
                    role=form.value.role,
                    email=form.value.email,
                    first_name=form.value.first_name,
                    last_name=form.value.last_name,
                )
            return _to_manage_users(request)
        except ValidationError as exc:
            errors = exc.errors

    values = {k: v for k, v in data.items() if k != "password"}
    return _user_form_page(request, auth, "add_user.html", {"values": values, "errors": errors}, status_code=400)


@router.get("/edit-user/{user_id}", response_class=HTMLResponse)
async def edit_user_get(
    request: Request,
    user_id: int,
    auth: Annotated[AuthContext, Depends(require_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    user = await get_user(db, user_id)
    return _user_form_page(request, auth, "edit_user.html", {"user": user, "values": None, "errors": []})


@router.post("/edit-user/{user_id}")
async def edit_user_post(
    request: Request,
    user_id: int,
    auth: Annotated[AuthContext, Depends(require_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    data = await request.form()
    form = validate_form(UserForm, data)
    errors = form.errors
    if form.ok:
        try:
            async with transaction(db):
                await update_user(db, user_id, form.value)
            return _to_manage_users(request)
        except ValidationError as exc:
            errors = exc.errors

    user = await get_user(db, user_id)
    values = {k: v for k, v in data.items() if k != "password"}
    return _user_form_page(
        request, auth, "edit_user.html", {"user": user, "values": values, "errors": errors}, status_code=400
    )


@router.post("/delete-user/{user_id}")
async def delete_user_post(
    request: Request,
    user_id: int,
    auth: Annotated[AuthContext, Depends(require_manager)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    async with transaction(db):
        await delete_user(db, auth.user_id, user_id)
    return _to_manage_users(request)
