"""Web routes: dashboard, search, project CRUD, word logging, stats. Jinja2 templates."""
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthContext, require_user
from app.core.exceptions import ValidationError
from app.core.logging_config import logger
from app.core.templating import templates
from app.db.session import get_db, transaction
from app.schemas.forms import ProjectForm, WordLogForm, validate_form
from app.schemas.project import ProgressEntrySchema
from app.schemas.stats import StatsOutSchema
from app.services.progress import history, record_words
from app.services.projects import (
    create_project,
    delete_project,
    get_owned_project,
    get_project_summary,
    list_projects,
    project_stats,
    update_project,
)

router = APIRouter()


# ---------- helpers ----------

def _to_dashboard(request: Request) -> RedirectResponse:
    return RedirectResponse(request.url_for("dashboard"), status_code=303)


def _render(request: Request, name: str, auth: AuthContext, context: dict[str, Any], status_code: int = 200):
    return templates.TemplateResponse(request, name, {"auth": auth, **context}, status_code=status_code)


async def _render_log_words(
    request: Request,
    db: AsyncSession,
    auth: AuthContext,
    project_id: int,
    error_message: str | None = None,
    status_code: int = 200,
):
    project = await get_project_summary(db, auth.user_id, project_id)
    entries = [ProgressEntrySchema.model_validate(e) for e in await history(db, project_id)]
    return _render(
        request,
        "log_words.html",
        auth,
        {
            "project": project,
            "entries": list(reversed(entries)),
            "error_message": error_message,
        },
        status_code=status_code,
    )


async def _dashboard(request: Request, db: AsyncSession, auth: AuthContext, search: str | None = None):
    try:
        projects = await list_projects(db, auth.user_id, search)
    except SQLAlchemyError:
        logger.exception("Dashboard query failed")
        projects = []
    return _render(request, "dashboard.html", auth, {"projects": projects, "search_term": search})


# ---------- routes ----------

@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await _dashboard(request, db, auth)


@router.get("/search", response_class=HTMLResponse)
async def search(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    q: str = "",
):
    return await _dashboard(request, db, auth, search=q)


@router.get("/add", response_class=HTMLResponse)
async def add_project_get(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_user)],
):
    return _render(request, "add_project.html", auth, {"values": {}, "errors": []})


@router.post("/add")
async def add_project_post(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create project, its active goal and optional opening word count in one transaction."""
    data = await request.form()
    form = validate_form(ProjectForm, data)
    if not form.ok:
        return _render(
            request, "add_project.html", auth, {"values": dict(data), "errors": form.errors}, status_code=400
        )

    async with transaction(db):
        await create_project(db, auth.user_id, form.value)
    return _to_dashboard(request)


@router.get("/edit/{project_id}", response_class=HTMLResponse)
async def edit_project_get(
    request: Request,
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    project = await get_project_summary(db, auth.user_id, project_id)
    return _render(request, "edit_project.html", auth, {"project": project, "values": None, "errors": []})


@router.post("/edit/{project_id}")
async def edit_project_post(
    request: Request,
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update metadata and goal, and reconcile the restated current word count."""
    data = await request.form()
    form = validate_form(ProjectForm, data)
    if not form.ok:
        project = await get_project_summary(db, auth.user_id, project_id)
        return _render(
            request,
            "edit_project.html",
            auth,
            {"project": project, "values": dict(data), "errors": form.errors},
            status_code=400,
        )

    async with transaction(db):
        await update_project(db, auth.user_id, project_id, form.value)
    return _to_dashboard(request)


@router.post("/delete/{project_id}")
async def delete_project_post(
    request: Request,
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    async with transaction(db):
        await delete_project(db, auth.user_id, project_id)
    return _to_dashboard(request)


@router.get("/log-words/{project_id}", response_class=HTMLResponse)
async def log_words_get(
    request: Request,
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await _render_log_words(request, db, auth, project_id)


@router.post("/log-words/{project_id}")
async def log_words_post(
    request: Request,
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Append either a manual count or the word count of the submitted text."""
    await get_owned_project(db, auth.user_id, project_id)
    form = validate_form(WordLogForm, await request.form())
    if not form.ok:
        return await _render_log_words(
            request, db, auth, project_id, error_message="; ".join(form.errors), status_code=400
        )

    try:
        async with transaction(db):
            await record_words(db, project_id, form.value.word_count)
    except ValidationError as exc:
        return await _render_log_words(request, db, auth, project_id, error_message=exc.message, status_code=400)
    return _to_dashboard(request)


@router.get("/stats", response_class=HTMLResponse)
async def stats(
    request: Request,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    try:
        summary = await project_stats(db, auth.user_id)
    except SQLAlchemyError:
        logger.exception("Stats query failed")
        summary = StatsOutSchema(projects=[])
    return _render(request, "stats.html", auth, {"stats": summary})
