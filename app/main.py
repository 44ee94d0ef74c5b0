"""Word Count Tracker - FastAPI app entry point."""
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import BASE_DIR, get_settings
from app.core.exceptions import (
    AuthorizationError,
    NotAuthenticatedError,
    ProjectNotFoundError,
    UserNotFoundError,
)
from app.core.logging_config import generate_request_id, logger, set_request_id, set_user_id
from app.db.base import Base
from app.db.session import engine, AsyncSessionLocal
from app.routers import api, auth, manage, web
from app.routers.auth import render_login
from app.services.users import seed_initial_manager

ADMIN_PATHS = ("/manage-users", "/add-user", "/edit-user", "/delete-user")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables (migrations are run separately with alembic)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        await seed_initial_manager(db)

    logger.info("Application started")
    yield
    await engine.dispose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Track writing projects, word-count goals and daily progress",
    debug=settings.debug,
    lifespan=lifespan,
)

# Mount static files at /static
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "app" / "static")), name="static")

app.include_router(auth.router)
app.include_router(web.router)
app.include_router(manage.router)
app.include_router(api.router)


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _safe_page(request: Request) -> str:
    if request.url.path.startswith(ADMIN_PATHS):
        return "manage_users"
    return "dashboard"


@app.middleware("http")
async def log_requests(request: Request, call_next):
    set_request_id(generate_request_id())
    set_user_id("")
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "HTTP %s %s - %s (%.2fms)",
        request.method, request.url.path, response.status_code, duration_ms,
    )
    return response


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    if _is_api(request):
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)
    return render_login(request, exc.message)


@app.exception_handler(AuthorizationError)
async def authorization_handler(request: Request, exc: AuthorizationError):
    if _is_api(request):
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(ProjectNotFoundError)
async def project_not_found_handler(request: Request, exc: ProjectNotFoundError):
    logger.info("Project %s not available to this user", exc.details["project_id"])
    if _is_api(request):
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)
    return RedirectResponse(request.url_for("dashboard"), status_code=303)


@app.exception_handler(UserNotFoundError)
async def user_not_found_handler(request: Request, exc: UserNotFoundError):
    return RedirectResponse(request.url_for("manage_users"), status_code=303)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    if _is_api(request):
        return JSONResponse({"code": "DATABASE_ERROR", "message": "Database error"}, status_code=500)
    return RedirectResponse(request.url_for(_safe_page(request)), status_code=303)


@app.get("/health")
async def health():
    return {"status": "ok"}
