"""API routes: JSON for project ledgers and stats."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthContext, require_user
from app.db.session import get_db
from app.schemas.project import GoalSchema, ProgressEntrySchema, ProjectSummarySchema
from app.schemas.stats import StatsOutSchema
from app.services.goals import active_goal
from app.services.progress import history
from app.services.projects import get_owned_project, list_projects, project_stats

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/projects", response_model=list[ProjectSummarySchema])
async def get_projects(
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    q: str | None = None,
):
    """Projects of the session user with current totals and goals."""
    return await list_projects(db, auth.user_id, q)


@router.get("/projects/{project_id}/history", response_model=list[ProgressEntrySchema])
async def get_project_history(
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Ledger entries for one owned project, oldest first."""
    await get_owned_project(db, auth.user_id, project_id)
    return [ProgressEntrySchema.model_validate(e) for e in await history(db, project_id)]


@router.get("/projects/{project_id}/goal", response_model=GoalSchema)
async def get_project_goal(
    project_id: int,
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Active goal, or the unsaved default when the project has none."""
    await get_owned_project(db, auth.user_id, project_id)
    return await active_goal(db, project_id)


@router.get("/stats", response_model=StatsOutSchema)
async def get_stats(
    auth: Annotated[AuthContext, Depends(require_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await project_stats(db, auth.user_id)
