"""Project CRUD. Every query is scoped to the owning user's id."""
from datetime import datetime, time, timezone

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import ProjectNotFoundError
from app.core.logging_config import logger
from app.models.goal import GOAL_TOTAL_WORDS, Goal
from app.models.progress_log import ProgressLog
from app.models.project import Project
from app.schemas.forms import ProjectForm
from app.schemas.project import ProjectSummarySchema
from app.schemas.stats import ProjectStatsSchema, StatsOutSchema
from app.services.goals import set_goal, update_active_goal
from app.services.progress import record_words, set_absolute_total


def _latest_total():
    """Correlated subquery: running total of the project's newest ledger entry."""
    return (
        select(ProgressLog.total_words)
        .where(ProgressLog.project_id == Project.id)
        .order_by(ProgressLog.logged_at.desc(), ProgressLog.id.desc())
        .limit(1)
        .correlate(Project)
        .scalar_subquery()
    )


def _summary_query(owner_id: int):
    return (
        select(
            Project,
            func.coalesce(_latest_total(), 0).label("current_words"),
            Goal.target_words,
            Goal.daily_target,
        )
        .outerjoin(
            Goal,
            and_(
                Goal.project_id == Project.id,
                Goal.is_active.is_(True),
                Goal.goal_type == GOAL_TOTAL_WORDS,
            ),
        )
        .where(Project.user_id == owner_id)
    )


def _to_summary(row) -> ProjectSummarySchema:
    settings = get_settings()
    project, current_words, target_words, daily_target = row
    return ProjectSummarySchema(
        id=project.id,
        title=project.title,
        genre=project.genre or "",
        description=project.description,
        start_date=project.start_date,
        current_words=current_words or 0,
        target_words=target_words if target_words is not None else settings.default_target_words,
        daily_goal=daily_target if daily_target is not None else settings.default_daily_target,
    )


async def list_projects(db: AsyncSession, owner_id: int, search: str | None = None) -> list[ProjectSummarySchema]:
    """Owner's projects, newest start date first, optionally filtered by title/genre."""
    query = _summary_query(owner_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(Project.title.ilike(pattern), Project.genre.ilike(pattern)))
    result = await db.execute(query.order_by(Project.start_date.desc(), Project.id.desc()))
    return [_to_summary(row) for row in result.all()]


async def get_project_summary(db: AsyncSession, owner_id: int, project_id: int) -> ProjectSummarySchema:
    result = await db.execute(_summary_query(owner_id).where(Project.id == project_id))
    row = result.first()
    if row is None:
        raise ProjectNotFoundError(project_id)
    return _to_summary(row)


async def get_owned_project(db: AsyncSession, owner_id: int, project_id: int) -> Project:
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.user_id == owner_id)
    )
    project = result.scalar_one_or_none()
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


async def create_project(db: AsyncSession, owner_id: int, form: ProjectForm) -> Project:
    """Project, its active goal and an optional opening ledger entry. Caller commits."""
    project = Project(
        user_id=owner_id,
        title=form.title,
        genre=form.genre,
        description=form.description,
        start_date=form.start_date,
    )
    db.add(project)
    await db.flush()

    await set_goal(db, project.id, form.target_words, form.daily_goal, form.start_date)

    if form.current_words:
        opened = datetime.combine(form.start_date, time.min, tzinfo=timezone.utc)
        await record_words(db, project.id, form.current_words, logged_at=opened)

    logger.info("Project created id=%s owner=%s", project.id, owner_id)
    return project


async def update_project(db: AsyncSession, owner_id: int, project_id: int, form: ProjectForm) -> Project:
    """Metadata, goal targets and a restated current total. Caller commits."""
    project = await get_owned_project(db, owner_id, project_id)
    project.title = form.title
    project.genre = form.genre
    project.description = form.description
    project.start_date = form.start_date
    await db.flush()

    await update_active_goal(db, project.id, form.target_words, form.daily_goal, form.start_date)
    if form.current_words is not None:
        await set_absolute_total(db, project.id, form.current_words)
    return project


async def delete_project(db: AsyncSession, owner_id: int, project_id: int) -> None:
    """Remove the project with its goals and ledger. Caller commits."""
    project = await get_owned_project(db, owner_id, project_id)
    await db.execute(delete(ProgressLog).where(ProgressLog.project_id == project.id))
    await db.execute(delete(Goal).where(Goal.project_id == project.id))
    await db.execute(delete(Project).where(Project.id == project.id, Project.user_id == owner_id))
    logger.info("Project deleted id=%s owner=%s", project_id, owner_id)


async def project_stats(db: AsyncSession, owner_id: int) -> StatsOutSchema:
    projects = [
        ProjectStatsSchema(title=p.title, total_words=p.current_words, goal_words=p.target_words)
        for p in await list_projects(db, owner_id)
    ]
    return StatsOutSchema(
        projects=projects,
        total_words=sum(p.total_words for p in projects),
        goal_words=sum(p.goal_words for p in projects),
    )
