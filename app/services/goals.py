"""Goal management: exactly one active 'total_words' goal per project."""
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.goal import GOAL_TOTAL_WORDS, Goal
from app.schemas.project import GoalSchema


def default_goal() -> GoalSchema:
    """Goal shown for projects without an active goal. Never stored."""
    settings = get_settings()
    return GoalSchema(
        target_words=settings.default_target_words,
        daily_target=settings.default_daily_target,
        is_default=True,
    )


async def _active_goal_row(db: AsyncSession, project_id: int) -> Goal | None:
    result = await db.execute(
        select(Goal)
        .where(
            Goal.project_id == project_id,
            Goal.goal_type == GOAL_TOTAL_WORDS,
            Goal.is_active.is_(True),
        )
        .order_by(Goal.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def set_goal(
    db: AsyncSession,
    project_id: int,
    target_words: int,
    daily_target: int,
    start_date: date,
) -> Goal:
    """Deactivate the current total_words goal(s) and insert a new active one."""
    await db.execute(
        update(Goal)
        .where(
            Goal.project_id == project_id,
            Goal.goal_type == GOAL_TOTAL_WORDS,
            Goal.is_active.is_(True),
        )
        .values(is_active=False)
    )
    goal = Goal(
        project_id=project_id,
        goal_type=GOAL_TOTAL_WORDS,
        target_words=target_words,
        daily_target=daily_target,
        start_date=start_date,
        is_active=True,
    )
    db.add(goal)
    await db.flush()
    return goal


async def update_active_goal(
    db: AsyncSession,
    project_id: int,
    target_words: int,
    daily_target: int,
    start_date: date,
) -> Goal:
    """Overwrite the active goal's targets, creating one if the project has none."""
    goal = await _active_goal_row(db, project_id)
    if goal is None:
        return await set_goal(db, project_id, target_words, daily_target, start_date)
    goal.target_words = target_words
    goal.daily_target = daily_target
    await db.flush()
    return goal


async def active_goal(db: AsyncSession, project_id: int) -> GoalSchema:
    goal = await _active_goal_row(db, project_id)
    if goal is None:
        return default_goal()
    return GoalSchema.model_validate(goal)


async def count_active_goals(db: AsyncSession, project_id: int) -> int:
    result = await db.execute(
        select(Goal.id).where(
            Goal.project_id == project_id,
            Goal.goal_type == GOAL_TOTAL_WORDS,
            Goal.is_active.is_(True),
        )
    )
    return len(result.all())
