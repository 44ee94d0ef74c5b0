"""Progress accounting: the per-project append-only word-count ledger.

Every entry stores the signed delta (``word_count``) and the running total
(``total_words``) after applying it. The ledger is never edited in place;
a downward correction is a new entry with a negative delta.

Invariants kept by this module:

* entries are ordered by ``(logged_at, id)`` and ``logged_at`` never
  decreases from one entry to the next;
* ``entry.total_words == previous.total_words + entry.word_count`` and the
  first entry's total equals its own delta;
* the current total of a project is the total of its latest entry, or 0.
"""
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.core.logging_config import logger
from app.models.progress_log import ProgressLog

# largest value the Integer ledger columns hold on every backend
MAX_WORDS = 2_147_483_647


def count_words(text: str | None) -> int:
    """Whitespace token count. Placeholder for a real word counter."""
    if not text:
        return 0
    return len(text.split())


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def latest_entry(db: AsyncSession, project_id: int) -> ProgressLog | None:
    result = await db.execute(
        select(ProgressLog)
        .where(ProgressLog.project_id == project_id)
        .order_by(ProgressLog.logged_at.desc(), ProgressLog.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def current_total(db: AsyncSession, project_id: int) -> int:
    """Running total of the most recent entry; 0 for an empty ledger."""
    entry = await latest_entry(db, project_id)
    return entry.total_words if entry else 0


async def history(db: AsyncSession, project_id: int) -> list[ProgressLog]:
    """All entries for the project, oldest first."""
    result = await db.execute(
        select(ProgressLog)
        .where(ProgressLog.project_id == project_id)
        .order_by(ProgressLog.logged_at.asc(), ProgressLog.id.asc())
    )
    return list(result.scalars().all())


async def _append(
    db: AsyncSession,
    project_id: int,
    previous: ProgressLog | None,
    delta: int,
    logged_at: datetime | None = None,
) -> ProgressLog:
    previous_total = previous.total_words if previous else 0
    when = _as_utc(logged_at) if logged_at else datetime.now(timezone.utc)
    if previous is not None:
        when = max(when, _as_utc(previous.logged_at))

    entry = ProgressLog(
        project_id=project_id,
        word_count=delta,
        total_words=previous_total + delta,
        logged_at=when,
    )
    db.add(entry)
    await db.flush()
    logger.info(
        "Ledger append project=%s delta=%+d total=%d",
        project_id, delta, entry.total_words,
    )
    return entry


async def record_words(
    db: AsyncSession,
    project_id: int,
    delta: int,
    logged_at: datetime | None = None,
) -> int:
    """Append ``delta`` new words to the project's ledger and return the new total."""
    if not _is_int(delta) or delta <= 0:
        raise ValidationError("Word count must be a positive whole number")

    previous = await latest_entry(db, project_id)
    if (previous.total_words if previous else 0) + delta > MAX_WORDS:
        raise ValidationError(f"Total word count cannot exceed {MAX_WORDS:,}")
    entry = await _append(db, project_id, previous, delta, logged_at)
    return entry.total_words


async def set_absolute_total(db: AsyncSession, project_id: int, new_total: int) -> ProgressLog | None:
    """Restate the current total, appending the signed difference.

    Returns the appended entry, or None when the total is unchanged.
    """
    if not _is_int(new_total) or new_total < 0:
        raise ValidationError("Current words must be zero or a positive whole number")
    if new_total > MAX_WORDS:
        raise ValidationError(f"Current words cannot exceed {MAX_WORDS:,}")

    previous = await latest_entry(db, project_id)
    previous_total = previous.total_words if previous else 0
    if new_total == previous_total:
        return None
    return await _append(db, project_id, previous, new_total - previous_total)
