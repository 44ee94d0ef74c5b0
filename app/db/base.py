"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.goal import Goal  # noqa: F401
from app.models.progress_log import ProgressLog  # noqa: F401
from app.models.project import Project  # noqa: F401
from app.models.security import Security  # noqa: F401
from app.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Security", "Project", "Goal", "ProgressLog"]
