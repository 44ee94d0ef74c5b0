from app.models.user import User
from app.models.security import Security
from app.models.project import Project
from app.models.goal import Goal
from app.models.progress_log import ProgressLog

__all__ = ["User", "Security", "Project", "Goal", "ProgressLog"]
