from app.schemas.forms import FormResult, NewUserForm, ProjectForm, UserForm, WordLogForm, validate_form
from app.schemas.project import GoalSchema, ProgressEntrySchema, ProjectSummarySchema
from app.schemas.stats import ProjectStatsSchema, StatsOutSchema

__all__ = [
    "FormResult",
    "GoalSchema",
    "NewUserForm",
    "ProgressEntrySchema",
    "ProjectForm",
    "ProjectStatsSchema",
    "ProjectSummarySchema",
    "StatsOutSchema",
    "UserForm",
    "WordLogForm",
    "validate_form",
]
