from app.services.goals import active_goal, set_goal
from app.services.progress import count_words, current_total, history, record_words, set_absolute_total

__all__ = [
    "active_goal",
    "count_words",
    "current_total",
    "history",
    "record_words",
    "set_absolute_total",
    "set_goal",
]
