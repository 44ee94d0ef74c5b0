"""Jinja2 environment shared by the HTML routers and the error handlers."""
from fastapi.templating import Jinja2Templates

from app.core.config import BASE_DIR

templates = Jinja2Templates(directory=str(BASE_DIR / "app" / "templates"))


def _thousands(value) -> str:
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


templates.env.filters["thousands"] = _thousands
