"""Typed validation of submitted HTML forms.

``validate_form`` never raises: it returns a ``FormResult`` that is either
ok (with the parsed model) or carries user-facing error messages, so every
route surfaces bad input the same way.
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Generic, Literal, Mapping, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from app.core.config import get_settings
from app.core.security import MAX_PASSWORD_BYTES
from app.models.user import ROLE_MEMBER
from app.services.progress import MAX_WORDS, count_words

# Simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

T = TypeVar("T", bound=BaseModel)

FIELD_LABELS = {
    "title": "Title",
    "genre": "Genre",
    "description": "Description",
    "target_words": "Target words",
    "current_words": "Current words",
    "daily_goal": "Daily goal",
    "start_date": "Start date",
    "manual_count": "Word count",
    "username": "Username",
    "email": "Email",
    "first_name": "First name",
    "last_name": "Last name",
    "role": "Role",
    "password": "Password",
}


@dataclass
class FormResult(Generic[T]):
    value: T | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


def _message(error: dict) -> str:
    if error["type"] == "value_error":
        msg = str(error["ctx"]["error"])
    else:
        msg = error["msg"]
    if not error["loc"]:
        return msg
    name = str(error["loc"][0])
    return f"{FIELD_LABELS.get(name, name)}: {msg}"


def validate_form(schema: type[T], data: Mapping[str, Any]) -> FormResult[T]:
    """Parse raw form fields into ``schema``. Blank fields count as not submitted."""
    cleaned = {
        key: value
        for key, value in data.items()
        if not (isinstance(value, str) and not value.strip())
    }
    try:
        return FormResult(value=schema.model_validate(cleaned))
    except ValidationError as exc:
        return FormResult(errors=[_message(e) for e in exc.errors()])


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class ProjectForm(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    genre: str = Field(default="", max_length=100)
    description: str | None = None
    target_words: int = Field(gt=0, le=MAX_WORDS)
    # None leaves the ledger alone on edit
    current_words: int | None = Field(default=None, ge=0, le=MAX_WORDS)
    daily_goal: int = Field(
        default_factory=lambda: get_settings().default_daily_target, gt=0, le=MAX_WORDS
    )
    start_date: date = Field(default_factory=date.today)

    @field_validator("title", "genre", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)


class WordLogForm(BaseModel):
    """Either free text to tokenize or an explicit count; the count wins when positive."""

    text: str = ""
    manual_count: int | None = Field(default=None, ge=0, le=MAX_WORDS)

    @property
    def word_count(self) -> int:
        if self.manual_count:
            return self.manual_count
        return count_words(self.text)

    @model_validator(mode="after")
    def require_words(self):
        if self.word_count <= 0:
            raise ValueError("Please enter text or a word count")
        return self


class UserForm(BaseModel):
    username: str = Field(min_length=1, max_length=80)
    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    role: Literal["manager", "member"] = ROLE_MEMBER
    password: str | None = Field(default=None, min_length=8)

    @field_validator("username", "email", "first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("email")
    @classmethod
    def email_shape(cls, value):
        if value is not None and not EMAIL_RE.match(value):
            raise ValueError("not a valid email address")
        return value

    @field_validator("password")
    @classmethod
    def bcrypt_limit(cls, value):
        if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class NewUserForm(UserForm):
    password: str = Field(min_length=8)
