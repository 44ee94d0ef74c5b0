"""
Exceptions for the word count tracker.

Services raise these; the app-level handlers in ``app.main`` and the
routers decide how each one is surfaced (re-rendered form, login page,
plain-text 4xx, redirect).
"""
from typing import Any, Dict, Optional


class WordTrackerError(Exception):
    """Base exception for all application errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# ============================================
# Validation Errors
# ============================================

class ValidationError(WordTrackerError):
    """Input failed validation; shown to the user on the originating form"""

    status_code = 400

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details={"errors": errors or [message]})

    @property
    def errors(self) -> list[str]:
        return self.details["errors"]


# ============================================
# Authentication & Authorization Errors
# ============================================

class NotAuthenticatedError(WordTrackerError):
    """Request requires a logged-in session"""

    status_code = 401

    def __init__(self, message: str = "Please log in to access this page"):
        super().__init__(message, code="NOT_AUTHENTICATED")


class AuthorizationError(WordTrackerError):
    """Logged in, but not allowed to perform this action"""

    status_code = 403

    def __init__(self, message: str = "Access denied", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class ForbiddenError(AuthorizationError):
    """Manager-only route requested by a member"""

    def __init__(self, message: str = "Access denied. Manager permissions required."):
        super().__init__(message)


class SelfDeletionError(AuthorizationError):
    """A manager tried to delete their own account"""

    status_code = 400

    def __init__(self, message: str = "You cannot delete your own account"):
        super().__init__(message, code="SELF_DELETION")


# ============================================
# Lookup Errors
# ============================================

class ProjectNotFoundError(WordTrackerError):
    """Project does not exist or is owned by someone else"""

    status_code = 404

    def __init__(self, project_id: int):
        super().__init__(
            f"Project not found: {project_id}",
            code="PROJECT_NOT_FOUND",
            details={"project_id": project_id},
        )


class UserNotFoundError(WordTrackerError):
    status_code = 404

    def __init__(self, user_id: int):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )
