# core/errors.py

from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError


# ============================================================
# Error taxonomy
# ============================================================

class AppError(Exception):
    """
    Base for every failure an accessor can report.
    Carries a stable `code` for clients and the HTTP status the
    presentation layer should use when it renders the failure.
    """

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
            self.status_code = CODE_STATUS.get(code, self.status_code)
        self.details = details


class Unauthorized(AppError):
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AccessDenied(AppError):
    code = "ACCESS_DENIED"
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 422


class NotFound(AppError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409


class SelfTargetError(AppError):
    """Principal tried to deactivate or delete their own account."""

    code = "SELF_TARGET_FORBIDDEN"
    status_code = 400


class FeatureUnavailable(AppError):
    """Backing table/column is missing from the deployed schema."""

    code = "FEATURE_UNAVAILABLE"
    status_code = 501


class DatabaseError(AppError):
    code = "DATABASE_ERROR"
    status_code = 500


class UnexpectedError(AppError):
    code = "UNEXPECTED_ERROR"
    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)


class RedirectRequired(Exception):
    """
    Raised by page-level area gates. main.py turns it into a 303.
    Resource-level checks never raise this; they return ActionError.
    """

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


# Codes that are not class defaults but still need a status
CODE_STATUS = {
    "UNAUTHORIZED": 401,
    "ACCESS_DENIED": 403,
    "VALIDATION_ERROR": 422,
    "NOT_FOUND": 404,
    "VENUE_NOT_FOUND": 404,
    "IMAGE_NOT_FOUND": 404,
    "MEDIA_NOT_FOUND": 404,
    "CONFLICT": 409,
    "ALREADY_EXISTS": 409,
    "SELF_TARGET_FORBIDDEN": 400,
    "NO_FILE_PROVIDED": 400,
    "INVALID_FILE_TYPE": 400,
    "FILE_TOO_LARGE": 413,
    "FEATURE_UNAVAILABLE": 501,
    "DATABASE_ERROR": 500,
    "STORAGE_ERROR": 502,
    "UNEXPECTED_ERROR": 500,
}


def status_for_code(code: Optional[str]) -> int:
    return CODE_STATUS.get(code or "", 500)


# ============================================================
# Form validation
# ============================================================

def parse_form(model_cls, data):
    """
    Validate a payload against a pydantic form model.
    Field errors are flattened into details["issues"] as {field: [messages]}.
    """
    if isinstance(data, model_cls):
        return data

    try:
        return model_cls.model_validate(data or {})
    except PydanticValidationError as e:
        issues: Dict[str, list] = {}
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "form"
            issues.setdefault(field, []).append(err["msg"].removeprefix("Value error, "))
        raise ValidationError("Invalid form data.", details={"issues": issues})


# ============================================================
# Supabase error helpers
# ============================================================

def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: PostgREST / GoTrue errors expose .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or "Unknown Supabase error"


# PostgreSQL error codes surfaced through PostgREST
PG_ERROR_MESSAGES = {
    "23505": "A record with this information already exists",
    "23503": "Referenced record does not exist",
    "23502": "Required field is missing",
    "42P01": "Database table not found",
}


def handle_supabase_error(error: Exception, operation: str = "Database operation") -> DatabaseError:
    """
    Convert a Supabase / PostgREST failure into a DatabaseError.
    Returns (doesn't raise) so the caller can `raise handle_supabase_error(...)`.

    `operation` becomes the user-facing message (e.g. "Failed to fetch venues");
    the raw collaborator text goes into details for operator screens.
    """
    from core.logging_config import logger

    detail = extract_supabase_error(error)
    pg_code = getattr(error, "code", None)
    logger.error(f"{operation}: {detail}")

    details: Dict[str, Any] = {"detail": detail}
    if pg_code:
        details["pg_code"] = pg_code
        if pg_code in PG_ERROR_MESSAGES:
            details["reason"] = PG_ERROR_MESSAGES[pg_code]

    return DatabaseError(operation, details=details)
