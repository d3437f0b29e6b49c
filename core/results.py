# core/results.py

"""
Uniform result shape for Guarded Data Accessors.

Every accessor returns either

    ActionSuccess(success=True, data=...)
    ActionError(success=False, error="...", code="...", details=...)

and never lets an exception escape. Accessors raise AppError subclasses
internally; the `guarded_action` decorator converts them here.
"""

import functools
from typing import Any, Callable, Dict, Literal, Optional, Union

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.errors import AppError, status_for_code
from core.logging_config import logger


class ActionSuccess(BaseModel):
    success: Literal[True] = True
    data: Any = None


class ActionError(BaseModel):
    success: Literal[False] = False
    error: str
    code: str
    details: Optional[Dict[str, Any]] = None


ActionResult = Union[ActionSuccess, ActionError]


def ok(data: Any = None) -> ActionSuccess:
    return ActionSuccess(data=data)


def fail(error: str, code: str = "SERVER_ERROR", details: Optional[Dict[str, Any]] = None) -> ActionError:
    return ActionError(error=error, code=code, details=details)


def from_app_error(exc: AppError) -> ActionError:
    return ActionError(error=exc.message, code=exc.code, details=exc.details)


# -----------------------------------------------------
# Accessor boundary
# -----------------------------------------------------
def guarded_action(operation: str) -> Callable:
    """
    Usage:
        @guarded_action("getVenues")
        def get_venues(client, principal, ...):
            ...
            return ok(rows)

    AppError → ActionError with its own code.
    Anything else → logged, generic UNEXPECTED_ERROR.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> ActionResult:
            try:
                return func(*args, **kwargs)
            except AppError as e:
                if e.status_code >= 500:
                    logger.error(f"{operation} failed: {e.message} ({e.code})")
                else:
                    logger.info(f"{operation} refused: {e.message} ({e.code})")
                return from_app_error(e)
            except Exception as e:
                logger.error(f"Error in {operation}: {e}", exc_info=True)
                return fail("An unexpected error occurred", "UNEXPECTED_ERROR")

        return wrapper

    return decorator


# -----------------------------------------------------
# Presentation helpers
# -----------------------------------------------------
GENERIC_NOT_FOUND = "Not found"


def to_response(
    result: ActionResult,
    *,
    detail_page: bool = False,
    operator: bool = False,
    status_code: int = 200,
) -> JSONResponse:
    """
    Render an ActionResult as JSON.

    detail_page: access failures become a plain 404 so a viewer can't tell
                 "exists but not yours" from "doesn't exist".
    operator:    keep technical details on failures (super-admin screens).
                 Validation issues are always kept.
    """
    if result.success:
        return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))

    body = result.model_dump(mode="json")
    code = result.code

    if detail_page and code == "ACCESS_DENIED":
        body.update({"error": GENERIC_NOT_FOUND, "code": "NOT_FOUND", "details": None})
        code = "NOT_FOUND"

    details = body.get("details")
    if details and not operator and code != "VALIDATION_ERROR":
        body["details"] = None

    return JSONResponse(status_code=status_for_code(code), content=body)
