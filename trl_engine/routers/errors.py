"""
Error Helpers - TRL Assessment Engine
trl_engine/routers/errors.py

Translates engine exceptions into HTTP errors with the standard
ErrorResponse body, and formats request-validation failures.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional

from fastapi import Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse

from trl_engine.core.exceptions import (
    ConcurrentModificationException,
    DuplicateEntityException,
    EmptyScoreSetError,
    EntityNotFoundException,
    IllegalTransitionError,
    PreconditionViolationError,
)
from trl_engine.models.api import ErrorResponse


# Templates keyed by pydantic error type. Placeholders other than {field}
# come from the error's ctx.
FIELD_MESSAGES = {
    "missing": "Field '{field}' is required",
    "greater_than_equal": "Field '{field}' must be at least {ge}",
    "greater_than": "Field '{field}' must be greater than {gt}",
    "less_than_equal": "Field '{field}' must be at most {le}",
    "less_than": "Field '{field}' must be less than {lt}",
    "string_too_short": "Field '{field}' must have at least {min_length} characters",
    "string_too_long": "Field '{field}' must have at most {max_length} characters",
    "too_short": "Field '{field}' must have at least {min_length} entries",
    "enum": "Field '{field}' must be one of {expected}",
    "string_type": "Field '{field}' must be a string",
    "int_type": "Field '{field}' must be an integer",
    "int_parsing": "Field '{field}' must be an integer",
    "int_from_float": "Field '{field}' must be a whole number",
    "datetime_parsing": "Field '{field}' must be an ISO 8601 datetime",
    "datetime_from_date_parsing": "Field '{field}' must be an ISO 8601 datetime",
    "dict_type": "Field '{field}' must be an object",
    "list_type": "Field '{field}' must be a list",
}


def _error_field(loc) -> str:
    return ".".join(str(part) for part in loc if part != "body")


def describe_validation_error(err: dict) -> Dict[str, str]:
    """Field path, pydantic error type and a readable message for one error."""
    field = _error_field(err.get("loc", ()))
    error_type = err.get("type", "")

    if error_type == "value_error":
        message = str(err.get("msg", "")).removeprefix("Value error, ")
    elif not field:
        message = "Request body is required" if error_type == "missing" else "Invalid request body"
    else:
        template = FIELD_MESSAGES.get(error_type)
        ctx = err.get("ctx") or {}
        try:
            message = template.format(field=field, **ctx) if template else None
        except (KeyError, IndexError):
            message = None
        message = message or f"Invalid value for field '{field}'"

    return {"field": field, "type": error_type, "message": message}


def _error_body(error_code: str, message: str, details: Optional[dict] = None) -> dict:
    return ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        timestamp=datetime.now(timezone.utc),
    ).model_dump(mode="json")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Flat ErrorResponse for request validation failures.

    Malformed JSON is a 400. Anything else is a 422 whose details carry the
    first failing field and type, plus every failure under ``errors``.
    """
    errors = exc.errors()

    if any(err.get("type") == "json_invalid" for err in errors):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("INVALID_REQUEST", "Malformed JSON request body"),
        )

    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body("VALIDATION_ERROR", "Request validation failed"),
        )

    described = [describe_validation_error(err) for err in errors]
    first = described[0]
    message = first["message"]
    if len(described) > 1:
        message = f"{message} (and {len(described) - 1} more)"

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "VALIDATION_ERROR",
            message,
            {"field": first["field"], "type": first["type"], "errors": described},
        ),
    )


def raise_error(status_code: int, error_code: str, message: str, details: Optional[dict] = None):
    raise HTTPException(
        status_code=status_code,
        detail=_error_body(error_code, message, details),
    )


@contextmanager
def engine_errors() -> Iterator[None]:
    """Map engine exceptions raised inside the block to HTTP errors."""
    try:
        yield
    except IllegalTransitionError as e:
        raise_error(
            status.HTTP_409_CONFLICT,
            "ILLEGAL_TRANSITION",
            str(e),
            {"action": e.action, "state": e.state},
        )
    except ConcurrentModificationException as e:
        raise_error(
            status.HTTP_409_CONFLICT,
            "CONCURRENT_MODIFICATION",
            str(e),
            {"expected_version": e.expected_version, "actual_version": e.actual_version},
        )
    except DuplicateEntityException as e:
        raise_error(status.HTTP_409_CONFLICT, "DUPLICATE_ENTITY", str(e))
    except EntityNotFoundException as e:
        raise_error(
            status.HTTP_404_NOT_FOUND,
            "WORKFLOW_NOT_FOUND",
            str(e),
            {"entity_type": e.entity_type, "entity_id": e.entity_id},
        )
    except PreconditionViolationError as e:
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "PRECONDITION_FAILED",
            str(e),
        )
    except EmptyScoreSetError as e:
        raise_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "NO_SCORES", str(e))
