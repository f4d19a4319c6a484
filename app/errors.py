"""
Problem-details responses and the exception handlers that produce them.

Two bodies are used across the API:

- a validation problem (400) carrying ``errors: {field: [messages]}``, used
  both for request-shape failures detected by FastAPI and for field rules
  checked by ``app.validation``;
- a generic problem (500) for anything unexpected, which never includes
  exception details.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.schemas import ProblemDetails, ValidationProblemDetails
from app.validation import ValidationErrors

PROBLEM_MEDIA_TYPE = "application/problem+json"

DUPLICATE_EMAIL_MESSAGE = "Email is already taken by another user."

_VALIDATION_TYPE = "https://tools.ietf.org/html/rfc9110#section-15.5.1"
_VALIDATION_TITLE = "One or more validation errors occurred."
_SERVER_ERROR_TYPE = "https://tools.ietf.org/html/rfc9110#section-15.6.1"
_SERVER_ERROR_TITLE = "An error occurred while processing your request."


class UserValidationError(Exception):
    """Raised by the router when ``validate_user`` reports failures."""

    def __init__(self, errors: ValidationErrors) -> None:
        super().__init__("User payload failed validation")
        self.errors = errors


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------

def validation_problem(errors: ValidationErrors) -> JSONResponse:
    body = ValidationProblemDetails(
        type=_VALIDATION_TYPE,
        title=_VALIDATION_TITLE,
        status=status.HTTP_400_BAD_REQUEST,
        errors=errors,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def server_error_problem() -> JSONResponse:
    body = ProblemDetails(
        type=_SERVER_ERROR_TYPE,
        title=_SERVER_ERROR_TITLE,
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _errors_from_request_validation(exc: RequestValidationError) -> ValidationErrors:
    """Collapse pydantic's error list into ``{field: [messages]}``."""
    errors: ValidationErrors = {}
    for error in exc.errors():
        # Drop the leading location kind ("body", "path", ...) when a field follows.
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else (loc[0] if loc else "request")
        errors.setdefault(field, []).append(error.get("msg", "Invalid value."))
    return errors


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return validation_problem(_errors_from_request_validation(exc))


async def user_validation_exception_handler(
    request: Request, exc: UserValidationError
) -> JSONResponse:
    return validation_problem(exc.errors)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(UserValidationError, user_validation_exception_handler)
