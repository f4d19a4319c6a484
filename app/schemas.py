import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict


# --- User ---

class UserPayload(BaseModel):
    """
    Request body for create and update.

    Every field is optional at the parsing stage so that missing values are
    reported by ``app.validation.validate_user`` with field-level messages
    instead of a generic type error.  A client-supplied ``id`` is accepted
    and ignored.
    """
    id: uuid.UUID | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    date_of_birth: date | None = None
    phone_number: str | None = None


class UserResponse(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str | None
    email: str
    date_of_birth: date
    phone_number: str
    age: int
    model_config = ConfigDict(from_attributes=True)


# --- Errors ---

class ProblemDetails(BaseModel):
    type: str
    title: str
    status: int


class ValidationProblemDetails(ProblemDetails):
    errors: dict[str, list[str]]
