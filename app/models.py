from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.validation import NAME_MAX_LENGTH, PHONE_NUMBER_LENGTH, calculate_age


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(NAME_MAX_LENGTH), nullable=True)
    # Uniqueness is checked by the service layer, not by a constraint.
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    phone_number: Mapped[str] = mapped_column(String(PHONE_NUMBER_LENGTH), nullable=False)

    @property
    def age(self) -> int:
        """Age in whole years as of today; never persisted."""
        return calculate_age(self.date_of_birth)

    @property
    def formatted_phone_number(self) -> str:
        """Phone number rendered as ``(XXX) XXX-XXXX``."""
        p = self.phone_number
        return f"({p[:3]}) {p[3:6]}-{p[6:10]}"

    def __str__(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return (
            f"Id: {self.id}\n"
            f"Name: {name}\n"
            f"Email: {self.email}\n"
            f"Date of Birth: {self.date_of_birth.isoformat()}\n"
            f"Age: {self.age}\n"
            f"Phone Number: {self.formatted_phone_number}"
        )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
