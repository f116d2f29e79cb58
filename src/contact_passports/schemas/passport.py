"""Plain record types for passports and their contacts.

These carry passport data outside a database session, e.g. for the CLI's
JSON output. Build them from ORM rows with ``model_validate``.
"""

from datetime import datetime
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ContactRead(BaseModel):
    """Contact fields exposed alongside a passport."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class PassportBase(BaseModel):
    """Passport document fields."""

    model_config = ConfigDict(
        from_attributes=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    passport_number: Optional[str] = None
    surname: Optional[str] = None
    given_names: Optional[str] = None
    sex: Optional[str] = None
    date_of_birth: Optional[str] = None
    place_of_birth: Optional[str] = None
    nationality: Optional[str] = None
    date_of_issue: Optional[str] = None
    date_of_expiration: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Passport type, e.g. 'P'")
    issuing_country: Optional[str] = None
    authority: Optional[str] = None
    photo: Optional[bytes] = None


class PassportWrite(PassportBase):
    """Input for the repository's write operations.

    Surrounding whitespace is trimmed from text entered here; values read
    back from storage are left as stored.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    contact_id: int

    def as_args(self) -> Tuple[Any, ...]:
        """Positional arguments in the order the repository expects."""
        return (
            self.contact_id,
            self.passport_number,
            self.surname,
            self.given_names,
            self.sex,
            self.date_of_birth,
            self.place_of_birth,
            self.nationality,
            self.date_of_issue,
            self.date_of_expiration,
            self.type,
            self.issuing_country,
            self.authority,
            self.photo,
        )


class PassportRead(PassportBase):
    """A stored passport with its timestamps and, when loaded, its contact."""

    contact_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    contact: Optional[ContactRead] = None
