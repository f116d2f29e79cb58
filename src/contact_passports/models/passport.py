"""Passport model.

One row per contact: ``contact_id`` is both the primary key and the foreign
key to ``contacts``, which limits every contact to a single passport.
Timestamps are written by the repository, never by the database.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, LargeBinary, Text
from sqlalchemy.orm import relationship

from contact_passports.models.base import Base

# Positional order used by the repository operations
PASSPORT_FIELDS = (
    "contact_id",
    "passport_number",
    "surname",
    "given_names",
    "sex",
    "date_of_birth",
    "place_of_birth",
    "nationality",
    "date_of_issue",
    "date_of_expiration",
    "type",
    "issuing_country",
    "authority",
    "photo",
)


class Passport(Base):
    """Passport data captured for a contact."""

    __tablename__ = "passports"

    contact_id = Column(
        Integer,
        ForeignKey("contacts.id", ondelete="CASCADE", name="fk_passport_contact"),
        primary_key=True,
        autoincrement=False,
    )

    # Document data, stored as entered
    passport_number = Column(Text)
    surname = Column(Text)
    given_names = Column(Text)
    sex = Column(Text)
    date_of_birth = Column(Text)
    place_of_birth = Column(Text)
    nationality = Column(Text)
    date_of_issue = Column(Text)
    date_of_expiration = Column(Text)
    type = Column(Text)
    issuing_country = Column(Text)
    authority = Column(Text)
    photo = Column(LargeBinary)

    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))

    contact = relationship("Contact", back_populates="passport")

    def __repr__(self) -> str:
        """Return string representation of Passport."""
        return (
            f"<Passport(contact_id={self.contact_id}, "
            f"passport_number={self.passport_number})>"
        )


__all__ = ["Passport", "PASSPORT_FIELDS"]
