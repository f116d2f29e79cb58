"""Contact model.

Contacts are owned by another part of the system; only the columns the
passport module relies on are declared here.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from contact_passports.models.base import Base


class Contact(Base):
    """A person record that may own one passport."""

    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(Text)
    last_name = Column(Text)
    email = Column(String(255))
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))

    # Deleting a contact removes its passport; the database enforces it
    passport = relationship(
        "Passport",
        back_populates="contact",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """Return string representation of Contact."""
        return f"<Contact(id={self.id})>"


__all__ = ["Contact"]
