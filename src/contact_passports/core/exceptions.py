"""Core Exceptions Module.

Custom exceptions raised by the Contact Passports data-access layer.
"""


class ContactPassportsError(Exception):
    """Base exception for all Contact Passports errors."""


class ConfigurationError(ContactPassportsError):
    """Raised when configuration is invalid or missing."""


class PassportNotFoundError(ContactPassportsError):
    """Raised when a contact has no passport on record."""

    def __init__(self, contact_id: int) -> None:
        """Remember which contact was looked up."""
        super().__init__(f"No passport found for contact {contact_id}")
        self.contact_id = contact_id


class PassportStorageError(ContactPassportsError):
    """Raised when the database rejects or fails a passport operation."""


class PassportConflictError(PassportStorageError):
    """Raised when a passport insert violates a constraint.

    Either the contact already has a passport or the contact does not exist.
    """

    def __init__(self, contact_id: int) -> None:
        """Remember which contact the insert was for."""
        super().__init__(
            f"Cannot create passport for contact {contact_id}: "
            "a passport already exists or the contact is unknown"
        )
        self.contact_id = contact_id
