"""Contact Passports.

Async data access for the passport record owned by a contact.
"""

from contact_passports.core.database import Database
from contact_passports.core.exceptions import (
    ConfigurationError,
    ContactPassportsError,
    PassportConflictError,
    PassportNotFoundError,
    PassportStorageError,
)
from contact_passports.models import Contact, Passport
from contact_passports.repositories import PassportRepository

__version__ = "0.1.0"

__all__ = [
    "Contact",
    "Database",
    "Passport",
    "PassportRepository",
    "ContactPassportsError",
    "ConfigurationError",
    "PassportConflictError",
    "PassportNotFoundError",
    "PassportStorageError",
]
