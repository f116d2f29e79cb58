"""Database models for Contact Passports."""

from .base import Base
from .contact import Contact
from .passport import PASSPORT_FIELDS, Passport

__all__ = ["Base", "Contact", "Passport", "PASSPORT_FIELDS"]
