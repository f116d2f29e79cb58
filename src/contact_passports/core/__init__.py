"""Core Module.

Storage handle and error types shared by the repositories.
"""

from .exceptions import (
    ConfigurationError,
    ContactPassportsError,
    PassportConflictError,
    PassportNotFoundError,
    PassportStorageError,
)

__all__ = [
    "ContactPassportsError",
    "ConfigurationError",
    "PassportNotFoundError",
    "PassportStorageError",
    "PassportConflictError",
]
