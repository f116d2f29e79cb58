"""Repository layer for data access."""

from .passport_repository import PassportRepository

__all__ = ["PassportRepository"]
