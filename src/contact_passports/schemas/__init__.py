"""Pydantic schemas for passport records."""

from .passport import ContactRead, PassportBase, PassportRead, PassportWrite

__all__ = ["ContactRead", "PassportBase", "PassportRead", "PassportWrite"]
