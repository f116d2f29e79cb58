"""Configuration module for Contact Passports."""

from contact_passports.config.base import Settings
from contact_passports.config.loader import get_settings

__all__ = ["Settings", "get_settings"]
