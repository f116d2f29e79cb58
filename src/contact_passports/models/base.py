"""Base model classes for database models."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import declarative_base

Base: Any = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for application-managed timestamps."""
    return datetime.now(timezone.utc)
