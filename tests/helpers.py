"""Shared test helpers."""

from datetime import datetime, timedelta, timezone

START_TIME = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def naive(value: datetime) -> datetime:
    """Drop tzinfo; SQLite hands timestamps back without it."""
    return value.replace(tzinfo=None)
