"""Data models for the available-slot finder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import TYPE_CHECKING

from agentda.errors import ConfigurationError

if TYPE_CHECKING:
    from agentda.config import Settings


def parse_clock(value: str | time) -> time:
    """Parse an ``HH:MM`` string into a :class:`datetime.time`.

    Raises:
        ConfigurationError: If *value* is not a valid wall-clock time.
    """
    if isinstance(value, time):
        return value
    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid time of day: {value!r} (expected HH:MM)") from exc


@dataclass(frozen=True)
class BusyInterval:
    """A half-open ``[start, end)`` range already occupied by a meeting."""

    start: datetime
    end: datetime


MAX_HORIZON_DAYS = 366
MAX_INTERVAL_MINUTES = 24 * 60


@dataclass(frozen=True)
class SlotQuery:
    """Immutable slot search parameters.

    Defaults mirror the scheduler's product defaults: fifteen days ahead,
    30-minute slots, 09:00-17:00, weekends excluded.
    """

    horizon_days: int = 15
    interval_minutes: int = 30
    work_start: time = time(9, 0)
    work_end: time = time(17, 0)
    exclude_weekends: bool = True

    def validate(self) -> None:
        """Raise ConfigurationError if the query could not terminate sensibly."""
        if not 0 < self.interval_minutes <= MAX_INTERVAL_MINUTES:
            raise ConfigurationError(
                f"interval_minutes must be in 1..{MAX_INTERVAL_MINUTES}, "
                f"got {self.interval_minutes}"
            )
        if not 0 <= self.horizon_days <= MAX_HORIZON_DAYS:
            raise ConfigurationError(
                f"horizon_days must be in 0..{MAX_HORIZON_DAYS}, got {self.horizon_days}"
            )
        if self.work_end <= self.work_start:
            raise ConfigurationError(
                f"work_end ({self.work_end:%H:%M}) must be after "
                f"work_start ({self.work_start:%H:%M})"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> SlotQuery:
        return cls(
            horizon_days=settings.slot_horizon_days,
            interval_minutes=settings.slot_interval_minutes,
            work_start=parse_clock(settings.work_start),
            work_end=parse_clock(settings.work_end),
            exclude_weekends=settings.exclude_weekends,
        )


@dataclass(frozen=True, order=True)
class TimeSlot:
    """A candidate meeting start, identified by its (date, time) pair."""

    date: date
    time: time

    @property
    def start(self) -> datetime:
        return datetime.combine(self.date, self.time)

    def as_dict(self) -> dict[str, str]:
        return {"date": self.date.isoformat(), "time": self.time.strftime("%H:%M")}
