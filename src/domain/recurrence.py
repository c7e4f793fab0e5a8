"""Recurrence domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Weekday numbering follows the persisted calendar-event form: 0 = Sunday
WEEKDAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


class Frequency(StrEnum):
    """How often a recurring item repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


def weekday_index(dt: datetime) -> int:
    """Return the weekday of a datetime using 0 = Sunday numbering."""
    return (dt.weekday() + 1) % 7


class RecurrenceRule(BaseModel):
    """Recurrence settings embedded in a schedulable item."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Whether further occurrences are produced")
    frequency: Frequency = Field(default=Frequency.WEEKLY, description="Repeat period")
    interval: int = Field(default=1, ge=1, description="Repeat every N periods")
    days_of_week: frozenset[int] = Field(
        default_factory=frozenset,
        description="Weekdays for weekly rules (0 = Sunday .. 6 = Saturday)",
    )
    day_of_month: int | None = Field(default=None, ge=1, le=31, description="Calendar day for monthly rules")
    end_date: datetime | None = Field(default=None, description="No occurrences strictly after this instant")

    @field_validator("days_of_week", mode="before")
    @classmethod
    def normalize_days_of_week(cls, v: object) -> object:
        """Accept weekday names ("monday") as well as 0..6 indexes."""
        if v is None:
            return frozenset()
        if isinstance(v, str | int):
            v = [v]
        if not isinstance(v, list | tuple | set | frozenset):
            return v

        days: list[object] = []
        for day in v:
            if isinstance(day, str) and not day.strip().isdigit():
                name = day.strip().lower()
                if name not in WEEKDAY_NAMES:
                    raise ValueError(f"Unknown weekday: {day!r}")
                days.append(WEEKDAY_NAMES.index(name))
            else:
                days.append(day)
        return days

    @field_validator("days_of_week")
    @classmethod
    def validate_days_of_week(cls, v: frozenset[int]) -> frozenset[int]:
        """Validate weekday indexes are within 0..6."""
        out_of_range = sorted(day for day in v if not 0 <= day <= 6)  # noqa: PLR2004
        if out_of_range:
            raise ValueError(f"Weekday indexes must be between 0 and 6, got {out_of_range}")
        return v

    @field_validator("end_date")
    @classmethod
    def validate_end_date_aware(cls, v: datetime | None) -> datetime | None:
        """Validate the end date carries an explicit timezone."""
        if v is not None and v.tzinfo is None:
            raise ValueError("end_date must be timezone-aware")
        return v

    @classmethod
    def disabled(cls) -> "RecurrenceRule":
        """Rule for a one-off item."""
        return cls(enabled=False)
