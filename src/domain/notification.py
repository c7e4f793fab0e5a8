"""Notification advance models."""

from datetime import timedelta
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TimeUnit(StrEnum):
    """Unit for a notification advance."""

    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"


class NotificationAdvance(BaseModel):
    """One advance warning before a reminder's anchor time."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., ge=0, description="How far ahead of the anchor to notify")
    unit: TimeUnit = Field(..., description="Unit of value")

    def as_timedelta(self) -> timedelta:
        """Return the advance as a timedelta."""
        return timedelta(**{self.unit.value: self.value})

    @classmethod
    def from_minutes(cls, minutes: int) -> "NotificationAdvance":
        """Build an advance from the calendar-event "minutes before" form."""
        return cls(value=minutes, unit=TimeUnit.MINUTES)
