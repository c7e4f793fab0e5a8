"""Temporal status and schedulable entity kinds."""

from enum import StrEnum


class TemporalStatus(StrEnum):
    """Where a due date sits relative to now."""

    CURRENT = "current"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"


class EntityKind(StrEnum):
    """Household item kinds that carry a due date or recurrence."""

    CALENDAR_EVENT = "calendar_event"
    CHORE = "chore"
    CLEANING_TASK = "cleaning_task"
    GROCERY_ITEM = "grocery_item"
    MEAL_PLAN = "meal_plan"
    PERSONAL_REMINDER = "personal_reminder"
    PET_VACCINE = "pet_vaccine"
