"""Domain models and DTOs."""

from src.domain.family import Capability, Family, FamilyMember, FamilyRole, FamilySettings, PermissionSet
from src.domain.notification import NotificationAdvance, TimeUnit
from src.domain.recurrence import Frequency, RecurrenceRule
from src.domain.status import EntityKind, TemporalStatus


__all__ = [
    "Capability",
    "EntityKind",
    "Family",
    "FamilyMember",
    "FamilyRole",
    "FamilySettings",
    "Frequency",
    "NotificationAdvance",
    "PermissionSet",
    "RecurrenceRule",
    "TemporalStatus",
    "TimeUnit",
]
