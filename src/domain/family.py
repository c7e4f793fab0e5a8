"""Family domain models and enums."""

import re
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.config import constants, settings


class FamilyRole(StrEnum):
    """Member role within a family."""

    ADMIN = "admin"
    PARENT = "parent"
    CHILD = "child"
    GUARDIAN = "guardian"


class Capability(StrEnum):
    """Named permission granted or denied to a family member."""

    MANAGE_FAMILY = "manageFamily"
    MANAGE_CALENDAR = "manageCalendar"
    MANAGE_GROCERY = "manageGrocery"
    MANAGE_CHORES = "manageChores"
    MANAGE_MEALS = "manageMeals"
    INVITE_MEMBERS = "inviteMembers"


class PermissionSet(BaseModel):
    """Capabilities stored with a membership at the time it was created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    manage_family: bool = Field(default=False, alias="manageFamily")
    manage_calendar: bool = Field(default=False, alias="manageCalendar")
    manage_grocery: bool = Field(default=False, alias="manageGrocery")
    manage_chores: bool = Field(default=False, alias="manageChores")
    manage_meals: bool = Field(default=False, alias="manageMeals")
    invite_members: bool = Field(default=False, alias="inviteMembers")

    def allows(self, capability: Capability) -> bool:
        """Return whether the capability is granted."""
        field_name = next(name for name, info in type(self).model_fields.items() if info.alias == capability)
        return getattr(self, field_name)


class FamilySettings(BaseModel):
    """Family-wide settings."""

    model_config = ConfigDict(frozen=True)

    allow_children_to_invite: bool = Field(default=False, description="Parents may invite when enabled")
    require_approval_for_joining: bool = Field(default=True, description="Joins need admin approval")
    share_calendar_with_all: bool = Field(default=True, description="Calendar is visible to all members")
    allow_anonymous_chores: bool = Field(default=False, description="Chores may be left unassigned")
    max_members: int = Field(
        default_factory=lambda: settings.default_max_members,
        ge=constants.MIN_MAX_MEMBERS,
        le=constants.MAX_MAX_MEMBERS,
        description="Maximum number of members",
    )


class FamilyMember(BaseModel):
    """Membership record."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="ID of the member's user account")
    role: FamilyRole = Field(default=FamilyRole.PARENT, description="Role in the family")
    permissions: PermissionSet = Field(..., description="Permission snapshot taken when the role was assigned")
    joined_at: datetime = Field(..., description="When the member joined")


class Family(BaseModel):
    """Family data transfer object."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique family ID")
    name: str = Field(..., description="Family display name")
    description: str = Field(default="", max_length=constants.MAX_FAMILY_DESCRIPTION_LENGTH)
    invite_code: str = Field(..., description="Shareable code used to join the family")
    created_by: str = Field(..., description="User ID of the family creator")
    members: tuple[FamilyMember, ...] = Field(default=(), description="Current members")
    settings: FamilySettings = Field(default_factory=FamilySettings, description="Family-wide settings")
    is_active: bool = Field(default=True, description="Inactive families cannot be joined")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the family name is non-empty and not too long."""
        v = v.strip()
        if not v:
            raise ValueError("Family name cannot be empty")
        if len(v) > constants.MAX_FAMILY_NAME_LENGTH:
            raise ValueError(f"Family name too long (max {constants.MAX_FAMILY_NAME_LENGTH} characters)")
        return v

    @field_validator("invite_code")
    @classmethod
    def validate_invite_code(cls, v: str) -> str:
        """Validate invite code is 8 uppercase hexadecimal characters."""
        if not re.fullmatch(constants.INVITE_CODE_PATTERN, v):
            raise ValueError("Invite code must be 8 uppercase hexadecimal characters")
        return v

    @property
    def member_count(self) -> int:
        """Number of members."""
        return len(self.members)

    def get_member(self, user_id: str) -> FamilyMember | None:
        """Return the membership for a user, or None."""
        return next((m for m in self.members if m.user_id == user_id), None)
