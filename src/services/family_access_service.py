"""Family membership and role-based permissions.

Permissions are a snapshot: derive_permissions runs when a member is added or
their role changes, and the result is stored with the membership. Later changes
to family settings do not touch existing snapshots. The family creator is the
one live override and is authorized for every capability.

All operations return new Family objects and never mutate their inputs.
"""

import logging
from datetime import datetime

from src.core.errors import AlreadyMemberError, MemberLimitReachedError, MemberNotFoundError, PermissionDeniedError
from src.core.logging import log_with_family_context, span
from src.domain.family import Capability, Family, FamilyMember, FamilyRole, FamilySettings, PermissionSet


logger = logging.getLogger(__name__)


_MANAGING_ROLES = frozenset({FamilyRole.ADMIN, FamilyRole.PARENT, FamilyRole.GUARDIAN})


def derive_permissions(role: FamilyRole, allow_children_to_invite: bool) -> PermissionSet:
    """Map a role to its capability set.

    Args:
        role: Member role
        allow_children_to_invite: Family setting; grants inviteMembers to parents

    Returns:
        PermissionSet for the role
    """
    manages = role in _MANAGING_ROLES
    return PermissionSet(
        manage_family=role == FamilyRole.ADMIN,
        manage_calendar=manages,
        manage_grocery=manages,
        manage_chores=manages,
        manage_meals=manages,
        invite_members=role == FamilyRole.ADMIN or (role == FamilyRole.PARENT and allow_children_to_invite),
    )


def is_authorized(family: Family, requesting_user_id: str, capability: Capability) -> bool:
    """Check whether a user may perform an action in a family.

    Returns:
        True for the family creator, otherwise the stored permission of the
        user's membership, and False for non-members
    """
    if requesting_user_id == family.created_by:
        return True

    member = family.get_member(requesting_user_id)
    if member is None:
        return False

    return member.permissions.allows(capability)


def require_permission(family: Family, requesting_user_id: str, capability: Capability) -> None:
    """Raise PermissionDeniedError unless the user holds the capability."""
    if not is_authorized(family, requesting_user_id, capability):
        msg = f"User {requesting_user_id} lacks {capability} in family {family.id}"
        logger.warning(msg)
        raise PermissionDeniedError(msg)


def is_admin(family: Family, user_id: str) -> bool:
    """Return whether a user is the creator or holds the admin role."""
    if user_id == family.created_by:
        return True
    member = family.get_member(user_id)
    return member is not None and member.role == FamilyRole.ADMIN


def add_member(
    family: Family,
    user_id: str,
    role: FamilyRole = FamilyRole.PARENT,
    max_members: int | None = None,
    *,
    now: datetime,
) -> Family:
    """Add a member with a permission snapshot derived from their role.

    Args:
        family: Family to join
        user_id: Joining user's ID
        role: Role to assign
        max_members: Member limit; defaults to family.settings.max_members
        now: Join timestamp

    Returns:
        Updated family

    Raises:
        AlreadyMemberError: If the user is already a member
        MemberLimitReachedError: If the family is full
    """
    with span("family_access_service.add_member", family_id=family.id):
        limit = family.settings.max_members if max_members is None else max_members

        # Guard: Check membership
        if family.get_member(user_id) is not None:
            msg = f"User {user_id} is already a member of family {family.id}"
            logger.warning(msg)
            raise AlreadyMemberError(msg)

        # Guard: Check member limit
        if family.member_count >= limit:
            msg = f"Family {family.id} has reached its member limit ({limit})"
            logger.warning(msg)
            raise MemberLimitReachedError(msg)

        member = FamilyMember(
            user_id=user_id,
            role=role,
            permissions=derive_permissions(role, family.settings.allow_children_to_invite),
            joined_at=now,
        )
        updated = family.model_copy(update={"members": (*family.members, member)})

        log_with_family_context(logger, "info", "family_member_added", family_id=family.id, user_id=user_id, role=role)

        return updated


def remove_member(family: Family, user_id: str) -> Family:
    """Remove a member from the family.

    Raises:
        MemberNotFoundError: If the user is not a member
        PermissionDeniedError: If the user is the family creator
    """
    with span("family_access_service.remove_member", family_id=family.id):
        if user_id == family.created_by:
            msg = f"The creator of family {family.id} cannot be removed"
            raise PermissionDeniedError(msg)

        if family.get_member(user_id) is None:
            msg = f"User {user_id} is not a member of family {family.id}"
            raise MemberNotFoundError(msg)

        updated = family.model_copy(update={"members": tuple(m for m in family.members if m.user_id != user_id)})

        log_with_family_context(logger, "info", "family_member_removed", family_id=family.id, user_id=user_id)

        return updated


def leave_family(family: Family, user_id: str) -> Family:
    """Remove a member at their own request.

    The creator may only leave once every other member is gone. A family left
    without members is deactivated, so its invite code no longer works.

    Raises:
        MemberNotFoundError: If the user is not a member
        PermissionDeniedError: If the creator leaves while others remain
    """
    with span("family_access_service.leave_family", family_id=family.id):
        # Guard: Check membership
        if family.get_member(user_id) is None:
            msg = f"User {user_id} is not a member of family {family.id}"
            raise MemberNotFoundError(msg)

        # Guard: Creator must not abandon other members
        if user_id == family.created_by and family.member_count > 1:
            msg = f"Transfer ownership of family {family.id} before leaving, or remove the other members first"
            logger.warning(msg)
            raise PermissionDeniedError(msg)

        members = tuple(m for m in family.members if m.user_id != user_id)
        updated = family.model_copy(update={"members": members, "is_active": bool(members) and family.is_active})

        log_with_family_context(
            logger, "info", "family_member_left", family_id=family.id, user_id=user_id, is_active=updated.is_active
        )

        return updated


def change_member_role(family: Family, user_id: str, role: FamilyRole) -> Family:
    """Assign a new role and take a fresh permission snapshot from current settings.

    Raises:
        MemberNotFoundError: If the user is not a member
    """
    with span("family_access_service.change_member_role", family_id=family.id):
        member = family.get_member(user_id)
        if member is None:
            msg = f"User {user_id} is not a member of family {family.id}"
            raise MemberNotFoundError(msg)

        replacement = member.model_copy(
            update={
                "role": role,
                "permissions": derive_permissions(role, family.settings.allow_children_to_invite),
            }
        )
        members = tuple(replacement if m.user_id == user_id else m for m in family.members)

        log_with_family_context(
            logger, "info", "family_member_role_changed", family_id=family.id, user_id=user_id, role=role
        )

        return family.model_copy(update={"members": members})


def update_settings(family: Family, **changes: object) -> Family:
    """Return the family with updated settings.

    Member permission snapshots are left as they are.

    Raises:
        pydantic.ValidationError: If a changed value is invalid
        ValueError: If a setting is unknown or max_members drops below the member count
    """
    unknown = sorted(set(changes) - set(FamilySettings.model_fields))
    if unknown:
        raise ValueError(f"Unknown family settings: {', '.join(unknown)}")

    new_settings = FamilySettings.model_validate({**family.settings.model_dump(), **changes})
    if new_settings.max_members < family.member_count:
        msg = f"max_members ({new_settings.max_members}) is below the current member count ({family.member_count})"
        raise ValueError(msg)
    return family.model_copy(update={"settings": new_settings})


def create_family(
    *,
    family_id: str,
    name: str,
    created_by: str,
    invite_code: str,
    now: datetime,
    description: str = "",
    settings: FamilySettings | None = None,
) -> Family:
    """Build a new family with its creator as the first admin member."""
    family = Family(
        id=family_id,
        name=name,
        description=description,
        invite_code=invite_code,
        created_by=created_by,
        settings=settings or FamilySettings(),
    )
    return add_member(family, created_by, FamilyRole.ADMIN, now=now)
