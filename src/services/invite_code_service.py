"""Invite code generation and family creation with unique codes.

generate_unique_invite_code only sees a point-in-time existence check, so two
concurrent callers can both be told a code is free. Uniqueness is only
guaranteed when the storage write itself enforces it, which is what
create_family_with_unique_code relies on: it retries the whole
generate-and-insert unit when the store reports a duplicate.
"""

import logging
import re
import secrets
from collections.abc import Callable
from datetime import datetime

from src.core.config import constants, settings
from src.core.errors import CodeGenerationExhaustedError, DuplicateInviteCodeError, InvalidInviteCodeError
from src.core.family_store import FamilyStore
from src.core.logging import span
from src.domain.family import Family, FamilyRole, FamilySettings
from src.services import family_access_service


logger = logging.getLogger(__name__)


def generate_invite_code() -> str:
    """Generate a random 8 character uppercase hexadecimal invite code."""
    return secrets.token_hex(constants.INVITE_CODE_BYTES).upper()


def is_valid_invite_code(code: str) -> bool:
    """Return whether a code has the invite code format."""
    return re.fullmatch(constants.INVITE_CODE_PATTERN, code) is not None


def normalize_invite_code(raw: str) -> str:
    """Normalize user-entered invite code text.

    Raises:
        InvalidInviteCodeError: If the normalized code is not 8 hex characters
    """
    code = raw.strip().upper()
    if not is_valid_invite_code(code):
        msg = f"Invalid invite code: {raw!r}"
        raise InvalidInviteCodeError(msg)
    return code


def generate_unique_invite_code(
    exists_check: Callable[[str], bool],
    max_attempts: int | None = None,
) -> str:
    """Generate an invite code that exists_check reports as unused.

    Args:
        exists_check: Returns True when a code is already taken
        max_attempts: Codes to try before giving up; defaults to settings.invite_code_max_attempts

    Returns:
        An unused invite code

    Raises:
        CodeGenerationExhaustedError: If every attempt collided
    """
    attempts = settings.invite_code_max_attempts if max_attempts is None else max_attempts
    if attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        code = generate_invite_code()
        if not exists_check(code):
            return code
        logger.info("invite_code_collision", extra={"attempt": attempt})

    msg = f"Failed to generate unique invite code after {attempts} attempts"
    logger.error(msg)
    raise CodeGenerationExhaustedError(msg)


def create_family_with_unique_code(
    store: FamilyStore,
    *,
    family_id: str,
    name: str,
    created_by: str,
    now: datetime,
    description: str = "",
    family_settings: FamilySettings | None = None,
    max_attempts: int | None = None,
) -> Family:
    """Create and store a family, retrying when its invite code is taken.

    Raises:
        CodeGenerationExhaustedError: If no unique code could be stored
    """
    with span("invite_code_service.create_family_with_unique_code", family_id=family_id):
        attempts = settings.invite_code_max_attempts if max_attempts is None else max_attempts

        for attempt in range(1, attempts + 1):
            code = generate_unique_invite_code(store.invite_code_exists, max_attempts=attempts)
            family = family_access_service.create_family(
                family_id=family_id,
                name=name,
                created_by=created_by,
                invite_code=code,
                now=now,
                description=description,
                settings=family_settings,
            )
            try:
                stored = store.insert(family)
            except DuplicateInviteCodeError:
                logger.warning("invite_code_taken_on_insert", extra={"family_id": family_id, "attempt": attempt})
                continue

            logger.info("family_created", extra={"family_id": family_id, "created_by": created_by})
            return stored

        msg = f"Failed to store family {family_id} with a unique invite code after {attempts} attempts"
        logger.error(msg)
        raise CodeGenerationExhaustedError(msg)


def find_family_by_invite_code(store: FamilyStore, raw_code: str) -> Family | None:
    """Look up an active family by user-entered invite code.

    Raises:
        InvalidInviteCodeError: If the code is malformed
    """
    family = store.get_by_invite_code(normalize_invite_code(raw_code))
    if family is None or not family.is_active:
        return None
    return family


def join_family(
    store: FamilyStore,
    raw_code: str,
    user_id: str,
    *,
    now: datetime,
    role: FamilyRole = FamilyRole.PARENT,
) -> Family:
    """Join the family behind an invite code and store the new membership.

    Raises:
        InvalidInviteCodeError: If the code is malformed or matches no active family
        AlreadyMemberError: If the user is already a member
        MemberLimitReachedError: If the family is full
    """
    with span("invite_code_service.join_family", user_id=user_id):
        family = find_family_by_invite_code(store, raw_code)
        if family is None:
            msg = f"No active family uses invite code {raw_code!r}"
            logger.warning(msg)
            raise InvalidInviteCodeError(msg)

        def add_to_current(current: Family) -> Family:
            # Guard: Family may have been deactivated since the lookup
            if not current.is_active:
                msg = f"No active family uses invite code {raw_code!r}"
                raise InvalidInviteCodeError(msg)
            return family_access_service.add_member(current, user_id, role, now=now)

        # Membership and limit checks run against the stored family under the store lock
        return store.modify(family.id, add_to_current)
