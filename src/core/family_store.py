"""Family storage seam with invite-code uniqueness enforcement.

The uniqueness guarantee for invite codes belongs to storage: an existence
check on its own is a point-in-time read that two concurrent family creations
can both pass. Stores therefore reject a conflicting write with
DuplicateInviteCodeError, and callers retry generation on that error.
"""

import copy
import logging
import threading
from collections.abc import Callable
from typing import Protocol

from src.core.errors import DuplicateInviteCodeError
from src.domain.family import Family


logger = logging.getLogger(__name__)


class FamilyStore(Protocol):
    """Persistence operations the family services rely on."""

    def invite_code_exists(self, code: str) -> bool: ...

    def insert(self, family: Family) -> Family: ...

    def get(self, family_id: str) -> Family | None: ...

    def get_by_invite_code(self, code: str) -> Family | None: ...

    def modify(self, family_id: str, change: Callable[[Family], Family]) -> Family: ...


class InMemoryFamilyStore:
    """Thread-safe in-memory FamilyStore.

    The invite-code check and the write happen under one lock, which plays the
    role of a unique index in a real database.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._families: dict[str, Family] = {}
        self._codes: dict[str, str] = {}

    def invite_code_exists(self, code: str) -> bool:
        """Return whether any family already holds the code."""
        with self._lock:
            return code in self._codes

    def insert(self, family: Family) -> Family:
        """Insert a new family.

        Raises:
            DuplicateInviteCodeError: If another family holds the invite code
            ValueError: If a family with the same ID already exists
        """
        with self._lock:
            if family.invite_code in self._codes:
                logger.warning("family_store_invite_code_conflict", extra={"family_id": family.id})
                raise DuplicateInviteCodeError(f"Invite code {family.invite_code} is already in use")
            if family.id in self._families:
                raise ValueError(f"Family {family.id} already exists")
            self._families[family.id] = family
            self._codes[family.invite_code] = family.id
            return family

    def get(self, family_id: str) -> Family | None:
        """Get a family by ID."""
        with self._lock:
            return self._families.get(family_id)

    def get_by_invite_code(self, code: str) -> Family | None:
        """Get the family holding an invite code."""
        with self._lock:
            family_id = self._codes.get(code)
            return self._families.get(family_id) if family_id else None

    def modify(self, family_id: str, change: Callable[[Family], Family]) -> Family:
        """Apply change to the stored family and write the result in one step.

        The read, the change and the write happen under the store lock, so
        concurrent modifications of one family never overwrite each other.
        change must not call back into the store.

        Raises:
            KeyError: If the family does not exist
            ValueError: If change alters the invite code
        """
        with self._lock:
            existing = self._families.get(family_id)
            if existing is None:
                raise KeyError(f"Family {family_id} not found")
            updated = change(existing)
            if updated.invite_code != existing.invite_code:
                raise ValueError(f"Invite code of family {family_id} cannot change")
            self._families[family_id] = updated
            return updated

    def snapshot(self) -> dict[str, Family]:
        """Return a copy of all stored families keyed by ID."""
        with self._lock:
            return copy.copy(self._families)
