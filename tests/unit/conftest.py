"""Pytest configuration and fixtures for unit tests."""

from datetime import UTC, datetime

import pytest

from src.core.family_store import InMemoryFamilyStore
from src.domain.family import Family, FamilySettings
from src.services import family_access_service


@pytest.fixture
def now():
    """Fixed reference instant used instead of the system clock."""
    return datetime(2024, 1, 5, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def family_store():
    """Provides a fresh InMemoryFamilyStore for each test."""
    return InMemoryFamilyStore()


@pytest.fixture
def family(now) -> Family:
    """Family created by U1, who is also its first (admin) member."""
    return family_access_service.create_family(
        family_id="fam_1",
        name="The Smiths",
        created_by="U1",
        invite_code="A1B2C3D4",
        now=now,
    )


@pytest.fixture
def small_family(now) -> Family:
    """Family with the smallest allowed member limit."""
    return family_access_service.create_family(
        family_id="fam_small",
        name="Pair",
        created_by="U1",
        invite_code="0000FFFF",
        now=now,
        settings=FamilySettings(max_members=2),
    )
