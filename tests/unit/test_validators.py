"""Unit tests for domain model validators."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.domain.family import Family, FamilySettings
from src.domain.notification import NotificationAdvance, TimeUnit
from src.domain.recurrence import RecurrenceRule, weekday_index


@pytest.mark.unit
class TestRecurrenceRuleValidators:
    """Tests for RecurrenceRule field validators."""

    def test_weekday_names_are_converted(self):
        """Test weekday names map to 0 = Sunday indexes."""
        rule = RecurrenceRule(days_of_week=["monday", "Friday", "sunday"])
        assert rule.days_of_week == frozenset({0, 1, 5})

    def test_weekday_indexes_accepted(self):
        """Test numeric weekdays are kept."""
        rule = RecurrenceRule(days_of_week=[0, 6, "3"])
        assert rule.days_of_week == frozenset({0, 3, 6})

    def test_unknown_weekday_rejected(self):
        """Test misspelled weekday names are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            RecurrenceRule(days_of_week=["funday"])

        assert "Unknown weekday" in str(exc_info.value)

    def test_weekday_out_of_range_rejected(self):
        """Test weekday indexes outside 0..6 are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            RecurrenceRule(days_of_week=[7])

        assert "between 0 and 6" in str(exc_info.value)

    @pytest.mark.parametrize("day", [0, 32])
    def test_day_of_month_range(self, day):
        """Test day_of_month must be 1..31."""
        with pytest.raises(ValidationError):
            RecurrenceRule(day_of_month=day)

    def test_naive_end_date_rejected(self):
        """Test end_date must carry a timezone."""
        with pytest.raises(ValidationError) as exc_info:
            RecurrenceRule(enabled=True, end_date=datetime(2024, 1, 1))

        assert "timezone-aware" in str(exc_info.value)

    def test_defaults(self):
        """Test a bare rule is a disabled weekly rule."""
        rule = RecurrenceRule()
        assert rule.enabled is False
        assert rule.interval == 1
        assert rule.days_of_week == frozenset()
        assert rule.end_date is None

    def test_weekday_index_uses_sunday_zero(self):
        """Test weekday_index numbering."""
        assert weekday_index(datetime(2024, 1, 7, tzinfo=UTC)) == 0  # Sunday
        assert weekday_index(datetime(2024, 1, 13, tzinfo=UTC)) == 6  # Saturday


@pytest.mark.unit
class TestNotificationAdvance:
    """Tests for NotificationAdvance."""

    def test_from_minutes(self):
        """Test the calendar-event minutes form."""
        advance = NotificationAdvance.from_minutes(30)
        assert advance.unit == TimeUnit.MINUTES
        assert advance.as_timedelta().total_seconds() == 1800

    def test_weeks_timedelta(self):
        """Test weeks convert to seven days each."""
        assert NotificationAdvance(value=2, unit="weeks").as_timedelta().days == 14


@pytest.mark.unit
class TestFamilyValidators:
    """Tests for Family and FamilySettings validators."""

    def test_name_is_stripped(self):
        """Test family names are trimmed."""
        family = Family(id="f", name="  Smiths ", invite_code="ABCDEF12", created_by="U1")
        assert family.name == "Smiths"

    def test_name_too_long(self):
        """Test names over 50 characters are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Family(id="f", name="a" * 51, invite_code="ABCDEF12", created_by="U1")

        assert "too long" in str(exc_info.value)

    def test_description_too_long(self):
        """Test descriptions over 200 characters are rejected."""
        with pytest.raises(ValidationError):
            Family(id="f", name="Smiths", description="x" * 201, invite_code="ABCDEF12", created_by="U1")

    def test_invite_code_with_trailing_newline_rejected(self):
        """Test the invite code must be exactly eight hex characters."""
        with pytest.raises(ValidationError):
            Family(id="f", name="Smiths", invite_code="A1B2C3D4\n", created_by="U1")

    @pytest.mark.parametrize("max_members", [1, 21])
    def test_max_members_range(self, max_members):
        """Test max_members must stay within 2..20."""
        with pytest.raises(ValidationError):
            FamilySettings(max_members=max_members)

    def test_settings_defaults(self):
        """Test family settings defaults."""
        settings = FamilySettings()
        assert settings.allow_children_to_invite is False
        assert settings.require_approval_for_joining is True
        assert settings.share_calendar_with_all is True
        assert settings.allow_anonymous_chores is False
        assert settings.max_members == 10
