"""Unit tests for error classification utilities."""

import pytest
from pydantic import ValidationError

from src.core.errors import (
    AlreadyMemberError,
    CodeGenerationExhaustedError,
    DuplicateInviteCodeError,
    ErrorCode,
    ErrorSeverity,
    FamilyAccessError,
    InvalidInviteCodeError,
    MemberLimitReachedError,
    MemberNotFoundError,
    PermissionDeniedError,
    classify_error_with_response,
)
from src.domain.recurrence import RecurrenceRule


@pytest.mark.unit
class TestClassifyErrorWithResponse:
    """Tests for classify_error_with_response function."""

    def test_validation_error_names_fields(self):
        """Test pydantic validation errors list the offending fields."""
        with pytest.raises(ValidationError) as exc_info:
            RecurrenceRule(enabled=True, interval=0)

        response = classify_error_with_response(exc_info.value)

        assert response.code == ErrorCode.ERR_VALIDATION
        assert "interval" in response.message
        assert response.severity == ErrorSeverity.LOW

    def test_already_member(self):
        """Test AlreadyMemberError response."""
        response = classify_error_with_response(AlreadyMemberError("U2 already a member"))

        assert response.code == ErrorCode.ERR_ALREADY_MEMBER
        assert "already a member" in response.message.lower()
        assert response.retryable is False

    def test_member_limit_reached(self):
        """Test MemberLimitReachedError response."""
        response = classify_error_with_response(MemberLimitReachedError("full"))

        assert response.code == ErrorCode.ERR_MEMBER_LIMIT_REACHED
        assert "limit" in response.message.lower()

    def test_member_not_found(self):
        """Test MemberNotFoundError response."""
        response = classify_error_with_response(MemberNotFoundError("ghost"))

        assert response.code == ErrorCode.ERR_MEMBER_NOT_FOUND

    @pytest.mark.parametrize("error_cls", [CodeGenerationExhaustedError, DuplicateInviteCodeError])
    def test_invite_code_exhaustion_is_retryable(self, error_cls):
        """Test code generation failures ask the user to retry."""
        response = classify_error_with_response(error_cls("collisions"))

        assert response.code == error_cls.code
        assert response.retryable is True
        assert "try creating the family again" in response.suggestion.lower()
        assert response.severity == ErrorSeverity.MEDIUM

    def test_invalid_invite_code(self):
        """Test InvalidInviteCodeError response explains the format."""
        response = classify_error_with_response(InvalidInviteCodeError("bad"))

        assert response.code == ErrorCode.ERR_INVALID_INVITE_CODE
        assert "0-9 and A-F" in response.suggestion

    @pytest.mark.parametrize("exception", [PermissionDeniedError("no"), PermissionError("no")])
    def test_permission_denied(self, exception):
        """Test both domain and builtin permission errors map to permission denied."""
        response = classify_error_with_response(exception)

        assert response.code == ErrorCode.ERR_PERMISSION_DENIED
        assert "permission" in response.message.lower()

    def test_unknown_error(self):
        """Test unknown errors get a generic response."""
        response = classify_error_with_response(RuntimeError("boom"))

        assert response.code == ErrorCode.ERR_UNKNOWN
        assert "unexpected" in response.message.lower()


@pytest.mark.unit
class TestErrorHierarchy:
    """Tests for the domain exception hierarchy."""

    @pytest.mark.parametrize(
        "error_cls",
        [
            AlreadyMemberError,
            MemberLimitReachedError,
            MemberNotFoundError,
            CodeGenerationExhaustedError,
            DuplicateInviteCodeError,
            InvalidInviteCodeError,
            PermissionDeniedError,
        ],
    )
    def test_all_errors_share_base(self, error_cls):
        """Test every domain error can be caught as FamilyAccessError."""
        assert issubclass(error_cls, FamilyAccessError)
        assert error_cls.code.startswith("ERR_")
