"""Domain errors and user-facing error classification."""

from enum import Enum

from pydantic import BaseModel, ValidationError


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Validation errors
    ERR_VALIDATION = "ERR_VALIDATION"

    # Membership errors
    ERR_ALREADY_MEMBER = "ERR_ALREADY_MEMBER"
    ERR_MEMBER_LIMIT_REACHED = "ERR_MEMBER_LIMIT_REACHED"
    ERR_MEMBER_NOT_FOUND = "ERR_MEMBER_NOT_FOUND"

    # Invite code errors
    ERR_CODE_GENERATION_EXHAUSTED = "ERR_CODE_GENERATION_EXHAUSTED"
    ERR_DUPLICATE_INVITE_CODE = "ERR_DUPLICATE_INVITE_CODE"
    ERR_INVALID_INVITE_CODE = "ERR_INVALID_INVITE_CODE"

    # Permission errors
    ERR_PERMISSION_DENIED = "ERR_PERMISSION_DENIED"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class FamilyAccessError(Exception):
    """Base class for family membership and invite code errors."""

    code: str = ErrorCode.ERR_UNKNOWN
    retryable: bool = False


class AlreadyMemberError(FamilyAccessError):
    """The user already belongs to the family."""

    code = ErrorCode.ERR_ALREADY_MEMBER


class MemberLimitReachedError(FamilyAccessError):
    """The family has no free member slots."""

    code = ErrorCode.ERR_MEMBER_LIMIT_REACHED


class MemberNotFoundError(FamilyAccessError):
    """No member with the given user ID exists in the family."""

    code = ErrorCode.ERR_MEMBER_NOT_FOUND


class CodeGenerationExhaustedError(FamilyAccessError):
    """Every generated invite code collided with an existing one."""

    code = ErrorCode.ERR_CODE_GENERATION_EXHAUSTED
    retryable = True


class DuplicateInviteCodeError(FamilyAccessError):
    """The storage layer rejected a write because the invite code is taken."""

    code = ErrorCode.ERR_DUPLICATE_INVITE_CODE
    retryable = True


class InvalidInviteCodeError(FamilyAccessError):
    """An invite code does not match the 8 uppercase hex character format."""

    code = ErrorCode.ERR_INVALID_INVITE_CODE


class PermissionDeniedError(FamilyAccessError):
    """The requesting user lacks the capability for the action."""

    code = ErrorCode.ERR_PERMISSION_DENIED


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity
    retryable: bool = False


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised while handling a request

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, ValidationError):
        fields = ", ".join(str(err["loc"][-1]) for err in exception.errors() if err.get("loc"))
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=f"Some values are invalid: {fields}." if fields else "Some values are invalid.",
            suggestion="Check the highlighted fields and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, AlreadyMemberError):
        return ErrorResponse(
            code=exception.code,
            message="This person is already a member of the family.",
            suggestion="Open the member list to change their role instead.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, MemberLimitReachedError):
        return ErrorResponse(
            code=exception.code,
            message="This family has reached its member limit.",
            suggestion="Ask a family admin to raise the limit or remove a member.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, MemberNotFoundError):
        return ErrorResponse(
            code=exception.code,
            message="That member could not be found in this family.",
            suggestion="Refresh the member list and try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, CodeGenerationExhaustedError | DuplicateInviteCodeError):
        return ErrorResponse(
            code=exception.code,
            message="We couldn't reserve an invite code for your family.",
            suggestion="Please try creating the family again.",
            severity=ErrorSeverity.MEDIUM,
            retryable=True,
        )

    if isinstance(exception, InvalidInviteCodeError):
        return ErrorResponse(
            code=exception.code,
            message="That invite code doesn't look right.",
            suggestion="Invite codes are 8 characters using 0-9 and A-F.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, PermissionDeniedError | PermissionError):
        return ErrorResponse(
            code=ErrorCode.ERR_PERMISSION_DENIED,
            message="You don't have permission for this action.",
            suggestion="Contact your family admin if you think this is an error.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
