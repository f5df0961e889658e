"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Not found errors (404)
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    DONATION_NOT_FOUND = "DONATION_NOT_FOUND"
    CONTACT_NOT_FOUND = "CONTACT_NOT_FOUND"
    BUSINESS_NOT_FOUND = "BUSINESS_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_ROLE = "INVALID_ROLE"
    INVALID_QUERY = "INVALID_QUERY"
    NO_WORKSPACE_SELECTED = "NO_WORKSPACE_SELECTED"
    CANNOT_REMOVE_SELF = "CANNOT_REMOVE_SELF"
    CANNOT_DOWNGRADE_SELF = "CANNOT_DOWNGRADE_SELF"
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class WorkspaceNotFoundError(AppException):
    """Workspace not found."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_NOT_FOUND,
            message=f"Workspace not found: {workspace_id}",
            status_code=404,
            details={"workspace_id": workspace_id},
        )


class NoWorkspaceSelectedError(AppException):
    """The request has no current workspace to act on."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.NO_WORKSPACE_SELECTED,
            message="No workspace selected",
            status_code=400,
        )


class NotAMemberError(AppException):
    """User is not a member of the workspace."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="You are not a member of this workspace",
            status_code=403,
            details={"workspace_id": workspace_id},
        )


class InsufficientPermissionsError(AppException):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "Admin") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class MemberNotFoundError(AppException):
    """Target user has no membership in the workspace."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message="User not found in this workspace",
            status_code=404,
            details={"member_id": member_id},
        )


class AlreadyAMemberError(AppException):
    """User is already a member of the workspace."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message="This user is already a member of this workspace",
            status_code=400,
            details={"user_id": user_id},
        )


class MissingFieldError(AppException):
    """A required form field was not submitted."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.MISSING_FIELD,
            message=message,
            status_code=400,
        )


class InvalidRoleError(AppException):
    """Role label is not one of the known workspace roles."""

    def __init__(self, role: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ROLE,
            message=f"Invalid role: {role}",
            status_code=400,
            details={"role": role},
        )


class CannotRemoveSelfError(AppException):
    """A user tried to remove their own membership via the people page."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_REMOVE_SELF,
            message="You cannot remove yourself from the workspace",
            status_code=400,
        )


class CannotDowngradeSelfError(AppException):
    """A Super Admin tried to lower their own role."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_DOWNGRADE_SELF,
            message="You cannot downgrade your own Super Admin role",
            status_code=400,
        )


class InvalidQueryError(AppException):
    """A list query parameter (filter/sort/page) could not be parsed."""

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_QUERY,
            message=message,
            status_code=400,
            details={"value": value} if value is not None else None,
        )


class DonationNotFoundError(AppException):
    """Donation not found."""

    def __init__(self, donation_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.DONATION_NOT_FOUND,
            message=f"Donation not found: {donation_id}",
            status_code=404,
            details={"donation_id": donation_id},
        )


class ContactNotFoundError(AppException):
    """Contact not found."""

    def __init__(self, contact_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONTACT_NOT_FOUND,
            message=f"Contact not found: {contact_id}",
            status_code=404,
            details={"contact_id": contact_id},
        )


class BusinessNotFoundError(AppException):
    """Business not found."""

    def __init__(self, business_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.BUSINESS_NOT_FOUND,
            message=f"Business not found: {business_id}",
            status_code=404,
            details={"business_id": business_id},
        )
