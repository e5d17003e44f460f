"""Custom exception hierarchy for better error handling."""
from typing import Optional

from fastapi import HTTPException, status


class TaekUpException(Exception):
    """Base exception for all application errors."""
    pass


class ValidationError(TaekUpException):
    """Raised when scoring or session input is outside its documented domain."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {reason}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(self)
        )


class InvalidTierError(ValidationError):
    """Raised when the EPIC tier is picked for a challenge that is not the weekly one."""

    def __init__(self, tier: str):
        self.tier = tier
        super().__init__("tier", f"{tier} tier is only allowed for weekly challenges")


class SessionInvalidError(TaekUpException):
    """
    Raised when a support session token cannot be honoured.

    reason is one of 'not_found', 'ended', 'expired', 'wrong_kind' and is meant
    for logs; callers only ever see the generic message.
    """

    def __init__(self, reason: str, token_hint: Optional[str] = None):
        self.reason = reason
        self.token_hint = token_hint
        super().__init__(f"Invalid or expired session ({reason})")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session"
        )


class InvalidCredentialsError(TaekUpException):
    """Raised when a super-admin login fails."""

    def __init__(self):
        super().__init__("Invalid credentials")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )


class StudentNotFoundException(TaekUpException):
    """Raised when a student is not found."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student {student_id} not found")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Student {self.student_id} not found"
        )


class ClubNotFoundException(TaekUpException):
    """Raised when a club is not found."""

    def __init__(self, club_id: str):
        self.club_id = club_id
        super().__init__(f"Club {club_id} not found")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Club {self.club_id} not found"
        )


class DatabaseException(TaekUpException):
    """Raised when database operations fail."""

    def __init__(self, operation: str, original_error: Exception):
        self.operation = operation
        self.original_error = original_error
        super().__init__(f"Database {operation} failed: {str(original_error)}")

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database operation failed"
        )
