"""Unit tests for shared/utils/exceptions.py"""

import pytest
from fastapi import HTTPException

from shared.utils.exceptions import (
    ClubNotFoundException,
    DatabaseException,
    InvalidCredentialsError,
    InvalidTierError,
    SessionInvalidError,
    StudentNotFoundException,
    TaekUpException,
    ValidationError,
)


class TestHierarchy:

    @pytest.mark.parametrize("exc", [
        ValidationError("x", "bad"),
        InvalidTierError("EPIC"),
        SessionInvalidError("expired"),
        InvalidCredentialsError(),
        StudentNotFoundException("s-1"),
        ClubNotFoundException("c-1"),
        DatabaseException("create", RuntimeError("boom")),
    ])
    def test_all_are_taekup_exceptions(self, exc):
        assert isinstance(exc, TaekUpException)

    def test_invalid_tier_is_a_validation_error(self):
        exc = InvalidTierError("EPIC")
        assert isinstance(exc, ValidationError)
        assert exc.field == "tier"
        assert "weekly" in str(exc)


class TestHttpMapping:

    @pytest.mark.parametrize("exc,status_code", [
        (ValidationError("marks", "bad"), 422),
        (InvalidTierError("EPIC"), 422),
        (SessionInvalidError("ended"), 401),
        (InvalidCredentialsError(), 401),
        (StudentNotFoundException("s-1"), 404),
        (ClubNotFoundException("c-1"), 404),
        (DatabaseException("create", RuntimeError("boom")), 500),
    ])
    def test_status_codes(self, exc, status_code):
        http_exc = exc.to_http_exception()
        assert isinstance(http_exc, HTTPException)
        assert http_exc.status_code == status_code

    @pytest.mark.parametrize("reason", ["not_found", "ended", "expired", "wrong_kind"])
    def test_session_reason_is_not_exposed(self, reason):
        exc = SessionInvalidError(reason, token_hint="abcdef01...")
        assert exc.reason == reason
        assert exc.to_http_exception().detail == "Invalid or expired session"

    def test_database_error_hides_cause(self):
        exc = DatabaseException("get_by_token", RuntimeError("password=hunter2"))
        assert "hunter2" in str(exc)
        assert "hunter2" not in exc.to_http_exception().detail
        assert exc.operation == "get_by_token"
