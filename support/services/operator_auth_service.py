"""Super-admin login on top of operator-kind support sessions."""
import hmac
import logging
from typing import Optional

from sqlalchemy.orm import Session as DBSession

from config import get_settings
from shared.utils.exceptions import InvalidCredentialsError
from support.models.domain import IssuedSession, SessionKind
from support.services.support_session_service import Clock, SupportSessionService

logger = logging.getLogger(__name__)


class OperatorAuthService:
    """Issues, checks and revokes the super-admin's own session token."""

    def __init__(self, db: DBSession, settings=None, clock: Optional[Clock] = None):
        self.settings = settings or get_settings()
        self.sessions = SupportSessionService(db, settings=self.settings, clock=clock)

    def login(
        self,
        email: str,
        password: str,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> IssuedSession:
        """
        Check the configured super-admin credentials and open an operator session.

        Raises:
            InvalidCredentialsError: wrong email or password, or no password configured
        """
        expected_password = self.settings.super_admin_password
        email_ok = hmac.compare_digest(
            (email or "").strip().lower().encode(),
            self.settings.super_admin_email.strip().lower().encode(),
        )
        password_ok = bool(expected_password) and hmac.compare_digest(
            (password or "").encode(), expected_password.encode()
        )
        if not (email_ok and password_ok):
            logger.warning(f"Super-admin login failed for: {email}")
            raise InvalidCredentialsError()

        issued = self.sessions.create_session(
            operator_id=self.settings.super_admin_email,
            reason="Super-admin login",
            kind=SessionKind.OPERATOR,
            ip=ip,
            user_agent=user_agent,
        )
        logger.info(f"Super-admin login succeeded for: {self.settings.super_admin_email}")
        return issued

    def authenticate(self, token: str) -> str:
        """
        Return the operator id behind a live operator session.

        Raises:
            SessionInvalidError: token unknown, ended, expired, or not an operator session
        """
        grant = self.sessions.verify_session(token, kind=SessionKind.OPERATOR)
        return grant.operator_id

    def logout(self, token: str) -> None:
        self.sessions.end_session(token)
