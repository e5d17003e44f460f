"""
Support session service with state machine enforcement.

Lifecycle: created → (verified)* → ended | expired

- Verification may happen any number of times while the session is alive;
  was_used is an audit flag and never invalidates the token.
- Expiry is checked lazily at verification time; there is no sweep.
- end_session is idempotent and never fails for ended or expired sessions.

All support session state transitions go through this service.
"""
import json
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.orm import Session as DBSession

from config import get_settings
from shared.models.entities import SupportSession
from shared.utils.constants import DEFAULT_SUPPORT_REASON, TOKEN_LOG_PREFIX_LENGTH
from shared.utils.exceptions import ClubNotFoundException, SessionInvalidError, ValidationError
from support.models.domain import GrantContext, IssuedSession, SessionKind
from support.repositories.support_session_repository import SupportSessionRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def token_hint(token: str) -> str:
    """The loggable prefix of a bearer token."""
    return f"{token[:TOKEN_LOG_PREFIX_LENGTH]}..."


class SupportSessionService:
    """Mints, verifies and retires time-bounded support grants."""

    def __init__(self, db: DBSession, settings=None, clock: Optional[Clock] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.clock = clock or datetime.utcnow
        self.repo = SupportSessionRepository(db)

    def ttl_for(self, kind: SessionKind) -> timedelta:
        if kind is SessionKind.OPERATOR:
            return timedelta(hours=self.settings.operator_session_ttl_hours)
        return timedelta(minutes=self.settings.impersonation_ttl_minutes)

    def create_session(
        self,
        operator_id: str,
        target_club_id: Optional[str] = None,
        target_user_id: Optional[str] = None,
        reason: Optional[str] = None,
        kind: SessionKind = SessionKind.IMPERSONATION,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> IssuedSession:
        """
        Mint a new session and return its token and expiry.

        Raises:
            ValidationError: missing operator, or an impersonation without a target
            ClubNotFoundException: target club does not exist
        """
        kind = SessionKind(kind)
        if not operator_id:
            raise ValidationError("operator_id", "an operator is required")
        if kind is SessionKind.IMPERSONATION and not (target_club_id or target_user_id):
            raise ValidationError("target", "target_club_id or target_user_id required")
        if target_club_id and self.repo.get_club(target_club_id) is None:
            raise ClubNotFoundException(target_club_id)

        token = secrets.token_hex(self.settings.session_token_bytes)
        started_at = self.clock()
        expires_at = started_at + self.ttl_for(kind)

        session = self.repo.create(
            token=token,
            kind=kind.value,
            started_at=started_at,
            expires_at=expires_at,
            operator_id=operator_id,
            target_club_id=target_club_id,
            target_user_id=target_user_id,
            reason=reason or DEFAULT_SUPPORT_REASON,
            ip=ip,
            user_agent=user_agent,
        )
        logger.info(
            f"Support session {session.id} created: kind={kind.value} operator={operator_id} "
            f"club={target_club_id} user={target_user_id} token={token_hint(token)} expires_at={expires_at}"
        )
        return IssuedSession(token=token, expires_at=expires_at, session_id=session.id, kind=kind)

    def verify_session(self, token: str, kind: Optional[SessionKind] = None) -> GrantContext:
        """
        Check a token and return the grant it carries.

        Valid iff the row exists, has not been ended and now < expires_at. A
        successful check sets was_used without touching the expiry.

        Args:
            token: Bearer token presented by the target surface
            kind: When given, the session must be of this kind

        Raises:
            SessionInvalidError: not found, ended, expired or of the wrong kind
        """
        if not token:
            raise SessionInvalidError("not_found")

        session = self.repo.get_by_token(token, for_update=True)
        reason = self._invalid_reason(session, kind)
        if reason:
            self.repo.release()
            logger.warning(f"Support session rejected ({reason}): token={token_hint(token)}")
            raise SessionInvalidError(reason, token_hint(token))

        grant = self._grant_context(session)
        self.repo.mark_used(session)
        logger.info(f"Support session {grant.session_id} verified")
        return grant

    def end_session(self, token: str) -> None:
        """
        Terminate a session. Calling it again, or on an expired or unknown
        token, is a successful no-op; ended_at keeps its first value.
        """
        session = self.repo.get_by_token(token, for_update=True)
        if session is None:
            self.repo.release()
            logger.warning(f"End requested for unknown support session: token={token_hint(token)}")
            return
        if session.ended_at is not None:
            self.repo.release()
            return

        session_id = session.id
        self.repo.mark_ended(session, self.clock())
        logger.info(f"Support session {session_id} ended")

    def list_active_sessions(self, club_id: str) -> List[SupportSession]:
        return self.repo.list_active_for_club(club_id, self.clock())

    def _invalid_reason(self, session: Optional[SupportSession], kind: Optional[SessionKind]) -> Optional[str]:
        if session is None:
            return "not_found"
        if session.ended_at is not None:
            return "ended"
        if self.clock() >= session.expires_at:
            return "expired"
        if kind is not None and session.kind != SessionKind(kind).value:
            return "wrong_kind"
        return None

    def _grant_context(self, session: SupportSession) -> GrantContext:
        club = self.repo.get_club(session.target_club_id) if session.target_club_id else None
        return GrantContext(
            session_id=session.id,
            kind=SessionKind(session.kind),
            club_id=session.target_club_id,
            club_name=club.name if club else None,
            owner_email=club.owner_email if club else None,
            owner_name=club.owner_name if club else None,
            target_user_id=session.target_user_id,
            operator_id=session.operator_id,
            expires_at=session.expires_at,
            wizard_data=self._load_wizard_data(club),
        )

    @staticmethod
    def _load_wizard_data(club) -> Optional[dict]:
        if club is None or not club.wizard_data:
            return None
        try:
            return json.loads(club.wizard_data)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Club {club.id} has unreadable wizard data; omitting it from the grant")
            return None
