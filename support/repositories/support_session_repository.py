"""Support session data access layer."""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from shared.models.entities import Club, SupportSession
from shared.utils.exceptions import DatabaseException

logger = logging.getLogger(__name__)


class SupportSessionRepository:
    """
    Repository for support session rows, keyed by token.

    Store failures are raised as DatabaseException and never disguised as a
    missing session.
    """

    def __init__(self, db: DBSession):
        self.db = db

    def create(
        self,
        token: str,
        kind: str,
        started_at: datetime,
        expires_at: datetime,
        operator_id: Optional[str] = None,
        target_club_id: Optional[str] = None,
        target_user_id: Optional[str] = None,
        reason: Optional[str] = None,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> SupportSession:
        """Insert a new session row and return it."""
        session = SupportSession(
            id=str(uuid.uuid4()),
            token=token,
            kind=kind,
            operator_id=operator_id,
            target_club_id=target_club_id,
            target_user_id=target_user_id,
            reason=reason,
            started_at=started_at,
            expires_at=expires_at,
            ended_at=None,
            was_used=False,
            ip=ip,
            user_agent=user_agent,
        )
        self.db.add(session)
        self._commit("create")
        self.db.refresh(session)
        return session

    def get_by_token(self, token: str, for_update: bool = False) -> Optional[SupportSession]:
        """
        Retrieve a session by its token.

        Args:
            token: Opaque bearer token
            for_update: Lock the row so the read and the following write see one snapshot
        """
        try:
            query = self.db.query(SupportSession).filter(SupportSession.token == token)
            if for_update:
                query = query.with_for_update()
            return query.first()
        except SQLAlchemyError as e:
            logger.error(f"Support session lookup failed: {e}")
            raise DatabaseException("get_by_token", e)

    def get_club(self, club_id: str) -> Optional[Club]:
        try:
            return self.db.query(Club).filter(Club.id == club_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Club lookup failed: {e}")
            raise DatabaseException("get_club", e)

    def mark_used(self, session: SupportSession) -> None:
        """Set was_used. Commits even when it was already set, releasing the row lock."""
        session.was_used = True
        self._commit("mark_used")

    def mark_ended(self, session: SupportSession, ended_at: datetime) -> None:
        if session.ended_at is not None:
            return
        session.ended_at = ended_at
        self._commit("mark_ended")

    def list_active_for_club(self, club_id: str, now: datetime) -> List[SupportSession]:
        """Sessions for a club that are neither ended nor expired at `now`."""
        try:
            return (
                self.db.query(SupportSession)
                .filter(
                    SupportSession.target_club_id == club_id,
                    SupportSession.ended_at.is_(None),
                    SupportSession.expires_at > now,
                )
                .order_by(SupportSession.started_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Active support session listing failed: {e}")
            raise DatabaseException("list_active_for_club", e)

    def release(self) -> None:
        """End the current transaction without writing, dropping any row locks."""
        self.db.rollback()

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Support session {operation} failed: {e}")
            raise DatabaseException(operation, e)
