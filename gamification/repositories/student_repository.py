"""Student data access layer for reward currencies and trust state."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from gamification.models.domain import TrustState, TrustTier
from shared.models.entities import Club, Student
from shared.utils.exceptions import DatabaseException

logger = logging.getLogger(__name__)


class StudentRepository:
    """Repository for reading students and writing their reward fields."""

    def __init__(self, db: DBSession):
        self.db = db

    def get_by_id(self, student_id: str, for_update: bool = False) -> Optional[Student]:
        """
        Retrieve a student by ID.

        Args:
            student_id: Student identifier
            for_update: Lock the row until the surrounding transaction ends

        Returns:
            Student if found, None otherwise
        """
        try:
            query = self.db.query(Student).filter(Student.id == student_id)
            if for_update:
                query = query.with_for_update()
            return query.first()
        except SQLAlchemyError as e:
            logger.error(f"Student lookup failed: {e}")
            raise DatabaseException("get_student", e)

    def get_club(self, club_id: str) -> Optional[Club]:
        """Club whose feature flags apply to a student's gradings."""
        try:
            return self.db.query(Club).filter(Club.id == club_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Club lookup failed: {e}")
            raise DatabaseException("get_club", e)

    def add_rewards(
        self,
        student: Student,
        stripe_points: int = 0,
        lifetime_xp: int = 0,
        global_xp: int = 0,
    ) -> Student:
        """
        Add computed rewards to a student's running totals and commit.

        All deltas are non-negative; callers pass values straight from the
        scoring engine.
        """
        student.current_stripe_points = (student.current_stripe_points or 0) + stripe_points
        student.lifetime_xp = (student.lifetime_xp or 0) + lifetime_xp
        student.global_xp = (student.global_xp or 0) + global_xp
        student.updated_at = datetime.utcnow()
        self._commit("add_rewards")
        self.db.refresh(student)
        return student

    def save_trust_state(self, student: Student, state: TrustState) -> Student:
        student.trust_tier = state.tier.value
        student.video_approval_streak = state.approval_streak
        student.video_rejection_count = state.rejection_count
        student.updated_at = datetime.utcnow()
        self._commit("save_trust_state")
        self.db.refresh(student)
        return student

    @staticmethod
    def trust_state_of(student: Student) -> TrustState:
        return TrustState(
            tier=TrustTier(student.trust_tier or TrustTier.UNVERIFIED.value),
            approval_streak=student.video_approval_streak or 0,
            rejection_count=student.video_rejection_count or 0,
        )

    def _commit(self, operation: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Student {operation} failed: {e}")
            raise DatabaseException(operation, e)
