"""Reward service - runs the scoring engine and persists the results on a student."""

import logging
from typing import Optional

from sqlalchemy.orm import Session as DBSession

from gamification.models.domain import (
    ChallengeScore,
    ChallengeSubmission,
    GradingInput,
    GradingScore,
    TrustState,
)
from gamification.repositories.student_repository import StudentRepository
from gamification.services import scoring
from gamification.services.avatar_tiers import get_progress_to_next_tier
from gamification.services.trust_tier_service import TrustTierPolicy, auto_approves
from shared.models.entities import Student
from shared.utils.exceptions import StudentNotFoundException

logger = logging.getLogger("gamification.reward_service")


class RewardService:
    """
    Applies scoring results to student records.

    Scores are computed before anything is written, so an invalid submission
    never leaves a partial award behind.
    """

    def __init__(self, db: DBSession, trust_policy: Optional[TrustTierPolicy] = None):
        self.db = db
        self.repo = StudentRepository(db)
        self.trust_policy = trust_policy or TrustTierPolicy.from_settings()

    def record_grading(self, student_id: str, grading: GradingInput) -> GradingScore:
        """
        Score a class grading and add it to the student's totals.

        Club feature flags override whatever the caller sent: a club that has
        coach bonus or homework switched off never earns those bonuses.
        """
        student = self._load_student(student_id)
        club = self.repo.get_club(student.club_id)
        grading = grading.model_copy(update={
            "coach_bonus_enabled": bool(club and club.coach_bonus_enabled),
            "homework_enabled": bool(club and club.homework_enabled),
        })

        score = scoring.score_grading(grading)
        self.repo.add_rewards(
            student,
            stripe_points=score.class_pts,
            lifetime_xp=score.grading_xp + score.streak_bonus,
            global_xp=score.global_grading_xp,
        )
        logger.info(
            f"Grading recorded for student {student_id}: pts={score.class_pts} "
            f"xp={score.grading_xp} streak_bonus={score.streak_bonus} global={score.global_grading_xp}"
        )
        return score

    def record_challenge(self, student_id: str, submission: ChallengeSubmission) -> ChallengeScore:
        """Validate and score a challenge, then add local XP and global rank score."""
        score = scoring.score_challenge(submission)
        student = self._load_student(student_id)
        self.repo.add_rewards(
            student,
            lifetime_xp=score.local_xp,
            global_xp=score.global_rank_score,
        )
        logger.info(
            f"Challenge recorded for student {student_id}: type={submission.challenge_type.value} "
            f"tier={submission.difficulty_tier.value} video={submission.has_video_proof} "
            f"local_xp={score.local_xp} global={score.global_rank_score}"
        )
        return score

    def review_video(self, student_id: str, approved: bool) -> TrustState:
        """Apply one approve/reject decision to the student's trust tier."""
        student = self._load_student(student_id)
        current = self.repo.trust_state_of(student)
        updated = self.trust_policy.apply_video_review(current, approved)
        self.repo.save_trust_state(student, updated)
        return updated

    def get_progress(self, student_id: str) -> dict:
        """Totals, trust state and avatar tier progress for one student."""
        student = self._load_student(student_id, for_update=False)
        trust = self.repo.trust_state_of(student)
        return {
            "student_id": student.id,
            "current_stripe_points": student.current_stripe_points or 0,
            "lifetime_xp": student.lifetime_xp or 0,
            "global_xp": student.global_xp or 0,
            "world_rank": student.world_rank,
            "previous_world_rank": student.previous_world_rank,
            "trust": trust,
            "auto_approves_video": auto_approves(trust.tier),
            "avatar": get_progress_to_next_tier(student.global_xp or 0),
        }

    def _load_student(self, student_id: str, for_update: bool = True) -> Student:
        student = self.repo.get_by_id(student_id, for_update=for_update)
        if not student:
            raise StudentNotFoundException(student_id)
        return student
