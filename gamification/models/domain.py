"""Domain models for the scoring engine."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Mark(str, Enum):
    """Per-skill grading mark. UNSET items are excluded from every denominator."""
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"
    UNSET = "UNSET"

    @property
    def points(self) -> Optional[int]:
        return _MARK_POINTS[self]


_MARK_POINTS = {
    Mark.GREEN: 2,
    Mark.YELLOW: 1,
    Mark.RED: 0,
    Mark.UNSET: None,
}


class ChallengeType(str, Enum):
    """coach_pick is technical / instructor-curated, general is open fitness."""
    COACH_PICK = "coach_pick"
    GENERAL = "general"


class DifficultyTier(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    EPIC = "EPIC"  # weekly challenge only


class TrustTier(str, Enum):
    """Video-verification reputation, lowest first."""
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    TRUSTED = "trusted"


class PerformanceRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    NEEDS_IMPROVEMENT = "needs_improvement"


class GradingInput(BaseModel):
    """One class grading submission. Ephemeral; only its results are persisted."""
    skill_marks: List[Mark] = Field(default_factory=list)
    coach_bonus: int = Field(default=0, ge=0)
    homework: int = Field(default=0, ge=0)
    coach_bonus_enabled: bool = False
    homework_enabled: bool = False
    consecutive_classes: int = Field(default=0, ge=0)


class ChallengeSubmission(BaseModel):
    """One gamified challenge attempt."""
    challenge_type: ChallengeType
    difficulty_tier: DifficultyTier
    has_video_proof: bool = False
    is_weekly_challenge: bool = False


class TrustState(BaseModel):
    """A student's trust tier plus the counters that drive it."""
    tier: TrustTier = TrustTier.UNVERIFIED
    approval_streak: int = Field(default=0, ge=0)
    rejection_count: int = Field(default=0, ge=0)


class AvatarTier(BaseModel):
    """Cosmetic rank a student reaches by accumulating global XP."""
    id: int
    name: str
    min_xp: int
    max_xp: Optional[int] = None  # None for the open-ended top tier
    unlocks: List[str] = Field(default_factory=list)


class GradingScore(BaseModel):
    """Every currency derived from one grading submission."""
    class_pts: int
    class_xp: int
    grading_xp: int
    global_grading_xp: int
    streak_bonus: int
    is_legendary: bool
    rating: PerformanceRating


class ChallengeScore(BaseModel):
    """Local XP and global rank score earned by one challenge submission."""
    local_xp: int
    global_rank_score: int
