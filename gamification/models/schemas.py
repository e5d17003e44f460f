"""Pydantic API request/response schemas for the gamification endpoints."""
from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt

from gamification.models.domain import (
    AvatarTier,
    ChallengeType,
    DifficultyTier,
    TrustState,
)

# Marks arrive as 0/1/2, as names, or as null for an unentered item.
# Strict types keep JSON booleans and floats from being coerced to marks or counts.
RawMark = Optional[Union[StrictInt, str]]


class GradingRequest(BaseModel):
    """A coach's grading of one student for one class."""
    skill_marks: List[RawMark] = Field(default_factory=list)
    coach_bonus: StrictInt = 0
    homework: StrictInt = 0
    coach_bonus_enabled: StrictBool = False
    homework_enabled: StrictBool = False
    consecutive_classes: StrictInt = 0


class ChallengeRequest(BaseModel):
    challenge_type: ChallengeType
    difficulty_tier: DifficultyTier
    has_video_proof: StrictBool = False
    is_weekly_challenge: StrictBool = False


class VideoReviewRequest(BaseModel):
    approved: StrictBool


class AvatarProgressResponse(BaseModel):
    current_tier: AvatarTier
    next_tier: Optional[AvatarTier] = None
    progress: int
    xp_needed: int
    xp_in_current_tier: int
    tier_range: int


class StudentProgressResponse(BaseModel):
    """Running totals for one student."""
    student_id: str
    current_stripe_points: int
    lifetime_xp: int
    global_xp: int
    world_rank: Optional[int] = None
    previous_world_rank: Optional[int] = None
    trust: TrustState
    auto_approves_video: bool
    avatar: AvatarProgressResponse
