"""Gamification models."""
from gamification.models.domain import (
    Mark,
    ChallengeType,
    DifficultyTier,
    TrustTier,
    PerformanceRating,
    GradingInput,
    ChallengeSubmission,
    TrustState,
    AvatarTier,
    GradingScore,
    ChallengeScore,
)
