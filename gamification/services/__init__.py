"""Gamification services - scoring engine, tier policies and reward persistence."""
from .reward_service import RewardService
from .trust_tier_service import TrustTierPolicy

__all__ = [
    "RewardService",
    "TrustTierPolicy",
]
