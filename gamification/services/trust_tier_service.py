"""
Trust tier policy for video proof review.

Tiers move one step at a time:
  unverified → verified → trusted   (N consecutive approvals)
  trusted → verified → unverified   (M rejections)

The thresholds are operational settings, not invariants of the engine.
"""

import logging
from typing import Optional

from config import get_settings
from gamification.models.domain import TrustState, TrustTier
from shared.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

_TIER_ORDER = (TrustTier.UNVERIFIED, TrustTier.VERIFIED, TrustTier.TRUSTED)


class TrustTierPolicy:
    """Applies approve/reject decisions to a student's TrustState."""

    def __init__(self, promotion_streak: int, demotion_rejections: int):
        if promotion_streak <= 0:
            raise ValidationError("promotion_streak", f"must be > 0, got {promotion_streak}")
        if demotion_rejections <= 0:
            raise ValidationError("demotion_rejections", f"must be > 0, got {demotion_rejections}")
        self.promotion_streak = promotion_streak
        self.demotion_rejections = demotion_rejections

    @classmethod
    def from_settings(cls, settings=None) -> "TrustTierPolicy":
        settings = settings or get_settings()
        return cls(
            promotion_streak=settings.trust_promotion_streak,
            demotion_rejections=settings.trust_demotion_rejections,
        )

    def apply_video_review(self, state: TrustState, approved: bool) -> TrustState:
        """Return the state after one reviewed video. The input is not modified."""
        if approved:
            return self._approve(state)
        return self._reject(state)

    def _approve(self, state: TrustState) -> TrustState:
        streak = state.approval_streak + 1
        if streak < self.promotion_streak:
            return TrustState(tier=state.tier, approval_streak=streak, rejection_count=state.rejection_count)

        promoted = _step(state.tier, +1)
        if promoted is None:
            # Already trusted; keep counting so the streak stays visible.
            return TrustState(tier=state.tier, approval_streak=streak, rejection_count=state.rejection_count)

        logger.info(f"Trust tier promoted {state.tier.value} → {promoted.value} after {streak} approvals")
        return TrustState(tier=promoted, approval_streak=0, rejection_count=state.rejection_count)

    def _reject(self, state: TrustState) -> TrustState:
        rejections = state.rejection_count + 1
        if rejections < self.demotion_rejections:
            return TrustState(tier=state.tier, approval_streak=0, rejection_count=rejections)

        demoted = _step(state.tier, -1)
        if demoted is None:
            return TrustState(tier=state.tier, approval_streak=0, rejection_count=rejections)

        logger.info(f"Trust tier demoted {state.tier.value} → {demoted.value} after {rejections} rejections")
        return TrustState(tier=demoted, approval_streak=0, rejection_count=0)


def auto_approves(tier: TrustTier) -> bool:
    """Only trusted students get their video proof approved without review."""
    return TrustTier(tier) is TrustTier.TRUSTED


def _step(tier: TrustTier, direction: int) -> Optional[TrustTier]:
    index = _TIER_ORDER.index(TrustTier(tier)) + direction
    if 0 <= index < len(_TIER_ORDER):
        return _TIER_ORDER[index]
    return None
