"""Unit tests for gamification/services/trust_tier_service.py"""

import pytest

from gamification.models.domain import TrustState, TrustTier
from gamification.services.trust_tier_service import TrustTierPolicy, auto_approves
from shared.utils.exceptions import ValidationError


@pytest.fixture
def policy():
    return TrustTierPolicy(promotion_streak=3, demotion_rejections=2)


def _review_many(policy, state, decisions):
    for approved in decisions:
        state = policy.apply_video_review(state, approved)
    return state


class TestPromotion:
    def test_streak_counts_up(self, policy):
        state = policy.apply_video_review(TrustState(), approved=True)
        assert state.tier is TrustTier.UNVERIFIED
        assert state.approval_streak == 1

    def test_promotes_after_threshold(self, policy):
        state = _review_many(policy, TrustState(), [True, True, True])
        assert state.tier is TrustTier.VERIFIED
        assert state.approval_streak == 0

    def test_promotes_one_step_at_a_time(self, policy):
        state = _review_many(policy, TrustState(), [True] * 6)
        assert state.tier is TrustTier.TRUSTED

    def test_trusted_is_the_ceiling(self, policy):
        state = _review_many(policy, TrustState(tier=TrustTier.TRUSTED), [True] * 4)
        assert state.tier is TrustTier.TRUSTED
        assert state.approval_streak == 4

    def test_rejection_breaks_the_streak(self, policy):
        state = _review_many(policy, TrustState(), [True, True, False, True, True])
        assert state.tier is TrustTier.UNVERIFIED
        assert state.approval_streak == 2

    def test_input_state_is_not_modified(self, policy):
        original = TrustState(approval_streak=2)
        policy.apply_video_review(original, approved=True)
        assert original.approval_streak == 2
        assert original.tier is TrustTier.UNVERIFIED


class TestDemotion:
    def test_demotes_after_threshold(self, policy):
        state = _review_many(policy, TrustState(tier=TrustTier.TRUSTED), [False, False])
        assert state.tier is TrustTier.VERIFIED
        assert state.rejection_count == 0

    def test_single_rejection_only_counts(self, policy):
        state = policy.apply_video_review(TrustState(tier=TrustTier.VERIFIED), approved=False)
        assert state.tier is TrustTier.VERIFIED
        assert state.rejection_count == 1

    def test_unverified_is_the_floor(self, policy):
        state = _review_many(policy, TrustState(), [False, False, False])
        assert state.tier is TrustTier.UNVERIFIED
        assert state.rejection_count == 3


class TestPolicyConfiguration:
    def test_thresholds_must_be_positive(self):
        with pytest.raises(ValidationError):
            TrustTierPolicy(promotion_streak=0, demotion_rejections=2)
        with pytest.raises(ValidationError):
            TrustTierPolicy(promotion_streak=3, demotion_rejections=-1)

    def test_from_settings(self, test_settings):
        policy = TrustTierPolicy.from_settings(test_settings)
        assert policy.promotion_streak == 3
        assert policy.demotion_rejections == 2


class TestAutoApproves:
    @pytest.mark.parametrize("tier,expected", [
        (TrustTier.UNVERIFIED, False),
        (TrustTier.VERIFIED, False),
        (TrustTier.TRUSTED, True),
        ("trusted", True),
    ])
    def test_only_trusted(self, tier, expected):
        assert auto_approves(tier) is expected
