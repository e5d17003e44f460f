"""Avatar tier progression driven by a student's global XP."""

from typing import Optional

from gamification.models.domain import AvatarTier
from shared.utils.exceptions import ValidationError

AVATAR_TIERS = (
    AvatarTier(
        id=1, name="Dojo Initiate", min_xp=0, max_xp=99,
        unlocks=["Basic avatar frame", "White belt glow"],
    ),
    AvatarTier(
        id=2, name="Rising Challenger", min_xp=100, max_xp=249,
        unlocks=["Blue aura ring", "Electric frame effect", "Custom stance selection"],
    ),
    AvatarTier(
        id=3, name="Guardian of the Dojang", min_xp=250, max_xp=499,
        unlocks=["Emerald guardian aura", "Shield frame effect", "Dojo background selection"],
    ),
    AvatarTier(
        id=4, name="Legendary Dragon", min_xp=500, max_xp=999,
        unlocks=["Dragon spirit aura", "Mythic frame glow", "Spirit companion preview", "Animated background"],
    ),
    AvatarTier(
        id=5, name="World Champion", min_xp=1000, max_xp=None,
        unlocks=["Golden champion aura", "Legendary frame with particles", "World Champion banner"],
    ),
)


def get_tier_from_xp(global_xp: int) -> AvatarTier:
    if global_xp < 0:
        raise ValidationError("global_xp", f"must be >= 0, got {global_xp}")
    for tier in reversed(AVATAR_TIERS):
        if global_xp >= tier.min_xp:
            return tier
    return AVATAR_TIERS[0]


def get_next_tier(current: AvatarTier) -> Optional[AvatarTier]:
    index = next(i for i, tier in enumerate(AVATAR_TIERS) if tier.id == current.id)
    if index + 1 < len(AVATAR_TIERS):
        return AVATAR_TIERS[index + 1]
    return None


def get_progress_to_next_tier(global_xp: int) -> dict:
    """
    Progress through the current tier.

    Returns:
        dict with current_tier, next_tier, progress (0-100, floored),
        xp_needed, xp_in_current_tier and tier_range. The top tier always
        reports progress 100 and a zero range.
    """
    current = get_tier_from_xp(global_xp)
    next_tier = get_next_tier(current)
    xp_in_current_tier = global_xp - current.min_xp

    if next_tier is None:
        return {
            "current_tier": current,
            "next_tier": None,
            "progress": 100,
            "xp_needed": 0,
            "xp_in_current_tier": xp_in_current_tier,
            "tier_range": 0,
        }

    tier_range = next_tier.min_xp - current.min_xp
    return {
        "current_tier": current,
        "next_tier": next_tier,
        "progress": min(100, (xp_in_current_tier * 100) // tier_range),
        "xp_needed": next_tier.min_xp - global_xp,
        "xp_in_current_tier": xp_in_current_tier,
        "tier_range": tier_range,
    }
