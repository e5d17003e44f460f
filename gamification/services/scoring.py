"""
Scoring engine: converts raw grading and challenge data into reward currencies.

Three currencies come out of here:
- PTS: raw sum of class marks, progress toward the next stripe (reset on promotion)
- XP: normalized per-session score, 0-100 (0-110 with bonuses)
- Global rank score: small, anti-inflated values for the cross-club leaderboard

Every function is pure. Out-of-domain input raises ValidationError instead of
being clamped, because these numbers end up on cross-tenant leaderboards.
"""

from types import MappingProxyType
from typing import Iterable, List, NamedTuple, Optional, Union

from gamification.models.domain import (
    ChallengeScore,
    ChallengeSubmission,
    ChallengeType,
    DifficultyTier,
    GradingInput,
    GradingScore,
    Mark,
    PerformanceRating,
)
from shared.utils.constants import (
    FLAT_BONUS_XP,
    GLOBAL_MAX_COACH_BONUS,
    GLOBAL_MAX_HOMEWORK_BONUS,
    GRADING_XP_CEILING,
    MARK_MAX_VALUE,
    MAX_CLASS_XP,
    RATING_AVERAGE,
    RATING_EXCELLENT,
    RATING_GOOD,
    STREAK_BONUS_BANDS,
)
from shared.utils.exceptions import InvalidTierError, ValidationError

MarkLike = Union[Mark, int, str, None]


class RewardValues(NamedTuple):
    without_video: int
    with_video: int


# Local XP per challenge. coach_pick is worth twice general, video proof doubles the award.
CHALLENGE_XP_MATRIX = MappingProxyType({
    ChallengeType.COACH_PICK: MappingProxyType({
        DifficultyTier.EASY: RewardValues(10, 20),
        DifficultyTier.MEDIUM: RewardValues(20, 40),
        DifficultyTier.HARD: RewardValues(35, 70),
        DifficultyTier.EPIC: RewardValues(50, 100),
    }),
    ChallengeType.GENERAL: MappingProxyType({
        DifficultyTier.EASY: RewardValues(5, 10),
        DifficultyTier.MEDIUM: RewardValues(10, 20),
        DifficultyTier.HARD: RewardValues(15, 30),
        DifficultyTier.EPIC: RewardValues(25, 50),
    }),
})

# Global leaderboard score per challenge, an order of magnitude below local XP.
ARENA_GLOBAL_SCORE_MATRIX = MappingProxyType({
    ChallengeType.COACH_PICK: MappingProxyType({
        DifficultyTier.EASY: RewardValues(1, 5),
        DifficultyTier.MEDIUM: RewardValues(3, 15),
        DifficultyTier.HARD: RewardValues(5, 25),
        DifficultyTier.EPIC: RewardValues(10, 35),
    }),
    ChallengeType.GENERAL: MappingProxyType({
        DifficultyTier.EASY: RewardValues(1, 3),
        DifficultyTier.MEDIUM: RewardValues(2, 5),
        DifficultyTier.HARD: RewardValues(3, 10),
        DifficultyTier.EPIC: RewardValues(5, 15),
    }),
})

_MARKS_BY_POINTS = {2: Mark.GREEN, 1: Mark.YELLOW, 0: Mark.RED}


# ── Input validation ────────────────────────────────────────────


def coerce_mark(value: MarkLike) -> Mark:
    """
    Accept a Mark, its name, its point value (0/1/2) or None (UNSET).

    Raises:
        ValidationError: for anything else, including booleans
    """
    if value is None:
        return Mark.UNSET
    if isinstance(value, Mark):
        return value
    if isinstance(value, bool):
        raise ValidationError("mark", f"unsupported mark {value!r}")
    if isinstance(value, int):
        if value not in _MARKS_BY_POINTS:
            raise ValidationError("mark", f"mark value must be 0, 1 or 2, got {value}")
        return _MARKS_BY_POINTS[value]
    if isinstance(value, str):
        try:
            return Mark(value.upper())
        except ValueError:
            raise ValidationError("mark", f"unknown mark {value!r}") from None
    raise ValidationError("mark", f"unsupported mark {value!r}")


def _coerce_enum(enum_cls, value, field: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(field, f"unknown {field} {value!r}") from None


def require_count(field: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"expected an integer, got {value!r}")
    if value < 0:
        raise ValidationError(field, f"must be >= 0, got {value}")
    return value


def _require_flag(field: str, value: bool) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(field, f"expected a boolean, got {value!r}")
    return value


def _graded_points(marks: Iterable[MarkLike]) -> List[int]:
    """Point values of every non-UNSET mark, in order."""
    if marks is None:
        raise ValidationError("marks", "expected a sequence of marks")
    points = []
    for raw in marks:
        mark = coerce_mark(raw)
        if mark is not Mark.UNSET:
            points.append(mark.points)
    return points


def _round_ratio(numerator: int, denominator: int) -> int:
    """round(numerator / denominator), halves rounded up, in exact integer arithmetic."""
    return (2 * numerator + denominator) // (2 * denominator)


# ── Class grading ───────────────────────────────────────────────


def compute_class_pts(marks: Iterable[MarkLike]) -> int:
    """
    Raw sum of graded marks (GREEN=2, YELLOW=1, RED=0), UNSET skipped.

    Intentionally uncapped: more graded items means more stripe progress.
    """
    return sum(_graded_points(marks))


def compute_class_xp(marks: Iterable[MarkLike]) -> int:
    """
    Normalized class XP: a perfect class is always exactly 100.

    round(sum / (graded_count * 2) * 100); 0 when nothing is graded.
    """
    points = _graded_points(marks)
    if not points:
        return 0
    return _round_ratio(sum(points) * MAX_CLASS_XP, len(points) * MARK_MAX_VALUE)


def compute_grading_xp(
    marks: Iterable[MarkLike],
    coach_bonus: int = 0,
    homework: int = 0,
    coach_bonus_enabled: bool = False,
    homework_enabled: bool = False,
) -> int:
    """
    The 110 protocol: class XP plus a flat +5 per enabled, non-zero bonus.

    Coach bonus and homework are binary triggers, not magnitudes. The result is
    capped at 110; 101-110 marks a Legendary session.
    """
    require_count("coach_bonus", coach_bonus)
    require_count("homework", homework)
    _require_flag("coach_bonus_enabled", coach_bonus_enabled)
    _require_flag("homework_enabled", homework_enabled)

    points = _graded_points(marks)
    if not points:
        return 0

    skill_score = _round_ratio(sum(points) * MAX_CLASS_XP, len(points) * MARK_MAX_VALUE)
    bonus_points = FLAT_BONUS_XP if coach_bonus_enabled and coach_bonus > 0 else 0
    homework_points = FLAT_BONUS_XP if homework_enabled and homework > 0 else 0
    return min(skill_score + bonus_points + homework_points, GRADING_XP_CEILING)


def compute_global_grading_xp(
    marks: Iterable[MarkLike],
    coach_bonus: int = 0,
    homework: int = 0,
    coach_bonus_enabled: bool = False,
    homework_enabled: bool = False,
) -> int:
    """
    World-ranking grading XP, normalized to 0-100.

    Bonus and homework each count for at most 2 points, and an enabled flag
    always adds its full 2 to the possible total, so generous coaches cannot
    inflate the global leaderboard.
    """
    require_count("coach_bonus", coach_bonus)
    require_count("homework", homework)
    _require_flag("coach_bonus_enabled", coach_bonus_enabled)
    _require_flag("homework_enabled", homework_enabled)

    points = _graded_points(marks)
    if not points:
        return 0

    earned = sum(points)
    possible = len(points) * MARK_MAX_VALUE
    if coach_bonus_enabled:
        earned += min(coach_bonus, GLOBAL_MAX_COACH_BONUS)
        possible += GLOBAL_MAX_COACH_BONUS
    if homework_enabled:
        earned += min(homework, GLOBAL_MAX_HOMEWORK_BONUS)
        possible += GLOBAL_MAX_HOMEWORK_BONUS
    return _round_ratio(earned * MAX_CLASS_XP, possible)


def compute_total_session_pts(
    marks: Iterable[MarkLike],
    bonus_points: int = 0,
    homework_points: int = 0,
) -> int:
    """Class PTS with the coach's bonus and homework points added on top."""
    require_count("bonus_points", bonus_points)
    require_count("homework_points", homework_points)
    return compute_class_pts(marks) + bonus_points + homework_points


def is_legendary(grading_xp: int) -> bool:
    """True for a grading XP above a perfect class (101-110)."""
    require_count("grading_xp", grading_xp)
    return MAX_CLASS_XP < grading_xp <= GRADING_XP_CEILING


def get_performance_rating(score: int) -> PerformanceRating:
    require_count("score", score)
    if score >= RATING_EXCELLENT:
        return PerformanceRating.EXCELLENT
    if score >= RATING_GOOD:
        return PerformanceRating.GOOD
    if score >= RATING_AVERAGE:
        return PerformanceRating.AVERAGE
    return PerformanceRating.NEEDS_IMPROVEMENT


def calculate_streak_bonus(consecutive_classes: int) -> int:
    """Step function: <3 → 0, 3-4 → 5, 5-9 → 10, 10+ → 15."""
    require_count("consecutive_classes", consecutive_classes)
    for threshold, bonus in STREAK_BONUS_BANDS:
        if consecutive_classes >= threshold:
            return bonus
    return 0


# ── Challenges ──────────────────────────────────────────────────


def is_valid_tier_selection(tier: Union[DifficultyTier, str], is_weekly_challenge: bool) -> bool:
    """EPIC is reserved for the weekly challenge; every other tier is always allowed."""
    tier = _coerce_enum(DifficultyTier, tier, "tier")
    _require_flag("is_weekly_challenge", is_weekly_challenge)
    return not (tier is DifficultyTier.EPIC and not is_weekly_challenge)


def ensure_valid_tier_selection(tier: Union[DifficultyTier, str], is_weekly_challenge: bool) -> DifficultyTier:
    """
    Raising form of is_valid_tier_selection.

    Raises:
        InvalidTierError: EPIC picked for a non-weekly challenge
    """
    if not is_valid_tier_selection(tier, is_weekly_challenge):
        raise InvalidTierError(DifficultyTier.EPIC.value)
    return _coerce_enum(DifficultyTier, tier, "tier")


def _lookup(matrix, challenge_type, tier, has_video_proof: bool) -> int:
    challenge_type = _coerce_enum(ChallengeType, challenge_type, "challenge_type")
    tier = _coerce_enum(DifficultyTier, tier, "tier")
    _require_flag("has_video_proof", has_video_proof)
    values = matrix[challenge_type][tier]
    return values.with_video if has_video_proof else values.without_video


def calculate_local_xp(
    challenge_type: Union[ChallengeType, str],
    tier: Union[DifficultyTier, str],
    has_video_proof: bool,
) -> int:
    """Local (club) XP for a challenge: the premium value with video proof, the free one without."""
    return _lookup(CHALLENGE_XP_MATRIX, challenge_type, tier, has_video_proof)


def calculate_arena_global_score(
    challenge_type: Union[ChallengeType, str],
    tier: Union[DifficultyTier, str],
    has_video_proof: bool,
) -> int:
    """Global rank score for a challenge."""
    return _lookup(ARENA_GLOBAL_SCORE_MATRIX, challenge_type, tier, has_video_proof)


# ── Aggregates ──────────────────────────────────────────────────


def score_grading(grading: GradingInput) -> GradingScore:
    """Compute every grading currency for one submission."""
    grading_xp = compute_grading_xp(
        grading.skill_marks,
        grading.coach_bonus,
        grading.homework,
        grading.coach_bonus_enabled,
        grading.homework_enabled,
    )
    return GradingScore(
        class_pts=compute_class_pts(grading.skill_marks),
        class_xp=compute_class_xp(grading.skill_marks),
        grading_xp=grading_xp,
        global_grading_xp=compute_global_grading_xp(
            grading.skill_marks,
            grading.coach_bonus,
            grading.homework,
            grading.coach_bonus_enabled,
            grading.homework_enabled,
        ),
        streak_bonus=calculate_streak_bonus(grading.consecutive_classes),
        is_legendary=is_legendary(grading_xp),
        rating=get_performance_rating(grading_xp),
    )


def score_challenge(submission: ChallengeSubmission) -> ChallengeScore:
    """
    Validate the tier selection and compute both challenge currencies.

    Raises:
        InvalidTierError: EPIC tier on a non-weekly challenge
    """
    ensure_valid_tier_selection(submission.difficulty_tier, submission.is_weekly_challenge)
    return ChallengeScore(
        local_xp=calculate_local_xp(
            submission.challenge_type, submission.difficulty_tier, submission.has_video_proof
        ),
        global_rank_score=calculate_arena_global_score(
            submission.challenge_type, submission.difficulty_tier, submission.has_video_proof
        ),
    )
