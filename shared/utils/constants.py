"""Application constants - all magic numbers centralized."""

# Class grading
MARK_MAX_VALUE = 2  # GREEN
MAX_CLASS_XP = 100  # perfect class, regardless of item count
GRADING_XP_CEILING = 110  # 101-110 marks a "Legendary" session
FLAT_BONUS_XP = 5  # coach bonus / homework are binary triggers

# World-ranking variant of grading XP
GLOBAL_MAX_COACH_BONUS = 2
GLOBAL_MAX_HOMEWORK_BONUS = 2

# Attendance streak bands, checked top-down: (min consecutive classes, bonus XP)
STREAK_BONUS_BANDS = (
    (10, 15),
    (5, 10),
    (3, 5),
)

# Performance rating bands (normalized 0-100 score)
RATING_EXCELLENT = 90
RATING_GOOD = 75
RATING_AVERAGE = 50

# Support sessions
DEFAULT_SUPPORT_REASON = "Support access"
TOKEN_LOG_PREFIX_LENGTH = 8  # characters of a token that may appear in logs
