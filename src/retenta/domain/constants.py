"""Centralized constants for the Retenta scheduler.

All magic numbers and tuning defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
MS_PER_DAY = 24 * 60 * 60 * 1000

# ---------- Quality ratings ----------
QUALITY_MIN = 0
QUALITY_MAX = 5
QUALITY_PASS = 3
QUALITY_NEUTRAL = 3

# ---------- SM-2 ----------
EASE_FACTOR_MIN = 1.3
EASE_FACTOR_DEFAULT = 2.5
INTERVAL_LADDER_DAYS = (1, 3)

# ---------- Mastery ----------
MASTERY_WEIGHTS = (0.4, 0.3, 0.3)  # accuracy, spacing, streak
MASTERY_INTERVAL_DAYS = 30
MASTERY_STREAK_TARGET = 5
MASTERED_THRESHOLD = 80

# ---------- Selection ----------
REVIEW_SLOTS_PER_PAGE = 3
MAX_REVIEW_ITEMS_PER_SESSION = 10
MAX_NEW_ITEMS_PER_SESSION = 3
PRESENTATION_BUDGET = 6

# ---------- Storage ----------
DEFAULT_LANGUAGE = "en"
ITEM_KEY_SEPARATOR = ":"
