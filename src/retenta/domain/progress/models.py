"""
Domain models for vocabulary progress.

These are pure data structures with no I/O or external dependencies.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from retenta.domain import constants


class InteractionKind(str, Enum):
    """Observed signals from the page that map onto a quality rating."""

    HOVER = "hover"
    PRONUNCIATION = "pronunciation"
    CONTEXT = "context"
    IGNORED = "ignored"
    CLICKED = "clicked"


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Tuning knobs for the SM-2 scheduler.

    Attributes:
        min_ease: Floor applied to the ease factor after every update.
        default_ease: Ease factor given to an item on its first review.
        interval_ladder: Fixed intervals (days) for the first successes in a streak.
            Past the end of the ladder, intervals grow by the ease factor.
        pass_threshold: Lowest quality that counts as a successful recall.
        mastery_weights: (accuracy, spacing, streak) weights, summing to 1.0.
        mastery_interval_days: Interval at which the spacing signal saturates.
        mastery_streak_target: Streak length at which the streak signal saturates.
        mastered_threshold: Mastery at or above which an item counts as mastered.
        review_slots: Maximum due items shown on one page.
        max_review_items: Default limit for due-item queries.
        max_new_items: Default limit for new-item introduction.
        presentation_budget: Default number of items annotated per page.
    """

    min_ease: float = constants.EASE_FACTOR_MIN
    default_ease: float = constants.EASE_FACTOR_DEFAULT
    interval_ladder: tuple[int, ...] = constants.INTERVAL_LADDER_DAYS
    pass_threshold: int = constants.QUALITY_PASS
    mastery_weights: tuple[float, float, float] = constants.MASTERY_WEIGHTS
    mastery_interval_days: int = constants.MASTERY_INTERVAL_DAYS
    mastery_streak_target: int = constants.MASTERY_STREAK_TARGET
    mastered_threshold: int = constants.MASTERED_THRESHOLD
    review_slots: int = constants.REVIEW_SLOTS_PER_PAGE
    max_review_items: int = constants.MAX_REVIEW_ITEMS_PER_SESSION
    max_new_items: int = constants.MAX_NEW_ITEMS_PER_SESSION
    presentation_budget: int = constants.PRESENTATION_BUDGET

    def __post_init__(self):
        if not self.interval_ladder:
            raise ValueError("interval_ladder must contain at least one interval")
        if any(days < 1 for days in self.interval_ladder):
            raise ValueError(f"interval_ladder entries must be >= 1 day: {self.interval_ladder}")
        if self.min_ease <= 0:
            raise ValueError(f"min_ease must be positive, got {self.min_ease}")
        if self.default_ease < self.min_ease:
            raise ValueError(
                f"default_ease ({self.default_ease}) must not be below min_ease ({self.min_ease})"
            )
        if not constants.QUALITY_MIN < self.pass_threshold <= constants.QUALITY_MAX:
            raise ValueError(f"pass_threshold out of range: {self.pass_threshold}")
        if len(self.mastery_weights) != 3 or not math.isclose(sum(self.mastery_weights), 1.0):
            raise ValueError(f"mastery_weights must be three values summing to 1.0: {self.mastery_weights}")
        if self.mastery_interval_days <= 0 or self.mastery_streak_target <= 0:
            raise ValueError("mastery saturation points must be positive")
        if not 0 <= self.mastered_threshold <= 100:
            raise ValueError(f"mastered_threshold out of range: {self.mastered_threshold}")
        for name in ("review_slots", "max_review_items", "max_new_items", "presentation_budget"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


DEFAULT_CONFIG = SchedulerConfig()

_COUNTER_FIELDS = (
    "interval",
    "repetitions",
    "total_seen",
    "correct_count",
    "last_seen",
    "next_review",
)


@dataclass(frozen=True)
class ProgressRecord:
    """
    Retention state for one learner and one vocabulary item.

    Attributes:
        item: Stable identifier, usually "<language>:<word>".
        ease_factor: Multiplier for interval growth (never below the configured floor).
        interval: Days between last_seen and next_review.
        repetitions: Current unbroken streak of successful reviews.
        last_seen: Epoch ms of the last review.
        next_review: Epoch ms at which the item becomes due.
        total_seen: Number of reviews ever recorded.
        correct_count: Number of successful reviews ever recorded.
        mastery: Derived 0-100 score, recomputed on every update.
        interactions: Per-kind counts of page interactions.
    """

    item: str
    ease_factor: float = constants.EASE_FACTOR_DEFAULT
    interval: int = 0
    repetitions: int = 0
    last_seen: int = 0
    next_review: int = 0
    total_seen: int = 0
    correct_count: int = 0
    mastery: int = 0
    interactions: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the persisted format."""
        return {
            "item": self.item,
            "easeFactor": self.ease_factor,
            "interval": self.interval,
            "repetitions": self.repetitions,
            "lastSeen": self.last_seen,
            "nextReview": self.next_review,
            "totalSeen": self.total_seen,
            "correctCount": self.correct_count,
            "mastery": self.mastery,
            "interactions": dict(self.interactions),
        }

    def integrity_errors(self) -> list[str]:
        """
        Describe every field that no sequence of reviews could have produced.

        An empty list means the record is safe to schedule.
        """
        errors = []
        if not math.isfinite(self.ease_factor) or self.ease_factor <= 0:
            errors.append(f"ease_factor must be a positive number, got {self.ease_factor!r}")
        for name in _COUNTER_FIELDS:
            value = getattr(self, name)
            if value < 0:
                errors.append(f"{name} must not be negative, got {value}")
        if self.correct_count > self.total_seen:
            errors.append(
                f"correct_count ({self.correct_count}) exceeds total_seen ({self.total_seen})"
            )
        if not 0 <= self.mastery <= 100:
            errors.append(f"mastery must be between 0 and 100, got {self.mastery}")
        if any(count < 0 for count in self.interactions.values()):
            errors.append("interaction counts must not be negative")
        return errors

    @classmethod
    def from_dict(cls, data: dict[str, Any], item: str | None = None) -> "ProgressRecord":
        """
        Parse a persisted record.

        Raises:
            ValueError: If a field has the wrong type or the record is inconsistent.
        """
        key = item if item is not None else data.get("item")
        if not key:
            raise ValueError("progress record has no item identifier")
        try:
            record = cls(
                item=key,
                ease_factor=float(data.get("easeFactor", constants.EASE_FACTOR_DEFAULT)),
                interval=int(data.get("interval", 0)),
                repetitions=int(data.get("repetitions", 0)),
                last_seen=int(data.get("lastSeen", 0)),
                next_review=int(data.get("nextReview", 0)),
                total_seen=int(data.get("totalSeen", 0)),
                correct_count=int(data.get("correctCount", 0)),
                mastery=int(data.get("mastery", 0)),
                interactions={k: int(v) for k, v in (data.get("interactions") or {}).items()},
            )
        except (TypeError, ValueError, OverflowError, AttributeError) as e:
            raise ValueError(f"progress record {key} is malformed: {e}") from e

        errors = record.integrity_errors()
        if errors:
            raise ValueError(f"progress record {key} is inconsistent: {'; '.join(errors)}")
        return record


@dataclass(frozen=True)
class DueItem:
    """A record whose next review has passed, with how late it is (ms)."""

    item: str
    record: ProgressRecord
    overdue: int


@dataclass(frozen=True)
class LearningStats:
    """Read-only aggregate over a progress map."""

    total_words: int
    mastered_words: int
    words_in_progress: int
    words_due_for_review: int
    average_mastery: float
    today_reviews: int
