"""
SM-2 review update and mastery scoring.

This is a pure computation module with no I/O: the caller supplies the
current record, the quality of the review and the time it happened, and
receives a new record back.
"""

import dataclasses
import math

from retenta.domain.constants import MS_PER_DAY, QUALITY_MAX
from retenta.domain.progress.models import DEFAULT_CONFIG, ProgressRecord, SchedulerConfig

from .validation import (
    InvalidInputError,
    validate_item,
    validate_quality,
    validate_record,
    validate_timestamp,
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def next_ease_factor(ease: float, quality: int, min_ease: float) -> float:
    """
    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at min_ease.

    q=5 raises the ease by 0.1, q=4 leaves it unchanged, lower ratings reduce it.
    """
    penalty = QUALITY_MAX - quality
    return max(ease + (0.1 - penalty * (0.08 + penalty * 0.02)), min_ease)


def compute_mastery(record: ProgressRecord, config: SchedulerConfig = DEFAULT_CONFIG) -> int:
    """
    Blend accuracy, spacing and streak length into a 0-100 score.

    Depends only on correct_count, total_seen, interval and repetitions.
    """
    if record.total_seen <= 0:
        return 0

    w_accuracy, w_spacing, w_streak = config.mastery_weights
    accuracy = record.correct_count / record.total_seen
    spacing = min(record.interval / config.mastery_interval_days, 1.0)
    streak = min(record.repetitions / config.mastery_streak_target, 1.0)

    blend = w_accuracy * accuracy + w_spacing * spacing + w_streak * streak
    return round_half_up(100 * min(max(blend, 0.0), 1.0))


def new_record(item: str, config: SchedulerConfig = DEFAULT_CONFIG) -> ProgressRecord:
    """Defaults for an item that has never been reviewed."""
    return ProgressRecord(item=validate_item(item), ease_factor=config.default_ease)


def record_review(
    record: ProgressRecord | None,
    quality: int,
    now: int,
    config: SchedulerConfig = DEFAULT_CONFIG,
    item: str | None = None,
) -> ProgressRecord:
    """
    Apply one review to a record and return the updated copy.

    Args:
        record: Current state, or None for an item seen for the first time.
        quality: Rating 0-5; ratings at or above config.pass_threshold are successes.
        now: Review time in epoch milliseconds.
        config: Tuning constants.
        item: Identifier to use when record is None.

    Returns:
        A new ProgressRecord; the input record is left untouched.

    Raises:
        InvalidInputError: On out-of-range quality, bad timestamp, missing identifier
            or a record with negative or contradictory counters.
    """
    quality = validate_quality(quality)
    now = validate_timestamp(now)
    if record is None:
        if item is None:
            raise InvalidInputError("an item identifier is required when no record exists")
        record = new_record(item, config)
    else:
        validate_record(record)

    ease = next_ease_factor(record.ease_factor, quality, config.min_ease)
    ladder = config.interval_ladder

    if quality >= config.pass_threshold:
        correct_count = record.correct_count + 1
        if record.repetitions < len(ladder):
            interval = ladder[record.repetitions]
        else:
            # zero-day intervals never grow by multiplication
            interval = max(1, round_half_up(record.interval * ease))
        repetitions = record.repetitions + 1
    else:
        correct_count = record.correct_count
        interval = ladder[0]
        repetitions = 0

    updated = dataclasses.replace(
        record,
        ease_factor=ease,
        interval=interval,
        repetitions=repetitions,
        last_seen=now,
        next_review=now + interval * MS_PER_DAY,
        total_seen=record.total_seen + 1,
        correct_count=correct_count,
        interactions=dict(record.interactions),
    )
    return dataclasses.replace(updated, mastery=compute_mastery(updated, config))
