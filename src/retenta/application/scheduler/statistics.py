"""
Aggregate learning statistics over a progress map.

Read-only; nothing here modifies the records it is given.
"""

from collections.abc import Mapping
from datetime import datetime, timezone, tzinfo

from retenta.domain.progress.models import (
    DEFAULT_CONFIG,
    LearningStats,
    ProgressRecord,
    SchedulerConfig,
)

from .validation import validate_timestamp


def local_midnight_ms(now: int, tz: tzinfo | None = None) -> int:
    """
    Epoch ms of the start of the calendar day containing `now`.

    Uses `tz` when given, otherwise the system local zone.
    """
    moment = datetime.fromtimestamp(now / 1000, tz=timezone.utc)
    local = moment.astimezone(tz) if tz is not None else moment.astimezone()
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * 1000)


def aggregate_statistics(
    progress: Mapping[str, ProgressRecord],
    now: int,
    tz: tzinfo | None = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> LearningStats:
    """
    Summarize a progress map for display.

    Mastered items are at or above config.mastered_threshold; items in
    progress have a positive mastery below it. Average mastery is 0 for
    an empty map.
    """
    now = validate_timestamp(now)
    records = list(progress.values())
    if not records:
        return LearningStats(
            total_words=0,
            mastered_words=0,
            words_in_progress=0,
            words_due_for_review=0,
            average_mastery=0.0,
            today_reviews=0,
        )

    threshold = config.mastered_threshold
    midnight = local_midnight_ms(now, tz)

    return LearningStats(
        total_words=len(records),
        mastered_words=sum(1 for r in records if r.mastery >= threshold),
        words_in_progress=sum(1 for r in records if 0 < r.mastery < threshold),
        words_due_for_review=sum(1 for r in records if r.next_review <= now),
        average_mastery=sum(r.mastery for r in records) / len(records),
        today_reviews=sum(1 for r in records if r.last_seen >= midnight),
    )
