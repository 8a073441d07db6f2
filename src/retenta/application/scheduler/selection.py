"""
Item selection for review sessions and page annotation.

Builds ordered lists by:
1. Ranking due items by how overdue they are
2. Introducing never-seen items in random order
3. Combining both under a per-page budget, reviews first
"""

import logging
import random
from collections.abc import Iterable, Mapping

from retenta.domain.progress.models import DEFAULT_CONFIG, DueItem, ProgressRecord, SchedulerConfig

from .shuffle import shuffle
from .validation import validate_limit, validate_timestamp

logger = logging.getLogger(__name__)


def due_for_review(
    progress: Mapping[str, ProgressRecord],
    now: int,
    limit: int | None = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> list[DueItem]:
    """
    Return up to `limit` items whose next review has passed, most overdue first.

    Items with equal overdue time keep the iteration order of `progress`.
    """
    now = validate_timestamp(now)
    limit = validate_limit(config.max_review_items if limit is None else limit)

    due = [
        DueItem(item=item, record=record, overdue=now - record.next_review)
        for item, record in progress.items()
        if record.next_review <= now
    ]
    # list.sort is stable, so ties stay in input order
    due.sort(key=lambda d: d.overdue, reverse=True)
    return due[:limit]


def select_new_items(
    progress: Mapping[str, ProgressRecord],
    candidates: Iterable[str],
    limit: int | None = None,
    rng: random.Random | None = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> list[str]:
    """
    Pick up to `limit` candidates that have no progress record yet, in random order.

    Args:
        progress: Existing records; anything present here is never returned.
        candidates: Pool to draw from. Duplicates are collapsed.
        limit: Maximum number of items (defaults to config.max_new_items).
        rng: Random source; seed it for deterministic selections.
    """
    limit = validate_limit(config.max_new_items if limit is None else limit)
    if rng is None:
        rng = random.Random()

    fresh = [c for c in dict.fromkeys(candidates) if c not in progress]
    return shuffle(fresh, rng)[:limit]


def select_for_presentation(
    progress: Mapping[str, ProgressRecord],
    visible_items: Iterable[str],
    total_budget: int | None = None,
    *,
    now: int,
    rng: random.Random | None = None,
    config: SchedulerConfig = DEFAULT_CONFIG,
) -> list[str]:
    """
    Choose which visible items to present: due reviews first, then new items.

    Up to config.review_slots due items that are visible are placed first,
    most overdue first. The rest of the budget goes to never-seen visible
    items in shuffled order. No item appears twice.
    """
    budget = validate_limit(
        config.presentation_budget if total_budget is None else total_budget, "total_budget"
    )
    visible = list(dict.fromkeys(visible_items))
    visible_set = set(visible)

    review_cap = min(config.review_slots, budget)
    due = due_for_review(progress, now, limit=len(progress), config=config)
    reviews = [d.item for d in due if d.item in visible_set][:review_cap]

    chosen = set(reviews)
    remaining = max(budget - len(reviews), 0)
    new_items = select_new_items(
        progress,
        (item for item in visible if item not in chosen),
        limit=remaining,
        rng=rng,
        config=config,
    )

    logger.debug(
        f"Selected {len(reviews)} review and {len(new_items)} new items "
        f"from {len(visible)} visible (budget {budget})"
    )
    return reviews + new_items
