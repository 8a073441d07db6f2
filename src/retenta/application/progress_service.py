"""
Progress Service: Application layer orchestrator.

Coordinates the read -> schedule -> write round trip between the
ProgressRepository and the pure scheduler functions.
"""

import dataclasses
import logging
import random
import time
from collections.abc import Callable
from datetime import tzinfo

from retenta.domain.progress.keys import filter_by_language, make_item_key
from retenta.domain.progress.models import (
    DEFAULT_CONFIG,
    DueItem,
    InteractionKind,
    LearningStats,
    ProgressRecord,
    SchedulerConfig,
)
from retenta.domain.progress.ports import ProgressRepository

from .scheduler import (
    InvalidInputError,
    aggregate_statistics,
    classify_interaction,
    due_for_review,
    record_review,
    select_for_presentation,
)
from .scheduler.interactions import DEFAULT_INTERACTION_QUALITY
from .scheduler.validation import validate_quality

logger = logging.getLogger(__name__)

_COUNTED_KINDS = frozenset(kind.value for kind in InteractionKind)


def system_clock() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class ProgressService:
    """
    Application service for recording reviews and selecting items.

    Follows Dependency Inversion: depends on the ProgressRepository
    abstraction, and takes its clock and random source as collaborators.
    """

    def __init__(
        self,
        repo: ProgressRepository,
        config: SchedulerConfig = DEFAULT_CONFIG,
        clock: Callable[[], int] = system_clock,
        rng: random.Random | None = None,
        tz: tzinfo | None = None,
        interaction_table=DEFAULT_INTERACTION_QUALITY,
    ):
        """
        Args:
            repo: The repository (port) holding progress records.
            config: Scheduler tuning.
            clock: Returns "now" in epoch milliseconds.
            rng: Random source for new-item shuffling.
            tz: Zone used for "reviewed today" statistics; system local if None.
            interaction_table: Interaction kind -> quality policy.
        """
        self._repo = repo
        self._config = config
        self._clock = clock
        self._rng = rng or random.Random()
        self._tz = tz
        self._interaction_table = interaction_table

    async def review(self, word: str, language: str, quality: int) -> ProgressRecord:
        """
        Record one review of a word and persist the result.

        Validation happens before the store is read, so a bad rating
        never touches the stored record.
        """
        key = self._key(word, language)
        quality = validate_quality(quality)
        now = self._clock()
        current = await self._repo.get(key)
        updated = record_review(current, quality, now, self._config, item=key)
        await self._repo.set(key, updated)
        logger.debug(
            f"Reviewed {key}: q={quality} interval={updated.interval}d "
            f"ease={updated.ease_factor:.2f} mastery={updated.mastery}"
        )
        return updated

    async def record_interaction(
        self, word: str, language: str, kind: InteractionKind | str
    ) -> ProgressRecord:
        """
        Turn a page interaction into a review and count the interaction.
        """
        key = self._key(word, language)
        quality = classify_interaction(kind, self._interaction_table)
        current = await self._repo.get(key)
        updated = record_review(current, quality, self._clock(), self._config, item=key)

        kind_name = kind.value if isinstance(kind, InteractionKind) else str(kind).strip().lower()
        # unknown kinds are scored but not counted
        if kind_name in _COUNTED_KINDS:
            counts = dict(updated.interactions)
            counts[kind_name] = counts.get(kind_name, 0) + 1
            updated = dataclasses.replace(updated, interactions=counts)
        else:
            logger.debug(f"Not counting unknown interaction kind {kind_name!r}")

        await self._repo.set(key, updated)
        logger.debug(f"Interaction {kind_name} on {key} scored q={quality}")
        return updated

    async def select_for_page(
        self, language: str, page_words: list[str], budget: int | None = None
    ) -> list[str]:
        """
        Choose which words on a page to annotate. Returns bare words.
        """
        progress = await self._language_progress(language)
        visible = [w.strip().lower() for w in page_words if w and w.strip()]
        selected = select_for_presentation(
            progress,
            visible,
            budget,
            now=self._clock(),
            rng=self._rng,
            config=self._config,
        )
        logger.info(f"Selected {len(selected)} of {len(visible)} page words ({language})")
        return selected

    async def due(self, language: str, limit: int | None = None) -> list[DueItem]:
        progress = await self._language_progress(language)
        return due_for_review(progress, self._clock(), limit, self._config)

    async def statistics(self, language: str) -> LearningStats:
        progress = await self._language_progress(language)
        return aggregate_statistics(progress, self._clock(), self._tz, self._config)

    async def _language_progress(self, language: str) -> dict[str, ProgressRecord]:
        return filter_by_language(await self._repo.all(), self._language(language))

    @staticmethod
    def _language(language: str) -> str:
        if not isinstance(language, str) or not language.strip():
            raise InvalidInputError(f"language must be a non-empty string, got {language!r}")
        return language.strip().lower()

    @staticmethod
    def _key(word: str, language: str) -> str:
        if not isinstance(word, str) or not isinstance(language, str):
            raise InvalidInputError("word and language must be strings")
        try:
            return make_item_key(word, language)
        except ValueError as e:
            raise InvalidInputError(str(e)) from e
