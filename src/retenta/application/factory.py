"""
Progress Service Factory
Centralizes the wiring of repository, clock and random source from config.
"""

import random

from retenta.application.config import AppConfig
from retenta.application.progress_service import ProgressService
from retenta.domain.progress.ports import ProgressRepository
from retenta.infrastructure.adapters.progress import (
    InMemoryProgressRepository,
    JsonFileProgressRepository,
)


def get_progress_repository(config: AppConfig, in_memory: bool = False) -> ProgressRepository:
    """
    Returns the appropriate ProgressRepository implementation based on config.
    """
    if in_memory:
        return InMemoryProgressRepository()
    return JsonFileProgressRepository(config.progress_path)


def get_progress_service(
    config: AppConfig, repo: ProgressRepository | None = None
) -> ProgressService:
    """
    Builds a ProgressService; a configured seed makes new-item selection reproducible.
    """
    return ProgressService(
        repo or get_progress_repository(config),
        config=config.scheduler_config(),
        rng=random.Random(config.seed),
        tz=config.tzinfo(),
    )
