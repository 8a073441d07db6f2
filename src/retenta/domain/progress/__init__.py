# Domain Progress Package
from .keys import filter_by_language, make_item_key, split_item_key
from .models import (
    DEFAULT_CONFIG,
    DueItem,
    InteractionKind,
    LearningStats,
    ProgressRecord,
    SchedulerConfig,
)
from .ports import ProgressRepository

__all__ = [
    "DEFAULT_CONFIG",
    "DueItem",
    "InteractionKind",
    "LearningStats",
    "ProgressRecord",
    "ProgressRepository",
    "SchedulerConfig",
    "filter_by_language",
    "make_item_key",
    "split_item_key",
]
