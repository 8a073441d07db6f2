# Application Scheduler Package
from .interactions import DEFAULT_INTERACTION_QUALITY, classify_interaction
from .selection import due_for_review, select_for_presentation, select_new_items
from .shuffle import shuffle
from .sm2 import compute_mastery, new_record, record_review
from .statistics import aggregate_statistics
from .validation import InvalidInputError

__all__ = [
    "DEFAULT_INTERACTION_QUALITY",
    "InvalidInputError",
    "aggregate_statistics",
    "classify_interaction",
    "compute_mastery",
    "due_for_review",
    "new_record",
    "record_review",
    "select_for_presentation",
    "select_new_items",
    "shuffle",
]
