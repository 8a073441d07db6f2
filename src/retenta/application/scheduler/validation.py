"""
Boundary validation for scheduler inputs.

Every check runs before any record is touched, so a bad call never leaves
a partially updated record behind.
"""

import math
from numbers import Real

from retenta.domain.constants import QUALITY_MAX, QUALITY_MIN
from retenta.domain.progress.models import ProgressRecord


class InvalidInputError(ValueError):
    """Raised when a caller passes a value the scheduler cannot act on."""


def validate_quality(quality) -> int:
    # bool is an int subclass; True would silently become quality 1
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidInputError(
            f"quality must be an integer between {QUALITY_MIN} and {QUALITY_MAX}, got {quality!r}"
        )
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        raise InvalidInputError(
            f"quality must be between {QUALITY_MIN} and {QUALITY_MAX}, got {quality}"
        )
    return quality


def validate_timestamp(value, name: str = "now") -> int:
    """Accept a finite, non-negative epoch-milliseconds value and return it as int."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"{name} must be a number of epoch milliseconds, got {value!r}")
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative, got {value!r}")
    return int(value)


def validate_item(item) -> str:
    if not isinstance(item, str) or not item.strip():
        raise InvalidInputError(f"item identifier must be a non-empty string, got {item!r}")
    return item


def validate_limit(limit, name: str = "limit") -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidInputError(f"{name} must be an integer, got {limit!r}")
    if limit < 0:
        raise InvalidInputError(f"{name} must not be negative, got {limit}")
    return limit


def validate_record(record: ProgressRecord) -> ProgressRecord:
    """Refuse to schedule a record whose counters are out of range or contradictory."""
    errors = record.integrity_errors()
    if errors:
        raise InvalidInputError(f"cannot schedule {record.item}: {'; '.join(errors)}")
    return record
