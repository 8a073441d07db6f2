"""
Interaction-to-quality policy.

The table is plain data so it can be tuned (or replaced per caller)
without touching the scheduling code.
"""

from collections.abc import Mapping
from types import MappingProxyType

from retenta.domain.constants import QUALITY_NEUTRAL
from retenta.domain.progress.models import InteractionKind

DEFAULT_INTERACTION_QUALITY: Mapping[str, int] = MappingProxyType(
    {
        InteractionKind.IGNORED.value: 4,  # recognized without help
        InteractionKind.CLICKED.value: 5,  # actively engaged
        InteractionKind.PRONUNCIATION.value: 3,
        InteractionKind.HOVER.value: 2,  # needed the translation
        InteractionKind.CONTEXT.value: 2,  # needed an explanation
    }
)


def classify_interaction(
    kind: InteractionKind | str,
    table: Mapping[str, int] = DEFAULT_INTERACTION_QUALITY,
) -> int:
    """Map an interaction signal to a quality rating; unknown kinds are neutral."""
    key = kind.value if isinstance(kind, InteractionKind) else str(kind).strip().lower()
    return table.get(key, QUALITY_NEUTRAL)
