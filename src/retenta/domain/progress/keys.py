"""Item identifiers: one key per (language, word) pair."""

from collections.abc import Mapping

from retenta.domain.constants import ITEM_KEY_SEPARATOR

from .models import ProgressRecord


def make_item_key(word: str, language: str) -> str:
    """Build the storage key for a word, e.g. ("Hello", "en") -> "en:hello"."""
    word = word.strip()
    language = language.strip()
    if not word or not language:
        raise ValueError(f"word and language must be non-empty (got {word!r}, {language!r})")
    if ITEM_KEY_SEPARATOR in language:
        raise ValueError(f"language code may not contain {ITEM_KEY_SEPARATOR!r}: {language!r}")
    return f"{language.lower()}{ITEM_KEY_SEPARATOR}{word.lower()}"


def split_item_key(key: str) -> tuple[str, str]:
    """Inverse of make_item_key. Returns (language, word)."""
    language, sep, word = key.partition(ITEM_KEY_SEPARATOR)
    if not sep or not language or not word:
        raise ValueError(f"not a language-qualified item key: {key!r}")
    return language, word


def filter_by_language(
    progress: Mapping[str, ProgressRecord], language: str
) -> dict[str, ProgressRecord]:
    """
    Select the records of one language, keyed by bare word.

    Keys that are not language-qualified are skipped.
    """
    prefix = f"{language.lower()}{ITEM_KEY_SEPARATOR}"
    return {
        key[len(prefix):]: record
        for key, record in progress.items()
        if key.startswith(prefix) and len(key) > len(prefix)
    }
