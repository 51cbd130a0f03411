"""Text normalization for chat messages."""
import re

from pydantic import BaseModel
from unidecode import unidecode

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NON_WORD = re.compile(r"[^a-z0-9\s]+")
_WHITESPACE = re.compile(r"\s+")


class NormalizedText(BaseModel):
    """The three forms of an inbound message used by the pipeline."""

    trimmed: str
    normalized: str  # lowercase, ascii, punctuation removed, single-spaced
    compact: str  # alphanumeric only


def fold(text: str) -> str:
    """Lowercase and transliterate to ascii (drops diacritics)."""
    return unidecode(text or "").lower()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize_words(text: str) -> str:
    """Lowercase, strip diacritics and punctuation, collapse whitespace."""
    return collapse_whitespace(_NON_WORD.sub(" ", fold(text)))


def compact(text: str) -> str:
    """Lowercase alphanumeric-only form, for typo tolerant keyword search."""
    return _NON_ALNUM.sub("", fold(text))


def normalize_text(raw: str) -> NormalizedText:
    """Build trimmed, normalized and compact forms of a message. Never fails."""
    trimmed = (raw or "").strip()
    normalized = normalize_words(trimmed)
    return NormalizedText(
        trimmed=trimmed,
        normalized=normalized,
        compact=compact(normalized),
    )
