"""Fuzzy keyword matching shared by the order parser, zone detector and confirmation check."""
from typing import Iterable, List, Optional

from rapidfuzz.distance import Levenshtein

from app.services.text.normalizer import compact


class KeywordSet:
    """
    A named family of keywords with their typo variants.

    Variants are tried longest first so that "alamat lengkap" wins over
    "alamat" and "orderan" over "order".
    """

    def __init__(self, name: str, variants: Iterable[str]):
        self.name = name
        self.variants: List[str] = sorted(
            {v.lower().strip() for v in variants if v and v.strip()},
            key=lambda v: (-len(v), v),
        )
        self._compact_variants = [compact(v) for v in self.variants]

    def __repr__(self) -> str:
        return f"KeywordSet({self.name!r}, {self.variants!r})"

    def match_prefix(self, line: str) -> Optional[str]:
        """
        Match a keyword at the start of ``line``.

        Returns the remainder of the original line after the keyword, or
        None. The keyword must end on a word boundary ("nama:" matches,
        "namanya" does not).
        """
        lower = line.lower()
        for variant in self.variants:
            if not lower.startswith(variant):
                continue
            end = len(variant)
            if end == len(lower) or not lower[end].isalnum():
                return line[end:]
        return None

    def found_in(self, normalized_text: str) -> bool:
        """Loose detection: any variant appears anywhere in the text."""
        return any(variant in normalized_text for variant in self.variants)

    def found_in_compact(self, compact_text: str) -> bool:
        """Substring search on the alphanumeric-only form."""
        return any(variant in compact_text for variant in self._compact_variants)


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance (insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Normalized similarity: 1 - distance / max(len(a), len(b))."""
    if not a and not b:
        return 1.0
    return Levenshtein.normalized_similarity(a, b)


def ngrams(tokens: List[str], max_n: int = 3) -> List[str]:
    """All contiguous 1..max_n word runs, joined with single spaces."""
    grams = []
    for n in range(1, max_n + 1):
        for start in range(0, len(tokens) - n + 1):
            grams.append(" ".join(tokens[start:start + n]))
    return grams


def contains_phrase(normalized_text: str, phrase: str) -> bool:
    """Word-bounded substring check on single-spaced text."""
    if not phrase:
        return False
    return f" {phrase} " in f" {normalized_text} "
