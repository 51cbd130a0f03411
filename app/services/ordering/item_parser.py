"""Order line parsing: quantity and product alias extraction."""
import math
import re
from typing import Optional

from app.services.ordering.models import ParsedItem

UNIT_WORDS = frozenset(
    [
        "x", "pcs", "pc", "kg", "gr", "gram", "g", "ons", "ikat", "iket",
        "buah", "bh", "bungkus", "bks", "pack", "pak", "ltr", "liter",
        "biji", "sisir", "papan", "porsi", "butir", "lembar", "batang",
        "kotak", "box",
    ]
)

_NUMBER = re.compile(r"\d+(?:[.,]\d+)?")
_TOKEN_SPLIT = re.compile(r"[^\w]+")
_PURE_NUMBER = re.compile(r"^\d+(?:[.,]\d+)?$")


def _to_quantity(token: str) -> float:
    try:
        return float(token.replace(",", "."))
    except ValueError:
        return math.nan


def parse_item_line(raw: str) -> Optional[ParsedItem]:
    """
    Extract quantity and alias text from one order line.

    "Bayam 2 ikat" -> qty 2, alias "bayam"; "Wortel" -> qty 1, alias "wortel".

    Returns:
        ParsedItem, or None when the quantity is not positive or nothing
        but numbers and unit words remain.
    """
    line = (raw or "").lower().strip()

    qty = 1.0
    match = _NUMBER.search(line)
    if match:
        qty = _to_quantity(match.group(0))
        line = line[:match.start()] + " " + line[match.end():]

    if math.isnan(qty) or qty <= 0:
        return None

    tokens = [
        token
        for token in _TOKEN_SPLIT.split(line)
        if token and token not in UNIT_WORDS and not _PURE_NUMBER.match(token)
    ]
    if not tokens:
        return None

    return ParsedItem(raw=raw, alias_text=" ".join(tokens), qty=qty)
