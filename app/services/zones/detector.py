"""Delivery zone detection from free-text addresses."""
import logging
from typing import List, Optional, Tuple

from app.services.persistence.zones import ZoneRepository
from app.services.text.keywords import contains_phrase, ngrams, similarity
from app.services.text.normalizer import normalize_words
from app.services.zones.models import ZoneMatch, ZoneRecord
from app.services.zones.rules import (
    ADDRESS_STOPWORDS,
    SHORTHAND_EXPANSIONS,
    STATIC_ZONE_RULES,
    ZONE_ALIASES,
)

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """Lowercase, expand shorthand, drop street stopwords, collapse whitespace."""
    tokens = []
    for token in normalize_words(address).split():
        if token in ADDRESS_STOPWORDS:
            continue
        tokens.extend(SHORTHAND_EXPANSIONS.get(token, token).split())
    return " ".join(tokens)


def zone_keywords(zone: ZoneRecord) -> List[str]:
    """Keywords for one zone: name, area group, code and hand-kept aliases.

    Keywords get the same cleanup as addresses: "Perum Griya Natura" becomes
    "griya natura".
    """
    candidates = [zone.name, zone.area_group or "", zone.code.replace("_", " ")]
    candidates.extend(ZONE_ALIASES.get(zone.code, []))

    keywords = []
    for candidate in candidates:
        keyword = normalize_address(candidate)
        if keyword and keyword not in keywords:
            keywords.append(keyword)
    return keywords


def score_keyword(keyword: str, normalized_address: str, grams: List[str]) -> float:
    """1.0 for a word-bounded substring, else best n-gram similarity."""
    if contains_phrase(normalized_address, keyword):
        return 1.0
    return max((similarity(keyword, gram) for gram in grams), default=0.0)


class ZoneDetector:
    """Matches an address against the zone table, then the static rule table."""

    def __init__(self, zone_repository: ZoneRepository, threshold: float = 0.7):
        self.zone_repository = zone_repository
        self.threshold = threshold

    async def _load_zones(self) -> List[ZoneRecord]:
        try:
            return await self.zone_repository.list_zones()
        except Exception as e:
            logger.error(
                f"[ZONE] Zone query failed, using static rules only - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return []

    def best_zone(
        self, normalized_address: str, zones: List[ZoneRecord]
    ) -> Optional[Tuple[ZoneRecord, float, str]]:
        """
        Highest scoring zone across all zones and keywords.

        Equal scores prefer the longer keyword, then the earlier zone.
        """
        grams = ngrams(normalized_address.split(), max_n=3)
        best = None
        best_rank = (-1.0, -1)
        for zone in zones:
            for keyword in zone_keywords(zone):
                score = score_keyword(keyword, normalized_address, grams)
                rank = (score, len(keyword))
                if rank > best_rank:
                    best_rank = rank
                    best = (zone, score, keyword)
        return best

    def match_static_rules(
        self, normalized_address: str, zones: List[ZoneRecord]
    ) -> Optional[ZoneMatch]:
        """Static fallback; the zone code is kept even without a DB row."""
        for code, keywords in STATIC_ZONE_RULES:
            if not any(keyword in normalized_address for keyword in keywords):
                continue
            zone = next((z for z in zones if z.code == code), None)
            if zone is None:
                return ZoneMatch(zone_code=code, source="rule")
            return ZoneMatch(
                zone_id=zone.id,
                zone_code=zone.code,
                zone_name=zone.name,
                delivery_fee_db=zone.delivery_fee,
                source="rule",
            )
        return None

    async def detect(self, address: Optional[str]) -> ZoneMatch:
        """
        Detect the delivery zone for an address.

        Returns:
            ZoneMatch; all fields None when nothing matched
        """
        normalized = normalize_address(address or "")
        if not normalized:
            return ZoneMatch()

        zones = await self._load_zones()

        best = self.best_zone(normalized, zones)
        if best is not None and best[1] >= self.threshold:
            zone, score, keyword = best
            logger.info(
                f"[ZONE] '{normalized}' -> {zone.code} via '{keyword}' (score {score:.2f})"
            )
            return ZoneMatch(
                zone_id=zone.id,
                zone_code=zone.code,
                zone_name=zone.name,
                delivery_fee_db=zone.delivery_fee,
                score=score,
                source="keyword",
            )

        fallback = self.match_static_rules(normalized, zones)
        if fallback is not None:
            logger.info(f"[ZONE] '{normalized}' -> {fallback.zone_code} via static rule")
            return fallback

        logger.info(f"[ZONE] No zone detected for '{normalized}'")
        return ZoneMatch()
