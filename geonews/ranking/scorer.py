"""
Location relevance scoring for search results.

A bounded keyword-density heuristic: weighted matches of the location's
name, region, aliases, local keywords, nearby places and preferred source
domains, divided by a fixed normalizer and clamped to 1.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from geonews.location.catalog import LocationDescriptor
from geonews.search.exa_client import SearchResultItem

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5

CITY_WEIGHT = 3.0
REGION_WEIGHT = 2.0
ALIAS_WEIGHT = 2.0
KEYWORD_WEIGHT = 0.5
NEARBY_WEIGHT = 0.3
DOMAIN_WEIGHT = 2.0
NORMALIZER = 10.0


@dataclass(frozen=True)
class ScoredResult:
    """
    A search result with its relevance to the detected location.
    """
    item: SearchResultItem
    relevance_score: float
    strategy_index: int = 0

    @property
    def url(self) -> str:
        return self.item.url

    @property
    def published_at(self) -> datetime:
        return self.item.published_at


def _distinct(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(value.lower() for value in values))


def score(result: SearchResultItem, location: Optional[LocationDescriptor]) -> float:
    """
    Score how strongly a result relates to a location.

    Args:
        result: Search result to score
        location: Detected location, or None

    Returns:
        Score in [0, 1]; 0.5 when there is no location
    """
    if location is None:
        return NEUTRAL_SCORE

    text = " ".join(
        part for part in (result.title, result.body_text, result.url) if part
    ).lower()
    url = result.url.lower()

    raw = 0.0

    if location.primary_name.lower() in text:
        raw += CITY_WEIGHT

    if location.region and location.region.lower() in text:
        raw += REGION_WEIGHT

    raw += ALIAS_WEIGHT * sum(1 for alias in _distinct(location.aliases) if alias in text)
    raw += KEYWORD_WEIGHT * sum(
        1 for keyword in _distinct(location.local_keywords) if keyword in text
    )
    raw += NEARBY_WEIGHT * sum(
        1 for place in _distinct(location.nearby_place_names) if place in text
    )

    if any(domain.lower() in url for domain in location.preferred_source_domains):
        raw += DOMAIN_WEIGHT

    return min(raw / NORMALIZER, 1.0)


def score_results(
    indexed_items: Iterable[Tuple[int, SearchResultItem]],
    location: Optional[LocationDescriptor]
) -> List[ScoredResult]:
    """Score ``(strategy_index, item)`` pairs, keeping their order."""
    return [
        ScoredResult(item=item, relevance_score=score(item, location), strategy_index=index)
        for index, item in indexed_items
    ]
