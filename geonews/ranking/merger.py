"""
Deduplication and final ranking of scored search results.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Sequence, Tuple

from geonews.ranking.scorer import ScoredResult

logger = logging.getLogger(__name__)

# (relevance weight, recency weight)
GENERAL_WEIGHTS: Tuple[float, float] = (0.7, 0.3)
LOCATION_WEIGHTS: Tuple[float, float] = (0.8, 0.2)


@dataclass
class RankedResultSet:
    """
    Final ordered results, unique by url.
    """
    results: List[ScoredResult] = field(default_factory=list)

    def __iter__(self) -> Iterator[ScoredResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, index: int) -> ScoredResult:
        return self.results[index]

    @property
    def count(self) -> int:
        return len(self.results)

    @property
    def urls(self) -> List[str]:
        return [result.url for result in self.results]


def deduplicate(scored_results: Sequence[ScoredResult]) -> List[ScoredResult]:
    """Keep the first result seen for each url."""
    seen_urls = set()
    unique_results = []

    for result in scored_results:
        if result.url not in seen_urls:
            seen_urls.add(result.url)
            unique_results.append(result)

    return unique_results


def combined_key(
    result: ScoredResult,
    now_timestamp: float,
    weights: Tuple[float, float]
) -> float:
    """Weighted sum of relevance and recency (publish time over now)."""
    relevance_weight, recency_weight = weights
    recency = result.published_at.timestamp() / now_timestamp if now_timestamp else 0.0
    return result.relevance_score * relevance_weight + recency * recency_weight


def merge(
    scored_results: Sequence[ScoredResult],
    limit: int,
    location_specific: bool = False,
    now: Optional[datetime] = None
) -> RankedResultSet:
    """
    Deduplicate and rank scored results.

    Args:
        scored_results: Results from every strategy, in strategy order
        limit: Maximum number of results to keep
        location_specific: Weight relevance higher for geo-targeted searches
        now: Reference time for recency, defaults to the current time

    Returns:
        Ranked result set of at most ``limit`` results
    """
    if not scored_results or limit <= 0:
        return RankedResultSet()

    now = now or datetime.now(timezone.utc)
    now_timestamp = now.timestamp()
    weights = LOCATION_WEIGHTS if location_specific else GENERAL_WEIGHTS

    unique_results = deduplicate(scored_results)

    # Equal keys fall back to strategy order, then arrival order
    ranked = sorted(
        enumerate(unique_results),
        key=lambda pair: (
            -combined_key(pair[1], now_timestamp, weights),
            pair[1].strategy_index,
            pair[0],
        )
    )

    logger.debug(
        f"Merged {len(scored_results)} results into {len(unique_results)} unique, keeping {limit}"
    )
    return RankedResultSet(results=[result for _, result in ranked[:limit]])
