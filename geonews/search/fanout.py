"""
Concurrent fan-out of planned queries to the news search provider.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Protocol, Sequence, Tuple

from geonews.location.catalog import LocationDescriptor, source_domains_for
from geonews.search.exa_client import SearchResultItem
from geonews.utils.config import get_search_config
from geonews.utils.exceptions import SearchUnavailableError

logger = logging.getLogger(__name__)

# Extra results requested per strategy to make up for later filtering
OVERFETCH = 5


class SearchClient(Protocol):
    async def search(
        self,
        query: str,
        num_results: int = 10,
        start_published_date: Optional[date] = None,
        include_domains: Optional[List[str]] = None
    ) -> List[SearchResultItem]:
        ...


@dataclass
class StrategyOutcome:
    """
    Result of one planned query.
    """
    index: int
    query: str
    items: List[SearchResultItem] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def per_query_cap(target_count: int, query_count: int) -> int:
    """Results to request from each strategy."""
    return math.ceil(target_count / query_count) + OVERFETCH


def flatten(outcomes: Sequence[StrategyOutcome]) -> List[Tuple[int, SearchResultItem]]:
    """Pair every hit with the index of the strategy that produced it."""
    return [(outcome.index, item) for outcome in outcomes for item in outcome.items]


class SearchFanout:
    """
    Issues one provider request per planned query and waits for all of them.
    """

    def __init__(self, client: SearchClient, lookback_days: Optional[int] = None):
        """
        Args:
            client: Open search connector
            lookback_days: Publish-date floor, in days before today
        """
        self.client = client
        if lookback_days is None:
            lookback_days = get_search_config()["lookback_days"]
        self.lookback_days = lookback_days

    def _date_floor(self) -> date:
        today = datetime.now(timezone.utc).date()
        return today - timedelta(days=self.lookback_days)

    async def gather(
        self,
        queries: Sequence[str],
        location: Optional[LocationDescriptor],
        target_count: int
    ) -> List[StrategyOutcome]:
        """
        Run every query concurrently and collect per-strategy outcomes.

        A failing query never cancels the others; its outcome carries the
        error and no items.

        Raises:
            SearchUnavailableError: If every query failed
        """
        if not queries:
            return []

        num_results = per_query_cap(target_count, len(queries))
        include_domains = source_domains_for(location) if location else None
        date_floor = self._date_floor()

        tasks = [
            self.client.search(
                query=query,
                num_results=num_results,
                start_published_date=date_floor,
                include_domains=include_domains
            )
            for query in queries
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for index, (query, result) in enumerate(zip(queries, results)):
            if isinstance(result, Exception):
                logger.warning(f"Search strategy {index} '{query}' failed: {result}")
                outcomes.append(StrategyOutcome(index=index, query=query, error=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(StrategyOutcome(index=index, query=query, items=list(result)))

        errors = [outcome.error for outcome in outcomes if outcome.failed]
        if len(errors) == len(outcomes):
            raise SearchUnavailableError(
                f"All {len(outcomes)} search strategies failed",
                errors=errors
            )

        return outcomes

    async def execute(
        self,
        queries: Sequence[str],
        location: Optional[LocationDescriptor],
        target_count: int
    ) -> List[SearchResultItem]:
        """
        Run every query and return all hits, flattened in strategy order.
        """
        outcomes = await self.gather(queries, location, target_count)
        return [item for _, item in flatten(outcomes)]
