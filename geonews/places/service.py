"""
Local business search with a static fallback when the provider is down.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from geonews.places.geoapify_client import GeoapifyConnector, LocalBusiness, UserLocation

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Using sample data due to search service issues"


@dataclass
class LocalSearchResult:
    """
    Local search response.
    """
    query: str
    results: List[LocalBusiness] = field(default_factory=list)
    total_results: int = 0
    source: str = "geoapify"
    warning: Optional[str] = None

    @property
    def processed_results(self) -> int:
        return len(self.results)


def get_sample_local_businesses(
    user_location: Optional[UserLocation],
    query: str
) -> List[LocalBusiness]:
    """Static sample businesses matching the query by name or category."""
    samples = [
        LocalBusiness(
            title="Joe's Coffee House",
            url="https://example.com",
            snippet="Local coffee shop serving fresh brewed coffee, pastries, and light meals. Free WiFi and cozy atmosphere.",
            rating="4.3",
            address="123 Main Street",
            phone="(555) 123-4567",
            category="Restaurant",
            opening_hours="Mon-Fri 6:00 AM - 8:00 PM",
            distance="0.3 km" if user_location else None,
        ),
        LocalBusiness(
            title="QuickMart Grocery",
            url="https://example.com",
            snippet="Full-service grocery store with fresh produce, meat, dairy, and household essentials.",
            rating="4.1",
            address="456 Oak Avenue",
            phone="(555) 987-6543",
            category="Shopping",
            opening_hours="Daily 7:00 AM - 11:00 PM",
            distance="0.7 km" if user_location else None,
        ),
    ]

    query_lower = query.lower()
    return [
        business for business in samples
        if query_lower in business.title.lower() or query_lower in business.category.lower()
    ]


class LocalSearchService:
    """
    Finds businesses near a user.
    """

    def __init__(self, connector_factory: Optional[Callable[[], Any]] = None):
        self.connector_factory = connector_factory or GeoapifyConnector

    async def search(
        self,
        query: str,
        user_location: Optional[UserLocation] = None,
        max_results: int = 8
    ) -> LocalSearchResult:
        """
        Search businesses matching a query.

        Args:
            query: What to look for, e.g. ``coffee``
            user_location: User position for proximity filtering and distances
            max_results: Maximum results to return

        Returns:
            Provider results sorted by distance, or sample data
        """
        query = query.strip()

        try:
            async with self.connector_factory() as connector:
                results = await connector.geocode_search(query, user_location)
        except Exception as e:
            logger.error(f"Local search failed for '{query}': {e}")
            fallback = get_sample_local_businesses(user_location, query)
            return LocalSearchResult(
                query=query,
                results=fallback,
                total_results=len(fallback),
                source="fallback",
                warning=FALLBACK_WARNING
            )

        if not results:
            fallback = get_sample_local_businesses(user_location, query)
            return LocalSearchResult(
                query=query,
                results=fallback,
                total_results=len(fallback),
                source="fallback"
            )

        if user_location:
            results.sort(
                key=lambda r: r.distance_km if r.distance_km is not None else float("inf")
            )

        return LocalSearchResult(
            query=query,
            results=results[:max_results],
            total_results=len(results),
            source="geoapify"
        )
