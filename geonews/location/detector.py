"""
Location detection for free-text news queries.
"""

import logging
from typing import Optional

from geonews.location.catalog import DEFAULT_CATALOG, LocationCatalog, LocationDescriptor

logger = logging.getLogger(__name__)

# A query needs at least this many local keywords of one city to resolve
# to that city without naming it.
MIN_KEYWORD_MATCHES = 2


class LocationDetector:
    """
    Finds the catalog location a query is about.
    """
    
    def __init__(self, catalog: Optional[LocationCatalog] = None):
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
    
    def detect(self, query: str) -> Optional[LocationDescriptor]:
        """
        Detect the location referenced by a query.
        
        A primary name or alias anywhere in the query wins outright. Failing
        that, the first catalog entry with at least two of its local
        keywords in the query is returned.
        
        Args:
            query: Free-text search query
            
        Returns:
            Matching location or None
        """
        if not query:
            return None
        
        query_lower = query.lower()
        
        for location in self.catalog:
            names = (location.primary_name, *location.aliases)
            if any(name.lower() in query_lower for name in names):
                logger.debug(f"Detected {location.primary_name} by name in '{query}'")
                return location
        
        # Ties resolve to catalog order
        for location in self.catalog:
            matches = sum(
                1 for keyword in location.local_keywords
                if keyword.lower() in query_lower
            )
            if matches >= MIN_KEYWORD_MATCHES:
                logger.debug(
                    f"Detected {location.primary_name} from {matches} local keywords in '{query}'"
                )
                return location
        
        return None
    
    def resolve(self, query: str, hint: Optional[str] = None) -> Optional[LocationDescriptor]:
        """
        Resolve the location for a request.
        
        A caller-supplied hint is tried first, as a catalog key and then as
        free text; the query itself is used when the hint gives nothing.
        """
        if hint and hint.strip():
            location = self.catalog.lookup(hint) or self.detect(hint)
            if location:
                return location
            logger.info(f"Ignoring unknown location hint '{hint}'")
        
        return self.detect(query)


_detector = LocationDetector()


def detect_location(query: str) -> Optional[LocationDescriptor]:
    """Detect a location using the default catalog."""
    return _detector.detect(query)
