"""
Query planning: turns one user query into several search strategies.
"""

import re
from typing import List, Optional

from geonews.location.catalog import LocationDescriptor

MAX_STRATEGIES = 4

FILLER_TOKENS = {"news", "latest", "today", "breaking"}

_token_pattern = re.compile(r"\S+")


def strip_filler(query: str) -> str:
    """Remove generic filler words, leaving the base search term."""
    tokens = _token_pattern.findall(query or "")
    return " ".join(token for token in tokens if token.lower() not in FILLER_TOKENS)


def _join(*parts: Optional[str]) -> str:
    return " ".join(part.strip() for part in parts if part and part.strip())


class QueryPlanner:
    """
    Builds the ordered list of provider queries for a request.
    """
    
    def __init__(self, max_strategies: int = MAX_STRATEGIES):
        self.max_strategies = max_strategies
    
    def plan(self, original_query: str, location: Optional[LocationDescriptor]) -> List[str]:
        """
        Plan search strategies for a query.
        
        Args:
            original_query: Query as typed by the user
            location: Detected location, if any
            
        Returns:
            Up to ``max_strategies`` query strings, most specific first
        """
        base = strip_filler(original_query)
        
        if location is None:
            queries = [
                _join(base, "latest news"),
                _join(base, "breaking news today"),
            ]
            return queries[:self.max_strategies]
        
        queries = [_join(base, location.primary_name, location.region, "news")]
        
        if location.local_keywords:
            queries.append(_join(base, location.primary_name, *location.local_keywords[:3]))
        
        if location.nearby_place_names:
            queries.append(
                _join(base, location.primary_name, *location.nearby_place_names[:2], "region")
            )
        
        for alias in location.aliases:
            queries.append(_join(base, alias, "news"))
        
        return queries[:self.max_strategies]


def plan_queries(original_query: str, location: Optional[LocationDescriptor]) -> List[str]:
    """Convenience wrapper around :class:`QueryPlanner`."""
    return QueryPlanner().plan(original_query, location)
