"""
Connector for the Exa neural search API.
Returns news search hits as typed result items.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Dict, Any, Optional, Tuple

import aiohttp

from geonews.utils.config import get_search_config
from geonews.utils.exceptions import ConfigurationError, SearchProviderError

logger = logging.getLogger(__name__)

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class SearchResultItem:
    """
    A single hit returned by the news search provider.
    """
    url: str
    published_at: datetime
    title: Optional[str] = None
    author: Optional[str] = None
    body_text: Optional[str] = None
    highlights: Tuple[str, ...] = ()
    image_url: Optional[str] = None


def parse_published_date(value: Optional[str]) -> datetime:
    """
    Parse a provider timestamp into an aware datetime.
    
    Missing or malformed dates map to the Unix epoch so they rank as the
    oldest possible result.
    """
    if not value:
        return EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable publish date: {value}")
        return EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_result(data: Dict[str, Any]) -> Optional[SearchResultItem]:
    """
    Parse one provider record.
    
    Args:
        data: Result object from the search response
        
    Returns:
        SearchResultItem or None when the record has no url
    """
    url = _clean(data.get("url"))
    if not url:
        return None
    
    highlights = data.get("highlights") or []
    
    return SearchResultItem(
        url=url,
        published_at=parse_published_date(data.get("publishedDate")),
        title=_clean(data.get("title")),
        author=_clean(data.get("author")),
        body_text=_clean(data.get("text")),
        highlights=tuple(h.strip() for h in highlights if isinstance(h, str) and h.strip()),
        image_url=_clean(data.get("image")),
    )


class ExaSearchConnector:
    """
    Connector for the Exa search service.
    """
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        max_results: Optional[int] = None,
        timeout: Optional[int] = None
    ):
        """
        Initialize the Exa connector.
        
        Args:
            api_key: Exa API key, defaults to the configured key
            base_url: API root, defaults to the configured URL
            max_results: Hard cap on results per request
            timeout: Request timeout in seconds
        """
        config = get_search_config()
        self.api_key = api_key or config["api_key"]
        if not self.api_key:
            raise ConfigurationError("EXA_API_KEY environment variable is required")
        
        self.base_url = (base_url or config["base_url"]).rstrip("/")
        self.max_results = max_results or config["max_results"]
        self.timeout = timeout or config["timeout"]
        self.session: Optional[aiohttp.ClientSession] = None
    
    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            headers={"x-api-key": self.api_key, "Content-Type": "application/json"},
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None
    
    def build_payload(
        self,
        query: str,
        num_results: int,
        start_published_date: Optional[date] = None,
        include_domains: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Build the JSON body for a neural news search."""
        payload: Dict[str, Any] = {
            "query": query,
            "type": "neural",
            "useAutoprompt": True,
            "numResults": max(1, min(num_results, self.max_results)),
            "category": "news",
            "contents": {
                "text": True,
                "highlights": {
                    "numSentences": 3,
                    "highlightsPerUrl": 2
                }
            }
        }
        
        if start_published_date:
            payload["startPublishedDate"] = start_published_date.isoformat()
        
        if include_domains:
            payload["includeDomains"] = list(include_domains)
        
        return payload
    
    async def search(
        self,
        query: str,
        num_results: int = 10,
        start_published_date: Optional[date] = None,
        include_domains: Optional[List[str]] = None
    ) -> List[SearchResultItem]:
        """
        Search news articles.
        
        Args:
            query: Search query
            num_results: Result count hint, capped at ``max_results``
            start_published_date: Oldest publish date to accept
            include_domains: Restrict results to these domains
            
        Returns:
            Parsed search results
            
        Raises:
            SearchProviderError: If the request fails or returns an error
        """
        if self.session is None:
            raise RuntimeError("ExaSearchConnector must be used as an async context manager")
        
        payload = self.build_payload(query, num_results, start_published_date, include_domains)
        url = f"{self.base_url}/search"
        
        try:
            async with self.session.post(url, json=payload) as response:
                if response.status != 200:
                    detail = await response.text()
                    raise SearchProviderError(
                        f"Exa search failed: HTTP {response.status} {detail[:200]}",
                        status=response.status
                    )
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SearchProviderError(f"Exa search failed: {e}") from e
        
        results = []
        for result_data in data.get("results", []):
            item = parse_result(result_data)
            if item:
                results.append(item)
        
        logger.info(f"Exa returned {len(results)} results for '{query}'")
        return results
