"""
Workflow orchestrator for location-aware news search.
Manages the pipeline: Detect → Plan → Fan out → Score → Merge → Enhance.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from geonews.ai.summarizer import DescriptionWriter, truncate
from geonews.location.catalog import LocationDescriptor
from geonews.location.detector import LocationDetector
from geonews.ranking.merger import RankedResultSet, merge
from geonews.ranking.scorer import ScoredResult, score_results
from geonews.scraper.extractor import ContentExtractor
from geonews.search.exa_client import ExaSearchConnector
from geonews.search.fanout import SearchFanout, flatten
from geonews.search.planner import QueryPlanner
from geonews.utils.config import get_scraping_config, settings
from geonews.utils.exceptions import ConfigurationError, SearchUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "breaking news today"
SNIPPET_CHARS = 300
PLACEHOLDER_DESCRIPTION = "Click to read more..."


@dataclass
class NewsSearchRequest:
    """
    Request configuration for a news search.
    """
    query: str = DEFAULT_QUERY
    limit: int = 20
    category: Optional[str] = None
    location_hint: Optional[str] = None
    enhance: bool = True


@dataclass
class ProcessedArticle:
    """
    A ranked article ready to be rendered.
    """
    title: str
    description: str
    url: str
    published_at: datetime
    source: str
    author: Optional[str] = None
    url_to_image: Optional[str] = None
    section: str = "News"
    summary: Optional[str] = None
    relevance_score: float = 0.0
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "urlToImage": self.url_to_image,
            "publishedAt": self.published_at.isoformat(),
            "source": self.source,
            "author": self.author,
            "section": self.section,
            "summary": self.summary,
            "relevanceScore": self.relevance_score,
            "location": self.location,
        }


@dataclass
class NewsSearchResult:
    """
    Complete news search result.
    """
    query: str
    articles: List[ProcessedArticle] = field(default_factory=list)
    total_results: int = 0
    location: Optional[LocationDescriptor] = None
    debug: Dict[str, Any] = field(default_factory=dict)
    last_fetched: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def count(self) -> int:
        return len(self.articles)


def extract_source(url: str) -> str:
    """Short source name from a URL, e.g. ``bbc`` for www.bbc.co.uk."""
    hostname = urlparse(url).hostname
    if not hostname:
        return "Unknown Source"
    return hostname.replace("www.", "").split(".")[0]


def is_displayable(article: ProcessedArticle) -> bool:
    return bool(article.title) and "[Removed]" not in article.title


class NewsSearchOrchestrator:
    """
    Orchestrates the location-aware news search workflow.
    """

    def __init__(
        self,
        detector: Optional[LocationDetector] = None,
        planner: Optional[QueryPlanner] = None,
        connector_factory: Optional[Callable[[], Any]] = None,
        writer: Optional[DescriptionWriter] = None,
        extractor_factory: Optional[Callable[[], Any]] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            detector: Location detector, defaults to the built-in catalog
            planner: Query planner
            connector_factory: Builds the search connector (async context manager)
            writer: Description writer for short snippets
            extractor_factory: Builds the page content extractor
        """
        self.detector = detector or LocationDetector()
        self.planner = planner or QueryPlanner()
        self.connector_factory = connector_factory or ExaSearchConnector
        self.extractor_factory = extractor_factory or ContentExtractor
        self._writer = writer
        self.min_description_length = get_scraping_config()["min_description_length"]

    @property
    def writer(self) -> DescriptionWriter:
        if self._writer is None:
            self._writer = DescriptionWriter()
        return self._writer

    async def search_news(self, request: NewsSearchRequest) -> NewsSearchResult:
        """
        Execute a news search.

        Args:
            request: Search request configuration

        Returns:
            Ranked, enhanced articles with debug information

        Raises:
            SearchUnavailableError: If the provider is unavailable or every
                search strategy failed
        """
        start_time = datetime.now()

        query = (request.query or "").strip() or DEFAULT_QUERY
        search_query = f"{request.category} {query}" if request.category else query

        location = self.detector.resolve(search_query, request.location_hint)
        queries = self.planner.plan(search_query, location)

        logger.info(
            f"Searching for '{search_query}' (location: "
            f"{location.primary_name if location else 'none'}, strategies: {len(queries)})"
        )

        try:
            connector = self.connector_factory()
        except ConfigurationError as e:
            logger.error(f"Search provider not configured: {e}")
            raise SearchUnavailableError(str(e), errors=[e]) from e

        async with connector as client:
            outcomes = await SearchFanout(client).gather(queries, location, request.limit)

        scored = score_results(flatten(outcomes), location)
        ranked = merge(scored, request.limit, location_specific=location is not None)

        if request.enhance:
            articles = await self._enhance_articles(ranked, location)
        else:
            articles = [self._build_article(result, location) for result in ranked]

        articles = [article for article in articles if is_displayable(article)]

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"News search returned {len(articles)} articles in {processing_time:.2f} seconds"
        )

        return NewsSearchResult(
            query=search_query,
            articles=articles,
            total_results=len(scored),
            location=location,
            debug={
                "searchQuery": search_query,
                "searchStrategies": list(queries),
                "resultsPerStrategy": [len(outcome.items) for outcome in outcomes],
                "cityDetected": location.primary_name if location else None,
                "locationContext": list(location.local_keywords) if location else [],
                "processingTime": processing_time,
                "apiSource": "exa",
                "apiKeysPresent": {
                    "exa": bool(settings.EXA_API_KEY),
                    "openai": bool(settings.OPENAI_API_KEY),
                },
            }
        )

    def _snippet(self, result: ScoredResult) -> str:
        item = result.item
        if item.highlights:
            return " ".join(item.highlights)
        return truncate(item.body_text, SNIPPET_CHARS)

    def _build_article(
        self,
        result: ScoredResult,
        location: Optional[LocationDescriptor],
        description: Optional[str] = None
    ) -> ProcessedArticle:
        item = result.item
        description = description or self._snippet(result)
        return ProcessedArticle(
            title=item.title or "",
            description=description or PLACEHOLDER_DESCRIPTION,
            url=item.url,
            published_at=item.published_at,
            source=extract_source(item.url),
            author=item.author,
            url_to_image=item.image_url,
            summary=description or None,
            relevance_score=result.relevance_score,
            location=location.primary_name if location else None,
        )

    async def _enhance_articles(
        self,
        ranked: RankedResultSet,
        location: Optional[LocationDescriptor]
    ) -> List[ProcessedArticle]:
        """Enhance every ranked result concurrently, dropping failures."""
        if not ranked:
            return []

        async with self.extractor_factory() as extractor:
            tasks = [self._enhance_article(result, location, extractor) for result in ranked]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        articles = []
        for result, outcome in zip(ranked, results):
            if isinstance(outcome, Exception):
                logger.warning(f"Failed to enhance article {result.url}: {outcome}")
            else:
                articles.append(outcome)
        return articles

    async def _enhance_article(
        self,
        result: ScoredResult,
        location: Optional[LocationDescriptor],
        extractor: ContentExtractor
    ) -> ProcessedArticle:
        """
        Build an article, replacing a too-short snippet with an AI description.
        """
        description = self._snippet(result)

        if len(description) < self.min_description_length:
            content = await extractor.extract(result.url)
            if content:
                description = await self.writer.describe(
                    result.item.title,
                    content,
                    location.label if location else None
                )

        return self._build_article(result, location, description)


# Global orchestrator instance
orchestrator: Optional[NewsSearchOrchestrator] = None


def get_orchestrator() -> NewsSearchOrchestrator:
    """
    Get the global orchestrator instance.

    Returns:
        News search orchestrator
    """
    global orchestrator
    if orchestrator is None:
        orchestrator = NewsSearchOrchestrator()
    return orchestrator


async def search_news(
    query: str = DEFAULT_QUERY,
    limit: int = 20,
    category: Optional[str] = None,
    location_hint: Optional[str] = None
) -> NewsSearchResult:
    """
    Convenience function to run a news search.

    Args:
        query: Search query
        limit: Maximum articles to return
        category: Optional category prefix, e.g. ``sports``
        location_hint: Catalog key or place name to search around

    Returns:
        News search result
    """
    request = NewsSearchRequest(
        query=query,
        limit=limit,
        category=category,
        location_hint=location_hint
    )
    return await get_orchestrator().search_news(request)
