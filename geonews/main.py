"""
FastAPI main application for the GeoNews service.
Provides REST API endpoints for location-aware news and local business search.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from urllib.parse import urlparse

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
import uvicorn

from geonews import __version__
from geonews.utils.config import settings
from geonews.utils.exceptions import SearchUnavailableError
from geonews.orchestrator import get_orchestrator, extract_source, NewsSearchRequest, DEFAULT_QUERY
from geonews.places.geoapify_client import UserLocation
from geonews.places.service import LocalSearchService
from geonews.scraper.extractor import ContentExtractor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Pydantic models for API requests and responses
class UserLocationModel(BaseModel):
    """User position reported by the browser."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")
    address: Optional[str] = Field(default=None, description="Reverse-geocoded address")
    city: Optional[str] = Field(default=None, description="Reverse-geocoded city")


class LocalSearchRequestModel(BaseModel):
    """Request model for local business search."""
    query: str = Field(..., description="What to search for")
    userLocation: Optional[UserLocationModel] = Field(default=None, description="User position")
    searchDepth: Optional[str] = Field(default=None, description="Accepted for client compatibility")
    maxResults: int = Field(default=8, ge=1, le=50, description="Maximum results")


class ArticleContentRequestModel(BaseModel):
    """Request model for full article content."""
    url: str = Field(..., description="Article URL")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    search_provider: bool
    places_provider: bool
    summarizer: bool
    timestamp: datetime


def _api_keys_present() -> Dict[str, bool]:
    return {
        "exa": bool(settings.EXA_API_KEY),
        "openai": bool(settings.OPENAI_API_KEY),
        "geoapify": bool(settings.GEOAPIFY_API_KEY),
    }


# Application lifecycle
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting GeoNews API...")
    for name, present in _api_keys_present().items():
        if not present:
            logger.warning(f"{name} API key not configured")

    yield

    logger.info("Shutting down GeoNews API...")


# Create FastAPI application
app = FastAPI(
    title="GeoNews API",
    description="Location-aware news and local business search",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

local_search_service = LocalSearchService()


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "GeoNews API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    keys = _api_keys_present()
    return HealthResponse(
        status="healthy" if keys["exa"] else "degraded",
        search_provider=keys["exa"],
        places_provider=keys["geoapify"],
        summarizer=keys["openai"],
        timestamp=datetime.now()
    )


@app.get("/news", response_model=Dict[str, Any])
async def get_news(
    query: str = Query(default=DEFAULT_QUERY, description="Search query"),
    limit: int = Query(default=20, ge=1, le=50, description="Maximum articles"),
    category: Optional[str] = Query(default=None, description="Category prefix, e.g. sports"),
    location: Optional[str] = Query(default=None, description="Location hint, e.g. mumbai")
):
    """
    Search location-aware news.
    """
    request = NewsSearchRequest(
        query=query,
        limit=limit,
        category=category or None,
        location_hint=location
    )

    try:
        result = await get_orchestrator().search_news(request)
    except SearchUnavailableError as e:
        logger.error(f"News search failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to fetch news",
                "message": str(e),
                "articles": [],
                "totalResults": 0,
                "count": 0,
                "lastFetched": datetime.now(timezone.utc).isoformat(),
                "debug": {
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "apiKeysPresent": _api_keys_present()
                }
            }
        )

    response = {
        "success": True,
        "articles": [article.to_dict() for article in result.articles],
        "totalResults": result.total_results,
        "count": result.count,
        "lastFetched": result.last_fetched.isoformat(),
        "debug": result.debug
    }
    if result.count == 0:
        response["message"] = "No articles found for the given query"
    return response


@app.post("/news/content", response_model=Dict[str, Any])
async def get_article_content(request: ArticleContentRequestModel) -> Dict[str, Any]:
    """
    Extract the full body of a news article.
    """
    url = request.url.strip()
    if urlparse(url).scheme not in ("http", "https"):
        raise HTTPException(
            status_code=400,
            detail="A valid http(s) article URL is required"
        )

    logger.info(f"Article content request: {url}")

    async with ContentExtractor() as extractor:
        content = await extractor.extract(url)

    if not content:
        raise HTTPException(
            status_code=404,
            detail="Could not extract article content"
        )

    return {
        "success": True,
        "article": {
            "url": url,
            "source": extract_source(url),
            "content": content
        }
    }


@app.post("/search", response_model=Dict[str, Any])
async def search_local(request: LocalSearchRequestModel) -> Dict[str, Any]:
    """
    Search businesses near the user.
    """
    if not request.query.strip():
        raise HTTPException(
            status_code=400,
            detail="Search query is required and must be a non-empty string"
        )

    user_location = None
    if request.userLocation:
        user_location = UserLocation(**request.userLocation.model_dump())

    logger.info(f"Local search request: {request.query}")
    result = await local_search_service.search(
        request.query,
        user_location=user_location,
        max_results=request.maxResults
    )

    response: Dict[str, Any] = {
        "results": [business.to_dict() for business in result.results],
        "query": result.query,
        "totalResults": result.total_results,
        "processedResults": result.processed_results,
        "source": result.source
    }
    if result.warning:
        response["warning"] = result.warning
    return response


@app.get("/search")
async def search_method_not_allowed():
    """Local search only accepts POST."""
    raise HTTPException(
        status_code=405,
        detail="This endpoint only accepts POST requests"
    )


# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "timestamp": datetime.now().isoformat()
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "timestamp": datetime.now().isoformat()
        }
    )


if __name__ == "__main__":
    uvicorn.run(
        "geonews.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
