"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest

from geonews.location.catalog import DEFAULT_CATALOG
from geonews.search.exa_client import SearchResultItem


@pytest.fixture
def mumbai():
    """Catalog entry for Mumbai."""
    return DEFAULT_CATALOG.lookup("mumbai")


@pytest.fixture
def now():
    """Fixed reference time."""
    return datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_item(now):
    """Factory for search result items."""
    def _make(url="https://example.com/story", title="Story", body_text=None,
              highlights=(), published_at=None, image_url=None, author=None):
        return SearchResultItem(
            url=url,
            published_at=published_at or now,
            title=title,
            author=author,
            body_text=body_text,
            highlights=tuple(highlights),
            image_url=image_url,
        )
    return _make
