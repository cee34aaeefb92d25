"""
Article body extraction for result pages whose search snippet is too short.
Uses newspaper3k first and falls back to BeautifulSoup selectors.
"""

import asyncio
import logging
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup
from newspaper import Article

from geonews.utils.config import get_scraping_config

logger = logging.getLogger(__name__)

CONTENT_SELECTORS = [
    'article',
    '.article-content',
    '.story-body',
    '.entry-content',
    'main',
]


class ContentExtractor:
    """
    Extracts the main body text of a news page.
    """

    def __init__(self):
        """Initialize the extractor with scraping configuration."""
        self.config = get_scraping_config()
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.config["timeout"]),
            headers={"User-Agent": self.config["user_agent"]}
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    async def extract(self, url: str) -> Optional[str]:
        """
        Extract article content from a URL.

        Args:
            url: Article URL

        Returns:
            Article text or None if nothing usable was found
        """
        try:
            loop = asyncio.get_running_loop()
            text = await loop.run_in_executor(None, self._newspaper_extract, url)
            if text and len(text) > 100:
                return text
        except Exception as e:
            logger.debug(f"newspaper extraction failed for {url}: {e}")

        return await self._manual_content_extraction(url)

    def _newspaper_extract(self, url: str) -> Optional[str]:
        article = Article(url)
        article.download()
        article.parse()
        return article.text.strip() if article.text else None

    async def _manual_content_extraction(self, url: str) -> Optional[str]:
        """
        Manual content extraction using BeautifulSoup as fallback.

        Args:
            url: Article URL

        Returns:
            Extracted content or None
        """
        if self.session is None:
            return None

        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    return None
                html = await response.text()
            return extract_text_from_html(html)
        except Exception as e:
            logger.debug(f"Manual content extraction failed for {url}: {e}")
            return None


def extract_text_from_html(html: str) -> Optional[str]:
    """
    Pull the main text out of an HTML document.

    Tries the common article containers first, then falls back to all
    paragraph text.
    """
    soup = BeautifulSoup(html, 'html.parser')

    for tag in soup(["script", "style", "nav", "header", "footer", "aside"]):
        tag.decompose()

    for selector in CONTENT_SELECTORS:
        content_elem = soup.select_one(selector)
        if content_elem:
            text = content_elem.get_text(strip=True, separator=' ')
            if len(text) > 200:
                return text

    paragraphs = soup.find_all('p')
    text = ' '.join(p.get_text(strip=True) for p in paragraphs)

    return text if len(text) > 100 else None
