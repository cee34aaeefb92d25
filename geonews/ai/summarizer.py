"""
Short article descriptions written by an OpenAI chat model.
Best effort: any failure falls back to truncated article text.
"""

import logging
from typing import Optional

from openai import AsyncOpenAI

from geonews.utils.config import get_openai_config

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 1500
FALLBACK_CHARS = 200

DESCRIPTION_TEMPLATE = """
You are a news editor. Create a concise, engaging description (2-3 sentences) for this news article.
Focus on the main points and make it compelling for readers.{location}

Article Title: {title}
Article Content: {content}

Description:
"""


def truncate(text: Optional[str], length: int = FALLBACK_CHARS) -> str:
    """Clip text to ``length`` characters with a trailing ellipsis."""
    text = (text or "").strip()
    if not text:
        return ""
    return text[:length] + "..."


class DescriptionWriter:
    """
    Generates reader-facing descriptions for news articles.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        """Initialize the writer with OpenAI configuration."""
        self.config = get_openai_config()
        self.model = self.config["model"]
        self.max_tokens = self.config["max_tokens"]
        self.temperature = self.config["temperature"]

        if client is not None:
            self.client = client
        elif self.config["api_key"]:
            self.client = AsyncOpenAI(api_key=self.config["api_key"])
        else:
            self.client = None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def describe(
        self,
        title: Optional[str],
        content: str,
        location_label: Optional[str] = None
    ) -> str:
        """
        Write a 2-3 sentence description of an article.

        Args:
            title: Article title
            content: Article body text
            location_label: Place the search was about, if any

        Returns:
            Generated description, or truncated content on failure
        """
        if not self.enabled:
            return truncate(content)

        location_text = ""
        if location_label:
            location_text = f"\nReaders are following news about {location_label}."

        prompt = DESCRIPTION_TEMPLATE.format(
            location=location_text,
            title=title or "Untitled",
            content=content[:MAX_CONTENT_CHARS]
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature
            )

            description = (response.choices[0].message.content or "").strip()
            return description or truncate(content)

        except Exception as e:
            logger.warning(f"Description generation failed: {e}")
            return truncate(content)
