"""
Configuration management for the GeoNews service.
Handles environment variables, provider API keys and search tuning.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # API Configuration
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    DEBUG: bool = Field(default=False, description="Debug mode")
    
    # Neural Search Configuration
    EXA_API_KEY: Optional[str] = Field(default=None, description="Exa search API key")
    EXA_BASE_URL: str = Field(default="https://api.exa.ai", description="Exa API base URL")
    MAX_RESULTS_PER_QUERY: int = Field(default=30, description="Provider cap on results per search call")
    SEARCH_LOOKBACK_DAYS: int = Field(default=0, description="Publish-date floor in days before today")
    SEARCH_TIMEOUT: int = Field(default=30, description="Timeout for search provider requests")
    
    # AI Model Configuration
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    OPENAI_MODEL: str = Field(default="gpt-3.5-turbo", description="OpenAI model to use")
    SUMMARY_MAX_TOKENS: int = Field(default=300, description="Maximum tokens for article descriptions")
    SUMMARY_TEMPERATURE: float = Field(default=0.3, description="Sampling temperature for descriptions")
    
    # Places Configuration
    GEOAPIFY_API_KEY: Optional[str] = Field(default=None, description="Geoapify API key")
    GEOAPIFY_BASE_URL: str = Field(default="https://api.geoapify.com", description="Geoapify API base URL")
    PLACES_RADIUS_METERS: int = Field(default=10000, description="Search radius around the user location")
    PLACES_RESULT_LIMIT: int = Field(default=20, description="Maximum places requested from the provider")
    
    # Scraping Configuration
    SCRAPING_TIMEOUT: int = Field(default=30, description="Timeout for web scraping requests")
    USER_AGENT: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        description="User agent for web scraping"
    )
    MIN_DESCRIPTION_LENGTH: int = Field(
        default=50,
        description="Descriptions shorter than this trigger page extraction"
    )
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def get_search_config() -> dict:
    """Get neural search provider configuration."""
    return {
        "api_key": settings.EXA_API_KEY,
        "base_url": settings.EXA_BASE_URL,
        "max_results": settings.MAX_RESULTS_PER_QUERY,
        "lookback_days": settings.SEARCH_LOOKBACK_DAYS,
        "timeout": settings.SEARCH_TIMEOUT,
    }


def get_openai_config() -> dict:
    """Get OpenAI configuration."""
    return {
        "api_key": settings.OPENAI_API_KEY,
        "model": settings.OPENAI_MODEL,
        "max_tokens": settings.SUMMARY_MAX_TOKENS,
        "temperature": settings.SUMMARY_TEMPERATURE,
    }


def get_places_config() -> dict:
    """Get places provider configuration."""
    return {
        "api_key": settings.GEOAPIFY_API_KEY,
        "base_url": settings.GEOAPIFY_BASE_URL,
        "radius": settings.PLACES_RADIUS_METERS,
        "limit": settings.PLACES_RESULT_LIMIT,
        "timeout": settings.SEARCH_TIMEOUT,
    }


def get_scraping_config() -> dict:
    """Get web scraping configuration."""
    return {
        "timeout": settings.SCRAPING_TIMEOUT,
        "user_agent": settings.USER_AGENT,
        "min_description_length": settings.MIN_DESCRIPTION_LENGTH,
    }
