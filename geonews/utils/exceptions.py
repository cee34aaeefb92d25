"""
Exception hierarchy for the GeoNews service.

    GeoNewsError
    ├── ConfigurationError
    ├── SearchProviderError
    ├── SearchUnavailableError
    └── PlacesProviderError
"""

from typing import List, Optional


class GeoNewsError(Exception):
    """Base exception for all GeoNews errors."""


class ConfigurationError(GeoNewsError):
    """A required setting, usually an API key, is missing."""


class SearchProviderError(GeoNewsError):
    """A single call to the news search provider failed."""
    
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SearchUnavailableError(GeoNewsError):
    """
    The news search could not produce any results.
    
    Raised when the provider is unreachable or every planned query failed.
    The individual failures are kept on ``errors``.
    """
    
    def __init__(self, message: str, errors: Optional[List[BaseException]] = None):
        super().__init__(message)
        self.errors = errors or []


class PlacesProviderError(GeoNewsError):
    """The places/geocoding provider returned an error."""
    
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
