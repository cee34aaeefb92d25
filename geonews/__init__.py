"""
GeoNews

A location-aware news and nearby-business search service. Detects the
place a query is about, fans the query out to a neural news search
provider, and ranks the combined results by local relevance and recency.
"""

__version__ = "1.0.0"
__author__ = "GeoNews Team"
__description__ = "Location-aware news and local business search"
