"""
Connector for the Geoapify geocoding and places APIs.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from geonews.places.geo import (
    calculate_distance,
    format_distance,
    format_opening_hours,
    format_price_level,
    generate_website_url,
    get_geoapify_categories,
    is_generic_category,
    map_category,
)
from geonews.utils.config import get_places_config
from geonews.utils.exceptions import ConfigurationError, PlacesProviderError

logger = logging.getLogger(__name__)

MAX_PLACES = 8


@dataclass
class UserLocation:
    """
    Position reported by the user's browser.
    """
    lat: float
    lng: float
    address: Optional[str] = None
    city: Optional[str] = None


@dataclass
class LocalBusiness:
    """
    A nearby business or place.
    """
    title: str
    url: str
    snippet: str
    rating: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    distance: Optional[str] = None
    category: Optional[str] = None
    opening_hours: Optional[str] = None
    price_level: Optional[str] = None
    coordinates: Optional[Tuple[float, float]] = None
    distance_km: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "rating": self.rating,
            "address": self.address,
            "phone": self.phone,
            "distance": self.distance,
            "category": self.category,
            "openingHours": self.opening_hours,
            "priceLevel": self.price_level,
        }
        if self.coordinates:
            data["coordinates"] = {"lat": self.coordinates[0], "lng": self.coordinates[1]}
        return data


def _join_address(properties: Dict[str, Any], fields: Tuple[str, ...]) -> Optional[str]:
    parts = [str(properties[name]) for name in fields if properties.get(name)]
    return ", ".join(parts) if parts else properties.get("formatted")


def _coordinates(place: Dict[str, Any]) -> Optional[List[float]]:
    """``[lng, lat]`` of a feature, or None when missing or malformed."""
    coords = (place.get("geometry") or {}).get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    try:
        return [float(coords[0]), float(coords[1])]
    except (TypeError, ValueError):
        return None


def _distance(
    user_location: Optional[UserLocation],
    coordinates: List[float]
) -> Tuple[Optional[float], Optional[str]]:
    if not user_location:
        return None, None
    km = calculate_distance(user_location.lat, user_location.lng, coordinates[1], coordinates[0])
    return km, format_distance(km)


def parse_geocode_feature(
    place: Dict[str, Any],
    user_location: Optional[UserLocation]
) -> Optional[LocalBusiness]:
    """Parse a geocode search feature; None when it has no usable position."""
    props = place.get("properties") or {}
    coords = _coordinates(place)
    if coords is None:
        return None

    address = _join_address(props, ("housenumber", "street", "city", "state", "postcode"))
    distance_km, distance = _distance(user_location, coords)

    category = map_category(props.get("categories"))
    snippet = f"{category} located in {props.get('city') or 'the area'}"
    if props.get("details"):
        snippet += f". {'. '.join(props['details'])}"
    if distance:
        snippet += f" Located {distance} away."

    return LocalBusiness(
        title=props.get("name") or "Local Business",
        url=generate_website_url(props, coords),
        snippet=snippet,
        rating=str(props["rating"]) if props.get("rating") else None,
        address=address,
        phone=props.get("phone"),
        distance=distance,
        category=category,
        opening_hours=format_opening_hours(props.get("opening_hours")),
        price_level=format_price_level(props.get("price_level")),
        coordinates=(coords[1], coords[0]),
        distance_km=distance_km,
    )


def parse_places_feature(
    place: Dict[str, Any],
    user_location: Optional[UserLocation]
) -> Optional[LocalBusiness]:
    """Parse a places search feature; None when it has no usable position."""
    props = place.get("properties") or {}
    coords = _coordinates(place)
    if coords is None:
        return None

    address = _join_address(props, ("housenumber", "street", "city", "state"))
    distance_km, distance = _distance(user_location, coords)

    category = map_category(props.get("categories"))
    snippet = category
    if props.get("city"):
        snippet += f" in {props['city']}"
    if address:
        snippet += f". Address: {address}"
    if props.get("phone"):
        snippet += f" Call: {props['phone']}"

    return LocalBusiness(
        title=props.get("name") or f"{category} Business",
        url=generate_website_url(props, coords),
        snippet=snippet,
        rating=str(props["rating"]) if props.get("rating") else None,
        address=address,
        phone=props.get("phone"),
        distance=distance,
        category=category,
        opening_hours=format_opening_hours(props.get("opening_hours")),
        price_level=format_price_level(props.get("price_level")),
        coordinates=(coords[1], coords[0]),
        distance_km=distance_km,
    )


def is_business(result: LocalBusiness) -> bool:
    """Filter out roads, unnamed features and schools from geocode hits."""
    title_lower = result.title.lower()
    return (
        result.title != "Local Business"
        and len(result.title) > 2
        and "unnamed road" not in title_lower
        and "street" not in title_lower
        and result.category != "Education"
    )


class GeoapifyConnector:
    """
    Connector for Geoapify geocoding and places search.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        """
        Initialize the Geoapify connector.

        Args:
            api_key: Geoapify API key, defaults to the configured key
            base_url: API root, defaults to the configured URL
        """
        self.config = get_places_config()
        self.api_key = api_key or self.config["api_key"]
        if not self.api_key:
            raise ConfigurationError("GEOAPIFY_API_KEY not found in environment variables")

        self.base_url = (base_url or self.config["base_url"]).rstrip("/")
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            headers={"Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=self.config["timeout"])
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    def _location_params(self, user_location: Optional[UserLocation]) -> Dict[str, str]:
        if not user_location:
            return {}
        return {
            "bias": f"proximity:{user_location.lng},{user_location.lat}",
            "filter": f"circle:{user_location.lng},{user_location.lat},{self.config['radius']}",
        }

    async def _get_features(self, path: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{path}"
        async with self.session.get(url, params=params) as response:
            if response.status != 200:
                error_text = await response.text()
                logger.error(f"Geoapify API error: {response.status} {error_text[:200]}")
                raise PlacesProviderError(
                    f"Geoapify API error: {response.status} {response.reason}",
                    status=response.status
                )
            data = await response.json()
        return data.get("features") or []

    async def geocode_search(
        self,
        query: str,
        user_location: Optional[UserLocation] = None
    ) -> List[LocalBusiness]:
        """
        Search places by free text.

        Falls back to a category-based places search when the geocoder
        returns nothing.

        Raises:
            PlacesProviderError: If the geocoder returns an error
        """
        params = {
            "text": query.strip(),
            "apiKey": self.api_key,
            "limit": str(self.config["limit"]),
            "format": "geojson",
        }
        params.update(self._location_params(user_location))

        logger.info(f"Geoapify search query: {query}")
        features = await self._get_features("/v1/geocode/search", params)

        if not features:
            logger.info("No results from Geoapify geocoder, trying Places API...")
            return await self.places_search(query, user_location)

        parsed = [parse_geocode_feature(place, user_location) for place in features]
        results = [result for result in parsed if result is not None]
        return [result for result in results if is_business(result)][:MAX_PLACES]

    async def places_search(
        self,
        query: str,
        user_location: Optional[UserLocation] = None
    ) -> List[LocalBusiness]:
        """
        Search places by category near the user.

        Errors are logged and yield an empty list.
        """
        params = {
            "categories": get_geoapify_categories(query),
            "apiKey": self.api_key,
            "limit": str(self.config["limit"]),
            "format": "geojson",
        }
        params.update(self._location_params(user_location))

        if not is_generic_category(query):
            params["name"] = query

        try:
            features = await self._get_features("/v2/places", params)
        except Exception as e:
            logger.error(f"Geoapify Places search error: {e}")
            return []

        parsed = [parse_places_feature(place, user_location) for place in features]
        results = [result for result in parsed if result is not None]
        return [result for result in results if len(result.title) > 2][:MAX_PLACES]
