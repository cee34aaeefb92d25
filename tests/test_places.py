"""
Tests for local business search.
"""

from unittest.mock import AsyncMock

import pytest

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
from geonews.places.geoapify_client import (
    GeoapifyConnector,
    LocalBusiness,
    UserLocation,
    is_business,
    parse_geocode_feature,
    parse_places_feature,
)
from geonews.places.service import FALLBACK_WARNING, LocalSearchService, get_sample_local_businesses
from geonews.utils.exceptions import ConfigurationError, PlacesProviderError

USER = UserLocation(lat=19.0760, lng=72.8777, city="Mumbai")


def feature(name="Blue Tokai Coffee", lng=72.8800, lat=19.0800, **properties):
    props = {
        "name": name,
        "street": "Hill Road",
        "city": "Mumbai",
        "state": "Maharashtra",
        "postcode": "400050",
        "categories": ["commercial.food_and_drink.cafe"],
        "place_id": "abc123",
    }
    props.update(properties)
    return {"properties": props, "geometry": {"coordinates": [lng, lat]}}


class TestGeoHelpers:
    def test_distance(self):
        assert calculate_distance(0, 0, 0, 1) == pytest.approx(111.19, abs=0.01)
        assert calculate_distance(19.0, 72.8, 19.0, 72.8) == 0

    def test_format_distance(self):
        assert format_distance(0.35) == "350 m"
        assert format_distance(2.44) == "2.4 km"

    def test_map_category(self):
        assert map_category(["commercial.food_and_drink.cafe"]) == "Restaurant"
        assert map_category(["healthcare.hospital.emergency"]) == "Healthcare"
        assert map_category(["something.else"]) == "Business"
        assert map_category(None) == "Business"

    def test_price_level(self):
        assert format_price_level(2) == "$$"
        assert format_price_level(None) is None
        assert format_price_level(7) is None

    def test_opening_hours(self):
        assert format_opening_hours("Open 24/7") == "24 hours"
        assert format_opening_hours(None) is None
        long_hours = "Mo-Fr 09:00-18:00; Sa 10:00-16:00; Su 12:00-15:00; PH off"
        assert format_opening_hours(long_hours) == long_hours[:50] + "..."
        assert format_opening_hours("Mo-Fr 09:00-18:00") == "Mo-Fr 09:00-18:00"

    def test_website_url(self):
        assert generate_website_url({"website": "https://cafe.example"}, [1, 2]) == "https://cafe.example"
        assert generate_website_url({"place_id": "p1"}, [1, 2]) == (
            "https://www.google.com/maps/place/?q=place_id:p1"
        )
        url = generate_website_url({"name": "Cafe", "formatted": "Hill Road"}, [72.8, 19.0])
        assert url.startswith("https://www.google.com/maps/search/?api=1&query=Cafe%20Hill%20Road")
        assert url.endswith("&center=19.0,72.8")

    def test_query_categories(self):
        assert get_geoapify_categories("coffee near me") == "catering.cafe"
        assert get_geoapify_categories("restaurants") == "catering.restaurant"
        assert get_geoapify_categories("xyz") == "commercial"

    def test_generic_category(self):
        assert is_generic_category("best Restaurants nearby")
        assert not is_generic_category("Blue Tokai")


class TestParsing:
    def test_geocode_feature(self):
        business = parse_geocode_feature(feature(rating=4.5, price_level=2), USER)

        assert business.title == "Blue Tokai Coffee"
        assert business.category == "Restaurant"
        assert business.address == "Hill Road, Mumbai, Maharashtra, 400050"
        assert business.rating == "4.5"
        assert business.price_level == "$$"
        assert business.distance.endswith("km") or business.distance.endswith("m")
        assert business.distance_km == pytest.approx(0.5, abs=0.2)
        assert business.snippet.startswith("Restaurant located in Mumbai")
        assert business.coordinates == (19.08, 72.88)

    def test_places_feature_without_user(self):
        business = parse_places_feature(feature(phone="022 1234"), None)

        assert business.distance is None
        assert business.address == "Hill Road, Mumbai, Maharashtra"
        assert business.snippet == (
            "Restaurant in Mumbai. Address: Hill Road, Mumbai, Maharashtra Call: 022 1234"
        )

    def test_is_business(self):
        assert is_business(parse_geocode_feature(feature(), None))
        assert not is_business(parse_geocode_feature(feature(name="Linking Street"), None))
        assert not is_business(parse_geocode_feature(feature(name=None), None))
        school = feature(name="St. Xavier's", categories=["education.school"])
        assert not is_business(parse_geocode_feature(school, None))


    def test_feature_without_geometry(self):
        broken = {"properties": {"name": "Cafe Nero"}, "geometry": None}
        assert parse_geocode_feature(broken, USER) is None
        assert parse_places_feature(broken, USER) is None

    def test_feature_with_short_coordinates(self):
        assert parse_geocode_feature(feature(lng=None, lat=None), None) is None
        short = {"properties": {"name": "Cafe Nero"}, "geometry": {"coordinates": [72.88]}}
        assert parse_places_feature(short, None) is None

    def test_feature_without_properties(self):
        business = parse_places_feature({"properties": None, "geometry": {"coordinates": [72.88, 19.08]}}, None)
        assert business.title == "Business Business"
    def test_to_dict(self):
        data = parse_geocode_feature(feature(), USER).to_dict()
        assert data["coordinates"] == {"lat": 19.08, "lng": 72.88}
        assert "openingHours" in data


class TestConnector:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr("geonews.places.geoapify_client.get_places_config", lambda: {
            "api_key": None,
            "base_url": "https://api.geoapify.com",
            "radius": 10000,
            "limit": 20,
            "timeout": 30,
        })
        with pytest.raises(ConfigurationError):
            GeoapifyConnector()

    @pytest.mark.asyncio
    async def test_geocode_filters_and_caps(self):
        connector = GeoapifyConnector(api_key="test-key")
        features = [feature(name=f"Cafe {i}") for i in range(10)] + [feature(name="Main Street")]
        connector._get_features = AsyncMock(return_value=features)

        results = await connector.geocode_search("cafe", USER)

        assert len(results) == 8
        path, params = connector._get_features.call_args.args
        assert path == "/v1/geocode/search"
        assert params["filter"] == "circle:72.8777,19.076,10000"
        assert params["bias"].startswith("proximity:")

    @pytest.mark.asyncio
    async def test_geocode_falls_back_to_places(self):
        connector = GeoapifyConnector(api_key="test-key")
        connector._get_features = AsyncMock(side_effect=[[], [feature()]])

        results = await connector.geocode_search("Blue Tokai", None)

        assert [r.title for r in results] == ["Blue Tokai Coffee"]
        path, params = connector._get_features.call_args.args
        assert path == "/v2/places"
        assert params["name"] == "Blue Tokai"
        assert "filter" not in params

    @pytest.mark.asyncio
    async def test_places_error_yields_empty(self):
        connector = GeoapifyConnector(api_key="test-key")
        connector._get_features = AsyncMock(side_effect=PlacesProviderError("HTTP 401", status=401))

        assert await connector.places_search("restaurants", USER) == []


class FakePlacesConnector:
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def geocode_search(self, query, user_location=None):
        if self.error:
            raise self.error
        return list(self.results)


def business(title, distance_km):
    return LocalBusiness(title=title, url="https://example.com", snippet="", distance_km=distance_km)


class TestLocalSearchService:
    def test_sample_businesses_filtered(self):
        assert [b.title for b in get_sample_local_businesses(None, "coffee")] == ["Joe's Coffee House"]
        assert [b.title for b in get_sample_local_businesses(USER, "shopping")] == ["QuickMart Grocery"]
        assert get_sample_local_businesses(USER, "shopping")[0].distance == "0.7 km"
        assert get_sample_local_businesses(None, "dentist") == []

    @pytest.mark.asyncio
    async def test_sorted_by_distance(self):
        connector = FakePlacesConnector([business("Far", 5.0), business("Near", 0.4), business("Unknown", None)])
        service = LocalSearchService(connector_factory=lambda: connector)

        result = await service.search("cafe", USER, max_results=2)

        assert result.source == "geoapify"
        assert [b.title for b in result.results] == ["Near", "Far"]
        assert result.total_results == 3
        assert result.processed_results == 2

    @pytest.mark.asyncio
    async def test_unsorted_without_location(self):
        connector = FakePlacesConnector([business("Far", None), business("Near", None)])
        service = LocalSearchService(connector_factory=lambda: connector)

        result = await service.search("cafe")

        assert [b.title for b in result.results] == ["Far", "Near"]

    @pytest.mark.asyncio
    async def test_fallback_on_provider_error(self):
        connector = FakePlacesConnector(error=PlacesProviderError("HTTP 500", status=500))
        service = LocalSearchService(connector_factory=lambda: connector)

        result = await service.search("coffee", USER)

        assert result.source == "fallback"
        assert result.warning == FALLBACK_WARNING
        assert [b.title for b in result.results] == ["Joe's Coffee House"]

    @pytest.mark.asyncio
    async def test_fallback_when_unconfigured(self):
        def factory():
            raise ConfigurationError("GEOAPIFY_API_KEY not found in environment variables")

        result = await LocalSearchService(connector_factory=factory).search("coffee")

        assert result.source == "fallback"
        assert result.warning == FALLBACK_WARNING

    @pytest.mark.asyncio
    async def test_fallback_on_empty_results(self):
        service = LocalSearchService(connector_factory=lambda: FakePlacesConnector([]))

        result = await service.search("coffee")

        assert result.source == "fallback"
        assert result.warning is None

    @pytest.mark.asyncio
    async def test_malformed_features_fall_back(self):
        connector = GeoapifyConnector(api_key="test-key")
        connector._get_features = AsyncMock(
            return_value=[{"properties": {"name": "Cafe Nero"}, "geometry": None}]
        )
        service = LocalSearchService(connector_factory=lambda: connector)

        result = await service.search("coffee")

        assert result.source == "fallback"
        assert [b.title for b in result.results] == ["Joe's Coffee House"]

    @pytest.mark.asyncio
    async def test_fallback_on_unexpected_provider_error(self):
        connector = FakePlacesConnector(error=ValueError("Expecting value: line 1 column 1"))
        service = LocalSearchService(connector_factory=lambda: connector)

        result = await service.search("coffee", USER)

        assert result.source == "fallback"
        assert result.warning == FALLBACK_WARNING


@pytest.mark.asyncio
async def test_places_search_skips_malformed_features():
    connector = GeoapifyConnector(api_key="test-key")
    connector._get_features = AsyncMock(return_value=[
        {"properties": {"name": "Cafe Nero"}, "geometry": {"coordinates": []}},
        feature(),
    ])

    results = await connector.places_search("restaurants", USER)

    assert [r.title for r in results] == ["Blue Tokai Coffee"]


@pytest.mark.asyncio
async def test_places_search_unexpected_error_yields_empty():
    connector = GeoapifyConnector(api_key="test-key")
    connector._get_features = AsyncMock(side_effect=ValueError("not json"))

    assert await connector.places_search("restaurants", USER) == []
