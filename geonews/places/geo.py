"""
Geographic helpers and category tables for local business search.
"""

import math
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

EARTH_RADIUS_KM = 6371.0

# Provider category → display category
CATEGORY_MAP: Dict[str, str] = {
    'accommodation': 'Hotel',
    'commercial': 'Business',
    'commercial.food_and_drink': 'Restaurant',
    'commercial.food_and_drink.restaurant': 'Restaurant',
    'commercial.food_and_drink.cafe': 'Restaurant',
    'commercial.food_and_drink.fast_food': 'Restaurant',
    'commercial.food_and_drink.bar': 'Restaurant',
    'commercial.food_and_drink.pub': 'Restaurant',
    'commercial.shopping': 'Shopping',
    'commercial.supermarket': 'Shopping',
    'commercial.marketplace': 'Shopping',
    'healthcare': 'Healthcare',
    'healthcare.hospital': 'Healthcare',
    'healthcare.clinic': 'Healthcare',
    'healthcare.pharmacy': 'Healthcare',
    'healthcare.dentist': 'Healthcare',
    'healthcare.veterinary': 'Healthcare',
    'service': 'Services',
    'service.automotive': 'Automotive',
    'service.financial': 'Services',
    'service.beauty': 'Services',
    'entertainment': 'Entertainment',
    'entertainment.cinema': 'Entertainment',
    'entertainment.nightclub': 'Entertainment',
    'tourism': 'Entertainment',
    'tourism.attraction': 'Entertainment',
    'sport': 'Entertainment',
    'education': 'Education',
    'building': 'Business',
    'parking': 'Parking',
    'fuel': 'Gas Station',
}

# Query keyword → provider category filter
QUERY_CATEGORY_MAP: Dict[str, str] = {
    'restaurant': 'catering.restaurant',
    'restaurants': 'catering.restaurant',
    'food': 'catering',
    'coffee': 'catering.cafe',
    'cafe': 'catering.cafe',
    'bar': 'catering.bar',
    'pub': 'catering.pub',
    'fast food': 'catering.fast_food',
    'gas station': 'service.fuel',
    'fuel': 'service.fuel',
    'petrol': 'service.fuel',
    'hospital': 'healthcare.hospital',
    'clinic': 'healthcare.clinic',
    'doctor': 'healthcare',
    'pharmacy': 'healthcare.pharmacy',
    'hotel': 'accommodation.hotel',
    'motel': 'accommodation.motel',
    'shopping': 'commercial.shopping_mall',
    'store': 'commercial',
    'supermarket': 'commercial.supermarket',
    'grocery': 'commercial.supermarket',
    'bank': 'commercial.bank',
    'atm': 'service.financial.bank',
    'gym': 'sport.fitness',
    'fitness': 'sport.fitness',
}

GENERIC_TERMS = [
    'restaurants', 'food', 'coffee shops', 'gas stations', 'hospitals',
    'hotels', 'shopping', 'stores', 'pharmacies', 'banks', 'gyms',
]

PRICE_LEVELS = {1: '$', 2: '$$', 3: '$$$', 4: '$$$$'}


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def format_distance(distance_km: float) -> str:
    """``"350 m"`` below one kilometre, ``"2.4 km"`` otherwise."""
    if distance_km < 1:
        return f"{round(distance_km * 1000)} m"
    return f"{distance_km:.1f} km"


def map_category(categories: Optional[Sequence[str]] = None) -> str:
    """
    Map provider categories to a display category.

    Exact matches win; otherwise the first partial match in either
    direction; ``Business`` when nothing matches.
    """
    categories = categories or []

    for category in categories:
        if category in CATEGORY_MAP:
            return CATEGORY_MAP[category]

    for category in categories:
        for key, value in CATEGORY_MAP.items():
            if key in category or category in key:
                return value

    return 'Business'


def format_price_level(level: Optional[int]) -> Optional[str]:
    if level is None:
        return None
    return PRICE_LEVELS.get(level)


def format_opening_hours(hours: Optional[str]) -> Optional[str]:
    if not hours:
        return None

    hours_lower = hours.lower()
    if '24/7' in hours_lower or '24 hours' in hours_lower:
        return '24 hours'

    return hours[:50] + '...' if len(hours) > 50 else hours


def generate_website_url(properties: Dict[str, Any], coordinates: Sequence[float]) -> str:
    """
    Link for a place: its website, else a Google Maps link.

    Args:
        properties: Provider feature properties
        coordinates: ``[lng, lat]`` pair
    """
    if properties.get('website'):
        return properties['website']

    if properties.get('place_id'):
        return f"https://www.google.com/maps/place/?q=place_id:{properties['place_id']}"

    name = properties.get('name') or 'Business'
    query = quote(f"{name} {properties.get('formatted') or ''}")
    return (
        f"https://www.google.com/maps/search/?api=1&query={query}"
        f"&center={coordinates[1]},{coordinates[0]}"
    )


def get_geoapify_categories(query: str) -> str:
    """Comma separated provider categories for a query; ``commercial`` by default."""
    query_lower = query.lower()
    matched: List[str] = [
        category for keyword, category in QUERY_CATEGORY_MAP.items()
        if keyword in query_lower
    ]
    return ','.join(dict.fromkeys(matched)) if matched else 'commercial'


def is_generic_category(query: str) -> bool:
    query_lower = query.lower()
    return any(term in query_lower for term in GENERIC_TERMS)
