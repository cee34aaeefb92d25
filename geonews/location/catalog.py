"""
Static catalog of known locations.

Maps place names, aliases and local keywords to a location descriptor used
by query planning and relevance scoring. The catalog is built once at
import time and never mutated afterwards; adding a city is a data entry in
``_LOCATION_DATA``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationDescriptor:
    """
    A known location and the vocabulary that identifies it.
    
    ``aliases`` and ``preferred_source_domains`` behave as sets but are kept
    as tuples so that query planning is deterministic.
    """
    primary_name: str
    country: str
    region: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    local_keywords: Tuple[str, ...] = ()
    nearby_place_names: Tuple[str, ...] = ()
    preferred_source_domains: Tuple[str, ...] = ()
    
    @property
    def key(self) -> str:
        """Normalized catalog identifier."""
        return normalize_key(self.primary_name)
    
    @property
    def label(self) -> str:
        """Human readable label, e.g. ``Mumbai, Maharashtra, India``."""
        parts = [self.primary_name, self.region, self.country]
        return ", ".join(part for part in parts if part)


def normalize_key(key: str) -> str:
    """Normalize a catalog key: trimmed and lowercase."""
    return " ".join(key.strip().lower().split())


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    ordered = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return tuple(ordered)


class LocationCatalog:
    """
    Read-only lookup table of location descriptors.
    
    Iteration order is insertion order, which is also the tie-break order
    used by location detection.
    """
    
    def __init__(self, descriptors: Iterable[LocationDescriptor]):
        self._entries: Dict[str, LocationDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.key in self._entries:
                raise ValueError(f"Duplicate catalog entry: {descriptor.key}")
            self._entries[descriptor.key] = descriptor
    
    def lookup(self, key: str) -> Optional[LocationDescriptor]:
        """
        Look up a location by its identifier.
        
        Args:
            key: Location identifier, case and surrounding whitespace ignored
            
        Returns:
            Matching descriptor or None
        """
        if not key:
            return None
        return self._entries.get(normalize_key(key))
    
    def __iter__(self) -> Iterator[LocationDescriptor]:
        return iter(self._entries.values())
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._entries


# Editorial source allow-lists per country, used to restrict the provider's
# candidate domains once a location is known.
COUNTRY_SOURCE_DOMAINS: Dict[str, Tuple[str, ...]] = {
    "India": (
        "timesofindia.indiatimes.com",
        "hindustantimes.com",
        "indianexpress.com",
        "thehindu.com",
        "ndtv.com",
        "news18.com",
        "livemint.com",
        "deccanherald.com",
    ),
    "USA": (
        "nytimes.com",
        "washingtonpost.com",
        "cnn.com",
        "apnews.com",
        "npr.org",
        "usatoday.com",
        "nbcnews.com",
        "reuters.com",
    ),
    "UK": (
        "bbc.com",
        "bbc.co.uk",
        "theguardian.com",
        "independent.co.uk",
        "telegraph.co.uk",
        "news.sky.com",
        "standard.co.uk",
        "reuters.com",
    ),
}


def source_domains_for(location: LocationDescriptor) -> List[str]:
    """
    Candidate source domains for a location.
    
    The country allow-list extended with the location's own preferred
    domains, without duplicates.
    """
    country_domains = COUNTRY_SOURCE_DOMAINS.get(location.country, ())
    return list(_unique([*country_domains, *location.preferred_source_domains]))


_LOCATION_DATA: List[LocationDescriptor] = [
    LocationDescriptor(
        primary_name="Mumbai",
        region="Maharashtra",
        country="India",
        aliases=("bombay",),
        local_keywords=(
            "bollywood", "financial capital", "local train", "bmc",
            "marine drive", "bandra", "andheri", "dharavi", "juhu",
        ),
        nearby_place_names=("thane", "navi mumbai", "kalyan", "vasai"),
        preferred_source_domains=("mid-day.com", "freepressjournal.in"),
    ),
    LocationDescriptor(
        primary_name="Delhi",
        country="India",
        aliases=("new delhi",),
        local_keywords=(
            "national capital", "connaught place", "chandni chowk", "yamuna",
            "india gate", "aiims", "red fort",
        ),
        nearby_place_names=("gurugram", "gurgaon", "noida", "ghaziabad", "faridabad"),
        preferred_source_domains=("hindustantimes.com",),
    ),
    LocationDescriptor(
        primary_name="Bangalore",
        region="Karnataka",
        country="India",
        aliases=("bengaluru",),
        local_keywords=(
            "silicon valley of india", "garden city", "electronic city",
            "whitefield", "koramangala", "bbmp", "namma metro",
        ),
        nearby_place_names=("mysuru", "mysore", "hosur", "tumakuru"),
        preferred_source_domains=("deccanherald.com", "bangaloremirror.indiatimes.com"),
    ),
    LocationDescriptor(
        primary_name="Chennai",
        region="Tamil Nadu",
        country="India",
        aliases=("madras",),
        local_keywords=(
            "detroit of india", "marina beach", "t nagar", "anna nagar",
            "tambaram", "egmore", "greater chennai corporation",
        ),
        nearby_place_names=("kanchipuram", "chengalpattu", "tiruvallur", "vellore"),
        preferred_source_domains=("dtnext.in",),
    ),
    LocationDescriptor(
        primary_name="Kolkata",
        region="West Bengal",
        country="India",
        aliases=("calcutta",),
        local_keywords=(
            "city of joy", "howrah bridge", "salt lake", "park street",
            "hooghly", "victoria memorial",
        ),
        nearby_place_names=("howrah", "barasat", "durgapur", "kalyani"),
        preferred_source_domains=("telegraphindia.com",),
    ),
    LocationDescriptor(
        primary_name="Pune",
        region="Maharashtra",
        country="India",
        aliases=("poona",),
        local_keywords=(
            "oxford of the east", "queen of the deccan", "hinjewadi",
            "kothrud", "shivajinagar", "pcmc",
        ),
        nearby_place_names=("pimpri-chinchwad", "lonavala", "satara"),
        preferred_source_domains=("punemirror.com",),
    ),
    LocationDescriptor(
        primary_name="Hyderabad",
        region="Telangana",
        country="India",
        local_keywords=(
            "cyberabad", "pearl city", "hitec city", "charminar",
            "gachibowli", "ghmc", "banjara hills",
        ),
        nearby_place_names=("secunderabad", "warangal", "sangareddy"),
        preferred_source_domains=("telanganatoday.com",),
    ),
    LocationDescriptor(
        primary_name="London",
        region="England",
        country="UK",
        local_keywords=(
            "westminster", "city of london", "tfl", "thames",
            "downing street", "heathrow", "camden",
        ),
        nearby_place_names=("croydon", "watford", "slough", "brighton"),
        preferred_source_domains=("standard.co.uk", "mylondon.news"),
    ),
    LocationDescriptor(
        primary_name="New York",
        region="New York State",
        country="USA",
        aliases=("nyc",),
        local_keywords=(
            "big apple", "manhattan", "brooklyn", "bronx", "mta",
            "wall street", "times square",
        ),
        nearby_place_names=("jersey city", "newark", "yonkers", "long island"),
        preferred_source_domains=("nydailynews.com", "silive.com"),
    ),
]

# Process-wide catalog, read-only after import
DEFAULT_CATALOG = LocationCatalog(_LOCATION_DATA)
