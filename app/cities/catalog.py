"""Cities that can be placed on either side of the paired maps."""

from app.models.city import CityLocation

DEFAULT_ZOOM = 10


class CityNotFoundError(Exception):
    """Raised when a city key is not in the catalog."""
    pass


AVAILABLE_CITIES = [
    CityLocation(key=key, name=name, coordinates=coordinates, zoom=DEFAULT_ZOOM)
    for key, name, coordinates in (
        ("seattle", "Seattle, WA", (47.6062, -122.3321)),
        ("portland", "Portland, OR", (45.5152, -122.6784)),
        ("newyork", "New York, NY", (40.7128, -74.0060)),
        ("boston", "Boston, MA", (42.3601, -71.0589)),
        ("sanfrancisco", "San Francisco, CA", (37.7749, -122.4194)),
        ("losangeles", "Los Angeles, CA", (34.0522, -118.2437)),
        ("chicago", "Chicago, IL", (41.8781, -87.6298)),
        ("detroit", "Detroit, MI", (42.3314, -83.0458)),
        ("austin", "Austin, TX", (30.2672, -97.7431)),
        ("houston", "Houston, TX", (29.7604, -95.3698)),
        ("miami", "Miami, FL", (25.7617, -80.1918)),
        ("denver", "Denver, CO", (39.7392, -104.9903)),
    )
]

_CITIES_BY_KEY = {city.key: city for city in AVAILABLE_CITIES}


def normalize_city_key(city_key: str) -> str:
    """Normalize a city key for lookups.

    Args:
        city_key: Raw city key string.

    Returns:
        Lower-cased key with surrounding whitespace removed.
    """
    return city_key.lower().strip()


def get_city(city_key: str) -> CityLocation:
    """Return the catalog entry for a city key.

    Raises:
        CityNotFoundError: If the key is not in the catalog.
    """
    city = _CITIES_BY_KEY.get(normalize_city_key(city_key))
    if city is None:
        raise CityNotFoundError(f"City not found: {city_key}")
    return city