import pytest

from app.cities.catalog import AVAILABLE_CITIES, CityNotFoundError, get_city


def test_get_city_is_case_insensitive():
    assert get_city(" Denver ").name == "Denver, CO"


def test_get_unknown_city_raises():
    with pytest.raises(CityNotFoundError, match="City not found: atlantis"):
        get_city("atlantis")


def test_catalog_keys_are_unique():
    keys = [city.key for city in AVAILABLE_CITIES]
    assert len(keys) == len(set(keys)) == 12
