"""Deterministic colors for pairings, derived from their coordinates.

Hue follows longitude and saturation/lightness follow latitude, so
pairings in the same region get related colors. The normalized values are
amplified before wrapping so neighbouring pairings stay distinguishable.
"""

import math

from app.models.location import Coordinates

AMPLIFICATION = 500
DISTANCE_OFFSET_FACTOR = 2.5

SATURATION_MIN = 70
SATURATION_SPAN = 30
LIGHTNESS_MIN = 50
LIGHTNESS_SPAN = 20

COLOR_KEY_PRECISION = 100000


def _wrap(value: float) -> float:
    """Wrap a value into [0, 1)."""
    wrapped = value % 1.0
    # -1e-20 % 1.0 rounds up to 1.0
    return 0.0 if wrapped >= 1.0 else wrapped


def color_from_coordinates(latitude: float, longitude: float) -> str:
    """Return the HSL color for a single coordinate.

    Args:
        latitude: Latitude in degrees, nominally -90 to 90.
        longitude: Longitude in degrees, nominally -180 to 180.

    Returns:
        A CSS ``hsl(h, s%, l%)`` string.
    """
    normalized_lat = (latitude + 90) / 180
    normalized_lng = (longitude + 180) / 360

    amplified_lat = _wrap(normalized_lat * AMPLIFICATION)
    amplified_lng = _wrap(normalized_lng * AMPLIFICATION)

    hue = math.floor(amplified_lng * 360)
    saturation = math.floor(SATURATION_MIN + amplified_lat * SATURATION_SPAN)
    lightness = math.floor(
        LIGHTNESS_MIN + _wrap(amplified_lat + amplified_lng) * LIGHTNESS_SPAN
    )
    return f"hsl({hue}, {saturation}%, {lightness}%)"


def color_for(coords_a: Coordinates, coords_b: Coordinates) -> str:
    """Return the color of the pairing between two coordinates.

    Both the midpoint and the absolute difference are symmetric, so the
    result does not depend on which side is passed first.

    Args:
        coords_a: (latitude, longitude) of one side of the pairing.
        coords_b: (latitude, longitude) of the other side.

    Returns:
        A CSS ``hsl(h, s%, l%)`` string.
    """
    mid_lat = (coords_a[0] + coords_b[0]) / 2
    mid_lng = (coords_a[1] + coords_b[1]) / 2

    lat_diff = abs(coords_a[0] - coords_b[0])
    lng_diff = abs(coords_a[1] - coords_b[1])

    offset_lat = mid_lat + _wrap(lat_diff * DISTANCE_OFFSET_FACTOR)
    offset_lng = mid_lng + _wrap(lng_diff * DISTANCE_OFFSET_FACTOR)
    return color_from_coordinates(offset_lat, offset_lng)


def _key_number(value: float) -> str:
    """Round to 5 decimals, half up, and drop a trailing ".0"."""
    rounded = math.floor(value * COLOR_KEY_PRECISION + 0.5) / COLOR_KEY_PRECISION
    return str(int(rounded)) if rounded.is_integer() else repr(rounded)


def color_key(
    source_key: str,
    target_key: str,
    source: Coordinates,
    target: Coordinates,
) -> str:
    """Return a stable identifier for the pairing a color belongs to."""
    first, second = sorted((source_key, target_key))
    mid_lat = _key_number((source[0] + target[0]) / 2)
    mid_lng = _key_number((source[1] + target[1]) / 2)
    return f"{first}-{second}-{mid_lat}-{mid_lng}"
