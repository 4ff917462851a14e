import re

import pytest

from app.colors.colors import color_for, color_from_coordinates, color_key

HSL_PATTERN = re.compile(r"^hsl\((\d+), (\d+)%, (\d+)%\)$")

SEATTLE = (47.6062, -122.3321)
PORTLAND = (45.5152, -122.6784)


def parse_hsl(color: str):
    match = HSL_PATTERN.match(color)
    assert match, color
    return tuple(int(part) for part in match.groups())


def test_color_from_coordinates_origin():
    assert color_from_coordinates(0.0, 0.0) == "hsl(0, 70%, 50%)"


def test_color_for_coincident_points_at_origin():
    assert color_for((0.0, 0.0), (0.0, 0.0)) == "hsl(0, 70%, 50%)"


def test_color_for_seattle_portland_pairing():
    assert color_for(SEATTLE, PORTLAND) == "hsl(20, 99%, 50%)"


def test_color_for_is_deterministic():
    first = color_for(SEATTLE, PORTLAND)
    for _ in range(5):
        assert color_for(SEATTLE, PORTLAND) == first


def test_color_for_is_symmetric():
    assert color_for(SEATTLE, PORTLAND) == color_for(PORTLAND, SEATTLE)
    assert color_for((-33.9, 151.2), (51.5, -0.12)) == color_for(
        (51.5, -0.12), (-33.9, 151.2)
    )


@pytest.mark.parametrize(
    "coords_a, coords_b",
    [
        (SEATTLE, PORTLAND),
        ((40.7128, -74.006), (42.3601, -71.0589)),
        ((-89.9, -179.9), (89.9, 179.9)),
        ((95.0, -200.0), (-95.0, 200.0)),
        ((25.7617, -80.1918), (25.7617, -80.1918)),
    ],
)
def test_color_components_stay_in_legible_ranges(coords_a, coords_b):
    hue, saturation, lightness = parse_hsl(color_for(coords_a, coords_b))
    assert 0 <= hue < 360
    assert 70 <= saturation < 100
    assert 50 <= lightness < 70


def test_nearby_pairings_get_different_colors():
    shifted_seattle = (SEATTLE[0], SEATTLE[1] + 0.01)
    assert color_for(SEATTLE, PORTLAND) != color_for(shifted_seattle, PORTLAND)


def test_color_key_sorts_city_keys():
    forward = color_key("seattle", "portland", SEATTLE, PORTLAND)
    backward = color_key("portland", "seattle", PORTLAND, SEATTLE)
    assert forward == backward
    assert forward.startswith("portland-seattle-")


def test_color_key_rounds_midpoint():
    key = color_key("a", "b", (1.0, 2.0), (2.0, 4.0))
    assert key == "a-b-1.5-3"


def test_color_key_drops_trailing_zero_on_whole_degrees():
    key = color_key("a", "b", (45.0, -121.0), (47.0, -123.0))
    assert key == "a-b-46--122"


def test_color_key_rounds_to_five_decimals():
    key = color_key("a", "b", (0.0, 0.0), (0.123456, -0.123456))
    assert key == "a-b-0.06173--0.06173"
