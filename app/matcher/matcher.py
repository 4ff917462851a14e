"""Proximity matching between the hovered map and its paired map.

Distances are planar, in degrees of latitude/longitude. 0.05 degrees is
roughly 5 km at mid-latitudes; the approximation degrades near the poles
and across the antimeridian.
"""

import math
from collections.abc import Sequence

from app.colors.colors import color_for, color_key
from app.models.location import Coordinates
from app.models.match import MapMatches, MatchedPoint
from app.models.pairing import Pairing

DEFAULT_MAX_DISTANCE = 0.05


def planar_distance(a: Coordinates, b: Coordinates) -> float:
    """Return the Euclidean distance between two coordinates in degrees."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _within(distance: float, max_distance: float) -> bool:
    if max_distance == 0:
        return distance == 0
    return distance < max_distance


def find_matches(
    hover_point: Coordinates | None,
    pairings: Sequence[Pairing],
    source_key: str,
    target_key: str,
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> list[MatchedPoint]:
    """Return the target points of pairings whose source point is near the hover.

    Pairings that lack either role key are skipped. Each pairing yields at
    most one match, and matches keep the order of ``pairings``.

    Args:
        hover_point: (latitude, longitude) under the cursor, or None.
        pairings: Snapshot of validated pairings; only read.
        source_key: City key of the hovered map.
        target_key: City key of the map to highlight. May equal source_key.
        max_distance: Match radius in degrees. Strictly closer points match.

    Returns:
        A fresh list of MatchedPoint, empty when nothing is in range.
    """
    if hover_point is None or not pairings:
        return []

    match_id = f"{source_key}-{target_key}"
    matches = []
    for pairing in pairings:
        source = pairing.point_for(source_key)
        target = pairing.point_for(target_key)
        if source is None or target is None:
            continue

        distance = planar_distance(source.coordinates, hover_point)
        if not _within(distance, max_distance):
            continue

        matches.append(
            MatchedPoint(
                coordinates=target.coordinates,
                normalized_distance=distance / max_distance if max_distance > 0 else 0.0,
                color=color_for(source.coordinates, target.coordinates),
                id=match_id,
                color_key=color_key(
                    source_key, target_key, source.coordinates, target.coordinates
                ),
            )
        )
    return matches


def match_for_map(
    hover_point: Coordinates | None,
    pairings: Sequence[Pairing],
    hovered_key: str,
    other_key: str,
    max_distance: float = DEFAULT_MAX_DISTANCE,
    include_self: bool = False,
) -> MapMatches:
    """Evaluate the matches produced by hovering one map.

    Args:
        hover_point: (latitude, longitude) under the cursor, or None.
        pairings: Snapshot of validated pairings.
        hovered_key: City key of the map under the cursor.
        other_key: City key of the paired map.
        max_distance: Match radius in degrees.
        include_self: Also highlight other paired points on the hovered map.

    Returns:
        MapMatches with the cross-map matches and, if requested, self matches.
    """
    cross = find_matches(hover_point, pairings, hovered_key, other_key, max_distance)
    self_matches = (
        find_matches(hover_point, pairings, hovered_key, hovered_key, max_distance)
        if include_self
        else []
    )
    return MapMatches(cross=cross, self_matches=self_matches)
