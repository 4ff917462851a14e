"""Pairing operations used by the API: storage, validation and matching."""

import os

from app.logging_config import logger
from app.matcher.matcher import DEFAULT_MAX_DISTANCE, match_for_map
from app.models.location import Coordinates
from app.models.match import MatchResponse
from app.pairing_service.errors import PairingNotFoundError
from app.pairing_service.validation import filter_valid_records, parse_pairing
from app.pairing_store.store import pairing_store

MATCH_MAX_DISTANCE = float(os.getenv("MATCH_MAX_DISTANCE", str(DEFAULT_MAX_DISTANCE)))


def list_pairings() -> list[dict]:
    """Return every stored pairing record.

    Returns:
        Raw ``{"id", "pairing"}`` records, oldest first.
    """
    records = pairing_store().list_all()
    logger.info("PAIRINGS_LISTED", count=len(records))
    return records


def get_pairing(pairing_id: str) -> dict:
    """Return a single stored pairing record.

    Args:
        pairing_id: Pairing identifier.

    Returns:
        The ``{"id", "pairing"}`` record.

    Raises:
        PairingNotFoundError: If nothing is stored under the id.
    """
    pairing = pairing_store().get(pairing_id)
    if pairing is None:
        raise PairingNotFoundError(f"Pairing not found: {pairing_id}")
    return {"id": pairing_id, "pairing": pairing}


def create_pairing(body) -> dict:
    """Validate and store a new pairing.

    Args:
        body: Flat pairing payload from the client.

    Returns:
        ``{"id", "success", "pairing"}`` for the stored pairing.

    Raises:
        InvalidPairingError: If the payload is not a valid pairing.
    """
    pairing = parse_pairing(body)
    pairing_id = pairing_store().create(pairing)
    logger.info(
        "PAIRING_CREATED",
        id=pairing_id,
        cities=sorted(pairing.locations),
    )
    return {"id": pairing_id, "success": True, "pairing": pairing.to_record()}


def delete_pairing(pairing_id: str) -> dict:
    """Delete a pairing. Deleting an unknown id still succeeds."""
    removed = pairing_store().delete(pairing_id)
    logger.info("PAIRING_DELETED", id=pairing_id, removed=removed)
    return {"success": True, "id": pairing_id}


def get_matches(
    source: str,
    target: str,
    hover: Coordinates | None,
    max_distance: float = MATCH_MAX_DISTANCE,
    include_self: bool = False,
) -> MatchResponse:
    """Compute the points to highlight while hovering the source city's map.

    Args:
        source: City key of the hovered map.
        target: City key of the paired map.
        hover: (latitude, longitude) under the cursor, or None.
        max_distance: Match radius in degrees.
        include_self: Also return nearby paired points on the source map.

    Returns:
        A MatchResponse with cross-map and self matches.
    """
    if hover is None:
        pairings = []
    else:
        # self matches only need the source city; the matcher skips missing targets
        required = [source] if include_self else [source, target]
        records = filter_valid_records(pairing_store().list_all(), required)
        pairings = [record.pairing for record in records]

    result = match_for_map(hover, pairings, source, target, max_distance, include_self)
    logger.info(
        "MATCHES_COMPUTED",
        source=source,
        target=target,
        pairings=len(pairings),
        matches=len(result.cross),
        self_matches=len(result.self_matches),
    )
    return MatchResponse(
        source=source,
        target=target,
        hover=hover,
        max_distance=max_distance,
        matches=result.cross,
        self_matches=result.self_matches,
    )
