"""Validation of raw pairing payloads and stored records."""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from pydantic import TypeAdapter, ValidationError

from app.logging_config import logger
from app.models.location import LocationPoint
from app.models.pairing import CREATED_AT_KEY, Pairing, PairingRecord
from app.pairing_service.errors import InvalidPairingError

MIN_LOCATIONS = 2

_timestamp = TypeAdapter(datetime)


def is_location_point(value) -> bool:
    """Return True if value is a ``{"city", "coordinates": [lat, lng]}`` mapping."""
    try:
        LocationPoint.model_validate(value)
    except ValidationError:
        return False
    return True


def _parse_created_at(value) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    try:
        return _timestamp.validate_python(value)
    except ValidationError as exc:
        raise InvalidPairingError(f"Invalid {CREATED_AT_KEY}: {value!r}") from exc


def parse_pairing(raw) -> Pairing:
    """Build a Pairing from its flat record form.

    Entries that are not valid location points are dropped. A missing
    ``createdAt`` defaults to the current UTC time.

    Args:
        raw: Mapping of city keys to location points plus ``createdAt``.

    Returns:
        The validated Pairing.

    Raises:
        InvalidPairingError: If raw is not a mapping, has a malformed
            timestamp, or holds fewer than two valid locations.
    """
    if not isinstance(raw, dict):
        raise InvalidPairingError("Invalid request body")

    created_at = _parse_created_at(raw.get(CREATED_AT_KEY))
    locations = {}
    for key, value in raw.items():
        if key == CREATED_AT_KEY:
            continue
        try:
            locations[key] = LocationPoint.model_validate(value)
        except ValidationError as exc:
            logger.warning(
                "PAIRING_LOCATION_DROPPED",
                city_key=key,
                error_count=exc.error_count(),
            )

    if len(locations) < MIN_LOCATIONS:
        raise InvalidPairingError(
            "At least two cities with valid coordinates are required"
        )
    return Pairing(locations=locations, created_at=created_at)


def _record_problem(record, city_keys: Sequence[str]) -> str | None:
    """Return why a stored record cannot be matched on city_keys, or None."""
    if not isinstance(record, dict):
        return "not an object"
    if "id" not in record or "pairing" not in record:
        return "missing id or pairing property"
    pairing = record["pairing"]
    if not isinstance(pairing, dict):
        return "pairing is not an object"
    for city_key in city_keys:
        if city_key not in pairing:
            return f'pairing missing city key "{city_key}"'
        if not is_location_point(pairing[city_key]):
            return f"{city_key} is not a valid LocationPoint"
    return None


def filter_valid_records(
    records: Iterable, city_keys: Sequence[str]
) -> list[PairingRecord]:
    """Keep the stored records that hold a valid point for every city key.

    Args:
        records: Raw ``{"id", "pairing"}`` records as listed by the store.
        city_keys: City keys every kept record must resolve.

    Returns:
        Validated PairingRecord instances in input order.
    """
    records = list(records)
    valid = []
    for record in records:
        problem = _record_problem(record, city_keys)
        if problem is None:
            try:
                pairing = parse_pairing(record["pairing"])
            except InvalidPairingError as exc:
                problem = str(exc)
            else:
                valid.append(PairingRecord(id=str(record["id"]), pairing=pairing))
                continue

        raw_pairing = record.get("pairing") if isinstance(record, dict) else None
        mentions_cities = isinstance(raw_pairing, dict) and any(
            raw_pairing.get(key) for key in city_keys
        )
        log = logger.warning if mentions_cities else logger.debug
        log("INVALID_PAIRING_RECORD", reason=problem, city_keys=list(city_keys))

    logger.info(
        "PAIRING_RECORDS_FILTERED",
        city_keys=list(city_keys),
        valid=len(valid),
        total=len(records),
    )
    return valid
