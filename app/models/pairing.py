"""Pairing models and their flat storage representation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.models.location import LocationPoint

CREATED_AT_KEY = "createdAt"


class Pairing(BaseModel):
    """Location points keyed by city, plus the time the pairing was made."""

    model_config = ConfigDict(frozen=True)

    locations: dict[str, LocationPoint]
    created_at: datetime

    def point_for(self, city_key: str) -> LocationPoint | None:
        """Return the point stored under a city key, or None."""
        return self.locations.get(city_key)

    def to_record(self) -> dict:
        """Return the flat record stored and served for this pairing.

        Returns:
            ``{"createdAt": ..., "<cityKey>": {"city": ..., "coordinates": [...]}}``
        """
        record: dict = {CREATED_AT_KEY: self.created_at.isoformat()}
        for city_key, point in self.locations.items():
            record[city_key] = {
                "city": point.label,
                "coordinates": list(point.coordinates),
            }
        return record


class PairingRecord(BaseModel):
    """A validated pairing together with its storage identifier."""

    id: str
    pairing: Pairing


class CreatePairingResponse(BaseModel):
    """Response payload for a newly stored pairing."""

    id: str
    success: bool
    pairing: dict


class DeletePairingResponse(BaseModel):
    """Response payload for a pairing deletion."""

    success: bool
    id: str
