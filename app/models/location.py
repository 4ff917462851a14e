"""Location point model shared by pairings and matches."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, Strict

Degrees = Annotated[FiniteFloat, Strict()]
Coordinates = tuple[Degrees, Degrees]


class LocationPoint(BaseModel):
    """A named place on one city's map.

    Serialized with the ``city`` key used by stored pairing records.
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(alias="city")
    coordinates: Coordinates  # (latitude, longitude)
