"""City model for the selectable map catalog."""

from pydantic import BaseModel

from app.models.location import Coordinates


class CityLocation(BaseModel):
    """A city that can be shown on one side of the paired maps."""

    key: str
    name: str
    coordinates: Coordinates
    zoom: int
