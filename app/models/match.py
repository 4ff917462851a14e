"""Matched point models produced by the proximity matcher."""

from pydantic import BaseModel, Field

from app.models.location import Coordinates


class MatchedPoint(BaseModel):
    """A point to highlight on the map opposite the hover."""

    coordinates: Coordinates
    normalized_distance: float = Field(ge=0, le=1)
    color: str
    id: str  # source and target keys, shared by every match of one call
    color_key: str


class MapMatches(BaseModel):
    """Matches for one hovered map."""

    cross: list[MatchedPoint] = []
    self_matches: list[MatchedPoint] = []


class MatchResponse(BaseModel):
    """Response payload for the match endpoint."""

    source: str
    target: str
    hover: Coordinates | None
    max_distance: float
    matches: list[MatchedPoint]
    self_matches: list[MatchedPoint]
