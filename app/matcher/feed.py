"""Recompute and publish matches whenever a hover point or the pairings change."""

from collections.abc import Callable, Sequence

from pydantic import BaseModel

from app.logging_config import logger
from app.matcher.matcher import DEFAULT_MAX_DISTANCE, match_for_map
from app.models.location import Coordinates
from app.models.match import MapMatches
from app.models.pairing import Pairing


class FeedUpdate(BaseModel):
    """Matches to draw on each of the two maps, keyed by the map's city key."""

    highlights: dict[str, MapMatches]


Subscriber = Callable[[FeedUpdate], None]


class MatchFeed:
    """Holds the hover state of two paired maps and notifies subscribers.

    Matches highlighted on one map come from hovering the other; self
    matches come from hovering the map itself.
    """

    def __init__(
        self,
        left_key: str,
        right_key: str,
        max_distance: float = DEFAULT_MAX_DISTANCE,
        include_self: bool = False,
    ):
        if left_key == right_key:
            raise ValueError("A match feed needs two different maps")
        self.left_key = left_key
        self.right_key = right_key
        self.max_distance = max_distance
        self.include_self = include_self
        self._pairings: tuple[Pairing, ...] = ()
        self._hover: dict[str, Coordinates | None] = {left_key: None, right_key: None}
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback and return a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_pairings(self, pairings: Sequence[Pairing]) -> FeedUpdate:
        self._pairings = tuple(pairings)
        return self._publish()

    def set_hover(self, city_key: str, point: Coordinates | None) -> FeedUpdate:
        """Record the cursor position on one map (None when it leaves)."""
        if city_key not in self._hover:
            raise ValueError(f"Unknown map for this feed: {city_key}")
        self._hover[city_key] = point
        return self._publish()

    def current(self) -> FeedUpdate:
        """Compute the matches for the present state without notifying."""
        left = self._evaluate(self.left_key, self.right_key)
        right = self._evaluate(self.right_key, self.left_key)
        return FeedUpdate(
            highlights={
                # cross matches land on the opposite map, self matches stay put
                self.left_key: MapMatches(
                    cross=right.cross, self_matches=left.self_matches
                ),
                self.right_key: MapMatches(
                    cross=left.cross, self_matches=right.self_matches
                ),
            }
        )

    def _evaluate(self, hovered_key: str, other_key: str) -> MapMatches:
        return match_for_map(
            self._hover[hovered_key],
            self._pairings,
            hovered_key,
            other_key,
            self.max_distance,
            self.include_self,
        )

    def _publish(self) -> FeedUpdate:
        update = self.current()
        left = update.highlights[self.left_key]
        right = update.highlights[self.right_key]
        logger.debug(
            "MATCH_FEED_UPDATE",
            left=self.left_key,
            right=self.right_key,
            left_matches=len(left.cross) + len(left.self_matches),
            right_matches=len(right.cross) + len(right.self_matches),
        )
        for callback in list(self._subscribers):
            try:
                callback(update)
            except Exception:
                logger.exception(
                    "MATCH_FEED_SUBSCRIBER_FAILED",
                    left=self.left_key,
                    right=self.right_key,
                )
        return update
