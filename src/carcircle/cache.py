"""In-memory shadow copies of remote-owned circles."""

from __future__ import annotations

from collections.abc import Iterable

from carcircle.models.circle import Circle


class CircleCache:
    """Keyed store of the last known state of each circle.

    Entries are never expired; last writer wins.  Reads hand out deep
    copies so callers cannot mutate the cached ``settings`` or
    ``members`` in place.
    """

    def __init__(self, circles: Iterable[Circle] = ()) -> None:
        self._circles: dict[str, Circle] = {}
        self.put_many(circles)

    def __len__(self) -> int:
        return len(self._circles)

    def __contains__(self, circle_id: object) -> bool:
        return circle_id in self._circles

    def get(self, circle_id: str) -> Circle | None:
        circle = self._circles.get(circle_id)
        if circle is None:
            return None
        return circle.model_copy(deep=True)

    def put(self, circle: Circle) -> Circle:
        stored = circle.model_copy(deep=True)
        self._circles[stored.id] = stored
        return stored.model_copy(deep=True)

    def put_many(self, circles: Iterable[Circle]) -> None:
        for circle in circles:
            self.put(circle)

    def remove(self, circle_id: str) -> Circle | None:
        circle = self._circles.pop(circle_id, None)
        if circle is None:
            return None
        return circle.model_copy(deep=True)

    def snapshot(self) -> list[Circle]:
        """All cached circles; order is insertion order but not a contract."""
        return [circle.model_copy(deep=True) for circle in self._circles.values()]

    def clear(self) -> None:
        self._circles.clear()
