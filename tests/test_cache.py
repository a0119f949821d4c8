from __future__ import annotations

from carcircle.cache import CircleCache
from carcircle.models.circle import Circle


def test_last_writer_wins() -> None:
    cache = CircleCache()
    cache.put(Circle(id="c1", name="First"))
    cache.put(Circle(id="c1", name="Second"))

    assert len(cache) == 1
    cached = cache.get("c1")
    assert cached is not None
    assert cached.name == "Second"


def test_reads_are_isolated_from_cached_state() -> None:
    cache = CircleCache([Circle(id="c1", name="Family", settings={"color": "blue"})])

    copy = cache.get("c1")
    assert copy is not None
    assert copy.settings is not None
    copy.settings["color"] = "red"

    again = cache.get("c1")
    assert again is not None
    assert again.settings == {"color": "blue"}


def test_remove_and_clear() -> None:
    cache = CircleCache([Circle(id="a", name="A"), Circle(id="b", name="B")])

    removed = cache.remove("a")
    assert removed is not None
    assert removed.id == "a"
    assert "a" not in cache
    assert cache.remove("a") is None

    cache.clear()
    assert cache.snapshot() == []
    assert cache.get("b") is None


def test_removed_circle_is_a_copy() -> None:
    cache = CircleCache([Circle(id="c1", name="Family", settings={"color": "blue"})])
    snapshot_before = cache.snapshot()

    removed = cache.remove("c1")
    assert removed is not None
    assert removed.settings is not None
    removed.settings["color"] = "red"

    assert snapshot_before[0].settings == {"color": "blue"}
    cache.put(snapshot_before[0])
    again = cache.get("c1")
    assert again is not None
    assert again.settings == {"color": "blue"}
