import logging

import pytest

from reservex.errors import Forbidden, NotFound, RemoteUnavailable, Unauthorized
from reservex.services.resolver import Resolver, merge_records
from reservex.utils.cache import TTLCache

from conftest import FakeRemote


def _rec(rid, created, **kw):
    return dict(kw, id=rid, createdAt=created)


def test_merge_has_one_record_per_id_and_overlay_wins():
    seed = [_rec("a", "2024-01-01T00:00:00.000Z", v=1), _rec("b", "2024-01-02T00:00:00.000Z", v=1)]
    overlay = [_rec("b", "2024-01-02T00:00:00.000Z", v=2), _rec("local-c", "2024-03-01T00:00:00.000Z", v=1)]
    merged = merge_records(seed, overlay)
    assert [r["id"] for r in merged] == ["local-c", "b", "a"]
    assert merged[1]["v"] == 2


def test_tombstone_hides_seed_record():
    seed = [_rec("a", "2024-01-01T00:00:00.000Z"), _rec("b", "2024-01-02T00:00:00.000Z")]
    overlay = [{"id": "a", "deleted": True, "deletedAt": "2024-05-01T00:00:00.000Z"}]
    assert [r["id"] for r in merge_records(seed, overlay)] == ["b"]


def test_records_without_timestamp_sort_last():
    merged = merge_records([{"id": "x"}], [_rec("y", "2024-01-01T00:00:00.000Z")])
    assert [r["id"] for r in merged] == ["y", "x"]


def test_keep_insertion_order_when_asked():
    seed = [_rec("a", "2024-01-01T00:00:00.000Z")]
    overlay = [_rec("b", "2025-01-01T00:00:00.000Z")]
    assert [r["id"] for r in merge_records(seed, overlay, newest_first=False)] == ["a", "b"]


def test_remote_result_wins_and_is_not_merged(engine, overlay):
    overlay.save("bookings", [_rec("local-booking-1", "2024-01-01T00:00:00.000Z")])
    resolver = Resolver(FakeRemote(list_bookings=[]), engine.resolver.seeds, overlay)
    result = resolver.execute("list", lambda: resolver.remote.list_bookings(), lambda: ["fallback"])
    assert result == []


def test_unreachable_remote_falls_back_with_warning(caplog):
    resolver = Resolver(FakeRemote(), None, None)
    with caplog.at_level(logging.WARNING, logger="reservex"):
        result = resolver.execute("get_thing", resolver.remote.get_thing, lambda: "local")
    assert result == "local"
    assert "get_thing: remote unavailable" in caplog.text


@pytest.mark.parametrize("error", [Unauthorized("expired"), Forbidden("no"), NotFound("gone")])
def test_other_remote_errors_propagate(error):
    fallback_calls = []
    resolver = Resolver(FakeRemote(get_thing=error), None, None)
    with pytest.raises(type(error)):
        resolver.execute("get_thing", resolver.remote.get_thing, lambda: fallback_calls.append(1))
    assert fallback_calls == []


def test_fallback_errors_propagate():
    resolver = Resolver(FakeRemote(), None, None)

    def fallback():
        raise NotFound("nowhere")

    with pytest.raises(NotFound):
        resolver.execute("get_thing", resolver.remote.get_thing, fallback)


def test_cached_remote_reads():
    remote = FakeRemote(get_thing=["a"])
    resolver = Resolver(remote, None, None, TTLCache(ttl_seconds=60))
    for _ in range(3):
        assert resolver.execute("get_thing", remote.get_thing, lambda: [], cache_key="thing") == ["a"]
    assert len(remote.calls) == 1


def test_fallback_results_are_not_cached():
    remote = FakeRemote()
    resolver = Resolver(remote, None, None, TTLCache(ttl_seconds=60))
    resolver.execute("get_thing", remote.get_thing, lambda: ["local"], cache_key="thing")
    resolver.execute("get_thing", remote.get_thing, lambda: ["local"], cache_key="thing")
    assert len(remote.calls) == 2


def test_ttl_cache_expiry():
    now = [100.0]
    cache = TTLCache(ttl_seconds=10, clock=lambda: now[0])
    cache.put("k", {"v": 1})
    assert cache.get("k") == {"v": 1}
    now[0] += 11
    assert cache.get("k") is None


def test_ttl_cache_returns_copies():
    cache = TTLCache(ttl_seconds=10)
    cache.put("k", {"v": [1]})
    cache.get("k")["v"].append(2)
    assert cache.get("k") == {"v": [1]}


def test_local_delete_of_overlay_only_record_leaves_no_tombstone(engine, overlay):
    record = engine.resolver.local_insert("reviews", {"restaurantId": "r1", "rating": 3})
    engine.resolver.local_delete("reviews", record["id"])
    assert overlay.load("reviews") == []


def test_remote_unavailable_is_a_reservex_error():
    assert RemoteUnavailable("x").status_code == 503
