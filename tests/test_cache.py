import fakeredis
import redis

from orders.cache import OrderListCache


def _cache(ttl_seconds=60, server=None):
    return OrderListCache(fakeredis.FakeRedis(server=server or fakeredis.FakeServer(), decode_responses=True), ttl_seconds)


def test_invalidate_clears_given_tabs_and_all_tab():
    cache = _cache()
    cache.set("on_hold", "count", 1)
    cache.set("shipped", "count", 2)
    cache.set(None, "list", ["all"])

    removed = cache.invalidate(["on_hold"])

    assert removed == 2
    assert cache.get("on_hold", "count") is None
    assert cache.get(None, "list") is None
    assert cache.get("shipped", "count") == 2


def test_entries_are_stored_with_ttl():
    cache = _cache(ttl_seconds=10)
    cache.set("on_hold", "count", 3)

    keys = list(cache.client.scan_iter(match="orders:list:on_hold:*"))

    assert len(keys) == 1
    assert 0 < cache.client.ttl(keys[0]) <= 10


def test_zero_ttl_disables_cache():
    cache = _cache(ttl_seconds=0)
    cache.set("on_hold", "count", 3)

    assert cache.get("on_hold", "count") is None
    assert list(cache.client.scan_iter(match="orders:list:*")) == []


def test_invalidation_is_visible_to_other_workers():
    server = fakeredis.FakeServer()
    worker_a = _cache(server=server)
    worker_b = _cache(server=server)

    worker_b.set("on_hold", "count", 4)
    assert worker_a.get("on_hold", "count") == 4

    worker_a.invalidate(["on_hold"])

    assert worker_b.get("on_hold", "count") is None


def test_redis_failure_falls_back_to_no_cache():
    server = fakeredis.FakeServer()
    server.connected = False
    cache = _cache(server=server)

    cache.set("on_hold", "count", 1)

    assert cache.get("on_hold", "count") is None
    assert cache.invalidate(["on_hold"]) == 0


def test_cached_values_are_json():
    cache = _cache()
    cache.set(None, "list", {"orders": [{"order_id": "ORD-1"}], "total_count": 1})

    assert cache.get(None, "list") == {"orders": [{"order_id": "ORD-1"}], "total_count": 1}
    assert isinstance(cache.client, redis.Redis)
