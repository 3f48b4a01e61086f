import threading

import pytest

from campaign_manager.core.cache import TTLCache


def test_get_returns_value_until_ttl_elapses(cache, clock):
    cache.set("k", {"v": 1}, ttl=30)
    clock.advance(29.9)
    assert cache.get("k") == {"v": 1}
    clock.advance(0.1)
    assert cache.get("k") is None


def test_expired_entry_is_purged_on_read(cache, clock):
    cache.set("k", "v", ttl=5)
    clock.advance(10)
    assert len(cache) == 1  # still physically present
    assert "k" not in cache
    assert cache.get("k") is None
    assert len(cache) == 0


def test_get_default_for_missing_key(cache):
    assert cache.get("missing") is None
    assert cache.get("missing", "fallback") == "fallback"


def test_delete_then_get_is_absent(cache):
    cache.set("k", "v")
    cache.delete("k")
    assert cache.get("k") is None
    cache.delete("k")  # idempotent
    cache.delete("never-set")


def test_set_overwrites_and_resets_ttl_window(cache, clock):
    cache.set("k", "v", ttl=10)
    clock.advance(8)
    cache.set("k", "v", ttl=10)
    clock.advance(8)
    assert cache.get("k") == "v"
    cache.set("k", "w", ttl=10)
    assert cache.get("k") == "w"


def test_default_ttl_used_when_not_given(clock):
    cache = TTLCache(default_ttl=3, clock=clock)
    cache.set("k", "v")
    clock.advance(2)
    assert cache.get("k") == "v"
    clock.advance(1)
    assert cache.get("k") is None


def test_zero_ttl_is_immediately_expired(cache):
    cache.set("k", "v", ttl=0)
    assert cache.get("k") is None


def test_negative_ttl_rejected(cache):
    with pytest.raises(ValueError):
        cache.set("k", "v", ttl=-1)
    with pytest.raises(ValueError):
        TTLCache(default_ttl=-5)


def test_clear_removes_everything(cache):
    for i in range(5):
        cache.set(f"k{i}", i)
    cache.clear()
    assert len(cache) == 0


def test_delete_prefix_only_touches_matching_keys(cache):
    cache.set("campaigns:all:100:0", 1)
    cache.set("campaigns:all:10:20", 2)
    cache.set("campaigns:ACTIVE:100:0", 3)
    cache.set("campaign:abc", 4)
    assert cache.delete_prefix("campaigns:all:") == 2
    assert cache.get("campaigns:ACTIVE:100:0") == 3
    assert cache.get("campaign:abc") == 4


def test_get_or_set_produces_on_miss_only(cache):
    calls = []

    def producer():
        calls.append(1)
        return "fresh"

    assert cache.get_or_set("k", producer) == "fresh"
    assert cache.get_or_set("k", producer) == "fresh"
    assert len(calls) == 1


def test_get_or_set_reproduces_after_expiry(cache, clock):
    values = iter(["first", "second"])
    assert cache.get_or_set("k", lambda: next(values), ttl=5) == "first"
    clock.advance(5)
    assert cache.get_or_set("k", lambda: next(values), ttl=5) == "second"


def test_get_or_set_does_not_cache_failures(cache):
    def failing():
        raise RuntimeError("store down")

    with pytest.raises(RuntimeError):
        cache.get_or_set("k", failing)
    assert "k" not in cache


def test_concurrent_misses_may_both_produce():
    cache = TTLCache(default_ttl=60)
    barrier = threading.Barrier(2, timeout=5)
    results = []

    def producer():
        # Both callers must be inside the producer at the same time to pass.
        barrier.wait()
        return threading.current_thread().name

    def worker():
        results.append(cache.get_or_set("k", producer))

    threads = [threading.Thread(target=worker, name=f"t{i}") for i in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results) == ["t0", "t1"]
    assert cache.get("k") in ("t0", "t1")


def test_parallel_writers_and_readers():
    cache = TTLCache(default_ttl=60)
    errors = []

    def hammer(worker_id):
        try:
            for i in range(500):
                key = f"k{i % 20}"
                cache.set(key, (worker_id, i))
                cache.get(key)
                if i % 50 == 0:
                    cache.delete_prefix("k1")
        except Exception as exc:  # pragma: no cover - surfaced by the assert below
            errors.append(exc)

    threads = [threading.Thread(target=hammer, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(cache) <= 20
