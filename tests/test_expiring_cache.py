"""Tests for ExpiringCache: capacity, FIFO eviction, lazy and explicit expiry."""

import random

import pytest

from focusline.core.expiring_cache import ExpiringCache


class ManualClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return ManualClock()


class TestGetSet:
    def test_get_after_set_returns_value(self, clock):
        cache = ExpiringCache(4, 1000, clock=clock)
        cache.set("a", 1)
        assert cache.get("a") == 1

    def test_missing_key_is_default(self, clock):
        cache = ExpiringCache(4, 1000, clock=clock)
        assert cache.get("nope") is None
        assert cache.get("nope", "fallback") == "fallback"

    def test_set_returns_value(self, clock):
        cache = ExpiringCache(4, 1000, clock=clock)
        assert cache.set("a", "x") == "x"

    def test_falsy_values_are_hits(self, clock):
        cache = ExpiringCache(4, 1000, clock=clock)
        cache.set("empty", "")
        assert cache.get("empty") == ""

    def test_overwrite_updates_value_and_timestamp(self, clock):
        cache = ExpiringCache(4, 100, clock=clock)
        cache.set("a", 1)
        clock.now = 90
        cache.set("a", 2)
        clock.now = 150
        assert cache.get("a") == 2
        assert len(cache) == 1

    def test_max_size_is_at_least_one(self, clock):
        cache = ExpiringCache(0, 1000, clock=clock)
        assert cache.max_size == 1
        cache.set("a", 1)
        cache.set("b", 2)
        assert len(cache) == 1
        assert cache.get("b") == 2


class TestEviction:
    def test_scenario_evicts_first_then_expires(self, clock):
        cache = ExpiringCache(2, 1000, clock=clock)
        cache.set("a", 1)
        clock.now = 10
        cache.set("b", 2)
        clock.now = 20
        cache.set("c", 3)

        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

        clock.now = 1100
        assert cache.get("b") is None

    def test_eviction_is_insertion_order_not_recency(self, clock):
        cache = ExpiringCache(3, None, clock=clock)
        for key in "abc":
            cache.set(key, key)
        # Reading "a" does not protect it.
        assert cache.get("a") == "a"
        cache.set("d", "d")
        assert cache.get("a") is None
        assert [cache.get(k) for k in "bcd"] == ["b", "c", "d"]

    def test_overwrite_keeps_original_position(self, clock):
        cache = ExpiringCache(2, None, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_evicts_oldest_live_key_skipping_removed(self, clock):
        cache = ExpiringCache(3, 100, clock=clock)
        cache.set("a", 1)
        clock.now = 50
        cache.set("b", 2)
        cache.set("c", 3)
        clock.now = 120
        assert cache.get("a") is None  # expired, leaves a tombstone
        cache.set("d", 4)
        cache.set("e", 5)
        assert cache.get("b") is None
        assert [cache.get(k) for k in "cde"] == [3, 4, 5]

    def test_size_never_exceeds_max(self, clock):
        rng = random.Random(7)
        cache = ExpiringCache(5, 300, clock=clock)
        for _ in range(500):
            clock.now += rng.randint(0, 40)
            cache.set(rng.randint(0, 20), "v")
            assert len(cache) <= 5

    def test_order_is_compacted(self, clock):
        cache = ExpiringCache(2, None, clock=clock)
        for i in range(50):
            cache.set(i, i)
        assert len(cache._order) <= 2 * cache.max_size + 1
        assert cache.get(48) == 48
        assert cache.get(49) == 49


class TestExpiry:
    def test_lazy_expiry_without_gc(self, clock):
        cache = ExpiringCache(4, 500, clock=clock)
        cache.set("k", "v")
        clock.now = 500
        assert cache.get("k") == "v"
        clock.now = 501
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_zero_ttl_expires_once_time_moves(self, clock):
        cache = ExpiringCache(4, 0, clock=clock)
        cache.set("k", "v")
        assert cache.get("k") == "v"
        clock.now = 1
        assert cache.get("k") is None

    def test_none_ttl_never_expires(self, clock):
        cache = ExpiringCache(4, None, clock=clock)
        cache.set("k", "v")
        clock.now = 10**9
        assert cache.get("k") == "v"
        assert cache.gc() == 0


class TestGcAndClear:
    def test_gc_removes_only_expired(self, clock):
        cache = ExpiringCache(10, 100, clock=clock)
        cache.set("old", 1)
        clock.now = 80
        cache.set("new", 2)
        clock.now = 150
        assert cache.gc() == 1
        assert len(cache) == 1
        assert cache.get("new") == 2
        assert cache._order == ["new"]

    def test_gc_with_nothing_expired(self, clock):
        cache = ExpiringCache(10, 100, clock=clock)
        cache.set("a", 1)
        assert cache.gc() == 0
        assert cache.get("a") == 1

    def test_clear_is_in_place(self, clock):
        cache = ExpiringCache(10, 100, clock=clock)
        alias = cache
        entries = cache._entries
        cache.set("a", 1)
        cache.clear()
        assert alias.get("a") is None
        assert entries == {}
        assert cache._entries is entries
        assert len(alias) == 0

    def test_usable_after_clear(self, clock):
        cache = ExpiringCache(2, 100, clock=clock)
        cache.set("a", 1)
        cache.clear()
        cache.set("b", 2)
        cache.set("c", 3)
        cache.set("d", 4)
        assert cache.get("b") is None
        assert cache.get("d") == 4
