"""Tests for the Redis-backed category tree cache."""

import json
import logging

from storefront.services.tree_cache import TreeCache

TREE = [{"id": "1", "name": "Electronics", "slug": "electronics", "path": "electronics", "children": []}]


def test_miss_builds_and_stores_with_ttl(tree_cache, fake_redis):
    builds = []

    def build():
        builds.append(1)
        return TREE

    assert tree_cache.get_or_build(build) == TREE
    assert tree_cache.get_or_build(build) == TREE
    assert len(builds) == 1
    assert fake_redis.ttls["test_category_tree"] == 3600
    assert json.loads(fake_redis.data["test_category_tree"]) == TREE


def test_invalidate_forces_rebuild(tree_cache):
    tree_cache.set(TREE)
    tree_cache.invalidate()

    assert tree_cache.get() is None
    assert tree_cache.get_or_build(lambda: []) == []


def test_unreadable_entry_is_treated_as_miss(tree_cache, fake_redis):
    fake_redis.data["test_category_tree"] = "{not json"

    assert tree_cache.get() is None


def test_unavailable_cache_falls_back_to_build(unavailable_redis, caplog):
    cache = TreeCache(unavailable_redis, key="k", ttl_seconds=60)

    with caplog.at_level(logging.WARNING):
        assert cache.get_or_build(lambda: TREE) == TREE

    assert "Cache read failed" in caplog.text


def test_failed_invalidation_is_logged_not_raised(unavailable_redis, caplog):
    cache = TreeCache(unavailable_redis, key="k", ttl_seconds=60)

    with caplog.at_level(logging.ERROR):
        cache.invalidate()

    assert "stale tree may be served" in caplog.text
