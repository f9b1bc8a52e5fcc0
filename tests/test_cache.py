"""Local version cache and merge behaviour."""
from __future__ import annotations

from shotchain.engine.cache import VersionCache, merge_versions


def test_merge_prefers_server_copy_and_orders_by_number(make_version) -> None:
    local = [make_version("a", 3, image_url="local.png"), make_version("a", 2)]
    server = [make_version("a", 1), make_version("a", 3, image_url="server.png")]
    merged = merge_versions(server, local)
    assert [v.id for v in merged] == ["a-v1", "a-v2", "a-v3"]
    assert merged[-1].image_url == "server.png"


def test_reconcile_drops_confirmed_entries(make_version) -> None:
    cache = VersionCache()
    cache.record_local("a", make_version("a", 2))
    cache.record_local("a", make_version("a", 3))

    cache.reconcile("a", [make_version("a", 1), make_version("a", 2)])

    assert [v.id for v in cache.cached("a")] == ["a-v3"]
    cache.reconcile("a", [make_version("a", 3)])
    assert cache.cached("a") == []
    assert cache.shot_ids() == []


def test_recording_same_id_replaces_entry(make_version) -> None:
    cache = VersionCache()
    cache.record_local("a", make_version("a", 2, image_url="first.png"))
    cache.record_local("a", make_version("a", 2, image_url="second.png"))
    cached = cache.cached("a")
    assert len(cached) == 1
    assert cached[0].image_url == "second.png"


def test_merged_versions_include_local_entries(make_version) -> None:
    cache = VersionCache()
    cache.record_local("a", make_version("a", 2))
    merged = cache.merged_versions("a", [make_version("a", 1)])
    assert [v.id for v in merged] == ["a-v1", "a-v2"]
    cache.discard("a")
    assert cache.merged_versions("a", [make_version("a", 1)])[-1].id == "a-v1"
