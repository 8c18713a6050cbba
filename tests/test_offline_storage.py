"""Tests for the JSON file key/value store."""

from portfolio.services.offline_storage import OfflineStore


def test_get_missing_returns_default(offline_store):
    assert offline_store.get("nothing") is None
    assert offline_store.get("nothing", []) == []


def test_set_get_delete(offline_store):
    offline_store.set("sync_queue", [{"id": "a"}])
    assert offline_store.get("sync_queue") == [{"id": "a"}]

    offline_store.delete("sync_queue")
    assert offline_store.get("sync_queue") is None


def test_values_persist_across_instances(tmp_path):
    OfflineStore(tmp_path).set("data_version_skills", 3)
    assert OfflineStore(tmp_path).get("data_version_skills") == 3


def test_unreadable_file_reads_as_missing(offline_store):
    offline_store.set("state", {"ok": True})
    path = offline_store.directory / "state.json"
    path.write_text("{not json", encoding="utf-8")

    assert offline_store.get("state", "fallback") == "fallback"


def test_keys_are_sanitised(offline_store):
    offline_store.set("../escape/attempt", 1)

    assert offline_store.get("../escape/attempt") == 1
    assert [p.name for p in offline_store.directory.iterdir()] == [".._escape_attempt.json"]


def test_no_temp_files_left_behind(offline_store):
    for i in range(3):
        offline_store.set("k", i)
    assert [p.name for p in offline_store.directory.iterdir()] == ["k.json"]
