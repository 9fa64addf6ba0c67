"""Tests for the JSON vector store."""
import json

import pytest

from ragbot.exceptions import (
    DimensionMismatch,
    StoreCorrupt,
    StoreNotFound,
    StoreWriteFailed,
)
from ragbot.rag.store_json import JSONVectorStore, Record


def test_round_trip_preserves_values(store):
    records = [
        Record(text="first chunk", embedding=[0.1, -2.5e-7, 3.141592653589793]),
        Record(text="second chunk, ünïcode", embedding=[1.0, 0.0, -1.0]),
    ]
    store.save(records)

    assert store.load() == records


def test_file_is_human_readable_list(store):
    store.save([Record(text="a b", embedding=[1.0, 0.0])])

    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert raw == [{"text": "a b", "embedding": [1.0, 0.0]}]
    assert "\n  " in store.path.read_text(encoding="utf-8")


def test_save_overwrites_previous_store(store):
    store.save([Record(text=str(i), embedding=[1.0]) for i in range(3)])
    store.save([Record(text="only", embedding=[2.0])])

    assert [r.text for r in store.load()] == ["only"]


def test_save_empty_list(store):
    store.save([])
    assert store.load() == []


def test_save_creates_parent_directories(tmp_path):
    store = JSONVectorStore(tmp_path / "nested" / "dir" / "store.json")
    store.save([Record(text="x", embedding=[1.0])])
    assert store.exists()


def test_save_leaves_no_temp_file(store):
    store.save([Record(text="x", embedding=[1.0])])
    assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]


def test_mixed_dimensions_rejected_and_store_untouched(store):
    store.save([Record(text="old", embedding=[1.0, 0.0])])

    with pytest.raises(DimensionMismatch):
        store.save(
            [
                Record(text="a", embedding=[1.0, 0.0]),
                Record(text="b", embedding=[1.0, 0.0, 0.0]),
            ]
        )

    assert [r.text for r in store.load()] == ["old"]


def test_load_missing_file(store):
    with pytest.raises(StoreNotFound):
        store.load()


@pytest.mark.parametrize(
    "content",
    [
        "not json at all",
        '{"text": "x", "embedding": [1]}',
        '[{"text": "x"}]',
        '[{"text": "x", "embedding": []}]',
        '[{"text": "x", "embedding": ["a", "b"]}]',
    ],
)
def test_load_corrupt_file(store, content):
    store.path.write_text(content, encoding="utf-8")

    with pytest.raises(StoreCorrupt):
        store.load()


def test_stats(store):
    assert store.get_stats()["exists"] is False

    store.save([Record(text="x", embedding=[1.0, 2.0, 3.0])])
    stats = store.get_stats()

    assert stats["record_count"] == 1
    assert stats["dimension"] == 3


def test_save_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JSONVectorStore(blocker / "store.json")

    with pytest.raises(StoreWriteFailed) as exc_info:
        store.save([Record(text="x", embedding=[1.0])])

    assert isinstance(exc_info.value.__cause__, OSError)


def test_save_failure_keeps_previous_store(store, monkeypatch):
    store.save([Record(text="old", embedding=[1.0])])

    def fail_replace(src, dst):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr("ragbot.rag.store_json.os.replace", fail_replace)

    with pytest.raises(StoreWriteFailed):
        store.save([Record(text="new", embedding=[2.0])])

    monkeypatch.undo()
    assert [r.text for r in store.load()] == ["old"]
    assert not store.path.with_name(store.path.name + ".tmp").exists()


def test_load_unreadable_path(tmp_path):
    store_dir = tmp_path / "store.json"
    store_dir.mkdir()

    with pytest.raises(StoreCorrupt) as exc_info:
        JSONVectorStore(store_dir).load()

    assert isinstance(exc_info.value.__cause__, OSError)
