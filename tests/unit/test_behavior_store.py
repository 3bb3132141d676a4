"""
Unit tests for the behavior key-value store.

Tests cover:
- Defaults for missing keys
- Typed round trips for lists, maps and timestamps
- Malformed persisted values falling back to defaults
- Write failures reported without raising
- Snapshot and reset
"""

import sqlite3
from datetime import datetime

import pytest

from ayewam.data.behavior_store import BEHAVIOR_KEYS, BehaviorStore, default_value
from ayewam.data.models import BehaviorSnapshot


def _write_raw(store: BehaviorStore, key: str, raw: str):
    with sqlite3.connect(store.behavior_db) as conn:
        conn.execute(
            "INSERT OR REPLACE INTO behavior_data (key, value, updated_at) VALUES (?, ?, ?)",
            (key, raw, datetime.now().isoformat()),
        )
        conn.commit()


class TestDefaults:
    """Missing keys read as empty defaults."""

    def test_every_key_has_default(self, store):
        for key in BEHAVIOR_KEYS:
            assert store.get(key) == default_value(key)

    def test_unknown_key_raises(self, store):
        with pytest.raises(KeyError):
            store.get("not_a_key")

    def test_defaults_are_fresh_objects(self, store):
        first = store.get_completed_recipes()
        first.append("koko")
        assert store.get_completed_recipes() == []


class TestRoundTrip:
    """Values survive a write and read."""

    def test_list_round_trip(self, store):
        assert store.set_completed_recipes(["koko", "jollof_rice"])
        assert store.get_completed_recipes() == ["koko", "jollof_rice"]

    def test_map_round_trip(self, store):
        store.set_category_preferences({"Soups": 3.5, "Stews": 2.0})
        store.set_difficulty_progression({"Easy": 3, "Medium": 1})

        assert store.get_category_preferences() == {"Soups": 3.5, "Stews": 2.0}
        assert store.get_difficulty_progression() == {"Easy": 3, "Medium": 1}

    def test_timestamp_round_trip(self, store):
        when = datetime(2025, 10, 15, 19, 30, 0)
        store.set_last_cooking_session(when)

        assert store.get_last_cooking_session() == when

    def test_values_persist_across_instances(self, temp_db_dir):
        BehaviorStore(db_dir=temp_db_dir).set_ignored_suggestions(["koko|timeBased"])

        assert BehaviorStore(db_dir=temp_db_dir).get_ignored_suggestions() == ["koko|timeBased"]


class TestMalformedData:
    """Undecodable values read as the key's default."""

    def test_invalid_json(self, store):
        _write_raw(store, "completed_recipes", "{not json")
        assert store.get_completed_recipes() == []

    def test_wrong_shape(self, store):
        _write_raw(store, "category_preferences", '["Soups", "Stews"]')
        assert store.get_category_preferences() == {}

    def test_snapshot_tolerates_malformed_key(self, store):
        store.set_completed_recipes(["koko"])
        _write_raw(store, "cooking_time_slots", '"evening"')

        snapshot = store.snapshot()
        assert snapshot.completed_recipes == ["koko"]
        assert snapshot.cooking_time_slots == []

    def test_snapshot_ignores_unknown_keys(self, store):
        _write_raw(store, "legacy_key", "[1, 2, 3]")
        assert store.snapshot() == BehaviorSnapshot()


class TestWriteFailure:
    """Storage errors are logged and reported, never raised."""

    def test_set_returns_false_on_storage_error(self, store, monkeypatch):
        def broken_connect(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr("ayewam.data.behavior_store.sqlite3.connect", broken_connect)

        assert store.set_completed_recipes(["koko"]) is False
        assert store.reset() is False

    def test_get_returns_default_on_storage_error(self, store, monkeypatch):
        store.set_completed_recipes(["koko"])

        def broken_connect(*args, **kwargs):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr("ayewam.data.behavior_store.sqlite3.connect", broken_connect)

        assert store.get_completed_recipes() == []
        assert store.snapshot() == BehaviorSnapshot()


class TestSnapshotAndReset:
    """Whole-store operations."""

    def test_snapshot_reads_every_key(self, store):
        store.set_completed_recipes(["koko"])
        store.set_recently_viewed_recipes(["bofrot", "koko"])
        store.set_suggestion_type_scores({"timeBased": 2.0})

        snapshot = store.snapshot()
        assert snapshot.completed_recipes == ["koko"]
        assert snapshot.recently_viewed_recipes == ["bofrot", "koko"]
        assert snapshot.suggestion_type_scores == {"timeBased": 2.0}

    def test_reset_clears_every_key(self, store):
        store.set_completed_recipes(["koko"])
        store.set_category_preferences({"Soups": 2.0})
        store.set_last_session_time(datetime(2025, 10, 15, 19, 0))
        store.set_session_durations([120.0])

        assert store.reset() is True
        assert store.snapshot() == BehaviorSnapshot()
