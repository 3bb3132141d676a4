"""
Behavior store for the Ayewam recommendation engine.

Manages the behavior.db SQLite database: a key-value table holding every
behavior collection (counters, sets, small maps) as JSON under a stable key.

The store is pure storage. It never raises to callers:
- write failures are logged and reported as False
- undecodable values read as the collection's default
"""

import logging
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from .models import BehaviorSnapshot

logger = logging.getLogger(__name__)

# Every persisted key, with the adapter that encodes/validates its value
BEHAVIOR_KEYS: Dict[str, TypeAdapter] = {
    name: TypeAdapter(field.annotation)
    for name, field in BehaviorSnapshot.model_fields.items()
}


def default_value(key: str) -> Any:
    """Empty default for a behavior key."""
    return BehaviorSnapshot.model_fields[key].get_default(call_default_factory=True)


class BehaviorStore:
    """Interface for the behavior key-value database."""

    def __init__(self, db_dir: str = "data"):
        """
        Initialize the behavior store.

        Args:
            db_dir: Directory containing database files
        """
        self.db_dir = Path(db_dir)
        self.db_dir.mkdir(parents=True, exist_ok=True)

        self.behavior_db = self.db_dir / "behavior.db"
        self._lock = threading.RLock()

        self._init_database()

    def _init_database(self):
        """Initialize behavior database schema."""
        with sqlite3.connect(self.behavior_db) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS behavior_data (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.commit()
            logger.debug("Behavior database initialized")

    # ==================== Encoding ====================

    def _decode(self, key: str, raw: Optional[str]) -> Any:
        """Decode a stored value, falling back to the key's default."""
        if raw is None:
            return default_value(key)
        try:
            return BEHAVIOR_KEYS[key].validate_json(raw)
        except ValidationError as e:
            logger.warning(f"[STORE] Malformed value for '{key}', using default: {e.error_count()} error(s)")
            return default_value(key)

    def _encode(self, key: str, value: Any) -> str:
        return BEHAVIOR_KEYS[key].dump_json(value).decode("utf-8")

    # ==================== Generic Operations ====================

    def get(self, key: str) -> Any:
        """
        Read one behavior collection.

        Args:
            key: Behavior key (a BehaviorSnapshot field name)

        Returns:
            Decoded value, or the key's default if missing/unreadable
        """
        if key not in BEHAVIOR_KEYS:
            raise KeyError(f"Unknown behavior key: {key}")

        with self._lock:
            try:
                with sqlite3.connect(self.behavior_db) as conn:
                    cursor = conn.cursor()
                    cursor.execute("SELECT value FROM behavior_data WHERE key = ?", (key,))
                    row = cursor.fetchone()
            except sqlite3.Error as e:
                logger.error(f"[STORE] Failed to read '{key}': {e}")
                return default_value(key)

        return self._decode(key, row[0] if row else None)

    def set(self, key: str, value: Any) -> bool:
        """
        Replace one behavior collection.

        Returns:
            True if the value was persisted
        """
        if key not in BEHAVIOR_KEYS:
            raise KeyError(f"Unknown behavior key: {key}")

        with self._lock:
            try:
                encoded = self._encode(key, value)
                with sqlite3.connect(self.behavior_db) as conn:
                    cursor = conn.cursor()
                    cursor.execute(
                        """
                        INSERT OR REPLACE INTO behavior_data (key, value, updated_at)
                        VALUES (?, ?, ?)
                        """,
                        (key, encoded, datetime.now().isoformat()),
                    )
                    conn.commit()
            except (sqlite3.Error, ValueError) as e:
                logger.error(f"[STORE] Failed to write '{key}': {e}")
                return False

        return True

    def transaction(self) -> threading.RLock:
        """
        Lock serializing a multi-key read-modify-write.

        Usage:
            with store.transaction():
                completed = store.get_completed_recipes()
                store.set_completed_recipes(completed + [recipe_id])

        Reentrant, so get/set/snapshot can be called while it is held.
        """
        return self._lock

    def snapshot(self) -> BehaviorSnapshot:
        """
        Read every behavior collection in one transaction.

        Tracking events hold transaction() while they write, so a snapshot
        never observes a partially applied event.
        """
        with self._lock:
            try:
                with sqlite3.connect(self.behavior_db) as conn:
                    cursor = conn.cursor()
                    cursor.execute("SELECT key, value FROM behavior_data")
                    rows = cursor.fetchall()
            except sqlite3.Error as e:
                logger.error(f"[STORE] Failed to read snapshot: {e}")
                rows = []

        stored = {key: raw for key, raw in rows if key in BEHAVIOR_KEYS}
        return BehaviorSnapshot(**{
            key: self._decode(key, stored.get(key)) for key in BEHAVIOR_KEYS
        })

    def reset(self) -> bool:
        """
        Overwrite every behavior key with its empty default.

        All keys are written in a single transaction.
        """
        now = datetime.now().isoformat()
        rows = [(key, self._encode(key, default_value(key)), now) for key in BEHAVIOR_KEYS]

        with self._lock:
            try:
                with sqlite3.connect(self.behavior_db) as conn:
                    cursor = conn.cursor()
                    cursor.executemany(
                        """
                        INSERT OR REPLACE INTO behavior_data (key, value, updated_at)
                        VALUES (?, ?, ?)
                        """,
                        rows,
                    )
                    conn.commit()
            except sqlite3.Error as e:
                logger.error(f"[STORE] Failed to reset behavior data: {e}")
                return False

        logger.info("[STORE] Behavior data reset")
        return True

    # ==================== Typed Accessors ====================

    def get_completed_recipes(self) -> List[str]:
        return self.get("completed_recipes")

    def set_completed_recipes(self, value: List[str]) -> bool:
        return self.set("completed_recipes", value)

    def get_recently_viewed_recipes(self) -> List[str]:
        return self.get("recently_viewed_recipes")

    def set_recently_viewed_recipes(self, value: List[str]) -> bool:
        return self.set("recently_viewed_recipes", value)

    def get_category_preferences(self) -> Dict[str, float]:
        return self.get("category_preferences")

    def set_category_preferences(self, value: Dict[str, float]) -> bool:
        return self.set("category_preferences", value)

    def get_difficulty_progression(self) -> Dict[str, int]:
        return self.get("difficulty_progression")

    def set_difficulty_progression(self, value: Dict[str, int]) -> bool:
        return self.set("difficulty_progression", value)

    def get_difficulty_preferences(self) -> Dict[str, float]:
        return self.get("difficulty_preferences")

    def set_difficulty_preferences(self, value: Dict[str, float]) -> bool:
        return self.set("difficulty_preferences", value)

    def get_cooking_time_preferences(self) -> Dict[str, int]:
        return self.get("cooking_time_preferences")

    def set_cooking_time_preferences(self, value: Dict[str, int]) -> bool:
        return self.set("cooking_time_preferences", value)

    def get_explored_categories(self) -> List[str]:
        return self.get("explored_categories")

    def set_explored_categories(self, value: List[str]) -> bool:
        return self.set("explored_categories", value)

    def get_cooking_time_slots(self) -> List[int]:
        return self.get("cooking_time_slots")

    def set_cooking_time_slots(self, value: List[int]) -> bool:
        return self.set("cooking_time_slots", value)

    def get_session_times(self) -> List[float]:
        return self.get("session_times")

    def set_session_times(self, value: List[float]) -> bool:
        return self.set("session_times", value)

    def get_session_durations(self) -> List[float]:
        return self.get("session_durations")

    def set_session_durations(self, value: List[float]) -> bool:
        return self.set("session_durations", value)

    def get_last_session_time(self) -> Optional[datetime]:
        return self.get("last_session_time")

    def set_last_session_time(self, value: Optional[datetime]) -> bool:
        return self.set("last_session_time", value)

    def get_last_cooking_session(self) -> Optional[datetime]:
        return self.get("last_cooking_session")

    def set_last_cooking_session(self, value: Optional[datetime]) -> bool:
        return self.set("last_cooking_session", value)

    def get_ignored_suggestions(self) -> List[str]:
        return self.get("ignored_suggestions")

    def set_ignored_suggestions(self, value: List[str]) -> bool:
        return self.set("ignored_suggestions", value)

    def get_successful_suggestions(self) -> List[str]:
        return self.get("successful_suggestions")

    def set_successful_suggestions(self, value: List[str]) -> bool:
        return self.set("successful_suggestions", value)

    def get_suggestion_type_scores(self) -> Dict[str, float]:
        return self.get("suggestion_type_scores")

    def set_suggestion_type_scores(self, value: Dict[str, float]) -> bool:
        return self.set("suggestion_type_scores", value)
