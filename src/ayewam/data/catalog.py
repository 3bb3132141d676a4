"""
Recipe catalog for the Ayewam recommendation engine.

Manages the recipes.db SQLite database. The recommendation core only ever
reads from it; writes happen when seeding or when the user toggles a favorite.
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import Recipe

logger = logging.getLogger(__name__)

SEED_FILE = Path(__file__).parent / "seed_recipes.json"


class RecipeCatalog:
    """Interface for the recipe catalog database."""

    def __init__(self, db_dir: str = "data"):
        """
        Initialize the recipe catalog.

        Args:
            db_dir: Directory containing database files
        """
        self.db_dir = Path(db_dir)
        self.db_dir.mkdir(parents=True, exist_ok=True)

        self.recipes_db = self.db_dir / "recipes.db"

        self._init_database()

    def _init_database(self):
        """Initialize recipe catalog schema."""
        with sqlite3.connect(self.recipes_db) as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT,
                    category TEXT,
                    difficulty TEXT,
                    region TEXT,
                    prep_time INTEGER DEFAULT 0,
                    cook_time INTEGER DEFAULT 0,
                    servings INTEGER DEFAULT 0,
                    is_favorite BOOLEAN DEFAULT 0,
                    image_name TEXT,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_name ON recipes(name)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_favorite ON recipes(is_favorite)")

            conn.commit()
            logger.debug("Recipe catalog initialized")

    # ==================== Read Operations ====================

    def fetch_all_recipes(self) -> List[Recipe]:
        """
        Fetch every recipe, sorted by name.

        Fails open: storage errors are logged and an empty list is returned,
        which the engine treats as an empty catalog.
        """
        try:
            with sqlite3.connect(self.recipes_db) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM recipes ORDER BY name ASC, id ASC")
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"[CATALOG] Error fetching recipes for recommendations: {e}")
            return []

        return self._rows_to_recipes(rows)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        """Get a recipe by ID, or None when missing or unreadable."""
        try:
            with sqlite3.connect(self.recipes_db) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"[CATALOG] Error fetching recipe {recipe_id}: {e}")
            return None

        if not row:
            return None
        recipes = self._rows_to_recipes([row])
        return recipes[0] if recipes else None

    def get_favorite_recipes(self) -> List[Recipe]:
        """Get all favorited recipes, sorted by name."""
        try:
            with sqlite3.connect(self.recipes_db) as conn:
                conn.row_factory = sqlite3.Row
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT * FROM recipes WHERE is_favorite = 1 ORDER BY name ASC, id ASC"
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"[CATALOG] Error fetching favorite recipes: {e}")
            return []

        return self._rows_to_recipes(rows)

    def count(self) -> int:
        """Number of recipes in the catalog."""
        try:
            with sqlite3.connect(self.recipes_db) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM recipes")
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            logger.error(f"[CATALOG] Error counting recipes: {e}")
            return 0

    def _rows_to_recipes(self, rows: Iterable[sqlite3.Row]) -> List[Recipe]:
        """Convert rows, skipping (and logging) any that cannot be parsed."""
        recipes = []
        for row in rows:
            try:
                recipes.append(self._row_to_recipe(row))
            except (TypeError, ValueError) as e:
                logger.warning(f"[CATALOG] Error parsing recipe {row['id']}: {e}")
        return recipes

    def _row_to_recipe(self, row: sqlite3.Row) -> Recipe:
        """Convert database row to Recipe object."""
        return Recipe.from_dict({
            "id": row["id"],
            "name": row["name"],
            "description": row["description"],
            "category": row["category"],
            "difficulty": row["difficulty"],
            "region": row["region"],
            "prep_time": row["prep_time"],
            "cook_time": row["cook_time"],
            "servings": row["servings"],
            "is_favorite": bool(row["is_favorite"]),
            "image_name": row["image_name"],
        })

    # ==================== Write Operations ====================

    def load_recipes(self, recipes: Iterable[Recipe]) -> int:
        """
        Insert or replace recipes.

        Args:
            recipes: Recipes to upsert

        Returns:
            Number of recipes written
        """
        now = datetime.now().isoformat()
        rows = [
            (
                r.id, r.name, r.description, r.category, r.difficulty, r.region,
                r.prep_time, r.cook_time, r.servings, int(r.is_favorite),
                r.image_name, now,
            )
            for r in recipes
        ]

        with sqlite3.connect(self.recipes_db) as conn:
            cursor = conn.cursor()
            cursor.executemany(
                """
                INSERT OR REPLACE INTO recipes (
                    id, name, description, category, difficulty, region,
                    prep_time, cook_time, servings, is_favorite, image_name, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
            conn.commit()

        logger.info(f"[CATALOG] Loaded {len(rows)} recipes")
        return len(rows)

    def load_seed_file(self, path: Optional[Path] = None) -> int:
        """
        Load recipes from a JSON file (a list of recipe objects).

        Args:
            path: JSON file to load (defaults to the bundled seed recipes)

        Returns:
            Number of recipes written
        """
        seed_path = Path(path) if path else SEED_FILE
        with open(seed_path, "r", encoding="utf-8") as f:
            data: List[Dict[str, Any]] = json.load(f)

        logger.info(f"[CATALOG] Seeding from {seed_path}")
        return self.load_recipes(Recipe.from_dict(item) for item in data)

    def set_favorite(self, recipe_id: str, is_favorite: bool) -> bool:
        """
        Set the favorite flag of a recipe.

        Returns:
            True if the recipe exists and was updated
        """
        with sqlite3.connect(self.recipes_db) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE recipes SET is_favorite = ?, updated_at = ? WHERE id = ?",
                (int(is_favorite), datetime.now().isoformat(), recipe_id),
            )
            conn.commit()
            updated = cursor.rowcount > 0

        if updated:
            logger.info(f"[CATALOG] Recipe {recipe_id} favorite -> {is_favorite}")
        else:
            logger.warning(f"[CATALOG] Recipe {recipe_id} not found")
        return updated
