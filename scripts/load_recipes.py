#!/usr/bin/env python3
"""
Load recipes from a JSON or CSV file into the recipe catalog.

Usage:
    python scripts/load_recipes.py --input recipes.json
    python scripts/load_recipes.py --input recipes.csv --data-dir data
"""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator

from ayewam.data.catalog import RecipeCatalog
from ayewam.data.models import Recipe

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def read_rows(input_file: Path) -> Iterator[Dict[str, Any]]:
    """Yield raw recipe rows from a JSON list or a CSV file with a header row."""
    with open(input_file, "r", encoding="utf-8") as f:
        if input_file.suffix.lower() == ".csv":
            yield from csv.DictReader(f)
        else:
            yield from json.load(f)


def load_recipes(input_file: Path, data_dir: Path, batch_size: int = 500) -> int:
    """
    Load recipes into data_dir/recipes.db.

    Args:
        input_file: JSON or CSV recipe file
        data_dir: Directory holding the catalog database
        batch_size: Number of recipes to upsert at once

    Returns:
        Number of recipes loaded
    """
    if not input_file.exists():
        logger.error(f"Input file not found: {input_file}")
        sys.exit(1)

    logger.info(f"Loading recipes from {input_file} into {data_dir}")

    catalog = RecipeCatalog(db_dir=str(data_dir))
    batch = []
    total_count = 0
    error_count = 0

    for index, row in enumerate(read_rows(input_file)):
        try:
            batch.append(Recipe.from_dict(row))
        except (KeyError, TypeError, ValueError) as e:
            error_count += 1
            logger.warning(f"Error processing row {index}: {e}")
            continue

        if len(batch) >= batch_size:
            total_count += catalog.load_recipes(batch)
            logger.info(f"Loaded {total_count} recipes...")
            batch = []

    if batch:
        total_count += catalog.load_recipes(batch)

    logger.info(f"Loaded {total_count} recipes successfully")
    if error_count > 0:
        logger.warning(f"Encountered {error_count} errors")
    return total_count


def main():
    parser = argparse.ArgumentParser(description="Load recipes into the Ayewam catalog")
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="Input JSON or CSV file",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("data"),
        help="Database directory (default: data)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=500,
        help="Batch size for inserts (default: 500)",
    )

    args = parser.parse_args()

    load_recipes(args.input, args.data_dir, args.batch_size)
    logger.info("Done!")


if __name__ == "__main__":
    main()
