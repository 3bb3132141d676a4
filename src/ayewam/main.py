#!/usr/bin/env python3
"""
Command-line interface for the Ayewam recommendation engine.

Seeds the recipe catalog, prints recommendations and records behavior events.
"""

import argparse
import logging
from datetime import datetime
from typing import List, Optional

from .config import load_settings, setup_logging
from .data.models import RecommendationSection, RecommendationType
from .service import RecommendationService

logger = logging.getLogger(__name__)

COMMANDS = [
    "seed",
    "recommend",
    "personalized",
    "view",
    "cook",
    "favorite",
    "ignore",
    "interact",
    "patterns",
    "summary",
    "reset",
]

RECIPE_COMMANDS = {"view", "cook", "favorite", "ignore", "interact"}
SECTION_COMMANDS = {"ignore", "interact"}


def print_sections(sections: List[RecommendationSection]):
    """Print recommendation sections to stdout."""
    if not sections:
        print("No recommendations available.")
        return

    for section in sections:
        print("\n" + "=" * 70)
        print(f"{section.title}  [{section.section_type.value}]")
        if section.subtitle:
            print(f"  {section.subtitle}")
        print("=" * 70)
        for recipe in section.recipes:
            marker = "*" if recipe.is_favorite else " "
            print(f" {marker} {recipe.id:<24} {recipe}")
        print(f"\n  Why: {section.reasoning}")


def print_patterns(service: RecommendationService):
    patterns = service.get_cooking_patterns()
    prefs = service.get_time_preferences()

    print("\nCooking patterns:")
    for key, value in patterns.to_dict().items():
        print(f"   • {key}: {value}")

    print("\nTime preferences:")
    for key, value in prefs.to_dict().items():
        print(f"   • {key}: {value:.2f}")


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Ayewam recipe recommendations")
    parser.add_argument(
        "command",
        choices=COMMANDS,
        help="Command to run",
    )
    parser.add_argument(
        "--recipe-id",
        type=str,
        help="Recipe ID for tracking commands",
    )
    parser.add_argument(
        "--section",
        type=str,
        choices=[t.value for t in RecommendationType],
        help="Section type for 'ignore' and 'interact'",
    )
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        help="Evaluate recommendations at this time (YYYY-MM-DDTHH:MM)",
    )
    parser.add_argument(
        "--seed-file",
        type=str,
        default=None,
        help="Recipe JSON file for 'seed' (default: bundled recipes)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=settings.data_dir,
        help=f"Database directory (default: {settings.data_dir})",
    )

    args = parser.parse_args(argv)

    setup_logging(settings)

    if args.command in RECIPE_COMMANDS and not args.recipe_id:
        print(f"❌ Error: --recipe-id required for '{args.command}' command")
        return 2
    if args.command in SECTION_COMMANDS and not args.section:
        print(f"❌ Error: --section required for '{args.command}' command")
        return 2

    service = RecommendationService.from_data_dir(args.data_dir)

    if args.command == "seed":
        count = service.catalog.load_seed_file(args.seed_file or settings.seed_file)
        print(f"✅ Loaded {count} recipes into {args.data_dir}")

    elif args.command == "recommend":
        print_sections(service.get_recommendations(now=args.at))

    elif args.command == "personalized":
        print_sections(service.get_personalized_recommendations(now=args.at))

    elif args.command == "view":
        if not service.track_recipe_viewed(args.recipe_id):
            print(f"❌ Unknown recipe: {args.recipe_id}")
            return 1
        print(f"✅ Viewed {args.recipe_id}")

    elif args.command == "cook":
        if not service.track_recipe_cooked(args.recipe_id):
            print(f"❌ Unknown recipe: {args.recipe_id}")
            return 1
        print(f"✅ Cooked {args.recipe_id}")

    elif args.command == "favorite":
        state = service.toggle_favorite(args.recipe_id)
        if state is None:
            print(f"❌ Unknown recipe: {args.recipe_id}")
            return 1
        print(f"✅ {args.recipe_id} {'added to' if state else 'removed from'} favorites")

    elif args.command == "ignore":
        if not service.track_suggestion_ignored(args.recipe_id, RecommendationType(args.section)):
            print(f"❌ Unknown recipe: {args.recipe_id}")
            return 1
        print(f"✅ Ignored {args.recipe_id} in {args.section}")

    elif args.command == "interact":
        if not service.track_suggestion_interacted(args.recipe_id, RecommendationType(args.section)):
            print(f"❌ Unknown recipe: {args.recipe_id}")
            return 1
        print(f"✅ Interacted with {args.recipe_id} in {args.section}")

    elif args.command == "patterns":
        print_patterns(service)

    elif args.command == "summary":
        print(service.get_cooking_journey_summary())
        print()
        print(service.get_behavior_tracking_summary())

    elif args.command == "reset":
        service.reset_behavior_data()
        print("✅ Behavior data reset")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
