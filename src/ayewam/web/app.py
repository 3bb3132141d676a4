#!/usr/bin/env python3
"""
Flask JSON API for the Ayewam recommendation engine.

Serves contextual and personalized recommendations and records behavior
events sent by the app.
"""

import logging
from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from pydantic import BaseModel, ValidationError

from ..config import load_settings, setup_logging
from ..data.models import RecommendationType
from ..service import RecommendationService

logger = logging.getLogger(__name__)

TRACK_EVENTS = ("viewed", "cooked", "favorited", "ignored", "interacted")
SECTION_EVENTS = ("ignored", "interacted")


class TrackRequest(BaseModel):
    """Body of POST /api/track/<event>."""
    recipe_id: str
    section_type: Optional[RecommendationType] = None


def _parse_at() -> Optional[datetime]:
    """Optional ?at=ISO timestamp; raises ValueError when malformed."""
    at = request.args.get('at')
    return datetime.fromisoformat(at) if at else None


def create_app(service: Optional[RecommendationService] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        service: Recommendation service to serve (built from settings if not given)
    """
    if service is None:
        settings = load_settings()
        service = RecommendationService.from_data_dir(settings.data_dir)
        if service.catalog.count() == 0:
            logger.info("Recipe catalog empty - loading seed recipes")
            service.catalog.load_seed_file(settings.seed_file)

    app = Flask(__name__)
    CORS(app)
    app.config["SERVICE"] = service

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({"status": "healthy", "timestamp": datetime.now().isoformat()}), 200

    @app.route('/api/recommendations', methods=['GET'])
    def api_recommendations():
        """Contextual recommendations for now (or ?at=)."""
        try:
            now = _parse_at()
        except ValueError:
            return jsonify({"success": False, "error": "Invalid 'at' timestamp"}), 400

        try:
            sections = service.get_recommendations(now=now)
            return jsonify({
                "success": True,
                "sections": [section.to_dict() for section in sections],
            })

        except Exception as e:
            logger.error(f"Error generating recommendations: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route('/api/recommendations/personalized', methods=['GET'])
    def api_personalized_recommendations():
        """Personalized recommendations for now (or ?at=)."""
        try:
            now = _parse_at()
        except ValueError:
            return jsonify({"success": False, "error": "Invalid 'at' timestamp"}), 400

        try:
            sections = service.get_personalized_recommendations(now=now)
            return jsonify({
                "success": True,
                "sections": [section.to_dict() for section in sections],
                "has_significant_data": service.has_significant_cooking_data(),
            })

        except Exception as e:
            logger.error(f"Error generating personalized recommendations: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route('/api/track/<event>', methods=['POST'])
    def api_track(event):
        """
        Record a behavior event.

        Body: {"recipe_id": "...", "section_type": "timeBased"}
        section_type is required for 'ignored' and 'interacted'.
        """
        if event not in TRACK_EVENTS:
            return jsonify({"success": False, "error": f"Unknown event: {event}"}), 404

        try:
            body = TrackRequest.model_validate(request.get_json(silent=True) or {})
        except ValidationError as e:
            return jsonify({"success": False, "error": e.errors(include_url=False, include_context=False)}), 400

        if event in SECTION_EVENTS and body.section_type is None:
            return jsonify({"success": False, "error": "section_type is required"}), 400

        try:
            if event == "viewed":
                found = service.track_recipe_viewed(body.recipe_id)
            elif event == "cooked":
                found = service.track_recipe_cooked(body.recipe_id)
            elif event == "favorited":
                found = service.track_recipe_favorited(body.recipe_id)
            elif event == "ignored":
                found = service.track_suggestion_ignored(body.recipe_id, body.section_type)
            else:
                found = service.track_suggestion_interacted(body.recipe_id, body.section_type)

            if not found:
                return jsonify({"success": False, "error": f"Recipe not found: {body.recipe_id}"}), 404

            return jsonify({"success": True, "event": event, "recipe_id": body.recipe_id})

        except Exception as e:
            logger.error(f"Error tracking {event}: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route('/api/favorite/<recipe_id>', methods=['POST'])
    def api_toggle_favorite(recipe_id):
        """Toggle a recipe's favorite flag."""
        try:
            state = service.toggle_favorite(recipe_id)
            if state is None:
                return jsonify({"success": False, "error": f"Recipe not found: {recipe_id}"}), 404

            return jsonify({"success": True, "recipe_id": recipe_id, "is_favorite": state})

        except Exception as e:
            logger.error(f"Error toggling favorite: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route('/api/patterns', methods=['GET'])
    def api_patterns():
        """Current cooking patterns and time preferences."""
        try:
            return jsonify({
                "success": True,
                "cooking_patterns": service.get_cooking_patterns().to_dict(),
                "time_preferences": service.get_time_preferences().to_dict(),
                "prefers_quick_recipes": service.seems_to_prefer_quick_recipes(),
            })

        except Exception as e:
            logger.error(f"Error getting patterns: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route('/api/summary', methods=['GET'])
    def api_summary():
        """Human-readable cooking journey and tracking summaries."""
        try:
            return jsonify({
                "success": True,
                "cooking_journey": service.get_cooking_journey_summary(),
                "behavior_tracking": service.get_behavior_tracking_summary(),
                "has_significant_data": service.has_significant_cooking_data(),
            })

        except Exception as e:
            logger.error(f"Error getting summary: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route('/api/reset', methods=['POST'])
    def api_reset():
        """Erase all behavior data (privacy control)."""
        try:
            service.reset_behavior_data()
            return jsonify({"success": True, "message": "Behavior data reset."})

        except Exception as e:
            logger.error(f"Error resetting behavior data: {e}", exc_info=True)
            return jsonify({"success": False, "error": str(e)}), 500

    return app


if __name__ == '__main__':
    settings = load_settings()
    setup_logging(settings)

    # Run development server
    create_app().run(
        host=settings.host,
        port=settings.port,
        debug=True,
    )
