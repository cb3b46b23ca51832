"""
AIS Reception map server - Flask app

Alternative to FastAPI for environments where FastAPI isn't available.
Same routes, different framework.
"""

import logging

from flask import Flask, jsonify

from ais_reception.api.map import build_health, build_map_data
from ais_reception.api.map_page import DEFAULT_PORT, render_map_page
from ais_reception.models.reception import AnalysisResult


logger = logging.getLogger(__name__)


def create_flask_app(result: AnalysisResult, api_key: str) -> Flask:
    """
    Create the Flask map server for a completed analysis.

    Raises:
        ValueError: if no API key is given
    """
    if not api_key:
        raise ValueError("A Google Maps API key is required for the map view")

    app = Flask(__name__)

    @app.route("/")
    def map_page():
        """Map page with filtered positions and beam edges."""
        html = render_map_page(build_map_data(result), api_key)
        return html, 200, {"Content-Type": "text/html; charset=utf-8"}

    @app.route("/data")
    def map_data():
        """Filtered positions and beam statistics as JSON."""
        return jsonify(build_map_data(result).model_dump())

    @app.route("/health")
    def health_check():
        """Health check endpoint."""
        return jsonify(build_health(result).model_dump())

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"detail": "Not found"}), 404

    return app


def serve_map(result: AnalysisResult, api_key: str, port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> None:
    """Run the Flask map server until interrupted."""
    app = create_flask_app(result, api_key)
    logger.info(f"Map server running at http://localhost:{port}/ -- open this URL to view the AIS data")
    app.run(host=host, port=port)
