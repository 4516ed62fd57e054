"""
Minimal Flask server - only serves rendered solution maps
"""
import os

from flask import Flask, send_from_directory
from flask_cors import CORS


def create_app(maps_dir: str = "maps") -> Flask:
    """Create the map server

    Args:
        maps_dir: Directory with HTML maps and GeoJSON files

    Returns:
        Flask application
    """
    app = Flask(__name__)
    CORS(app)  # Lets map pages fetch GeoJSON from other origins
    app.config["MAPS_DIR"] = os.path.abspath(maps_dir)

    @app.route('/health')
    def health_check():
        return {"status": "ok"}

    @app.route('/maps/<path:filename>')
    def serve_map(filename):
        return send_from_directory(app.config["MAPS_DIR"], filename)

    return app
