"""Application factory and app-wide configuration."""

from typing import Optional

from flask import Flask
from flask_cors import CORS
from loguru import logger

from backend.app.api.routes import api_bp
from backend.logging_config import configure_logging
from backend.settings import AppSettings


def create_app(settings: Optional[AppSettings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or AppSettings()
    configure_logging(settings.log_level, settings.log_file)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info(f"Wealth roadmap API ready (origins: {', '.join(settings.cors_origins)})")
    return app
