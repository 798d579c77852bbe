"""Application factory and app-wide configuration."""

from __future__ import annotations

import atexit
import logging
from typing import Optional

import requests
from flask import Flask
from flask_cors import CORS

from retirecalc.app.api.routes import api_bp
from retirecalc.app.views import pages_bp
from retirecalc.config import Settings
from retirecalc.core.relay import DEFAULT_DISPATCH_TIMEOUT, LeadDispatcher, LeadRelay

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, http_session: Optional[requests.Session] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    relay = None
    if settings.relay_configured:
        relay = LeadRelay.from_settings(settings, session=http_session)
    else:
        logger.warning("lead relay disabled, missing %s", settings.missing_relay_settings())
    app.extensions["lead_relay"] = relay
    dispatcher = LeadDispatcher(relay, timeout=settings.relay_timeout or DEFAULT_DISPATCH_TIMEOUT)
    # drop whatever is still queued when the process exits
    atexit.register(dispatcher.shutdown, wait=False)
    app.extensions["lead_dispatcher"] = dispatcher

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(pages_bp)
    return app
