"""Flask application for the podshelf HTTP API."""

import logging
from dataclasses import dataclass

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from podshelf.core.config import Config, get_config
from podshelf.core.errors import (
    CatalogUnavailable,
    DuplicateKeyError,
    FetchError,
    NotFoundError,
    PodshelfError,
    Unauthorized,
    ValidationError,
)
from podshelf.db.database import Database
from podshelf.services.auth import Authenticator
from podshelf.services.catalog import CatalogService
from podshelf.services.episodes import EpisodeService
from podshelf.services.feeds import FeedService
from podshelf.services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

EXTENSION_KEY = "podshelf"

ERROR_STATUS: dict[type[PodshelfError], int] = {
    ValidationError: 400,
    Unauthorized: 401,
    NotFoundError: 404,
    DuplicateKeyError: 409,
    FetchError: 502,
    CatalogUnavailable: 503,
}


@dataclass
class Services:
    """Service objects shared by all requests of one application."""

    config: Config
    database: Database
    catalog: CatalogService
    episodes: EpisodeService
    subscriptions: SubscriptionService
    authenticator: Authenticator


def _status_for(error: PodshelfError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PodshelfError)
    def handle_podshelf_error(error: PodshelfError):
        status = _status_for(error)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error)
        return jsonify({"error": str(error)}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500


def _register_cors(app: Flask, allowed_origin: str) -> None:
    @app.before_request
    def answer_preflight():
        if request.method == "OPTIONS":
            return Response(status=204)
        return None

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = allowed_origin
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        return response


def create_app(
    config: Config | None = None,
    database: Database | None = None,
    feed_service: FeedService | None = None,
) -> Flask:
    """
    Build the API application.

    Args:
        config: Loaded configuration; read from disk and environment if omitted
        database: Database to use; built from ``config.database`` if omitted
        feed_service: Feed fetcher; built from ``config.feeds`` if omitted

    Returns:
        Configured Flask application with all blueprints registered
    """
    from podshelf.api.missing_episodes import bp as missing_episodes_bp
    from podshelf.api.podcasts import bp as podcasts_bp
    from podshelf.api.subscriptions import bp as subscriptions_bp

    config = config or get_config()
    database = database or Database.from_config(config.database)
    database.init()

    feed_service = feed_service or FeedService(timeout=config.feeds.timeout)
    catalog = CatalogService(database)

    app = Flask(__name__)
    app.config["PODSHELF"] = config
    app.json.sort_keys = False
    app.extensions[EXTENSION_KEY] = Services(
        config=config,
        database=database,
        catalog=catalog,
        episodes=EpisodeService(feed_service, catalog),
        subscriptions=SubscriptionService(database),
        authenticator=Authenticator(database),
    )

    _register_cors(app, config.server.allowed_origin)
    _register_error_handlers(app)

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok", "environment": config.server.environment})

    app.register_blueprint(podcasts_bp)
    app.register_blueprint(missing_episodes_bp)
    app.register_blueprint(subscriptions_bp)

    logger.info(
        "API ready (%s, base url %s)", config.server.environment, config.server.api_base_url
    )
    return app
