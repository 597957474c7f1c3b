"""Flask application factory for the chatdesk messaging console."""
import logging
import sys
from typing import Optional

from flask import Flask, jsonify

from chatdesk.config.settings import get_config
from chatdesk.infrastructure.service_container import ServiceContainer
from chatdesk.middleware.error_handler import init_error_handlers
from chatdesk.middleware.monitoring import register_metrics_middleware
from chatdesk.middleware.rate_limiter import create_rate_limiter, limit_webhook
from chatdesk.views import (
    chats_blueprint,
    dashboard_blueprint,
    health_blueprint,
    identity_blueprint,
    scheduler_blueprint,
    webhook_blueprint,
)


def create_app(config_class=None, container: Optional[ServiceContainer] = None) -> Flask:
    """
    Create and configure Flask application with dependency injection.

    Implements Factory Pattern and Dependency Injection.

    Args:
        config_class: Optional configuration class (for testing)
        container: Optional preconfigured service container (for testing)

    Returns:
        Configured Flask application
    """
    config = config_class or get_config()
    _configure_logging(config)
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)
    app.config.from_object(config)

    try:
        config.validate()
    except ValueError as e:
        _logger.critical(f"Invalid configuration: {e}")
        raise

    _initialize_middleware(app)

    app.register_blueprint(webhook_blueprint)
    app.register_blueprint(chats_blueprint)
    app.register_blueprint(scheduler_blueprint)
    app.register_blueprint(identity_blueprint)
    app.register_blueprint(dashboard_blueprint)
    app.register_blueprint(health_blueprint)

    @app.route("/", methods=["GET"])
    def root():
        """Root endpoint for testing."""
        return jsonify({
            "status": "ok",
            "service": "chatdesk",
            "message": "Service is running"
        }), 200

    _initialize_services(app, config, container)

    _logger.info(f"Application ready - registered blueprints: {[bp.name for bp in app.blueprints.values()]}")
    return app


def _configure_logging(config) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if config.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )


def _initialize_middleware(app: Flask) -> None:
    """
    Initialize middleware (rate limiting, monitoring, error handling).

    Args:
        app: Flask application instance
    """
    limiter = create_rate_limiter(app)
    limit_webhook(limiter, webhook_blueprint)
    app.config['limiter'] = limiter

    register_metrics_middleware(app)
    init_error_handlers(app)


def _initialize_services(app: Flask, config, container: Optional[ServiceContainer]) -> None:
    """
    Restore the console and store the service container in app config.

    Stores are loaded eagerly so the first request does not pay for the
    restore and a broken backend shows up at start-up.

    Args:
        app: Flask application instance
        config: Configuration class
        container: Optional preconfigured container
    """
    container = container or ServiceContainer(config)
    app.config['service_container'] = container
    container.get_console()
    logging.getLogger(__name__).info("Services initialized successfully")
