"""Error handling middleware with Sentry integration."""
import logging
import sentry_sdk
from flask import jsonify
from sentry_sdk.integrations.flask import FlaskIntegration

from chatdesk.domain.exceptions import (
    ChatNotFound,
    CompanyCapacityExceeded,
    CompanyNotFound,
    EmptyMessage,
    InvalidScheduleDate,
    InvalidTransition,
    MalformedPayload,
    ScheduledMessageNotFound,
    UserNotFound,
)

logger = logging.getLogger(__name__)

# Domain errors reported to the caller, by HTTP status
DOMAIN_ERROR_STATUS = {
    MalformedPayload: 400,
    EmptyMessage: 400,
    InvalidScheduleDate: 400,
    ChatNotFound: 404,
    UserNotFound: 404,
    CompanyNotFound: 404,
    ScheduledMessageNotFound: 404,
    InvalidTransition: 409,
    CompanyCapacityExceeded: 409,
}


def error_response(message: str, status_code: int):
    return jsonify({"status": "error", "message": message}), status_code


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """
    sentry_dsn = app.config.get("SENTRY_DSN")
    if sentry_dsn:
        sentry_sdk.init(
            dsn=sentry_dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get("ENV", "production"),
        )
        logger.info("Sentry error tracking initialized")

    def handle_domain_error(error):
        status_code = next(
            status for error_class, status in DOMAIN_ERROR_STATUS.items()
            if isinstance(error, error_class)
        )
        logger.warning(f"{type(error).__name__}: {error}")
        return error_response(str(error), status_code)

    for error_class in DOMAIN_ERROR_STATUS:
        app.register_error_handler(error_class, handle_domain_error)

    @app.errorhandler(ValueError)
    def invalid_value(error):
        """Handle validation errors raised by the stores."""
        return error_response(str(error), 400)

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return error_response("Resource not found", 404)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return error_response("Internal server error", 500)

    @app.errorhandler(429)
    def rate_limit_error(error):
        """Handle rate limit errors."""
        return error_response("Rate limit exceeded. Please try again later.", 429)
