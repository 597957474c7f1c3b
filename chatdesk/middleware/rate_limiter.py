"""Rate limiting middleware using Flask-Limiter."""
import logging
from flask import request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from chatdesk.utils.phone_format import PhoneNumberFormatter
from chatdesk.utils.webhook_parser import WebhookParser

DEFAULT_LIMITS = ["1000 per hour", "100 per minute"]
WEBHOOK_LIMIT = "60 per minute"


def get_limiter_key() -> str:
    """
    Get rate limit key based on the webhook contact or IP address.

    Returns:
        String key for rate limiting
    """
    if request.is_json:
        body = request.get_json(silent=True)
        data = WebhookParser.extract_data(body)
        remote_jid = WebhookParser.extract_remote_jid(data) if data else None
        if remote_jid:
            contact = PhoneNumberFormatter.digits(remote_jid.split("@", 1)[0])
            if contact:
                return f"rate_limit:contact:{contact}"

    return get_remote_address()


def create_rate_limiter(app) -> Limiter:
    """
    Create and configure Flask-Limiter instance.

    Args:
        app: Flask application instance

    Returns:
        Configured Limiter instance
    """
    if not app.config.get("RATELIMIT_ENABLED", True):
        return Limiter(
            key_func=get_remote_address,
            app=app,
            default_limits=[],
            storage_uri="memory://",
            enabled=False,
        )

    storage_uri = app.config.get("RATELIMIT_STORAGE_URL") or "memory://"
    try:
        return Limiter(
            key_func=get_limiter_key,
            app=app,
            default_limits=DEFAULT_LIMITS,
            storage_uri=storage_uri,
            strategy="fixed-window",
            headers_enabled=True,
        )
    except Exception as e:
        logging.warning(f"Failed to initialize rate limiter: {e}, using memory storage")
        return Limiter(
            key_func=get_limiter_key,
            app=app,
            default_limits=DEFAULT_LIMITS,
            storage_uri="memory://",
        )


def limit_webhook(limiter: Limiter, blueprint) -> None:
    """Apply the per-contact webhook limit to a blueprint."""
    limiter.limit(WEBHOOK_LIMIT, key_func=get_limiter_key)(blueprint)
