"""Monitoring and metrics middleware using Prometheus."""
import logging
from typing import Optional
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from prometheus_client import make_wsgi_app
from werkzeug.middleware.dispatcher import DispatcherMiddleware

from chatdesk.config.settings import Config

logger = logging.getLogger(__name__)

# Prometheus metrics
webhook_events_total = Counter(
    'chatdesk_webhook_events_total',
    'Total number of inbound webhook events',
    ['outcome']
)

messages_appended_total = Counter(
    'chatdesk_messages_appended_total',
    'Total number of messages appended to chats',
    ['direction']
)

simulated_replies_total = Counter(
    'chatdesk_simulated_replies_total',
    'Total number of simulated customer replies',
    ['outcome']
)

reply_generation_duration = Histogram(
    'chatdesk_reply_generation_duration_seconds',
    'Time spent generating simulated reply text',
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
)

persistence_failures_total = Counter(
    'chatdesk_persistence_failures_total',
    'Total number of snapshot save/load failures',
    ['collection', 'operation']
)

composing_chats = Gauge(
    'chatdesk_composing_chats',
    'Number of chats with a simulated reply in flight'
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS", Config.ENABLE_METRICS):
        return

    @app.route('/metrics')
    def metrics():
        """Prometheus metrics endpoint."""
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}

    app.wsgi_app = DispatcherMiddleware(app.wsgi_app, {
        '/metrics': make_wsgi_app()
    })

    logger.info("Prometheus metrics enabled at /metrics")


def track_webhook_event(outcome: str) -> None:
    """
    Track an inbound webhook outcome.

    Args:
        outcome: "created", "appended" or "malformed"
    """
    try:
        webhook_events_total.labels(outcome=outcome).inc()
    except Exception as e:
        logger.debug(f"Failed to track webhook metrics: {e}")


def track_message_appended(direction: str) -> None:
    """
    Track a message appended to a chat.

    Args:
        direction: "inbound" or "outbound"
    """
    try:
        messages_appended_total.labels(direction=direction).inc()
    except Exception as e:
        logger.debug(f"Failed to track message metrics: {e}")


def track_simulated_reply(outcome: str, duration: Optional[float] = None) -> None:
    """
    Track a simulated reply.

    Args:
        outcome: "generated", "fallback" or "dropped"
        duration: Seconds spent in the generator, if it was called
    """
    try:
        simulated_replies_total.labels(outcome=outcome).inc()
        if duration is not None:
            reply_generation_duration.observe(duration)
    except Exception as e:
        logger.debug(f"Failed to track reply metrics: {e}")


def track_persistence_failure(collection: str, operation: str) -> None:
    """
    Track a persistence failure.

    Args:
        collection: Collection name (users, companies, chats, scheduled_messages)
        operation: "save" or "load"
    """
    try:
        persistence_failures_total.labels(collection=collection, operation=operation).inc()
    except Exception as e:
        logger.debug(f"Failed to track persistence metrics: {e}")


def set_composing_count(count: int) -> None:
    try:
        composing_chats.set(count)
    except Exception as e:
        logger.debug(f"Failed to track composing gauge: {e}")
