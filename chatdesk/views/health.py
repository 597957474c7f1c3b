"""Health check endpoints."""
import logging
from flask import Blueprint, jsonify, current_app

health_blueprint = Blueprint("health", __name__)
_logger = logging.getLogger(__name__)


@health_blueprint.route("/health", methods=["GET"])
def health_check():
    """Process is up and serving requests."""
    return jsonify({"status": "healthy", "service": "chatdesk"}), 200


@health_blueprint.route("/health/ready", methods=["GET"])
def readiness_check():
    """
    Readiness check: snapshot backend reachable, console state loaded and
    every stored collection restored.

    Returns:
        JSON response with per-check results; 503 if any check fails
    """
    checks = {"storage": False, "restored": False, "console": False}
    held = []
    container = current_app.config.get("service_container")

    if container is not None:
        try:
            repository = container.get_snapshot_repository()
            checks["storage"] = repository.ping()
            held = repository.held_collections
            checks["restored"] = not held
        except Exception as e:
            _logger.error(f"Storage readiness check failed: {e}")

        try:
            chats = container.get_conversation_store().chats
            checks["console"] = True
        except Exception as e:
            _logger.error(f"Console readiness check failed: {e}")
            chats = []
    else:
        chats = []

    ready = all(checks.values())
    return jsonify({
        "status": "ready" if ready else "not_ready",
        "checks": checks,
        "chats": len(chats),
        "unrestored": held,
    }), 200 if ready else 503


@health_blueprint.route("/health/live", methods=["GET"])
def liveness_check():
    """Liveness probe (for Kubernetes)."""
    return jsonify({"status": "alive", "service": "chatdesk"}), 200
