"""Inbound webhook endpoint (Evolution API shaped payloads)."""
import logging
from typing import Tuple

from flask import Blueprint, jsonify, request

from chatdesk.views.request_helpers import get_container


webhook_blueprint = Blueprint("webhook", __name__)
_logger = logging.getLogger(__name__)


@webhook_blueprint.route("/webhook", methods=["POST"])
def webhook_post() -> Tuple[str, int]:
    """
    Route an inbound message to its chat.

    A payload without ``data.key.remoteJid`` is rejected with 400 and leaves
    every chat untouched.

    Returns:
        Tuple of (response, status_code)
    """
    body = request.get_json(silent=True)
    routing = get_container().get_webhook_normalizer().ingest(body)

    return jsonify({
        "status": "ok",
        "chat_id": routing.chat.id,
        "message_id": routing.message.id,
        "created": routing.created,
    }), 200
