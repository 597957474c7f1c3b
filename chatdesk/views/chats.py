"""Chat endpoints: listing, focus, operator sends, status and CRM fields."""
import logging

from flask import Blueprint, jsonify, request

from chatdesk.application.use_cases.send_operator_message_use_case import SendMessageRequest
from chatdesk.domain.entities.chat import AttachmentType, ChatStatus
from chatdesk.views.request_helpers import get_container, json_body, operator_id, require_fields


chats_blueprint = Blueprint("chats", __name__, url_prefix="/api/chats")
_logger = logging.getLogger(__name__)


@chats_blueprint.route("", methods=["GET"])
def list_chats():
    """List chats, most recent first, optionally filtered by ``?status=``."""
    store = get_container().get_conversation_store()
    status = request.args.get("status")
    chats = store.list_chats(ChatStatus(status) if status else None)
    return jsonify({
        "chats": [chat.to_dict() for chat in chats],
        "focusedChatId": store.focused_chat_id,
    }), 200


@chats_blueprint.route("/<chat_id>", methods=["GET"])
def get_chat(chat_id: str):
    chat = get_container().get_conversation_store().get_chat(chat_id)
    return jsonify(chat.to_dict()), 200


@chats_blueprint.route("/<chat_id>/messages", methods=["POST"])
def send_message(chat_id: str):
    """
    Send an operator message and schedule the simulated customer reply.

    Body: ``{"text": "...", "attachmentUrl": "...", "attachmentType": "image|file|audio"}``
    """
    body = json_body()
    attachment_type = body.get("attachmentType")
    message = get_container().get_send_message_use_case().execute(SendMessageRequest(
        chat_id=chat_id,
        operator_id=operator_id(),
        text=body.get("text") or "",
        attachment_url=body.get("attachmentUrl"),
        attachment_type=AttachmentType(attachment_type) if attachment_type else None,
    ))
    return jsonify(message.to_dict()), 201


@chats_blueprint.route("/<chat_id>/select", methods=["POST"])
def select_chat(chat_id: str):
    chat = get_container().get_conversation_store().select_chat(chat_id)
    return jsonify(chat.to_dict()), 200


@chats_blueprint.route("/focus", methods=["DELETE"])
def clear_focus():
    get_container().get_conversation_store().clear_focus()
    return jsonify({"status": "ok", "focusedChatId": None}), 200


@chats_blueprint.route("/<chat_id>/status", methods=["POST"])
def set_status(chat_id: str):
    body = json_body()
    require_fields(body, "status")
    chat = get_container().get_conversation_store().set_status(chat_id, ChatStatus(body["status"]))
    return jsonify(chat.to_dict()), 200


@chats_blueprint.route("/<chat_id>", methods=["PATCH"])
def update_crm_fields(chat_id: str):
    """Patch CRM fields; unknown fields are rejected with 400."""
    body = json_body()
    if not body:
        raise ValueError("No CRM fields supplied")
    chat = get_container().get_conversation_store().update_crm_fields(chat_id, body)
    return jsonify(chat.to_dict()), 200


@chats_blueprint.route("/<chat_id>/composing", methods=["GET"])
def composing(chat_id: str):
    """Whether a simulated reply is in flight for this chat."""
    container = get_container()
    container.get_conversation_store().get_chat(chat_id)
    return jsonify({
        "chatId": chat_id,
        "composing": container.get_reply_simulator().is_composing(chat_id),
    }), 200
