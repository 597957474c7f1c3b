"""Scheduled message endpoints."""
from flask import Blueprint, jsonify

from chatdesk.domain.exceptions import ScheduledMessageNotFound
from chatdesk.views.request_helpers import get_container, json_body, operator_id, require_fields


scheduler_blueprint = Blueprint("scheduler", __name__, url_prefix="/api/scheduled-messages")


@scheduler_blueprint.route("", methods=["GET"])
def list_scheduled():
    """List scheduled messages, earliest first."""
    scheduled = get_container().get_scheduler_store().list()
    return jsonify({"scheduledMessages": [item.to_dict() for item in scheduled]}), 200


@scheduler_blueprint.route("", methods=["POST"])
def create_scheduled():
    body = json_body()
    require_fields(body, "customerName", "customerPhone", "text", "scheduledDate")
    item = get_container().get_scheduler_store().schedule(
        customer_name=body["customerName"],
        customer_phone=body["customerPhone"],
        text=body["text"],
        scheduled_date=body["scheduledDate"],
        created_by=operator_id(),
    )
    return jsonify(item.to_dict()), 201


@scheduler_blueprint.route("/<scheduled_id>", methods=["DELETE"])
def delete_scheduled(scheduled_id: str):
    if not get_container().get_scheduler_store().cancel(scheduled_id):
        raise ScheduledMessageNotFound(scheduled_id)
    return jsonify({"status": "ok"}), 200
