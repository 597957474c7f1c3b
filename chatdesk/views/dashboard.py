"""Dashboard endpoint."""
from flask import Blueprint, jsonify

from chatdesk.views.request_helpers import get_container


dashboard_blueprint = Blueprint("dashboard", __name__)


@dashboard_blueprint.route("/api/dashboard", methods=["GET"])
def dashboard():
    summary = get_container().get_dashboard_service().summary()
    return jsonify(summary.to_dict()), 200
