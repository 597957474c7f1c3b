"""Tenant and user management endpoints."""
import logging

from flask import Blueprint, jsonify

from chatdesk.domain.entities.identity import MetaConfig
from chatdesk.views.request_helpers import get_container, json_body, require_fields


identity_blueprint = Blueprint("identity", __name__, url_prefix="/api")
_logger = logging.getLogger(__name__)


def _identity():
    return get_container().get_identity_store()


@identity_blueprint.route("/companies", methods=["GET"])
def list_companies():
    identity = _identity()
    return jsonify({
        "companies": [
            dict(company.to_dict(), userCount=len(identity.list_users(company.id)))
            for company in identity.companies
        ]
    }), 200


@identity_blueprint.route("/companies", methods=["POST"])
def create_company():
    body = json_body()
    require_fields(body, "name")
    company = _identity().add_company(body["name"])
    return jsonify(company.to_dict()), 201


@identity_blueprint.route("/companies/<company_id>", methods=["DELETE"])
def delete_company(company_id: str):
    """Delete a company together with its users."""
    _identity().delete_company(company_id)
    return jsonify({"status": "ok"}), 200


@identity_blueprint.route("/companies/<company_id>/meta-config", methods=["PUT"])
def update_meta_config(company_id: str):
    company = _identity().update_meta_config(company_id, MetaConfig.from_dict(json_body()))
    return jsonify(company.to_dict()), 200


@identity_blueprint.route("/register", methods=["POST"])
def register():
    """
    Register a company and its first administrator.

    Body fields: companyName, name, email, password and optionally phone,
    birthDate, age, profession, avatarUrl.
    """
    body = json_body()
    require_fields(body, "companyName", "name", "email", "password")
    age = body.get("age")
    company, admin = _identity().register_tenant(
        company_name=body["companyName"],
        name=body["name"],
        email=body["email"],
        password=body["password"],
        phone=body.get("phone"),
        birth_date=body.get("birthDate"),
        age=int(age) if age not in (None, "") else None,
        profession=body.get("profession"),
        avatar_url=body.get("avatarUrl"),
    )
    return jsonify({"company": company.to_dict(), "user": admin.to_public_dict()}), 201


@identity_blueprint.route("/companies/<company_id>/users", methods=["GET"])
def list_company_users(company_id: str):
    identity = _identity()
    identity.get_company(company_id)
    return jsonify({
        "users": [user.to_public_dict() for user in identity.list_users(company_id)]
    }), 200


@identity_blueprint.route("/companies/<company_id>/users", methods=["POST"])
def add_agent(company_id: str):
    """Add an agent; 409 once the company is at its user limit."""
    body = json_body()
    require_fields(body, "name", "email")
    agent = _identity().add_agent(
        company_id=company_id,
        name=body["name"],
        email=body["email"],
        phone=body.get("phone"),
        avatar_url=body.get("avatarUrl"),
    )
    return jsonify(agent.to_public_dict()), 201


@identity_blueprint.route("/users/<user_id>", methods=["DELETE"])
def remove_user(user_id: str):
    _identity().remove_user(user_id)
    return jsonify({"status": "ok"}), 200


@identity_blueprint.route("/users/<user_id>/password", methods=["PUT"])
def change_password(user_id: str):
    body = json_body()
    require_fields(body, "password")
    _identity().change_password(user_id, body["password"])
    return jsonify({"status": "ok"}), 200


@identity_blueprint.route("/users/<user_id>/avatar", methods=["PUT"])
def update_avatar(user_id: str):
    body = json_body()
    require_fields(body, "avatarUrl")
    user = _identity().update_avatar(user_id, body["avatarUrl"])
    return jsonify(user.to_public_dict()), 200
