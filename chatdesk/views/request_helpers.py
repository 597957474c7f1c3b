"""Shared request parsing for the API blueprints."""
from typing import Any, Dict

from flask import current_app, request

from chatdesk.infrastructure.service_container import ServiceContainer

OPERATOR_HEADER = "X-Operator-Id"


def get_container() -> ServiceContainer:
    return current_app.config["service_container"]


def json_body() -> Dict[str, Any]:
    """Return the JSON object body, or an empty dict."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def require_fields(body: Dict[str, Any], *fields: str) -> None:
    """
    Check that every field is present and non-empty.

    Raises:
        ValueError: Naming the missing fields
    """
    missing = [name for name in fields if body.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")


def operator_id() -> str:
    """
    Resolve the acting operator from the request header.

    Raises:
        ValueError: If the header is absent
        UserNotFound: If no such user exists
    """
    user_id = request.headers.get(OPERATOR_HEADER, "").strip()
    if not user_id:
        raise ValueError(f"Missing {OPERATOR_HEADER} header")
    return get_container().get_identity_store().get_user(user_id).id
