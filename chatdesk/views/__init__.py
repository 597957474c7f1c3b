"""Views module - exports all blueprints."""
from chatdesk.views.webhook import webhook_blueprint
from chatdesk.views.chats import chats_blueprint
from chatdesk.views.scheduler import scheduler_blueprint
from chatdesk.views.identity import identity_blueprint
from chatdesk.views.dashboard import dashboard_blueprint
from chatdesk.views.health import health_blueprint

__all__ = [
    "webhook_blueprint",
    "chats_blueprint",
    "scheduler_blueprint",
    "identity_blueprint",
    "dashboard_blueprint",
    "health_blueprint",
]
