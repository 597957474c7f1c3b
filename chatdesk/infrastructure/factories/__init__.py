"""Factories for creating provider instances (Factory Pattern)."""

from chatdesk.infrastructure.factories.provider_factory import ProviderFactory

__all__ = [
    "ProviderFactory",
]
