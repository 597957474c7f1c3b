"""Factory for creating provider instances (Factory Pattern)."""
import logging
from typing import Optional

from chatdesk.config.settings import Config
from chatdesk.domain.interfaces.key_value_store import IKeyValueStore
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.infrastructure.providers.langchain_reply_generator import LangChainReplyGenerator
from chatdesk.infrastructure.providers.offline_reply_generator import OfflineReplyGenerator
from chatdesk.infrastructure.providers.openai_reply_generator import OpenAIReplyGenerator
from chatdesk.infrastructure.redis_client import RedisClientFactory
from chatdesk.infrastructure.repositories.key_value_stores import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
)


logger = logging.getLogger(__name__)


class ProviderFactory:
    """
    Factory for creating provider instances following Factory Pattern.

    Centralizes provider creation logic and allows easy switching between implementations.
    """

    @staticmethod
    def create_reply_generator(
        provider_type: str = "openai",
        api_key: Optional[str] = None,
    ) -> IReplyGenerator:
        """
        Create a reply generator instance.

        Args:
            provider_type: Type of provider ("openai", "langchain", "offline")
            api_key: OpenAI API key (defaults to Config)

        Returns:
            IReplyGenerator instance; the offline generator when the selected
            provider has no API key

        Raises:
            ValueError: If provider type is not supported
        """
        provider_type = provider_type.lower()
        api_key = api_key or Config.OPENAI_API_KEY

        if provider_type == "offline":
            return OfflineReplyGenerator()

        if provider_type not in ("openai", "langchain"):
            raise ValueError(f"Unsupported AI provider type: {provider_type}")

        if not api_key:
            logger.warning(f"No API key for {provider_type} provider, simulated replies will use the fallback text")
            return OfflineReplyGenerator()

        if provider_type == "langchain":
            return LangChainReplyGenerator(api_key=api_key)
        return OpenAIReplyGenerator(api_key=api_key)

    @staticmethod
    def create_key_value_store(storage_type: str = "redis", redis_url: Optional[str] = None) -> IKeyValueStore:
        """
        Create a key-value store instance.

        Args:
            storage_type: Type of storage ("redis", "memory")
            redis_url: Redis URL (defaults to Config)

        Returns:
            IKeyValueStore instance

        Raises:
            ValueError: If storage type is not supported
        """
        storage_type = storage_type.lower()

        if storage_type == "redis":
            redis_client = RedisClientFactory.get_client(redis_url)
            return RedisKeyValueStore(
                redis_client=redis_client,
                connect=lambda: RedisClientFactory.get_client(redis_url, ping_attempts=1),
            )
        elif storage_type == "memory":
            return InMemoryKeyValueStore()
        else:
            raise ValueError(f"Unsupported storage type: {storage_type}")
