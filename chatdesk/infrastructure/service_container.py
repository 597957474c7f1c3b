"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.application.services.dashboard_service import DashboardService
from chatdesk.application.services.identity_store import IdentityStore
from chatdesk.application.services.reply_simulator import ReplySimulator
from chatdesk.application.services.scheduler_store import SchedulerStore
from chatdesk.application.services.webhook_normalizer import WebhookNormalizer
from chatdesk.application.use_cases.send_operator_message_use_case import SendOperatorMessageUseCase
from chatdesk.config.settings import Config
from chatdesk.domain.interfaces.key_value_store import IKeyValueStore
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.infrastructure.console_loader import ConsoleState, load_console
from chatdesk.infrastructure.factories.provider_factory import ProviderFactory
from chatdesk.infrastructure.repositories.snapshot_repository import SnapshotRepository


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    Follows Singleton pattern and Dependency Inversion Principle.
    Uses Factory Pattern to create providers based on configuration; tests
    replace collaborators with ``use()`` before the first getter call.
    """

    _instance: Optional['ServiceContainer'] = None
    _config = Config
    _key_value_store: Optional[IKeyValueStore] = None
    _snapshot_repository: Optional[SnapshotRepository] = None
    _console: Optional[ConsoleState] = None
    _reply_generator: Optional[IReplyGenerator] = None
    _executor: Optional[Executor] = None
    _reply_simulator: Optional[ReplySimulator] = None
    _webhook_normalizer: Optional[WebhookNormalizer] = None
    _send_message_use_case: Optional[SendOperatorMessageUseCase] = None
    _dashboard_service: Optional[DashboardService] = None

    def __new__(cls, config=None):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config=None):
        """
        Initialize service container.

        Args:
            config: Optional configuration class; kept for the singleton's lifetime
        """
        if config is not None:
            type(self)._config = config
        self._logger = logging.getLogger(__name__)

    @property
    def config(self):
        return self._config

    def use(
        self,
        key_value_store: Optional[IKeyValueStore] = None,
        reply_generator: Optional[IReplyGenerator] = None,
        executor: Optional[Executor] = None,
    ) -> 'ServiceContainer':
        """Provide collaborators instead of building them from configuration."""
        if key_value_store is not None:
            self._key_value_store = key_value_store
        if reply_generator is not None:
            self._reply_generator = reply_generator
        if executor is not None:
            self._executor = executor
        return self

    def get_key_value_store(self) -> IKeyValueStore:
        """Get or create key-value store instance."""
        if self._key_value_store is None:
            storage_type = self._config.STORAGE_BACKEND
            try:
                self._key_value_store = ProviderFactory.create_key_value_store(
                    storage_type, redis_url=self._config.REDIS_URL
                )
                self._logger.info(f"KeyValueStore created with {storage_type}")
            except Exception as e:
                self._logger.error(f"Failed to create KeyValueStore: {e}")
                raise
        return self._key_value_store

    def get_snapshot_repository(self) -> SnapshotRepository:
        """Get or create snapshot repository instance."""
        if self._snapshot_repository is None:
            self._snapshot_repository = SnapshotRepository(
                store=self.get_key_value_store(),
                key_prefix=self._config.STORAGE_KEY_PREFIX,
            )
        return self._snapshot_repository

    def get_console(self) -> ConsoleState:
        """Get or restore the console stores."""
        if self._console is None:
            self._console = load_console(self.get_snapshot_repository(), self._config)
        return self._console

    def get_conversation_store(self) -> ConversationStore:
        return self.get_console().conversations

    def get_identity_store(self) -> IdentityStore:
        return self.get_console().identity

    def get_scheduler_store(self) -> SchedulerStore:
        return self.get_console().scheduler

    def get_reply_generator(self) -> IReplyGenerator:
        """Get or create reply generator instance."""
        if self._reply_generator is None:
            provider_type = self._config.AI_PROVIDER
            try:
                self._reply_generator = ProviderFactory.create_reply_generator(
                    provider_type, api_key=self._config.OPENAI_API_KEY
                )
                self._logger.info(f"ReplyGenerator created: {type(self._reply_generator).__name__}")
            except Exception as e:
                self._logger.error(f"Failed to create ReplyGenerator: {e}")
                raise
        return self._reply_generator

    def get_reply_simulator(self) -> ReplySimulator:
        """Get or create reply simulator instance."""
        if self._reply_simulator is None:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._config.REPLY_WORKERS,
                    thread_name_prefix="reply-simulator",
                )
            self._reply_simulator = ReplySimulator(
                conversation_store=self.get_conversation_store(),
                reply_generator=self.get_reply_generator(),
                executor=self._executor,
                delay_range=(self._config.REPLY_DELAY_MIN, self._config.REPLY_DELAY_MAX),
                fallback_text=self._config.REPLY_FALLBACK_TEXT,
            )
            self._logger.info("ReplySimulator created")
        return self._reply_simulator

    def get_webhook_normalizer(self) -> WebhookNormalizer:
        if self._webhook_normalizer is None:
            self._webhook_normalizer = WebhookNormalizer(self.get_conversation_store())
        return self._webhook_normalizer

    def get_send_message_use_case(self) -> SendOperatorMessageUseCase:
        """Get or create send message use case instance."""
        if self._send_message_use_case is None:
            self._send_message_use_case = SendOperatorMessageUseCase(
                conversation_store=self.get_conversation_store(),
                reply_simulator=self.get_reply_simulator(),
            )
            self._logger.info("SendOperatorMessageUseCase created")
        return self._send_message_use_case

    def get_dashboard_service(self) -> DashboardService:
        if self._dashboard_service is None:
            self._dashboard_service = DashboardService(
                self.get_conversation_store(), self.get_identity_store()
            )
        return self._dashboard_service

    @classmethod
    def reset(cls) -> None:
        """Reset all service instances (useful for testing)."""
        if cls._instance is not None and cls._instance._reply_simulator is not None:
            cls._instance._reply_simulator.shutdown(wait=False)
        cls._instance = None
        cls._config = Config
        cls._key_value_store = None
        cls._snapshot_repository = None
        cls._console = None
        cls._reply_generator = None
        cls._executor = None
        cls._reply_simulator = None
        cls._webhook_normalizer = None
        cls._send_message_use_case = None
        cls._dashboard_service = None
