"""Builds the console stores from persisted snapshots (seed-or-restore)."""
import logging
from dataclasses import dataclass

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.application.services.identity_store import IdentityStore
from chatdesk.application.services.scheduler_store import SchedulerStore
from chatdesk.config.settings import Config
from chatdesk.infrastructure.repositories.snapshot_repository import SnapshotRepository


logger = logging.getLogger(__name__)


@dataclass
class ConsoleState:
    """The three stores that make up a running console."""
    conversations: ConversationStore
    identity: IdentityStore
    scheduler: SchedulerStore


def load_console(repository: SnapshotRepository, config=Config) -> ConsoleState:
    """
    Restore every collection and wire each store back to the repository.

    Args:
        repository: Persistence adapter used for both the restore and later saves
        config: Configuration class (tenant limits, default password)

    Returns:
        ConsoleState whose mutations are persisted as they happen
    """
    users = repository.load_users()
    companies = repository.load_companies()
    chats = repository.load_chats()
    scheduled = repository.load_scheduled_messages()

    state = ConsoleState(
        conversations=ConversationStore(chats=chats, on_change=repository.save_chats),
        identity=IdentityStore(
            users=users,
            companies=companies,
            on_users_change=repository.save_users,
            on_companies_change=repository.save_companies,
            max_users=config.MAX_USERS_PER_COMPANY,
            default_password=config.DEFAULT_AGENT_PASSWORD,
        ),
        scheduler=SchedulerStore(scheduled=scheduled, on_change=repository.save_scheduled_messages),
    )
    logger.info(
        f"Console loaded: {len(users)} users, {len(companies)} companies, "
        f"{len(chats)} chats, {len(scheduled)} scheduled messages"
    )
    return state
