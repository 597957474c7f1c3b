"""Scheduler store: manually managed list of scheduled messages."""
import logging
from datetime import datetime
from threading import RLock
from typing import Callable, Iterable, List, Optional, Tuple

from chatdesk.domain.entities.scheduled_message import ScheduledMessage, ScheduledStatus
from chatdesk.domain.exceptions import InvalidScheduleDate, ScheduledMessageNotFound
from chatdesk.utils.id_generator import generate_id

ScheduledListener = Callable[[List[ScheduledMessage]], None]


def _parse_iso(value: str) -> datetime:
    try:
        # fromisoformat() only accepts a trailing "Z" from Python 3.11 on
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        raise InvalidScheduleDate(value) from None


class SchedulerStore:
    """
    Append/remove list of scheduled messages.

    Records are created ``pending`` and stay that way; no due-time firing
    happens here.
    """

    def __init__(
        self,
        scheduled: Iterable[ScheduledMessage] = (),
        on_change: Optional[ScheduledListener] = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._lock = RLock()
        self._scheduled: Tuple[ScheduledMessage, ...] = tuple(scheduled)
        self._on_change = on_change
        self._new_id = id_factory
        self._logger = logging.getLogger(__name__)

    @property
    def scheduled_messages(self) -> List[ScheduledMessage]:
        """Records in insertion order."""
        return list(self._scheduled)

    def list(self) -> List[ScheduledMessage]:
        """Records sorted by scheduled date, earliest first."""
        return sorted(self._scheduled, key=lambda item: _parse_iso(item.scheduled_date).timestamp())

    def get(self, scheduled_id: str) -> ScheduledMessage:
        for item in self._scheduled:
            if item.id == scheduled_id:
                return item
        raise ScheduledMessageNotFound(scheduled_id)

    def schedule(
        self,
        customer_name: str,
        customer_phone: str,
        text: str,
        scheduled_date: str,
        created_by: str,
    ) -> ScheduledMessage:
        """
        Record a message to be sent later.

        Args:
            customer_name: Contact display name
            customer_phone: Contact phone
            text: Message text
            scheduled_date: ISO-8601 point in time
            created_by: Id of the operator scheduling it

        Returns:
            The pending record

        Raises:
            InvalidScheduleDate: If ``scheduled_date`` is not ISO-8601
        """
        _parse_iso(scheduled_date)
        if not text or not text.strip():
            raise ValueError("Scheduled message text cannot be empty")

        item = ScheduledMessage(
            id=self._new_id(),
            customer_name=customer_name,
            customer_phone=customer_phone,
            text=text,
            scheduled_date=scheduled_date,
            status=ScheduledStatus.PENDING,
            created_by=created_by,
        )
        with self._lock:
            self._commit(self._scheduled + (item,))

        self._logger.info(f"Scheduled message {item.id} for {customer_phone} at {scheduled_date}")
        return item

    def cancel(self, scheduled_id: str) -> bool:
        """
        Remove a scheduled message whatever its status.

        Returns:
            True if a record was removed, False if the id was unknown
        """
        with self._lock:
            remaining = tuple(item for item in self._scheduled if item.id != scheduled_id)
            if len(remaining) == len(self._scheduled):
                return False
            self._commit(remaining)

        self._logger.info(f"Cancelled scheduled message {scheduled_id}")
        return True

    def _commit(self, scheduled: Tuple[ScheduledMessage, ...]) -> None:
        self._scheduled = scheduled
        if self._on_change is not None:
            self._on_change(list(scheduled))
