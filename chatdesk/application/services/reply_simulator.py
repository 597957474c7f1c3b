"""Reply simulator: delayed, generated customer replies to operator sends.

Each trigger captures the chat id and an immutable transcript snapshot, then
hands the work to an executor. The worker asks the reply generator for text
(falling back to a fixed text on any failure), waits a randomized delay and
appends the reply to the captured chat, never to whatever chat happens to be
focused at delivery time.
"""
import logging
import random
import time
from collections import Counter
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from threading import Lock
from typing import Callable, List, Optional, Tuple

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.domain.entities.chat import AttachmentType, Chat, Message, TranscriptTurn
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.middleware.monitoring import set_composing_count, track_simulated_reply
from chatdesk.utils.text_processor import WhatsAppTextProcessor

DEFAULT_FALLBACK_TEXT = "Sorry, I didn't understand."

ATTACHMENT_PLACEHOLDERS = {
    AttachmentType.AUDIO: "[Audio]",
    AttachmentType.IMAGE: "[Image]",
    AttachmentType.FILE: "[File]",
}


@dataclass(frozen=True)
class PendingReply:
    """Everything a worker needs, captured at trigger time."""

    chat_id: str
    customer_name: str
    transcript: Tuple[TranscriptTurn, ...]
    delay: float


def build_transcript(chat: Chat) -> List[TranscriptTurn]:
    """Map a chat's message log to operator/customer turns."""
    return [_turn(message) for message in chat.messages]


def _turn(message: Message) -> TranscriptTurn:
    text = message.text
    if not text and message.attachment_type is not None:
        text = ATTACHMENT_PLACEHOLDERS[message.attachment_type]
    role = TranscriptTurn.CUSTOMER if message.is_customer else TranscriptTurn.OPERATOR
    return TranscriptTurn(role=role, text=text)


class ReplySimulator:
    """
    Produces one simulated customer reply per operator send.

    Exposes a per-chat "composing" indicator for as long as a reply is in flight.
    """

    def __init__(
        self,
        conversation_store: ConversationStore,
        reply_generator: IReplyGenerator,
        executor: Executor,
        delay_range: Tuple[float, float] = (2.0, 4.0),
        fallback_text: str = DEFAULT_FALLBACK_TEXT,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the reply simulator.

        Args:
            conversation_store: Store the replies are appended to
            reply_generator: External text generation collaborator
            executor: Runs deliveries off the caller's thread
            delay_range: (min, max) seconds before a reply is appended
            fallback_text: Reply used when generation fails
            sleep: Blocking wait used by workers
            rng: Random source for the delay
        """
        low, high = delay_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid reply delay range: {delay_range}")

        self._store = conversation_store
        self._generator = reply_generator
        self._executor = executor
        self._delay_range = (low, high)
        self._fallback_text = fallback_text
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._composing: Counter = Counter()
        self._composing_lock = Lock()
        self._logger = logging.getLogger(__name__)

    def is_composing(self, chat_id: str) -> bool:
        with self._composing_lock:
            return self._composing[chat_id] > 0

    def trigger(self, chat_id: str) -> Future:
        """
        Schedule a simulated reply for a chat.

        Call right after an operator message has been appended; the transcript
        therefore ends with that message.

        Args:
            chat_id: Chat the reply belongs to

        Returns:
            Future resolving to the appended reply message, or None if dropped

        Raises:
            ChatNotFound: If the chat does not exist
        """
        chat = self._store.get_chat(chat_id)
        pending = PendingReply(
            chat_id=chat.id,
            customer_name=chat.customer_name,
            transcript=tuple(build_transcript(chat)),
            delay=self._rng.uniform(*self._delay_range),
        )

        self._set_composing(chat_id, +1)
        self._logger.info(f"Simulated reply for chat {chat_id} scheduled in {pending.delay:.1f}s")
        try:
            return self._executor.submit(self._deliver, pending)
        except RuntimeError:
            self._set_composing(chat_id, -1)
            raise

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)

    def _deliver(self, pending: PendingReply) -> Optional[Message]:
        try:
            text = self._generate(pending)
            self._sleep(pending.delay)

            if self._store.find_chat(pending.chat_id) is None:
                self._logger.warning(f"Chat {pending.chat_id} no longer exists, dropping simulated reply")
                track_simulated_reply("dropped")
                return None

            message = self._store.receive_customer_message(pending.chat_id, text)
            self._logger.info(f"Simulated reply {message.id} appended to chat {pending.chat_id}")
            return message
        except Exception as e:
            self._logger.error(f"Failed to deliver simulated reply for chat {pending.chat_id}: {e}", exc_info=True)
            raise
        finally:
            self._set_composing(pending.chat_id, -1)

    def _generate(self, pending: PendingReply) -> str:
        started = time.monotonic()
        try:
            text = self._generator.generate_reply(pending.transcript, pending.customer_name)
            text = WhatsAppTextProcessor.process(text or "", speaker=pending.customer_name)
        except Exception as e:
            self._logger.warning(
                f"Reply generation failed for chat {pending.chat_id}, using fallback text: {e}"
            )
            track_simulated_reply("fallback", time.monotonic() - started)
            return self._fallback_text

        if not text:
            self._logger.warning(f"Reply generator returned no text for chat {pending.chat_id}")
            track_simulated_reply("fallback", time.monotonic() - started)
            return self._fallback_text

        track_simulated_reply("generated", time.monotonic() - started)
        return text

    def _set_composing(self, chat_id: str, delta: int) -> None:
        with self._composing_lock:
            self._composing[chat_id] += delta
            if self._composing[chat_id] <= 0:
                del self._composing[chat_id]
            total = sum(self._composing.values())
        set_composing_count(total)
