"""Shared fixtures for the chatdesk test suite."""
from concurrent.futures import Executor, Future
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from chatdesk import create_app
from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.application.services.reply_simulator import ReplySimulator
from chatdesk.config.settings import TestingConfig
from chatdesk.domain.entities import (
    CUSTOMER_SENDER_ID,
    Chat,
    ChatStatus,
    Message,
    MessageStatus,
    TranscriptTurn,
)
from chatdesk.domain.interfaces.reply_generator import IReplyGenerator
from chatdesk.infrastructure.repositories.key_value_stores import InMemoryKeyValueStore
from chatdesk.infrastructure.service_container import ServiceContainer

BASE_TIME_MS = 1_700_000_000_000


class DeferredExecutor(Executor):
    """Queues submitted work until ``run_pending()`` is called."""

    def __init__(self):
        self._pending: List[Tuple[Future, Callable, tuple, dict]] = []

    def submit(self, fn, *args, **kwargs):
        future: Future = Future()
        self._pending.append((future, fn, args, kwargs))
        return future

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def run_pending(self) -> None:
        pending, self._pending = self._pending, []
        for future, fn, args, kwargs in pending:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)

    def shutdown(self, wait=True, *, cancel_futures=False):
        self._pending = []


class StubReplyGenerator(IReplyGenerator):
    """Returns a fixed reply, or raises ``error`` when set."""

    def __init__(self, reply: str = "Thanks!", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Tuple[Tuple[TranscriptTurn, ...], str]] = []

    def generate_reply(self, transcript: Sequence[TranscriptTurn], customer_name: str) -> str:
        self.calls.append((tuple(transcript), customer_name))
        if self.error is not None:
            raise self.error
        return self.reply


class FakeClock:
    """Millisecond clock advancing one second per reading unless set explicitly."""

    def __init__(self, start: int = BASE_TIME_MS, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


class SequentialIds:
    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.counter = 0

    def __call__(self) -> str:
        self.counter += 1
        return f"{self.prefix}{self.counter}"


def make_chat(
    chat_id: str,
    customer_phone: str = "+55 11 99999-9999",
    customer_name: str = "Ana",
    status: ChatStatus = ChatStatus.ACTIVE,
    unread_count: int = 0,
    last_text: Optional[str] = "Hello",
    timestamp: int = BASE_TIME_MS - 60_000,
) -> Chat:
    messages = ()
    if last_text is not None:
        messages = (Message(
            id=f"{chat_id}-m0",
            text=last_text,
            sender_id=CUSTOMER_SENDER_ID,
            timestamp=timestamp,
            status=MessageStatus.READ,
            is_customer=True,
        ),)
    return Chat(
        id=chat_id,
        customer_name=customer_name,
        customer_phone=customer_phone,
        avatar_url="",
        messages=messages,
        unread_count=unread_count,
        last_message_timestamp=timestamp if messages else 0,
        status=status,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def published():
    """Collects every snapshot handed to a store listener."""
    return []


@pytest.fixture
def conversation_store(clock, published):
    return ConversationStore(
        chats=[
            make_chat("chatA", customer_phone="+55 11 98888-1111", customer_name="Alice"),
            make_chat("chatB", customer_phone="+55 21 97777-2222", customer_name="Bruno"),
        ],
        on_change=published.append,
        clock=clock,
        id_factory=SequentialIds("m"),
    )


@pytest.fixture
def deferred_executor():
    return DeferredExecutor()


@pytest.fixture
def stub_generator():
    return StubReplyGenerator()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def reply_simulator(conversation_store, stub_generator, deferred_executor, sleeps):
    return ReplySimulator(
        conversation_store=conversation_store,
        reply_generator=stub_generator,
        executor=deferred_executor,
        delay_range=(2.0, 4.0),
        fallback_text="Sorry, I didn't understand.",
        sleep=sleeps.append,
    )


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def container(kv_store, stub_generator, deferred_executor):
    ServiceContainer.reset()
    container = ServiceContainer(TestingConfig).use(
        key_value_store=kv_store,
        reply_generator=stub_generator,
        executor=deferred_executor,
    )
    yield container
    ServiceContainer.reset()


@pytest.fixture
def app(container):
    return create_app(TestingConfig, container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def operator_headers():
    return {"X-Operator-Id": "u2"}
