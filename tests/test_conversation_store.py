import pytest

from chatdesk.application.services.conversation_store import ConversationStore
from chatdesk.domain.entities import AttachmentType, ChatStatus, MessageStatus
from chatdesk.domain.exceptions import ChatNotFound, EmptyMessage, InvalidTransition

from conftest import BASE_TIME_MS, FakeClock, SequentialIds, make_chat


def test_send_operator_message_appends_sent_message(conversation_store, published):
    message = conversation_store.send_operator_message("chatA", "u2", text="Hi Alice")

    chat = conversation_store.get_chat("chatA")
    assert chat.messages[-1] == message
    assert message.text == "Hi Alice"
    assert message.sender_id == "u2"
    assert message.is_customer is False
    assert message.status == MessageStatus.SENT
    assert chat.last_message_timestamp == message.timestamp
    assert len(published) == 1
    assert [c.id for c in published[-1]] == ["chatA", "chatB"]


def test_send_to_resolved_chat_is_rejected_without_mutation(clock, published):
    store = ConversationStore(
        chats=[make_chat("chatR", status=ChatStatus.RESOLVED)],
        on_change=published.append,
        clock=clock,
    )
    before = store.get_chat("chatR")

    with pytest.raises(InvalidTransition):
        store.send_operator_message("chatR", "u2", text="Anyone there?")

    assert store.get_chat("chatR") == before
    assert published == []


def test_send_without_text_or_attachment_is_rejected(conversation_store, published):
    with pytest.raises(EmptyMessage):
        conversation_store.send_operator_message("chatA", "u2", text="   ")

    assert len(conversation_store.get_chat("chatA").messages) == 1
    assert published == []


def test_audio_only_send_is_valid(conversation_store):
    message = conversation_store.send_operator_message(
        "chatA", "u2", attachment_url="data:audio/webm;base64,AAAA", attachment_type=AttachmentType.AUDIO
    )

    assert message.text == ""
    assert message.attachment_type == AttachmentType.AUDIO


def test_attachment_type_defaults_to_image(conversation_store):
    message = conversation_store.send_operator_message(
        "chatA", "u2", text="See this", attachment_url="https://example.com/a.png"
    )

    assert message.attachment_type == AttachmentType.IMAGE


def test_send_to_unknown_chat_raises(conversation_store):
    with pytest.raises(ChatNotFound):
        conversation_store.send_operator_message("nope", "u2", text="hi")


def test_empty_send_reports_chat_state_before_content():
    store = ConversationStore(chats=[make_chat("chatR", status=ChatStatus.RESOLVED)])

    with pytest.raises(InvalidTransition):
        store.send_operator_message("chatR", "u2", text="")
    with pytest.raises(ChatNotFound):
        store.send_operator_message("nope", "u2", text="")


def test_receive_on_unfocused_chat_increments_unread_by_one(conversation_store):
    conversation_store.receive_customer_message("chatA", "one")
    conversation_store.receive_customer_message("chatA", "two")

    chat = conversation_store.get_chat("chatA")
    assert chat.unread_count == 2
    assert [m.text for m in chat.messages[-2:]] == ["one", "two"]
    assert all(m.is_customer for m in chat.messages)


def test_receive_on_focused_chat_keeps_unread_at_zero(conversation_store):
    conversation_store.select_chat("chatA")
    conversation_store.receive_customer_message("chatA", "still here")

    assert conversation_store.get_chat("chatA").unread_count == 0
    assert conversation_store.get_chat("chatB").unread_count == 0


def test_select_chat_resets_unread_and_is_idempotent(clock):
    store = ConversationStore(chats=[make_chat("chatU", unread_count=3)], clock=clock)

    assert store.select_chat("chatU").unread_count == 0
    assert store.select_chat("chatU").unread_count == 0
    assert store.focused_chat_id == "chatU"


def test_clear_focus(conversation_store):
    conversation_store.select_chat("chatA")
    conversation_store.clear_focus()

    conversation_store.receive_customer_message("chatA", "hello?")

    assert conversation_store.focused_chat_id is None
    assert conversation_store.get_chat("chatA").unread_count == 1


def test_timestamps_never_decrease_when_clock_steps_back():
    clock = FakeClock(start=BASE_TIME_MS, step=-5000)
    store = ConversationStore(chats=[make_chat("chatT", timestamp=BASE_TIME_MS)], clock=clock)

    store.send_operator_message("chatT", "u2", text="first")
    store.receive_customer_message("chatT", "second")
    store.send_operator_message("chatT", "u2", text="third")

    timestamps = [m.timestamp for m in store.get_chat("chatT").messages]
    assert timestamps == sorted(timestamps)


def test_open_chat_inserts_at_head_with_one_unread(conversation_store):
    chat = conversation_store.open_chat("Carla", "+55 31 96666-3333", "Oi")

    assert conversation_store.chats[0].id == chat.id
    assert chat.unread_count == 1
    assert chat.status == ChatStatus.ACTIVE
    assert len(chat.messages) == 1
    assert chat.messages[0].is_customer
    assert "Carla" in chat.avatar_url


def test_set_status_leaves_focus_untouched(conversation_store, published):
    conversation_store.select_chat("chatA")

    chat = conversation_store.set_status("chatA", ChatStatus.RESOLVED)

    assert chat.status == ChatStatus.RESOLVED
    assert conversation_store.focused_chat_id == "chatA"
    count = len(published)
    conversation_store.set_status("chatA", ChatStatus.RESOLVED)
    assert len(published) == count


def test_reactivated_chat_accepts_operator_messages(conversation_store):
    conversation_store.set_status("chatA", ChatStatus.RESOLVED)
    conversation_store.set_status("chatA", ChatStatus.ACTIVE)

    conversation_store.send_operator_message("chatA", "u2", text="Back again")

    assert conversation_store.get_chat("chatA").messages[-1].text == "Back again"


def test_update_crm_fields_changes_only_the_given_field(conversation_store):
    before = conversation_store.get_chat("chatA")

    after = conversation_store.update_crm_fields("chatA", {"customerValue": 250})

    assert after.customer_value == 250.0
    assert after.customer_name == before.customer_name
    assert after.customer_phone == before.customer_phone
    assert after.customer_email == before.customer_email
    assert after.messages == before.messages
    assert after.unread_count == before.unread_count
    assert after.status == before.status


def test_update_crm_fields_accepts_attribute_names(conversation_store):
    chat = conversation_store.update_crm_fields(
        "chatA", {"customer_email": "alice@example.com", "customerInstagram": "@alice"}
    )

    assert chat.customer_email == "alice@example.com"
    assert chat.customer_instagram == "@alice"


@pytest.mark.parametrize("fields", [
    {"unknownField": "x"},
    {"customerValue": -1},
    {"customerName": ""},
    {"customerPhone": 5511988881111},
    {"customerEmail": ["a@x"]},
    {"customerValue": "lots"},
    {"customerValue": [1]},
])
def test_update_crm_fields_rejects_invalid_input(conversation_store, fields):
    before = conversation_store.get_chat("chatA")

    with pytest.raises(ValueError):
        conversation_store.update_crm_fields("chatA", fields)

    assert conversation_store.get_chat("chatA") == before


def test_find_chat_by_phone_uses_first_substring_match():
    store = ConversationStore(chats=[
        make_chat("first", customer_phone="+55 11 91234-5678"),
        make_chat("second", customer_phone="+55 11 91234-5678"),
    ])

    assert store.find_chat_by_phone("5511912345678").id == "first"
    assert store.find_chat_by_phone("912345678").id == "first"
    assert store.find_chat_by_phone("5599000000000") is None


def test_every_mutation_publishes_full_collection(clock):
    published = []
    store = ConversationStore(
        chats=[make_chat("chatA"), make_chat("chatB")],
        on_change=published.append,
        clock=clock,
        id_factory=SequentialIds(),
    )

    store.receive_customer_message("chatB", "ping")
    store.open_chat("New", "+55 11 90000-0000", "hey")

    assert [len(snapshot) for snapshot in published] == [2, 3]
    assert published[-1] == store.chats
