import pytest

from chatdesk.application.services.scheduler_store import SchedulerStore
from chatdesk.domain.entities import ScheduledStatus
from chatdesk.domain.exceptions import InvalidScheduleDate, ScheduledMessageNotFound

from conftest import SequentialIds


def _schedule(store, date, text="Follow up on the quote"):
    return store.schedule(
        customer_name="Alice",
        customer_phone="+55 11 98888-1111",
        text=text,
        scheduled_date=date,
        created_by="u2",
    )


def test_schedule_creates_pending_record_and_publishes():
    published = []
    store = SchedulerStore(on_change=published.append, id_factory=SequentialIds("s"))

    item = _schedule(store, "2030-01-15T10:00:00Z")

    assert item.id == "s1"
    assert item.status == ScheduledStatus.PENDING
    assert item.created_by == "u2"
    assert store.get("s1") == item
    assert published == [[item]]


@pytest.mark.parametrize("date", ["tomorrow", "", "2030-13-45T99:00"])
def test_schedule_rejects_unparseable_dates(date):
    store = SchedulerStore()

    with pytest.raises(InvalidScheduleDate):
        _schedule(store, date)

    assert store.scheduled_messages == []


def test_schedule_rejects_empty_text():
    with pytest.raises(ValueError):
        _schedule(SchedulerStore(), "2030-01-15T10:00:00", text="  ")


def test_list_is_sorted_by_date_while_storage_keeps_insertion_order():
    store = SchedulerStore(id_factory=SequentialIds("s"))
    _schedule(store, "2030-03-01T09:00:00Z")
    _schedule(store, "2030-01-01T09:00:00+00:00")
    _schedule(store, "2030-02-01T09:00:00Z")

    assert [item.id for item in store.list()] == ["s2", "s3", "s1"]
    assert [item.id for item in store.scheduled_messages] == ["s1", "s2", "s3"]


def test_cancel_removes_record_regardless_of_status():
    published = []
    store = SchedulerStore(on_change=published.append, id_factory=SequentialIds("s"))
    _schedule(store, "2030-01-15T10:00:00Z")

    assert store.cancel("s1") is True
    assert store.scheduled_messages == []
    assert published[-1] == []


def test_cancel_unknown_id_returns_false_without_publishing():
    published = []
    store = SchedulerStore(on_change=published.append)

    assert store.cancel("missing") is False
    assert published == []


def test_get_unknown_id_raises():
    with pytest.raises(ScheduledMessageNotFound):
        SchedulerStore().get("missing")
