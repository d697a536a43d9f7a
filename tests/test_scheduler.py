from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from reminders.coordinator import ChannelCoordinator
from reminders.gateway import DeliveryGateway
from reminders.messages import EARLY_WARNING_TEXT, URGENCY_TEXT
from reminders.policy import Urgency
from reminders.ports import ConnectionEvent, ConnectionState, ReminderCandidate
from reminders.scheduler import JOB_ID, ReminderScheduler
from whatsapp.phone import normalize_phone_number

from tests.fakes import FakeChannel, FakeTaskStore


def _task(task_id, deadline, **overrides):
    fields = dict(
        task_id=task_id,
        title=f"Tugas {task_id}",
        deadline=deadline,
        contact_address="081234567890",
        display_name="Rio",
    )
    fields.update(overrides)
    return ReminderCandidate(**fields)


def _scheduler(store, channel, clock=None, background=None):
    if background is None:
        background = MagicMock()
        background.running = False
    kwargs = dict(
        interval_seconds=30,
        normalize_address=normalize_phone_number,
        scheduler=background,
    )
    if clock is not None:
        kwargs["clock"] = clock
    return ReminderScheduler(store, DeliveryGateway(channel), **kwargs)


def test_early_warning_sent_once_and_recorded(now, channel):
    store = FakeTaskStore([_task(1, now + timedelta(minutes=3000))])
    scheduler = _scheduler(store, channel)

    report = scheduler.check_and_send_reminders(now)
    assert report.sent == 1
    assert channel.recipients() == ["6281234567890"]
    assert EARLY_WARNING_TEXT in channel.sent[0][1]
    assert store.tasks[1].two_days_reminder_sent is True
    assert store.writes == [("early_warning", 1)]

    report = scheduler.check_and_send_reminders(now + timedelta(seconds=30))
    assert report.sent == 0
    assert report.skipped == 1
    assert len(channel.sent) == 1


def test_tiered_reminder_records_tick_time(now, channel):
    store = FakeTaskStore([_task(1, now + timedelta(minutes=45))])
    scheduler = _scheduler(store, channel)

    scheduler.check_and_send_reminders(now)

    assert store.tasks[1].reminder_sent_at == now
    assert URGENCY_TEXT[Urgency.approaching] in channel.sent[0][1]


def test_failed_delivery_changes_nothing(now):
    channel = FakeChannel(reject={"6281234567890"})
    store = FakeTaskStore([
        _task(1, now + timedelta(minutes=3000)),
        _task(2, now + timedelta(minutes=30)),
    ])
    scheduler = _scheduler(store, channel)

    report = scheduler.check_and_send_reminders(now)

    assert report.failed == 2
    assert report.sent == 0
    assert store.writes == []
    assert store.tasks[1].two_days_reminder_sent is False
    assert store.tasks[2].reminder_sent_at is None


def test_disconnected_channel_sends_nothing(now):
    channel = FakeChannel(connected=False)
    store = FakeTaskStore([_task(1, now + timedelta(minutes=30))])

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert report.failed == 1
    assert channel.sent == []
    assert store.writes == []


def test_one_bad_task_does_not_block_the_rest(now):
    channel = FakeChannel(reject={"6280000000001"})
    store = FakeTaskStore([
        _task(1, now + timedelta(minutes=30), contact_address="080000000001"),
        _task(2, now + timedelta(minutes=30), contact_address="089999999999"),
    ])

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert report.failed == 1
    assert report.sent == 1
    assert channel.recipients() == ["6289999999999"]
    assert store.tasks[2].reminder_sent_at == now


def test_missing_contact_is_skipped(now, channel):
    store = FakeTaskStore([
        _task(1, now + timedelta(minutes=30), contact_address=None),
        _task(2, now + timedelta(minutes=30), contact_address=" - "),
    ])

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert report.skipped == 2
    assert channel.sent == []


def test_completed_and_past_tasks_never_sent(now, channel):
    store = FakeTaskStore([
        _task(1, now + timedelta(minutes=30), completed_at=now - timedelta(hours=1)),
        _task(2, now - timedelta(minutes=1)),
    ])

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert report.candidates == 0
    assert channel.sent == []


def test_dedup_window_over_several_ticks(clock, channel):
    start = clock()
    store = FakeTaskStore([_task(1, start + timedelta(minutes=90))])
    scheduler = _scheduler(store, channel, clock=clock)

    sends = []
    for _ in range(100):
        report = scheduler.check_and_send_reminders()
        if report.sent:
            sends.append(clock())
        clock.advance(seconds=30)

    # 90 down to 60 minutes out: one send at start, the next once 30 min elapsed
    assert sends[0] == start
    assert sends[1] - sends[0] >= timedelta(minutes=30)
    for earlier, later in zip(sends, sends[1:]):
        assert later - earlier >= timedelta(minutes=10)


def test_query_failure_yields_empty_report(now, channel):
    store = MagicMock()
    store.find_candidates.side_effect = RuntimeError("db down")

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert report.candidates == 0
    assert channel.sent == []


def test_persistence_failure_after_delivery_is_counted(now, channel):
    store = FakeTaskStore([_task(1, now + timedelta(minutes=30))], fail_writes_for={1})

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert report.sent == 1
    assert report.unrecorded == 1
    assert store.tasks[1].reminder_sent_at is None


def test_overlapping_tick_is_skipped(now, channel):
    inner_reports = []

    class ReentrantStore(FakeTaskStore):
        def find_candidates(self, at):
            inner_reports.append(scheduler.check_and_send_reminders(at))
            return super().find_candidates(at)

    store = ReentrantStore([_task(1, now + timedelta(minutes=30))])
    scheduler = _scheduler(store, channel)

    report = scheduler.check_and_send_reminders(now)

    assert inner_reports == [None]
    assert report.sent == 1
    # lock released afterwards
    assert scheduler.check_and_send_reminders(now) is not None


def test_arm_is_one_shot():
    background = MagicMock()
    background.running = False
    scheduler = _scheduler(FakeTaskStore([]), FakeChannel(), background=background)

    assert scheduler.armed is False
    assert scheduler.arm() is True
    background.running = True
    assert scheduler.arm() is False
    assert scheduler.arm() is False

    background.add_job.assert_called_once()
    background.start.assert_called_once_with()
    args, kwargs = background.add_job.call_args
    assert args[1] == 'interval'
    assert kwargs["seconds"] == 30
    assert kwargs["id"] == JOB_ID
    assert kwargs["max_instances"] == 1
    assert scheduler.armed is True


def test_reconnect_cycles_register_one_timer():
    background = MagicMock()
    background.running = False
    scheduler = _scheduler(FakeTaskStore([]), FakeChannel(), background=background)
    coordinator = ChannelCoordinator(FakeChannel().events, scheduler)

    for state in [ConnectionState.open, ConnectionState.closed] * 3:
        coordinator.handle(ConnectionEvent(state))

    assert background.add_job.call_count == 1


def test_shutdown_only_when_running():
    background = MagicMock()
    background.running = False
    scheduler = _scheduler(FakeTaskStore([]), FakeChannel(), background=background)

    scheduler.shutdown()
    background.shutdown.assert_not_called()

    background.running = True
    scheduler.shutdown()
    background.shutdown.assert_called_once_with(wait=False)


@pytest.mark.parametrize("raw", ["081234567890", "+62 812-3456-7890", "81234567890"])
def test_addresses_are_normalized_before_sending(now, raw):
    channel = FakeChannel()
    store = FakeTaskStore([_task(1, now + timedelta(minutes=30), contact_address=raw)])

    _scheduler(store, channel).check_and_send_reminders(now)

    assert channel.recipients() == ["6281234567890"]


def test_middle_task_failure_leaves_neighbours_recorded(now):
    channel = FakeChannel(reject={"6280000000002"})
    store = FakeTaskStore([
        _task(1, now + timedelta(minutes=30), contact_address="080000000001"),
        _task(2, now + timedelta(minutes=30), contact_address="080000000002"),
        _task(3, now + timedelta(minutes=30), contact_address="080000000003"),
    ])

    report = _scheduler(store, channel).check_and_send_reminders(now)

    assert (report.sent, report.failed) == (2, 1)
    assert store.tasks[1].reminder_sent_at == now
    assert store.tasks[2].reminder_sent_at is None
    assert store.tasks[3].reminder_sent_at == now
