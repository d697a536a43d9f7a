"""
Deadline Reminder Scheduler

Periodically checks outstanding tasks and sends WhatsApp reminders to their
owners. Each tick:
- fetches tasks with deadline >= now that are not completed,
- asks the tier policy what (if anything) to send,
- delivers through the gateway,
- persists dedup state only after a successful delivery.

A failed delivery leaves the task untouched, so the same tier is simply
reconsidered on the next tick.
"""
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import pytz
from apscheduler.schedulers.background import BackgroundScheduler

from .errors import PersistenceFailure
from .gateway import DeliveryGateway
from .messages import render_reminder
from .metrics import REMINDER_FAILURES, REMINDERS_SENT, TICK_DURATION
from .policy import ReminderAction, decide
from .ports import ReminderCandidate, TaskStore
from .scheduler_config import SCHEDULER_CHECK_INTERVAL

logger = logging.getLogger(__name__)

JOB_ID = "deadline_reminder_job"


@dataclass
class TickReport:
    candidates: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    unrecorded: int = 0


class ReminderScheduler:
    def __init__(
        self,
        store: TaskStore,
        gateway: DeliveryGateway,
        *,
        interval_seconds: int = SCHEDULER_CHECK_INTERVAL,
        timezone: Optional[str] = None,
        normalize_address: Optional[Callable[[str], str]] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        scheduler: Optional[BackgroundScheduler] = None,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._interval_seconds = interval_seconds
        self._timezone = timezone
        self._normalize_address = normalize_address or (lambda raw: raw.strip())
        self._clock = clock
        self._scheduler = scheduler or BackgroundScheduler(timezone=pytz.utc)

        self._tick_lock = threading.Lock()
        self._arm_lock = threading.Lock()
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> bool:
        """
        Register the recurring reminder job. One-shot: repeated calls
        (e.g. one per reconnect) return False and change nothing.
        """
        with self._arm_lock:
            if self._armed:
                return False

            self._scheduler.add_job(
                self.check_and_send_reminders,
                'interval',
                seconds=self._interval_seconds,
                id=JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            if not self._scheduler.running:
                self._scheduler.start()
            self._armed = True

        logger.info(f"🚀 Reminder scheduler armed (every {self._interval_seconds}s)")
        return True

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("🛑 Reminder scheduler stopped")

    def check_and_send_reminders(self, now: Optional[datetime] = None) -> Optional[TickReport]:
        """
        Run one tick. Returns None when the previous tick is still running.
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.warning("Previous reminder tick still running, skipping this one")
            return None

        started = time.monotonic()
        try:
            return self._run_tick(now or self._clock())
        finally:
            TICK_DURATION.observe(time.monotonic() - started)
            self._tick_lock.release()

    def _run_tick(self, now: datetime) -> TickReport:
        report = TickReport()

        try:
            candidates = self._store.find_candidates(now)
        except Exception as e:
            logger.error(f"Failed to fetch reminder candidates: {e}")
            REMINDER_FAILURES.labels(reason="query").inc()
            return report

        report.candidates = len(candidates)

        for candidate in candidates:
            try:
                self._process(candidate, now, report)
            except Exception:
                logger.exception(f"Unexpected error processing task {candidate.task_id}")
                report.failed += 1

        logger.debug(
            f"Reminder tick done: {report.candidates} candidates, {report.sent} sent, "
            f"{report.failed} failed, {report.skipped} skipped"
        )
        return report

    def _process(self, candidate: ReminderCandidate, now: datetime, report: TickReport) -> None:
        recipient = self._normalize_address(candidate.contact_address or "")
        if not recipient:
            report.skipped += 1
            return

        decision = decide(
            now,
            candidate.deadline,
            reminder_sent_at=candidate.reminder_sent_at,
            two_days_reminder_sent=candidate.two_days_reminder_sent,
            completed_at=candidate.completed_at,
        )
        if not decision.should_send:
            report.skipped += 1
            return

        message = render_reminder(candidate, decision, self._timezone)
        if not self._gateway.deliver(recipient, message):
            report.failed += 1
            return

        REMINDERS_SENT.labels(tier=decision.action.value).inc()
        report.sent += 1

        try:
            if decision.action == ReminderAction.early_warning:
                self._store.mark_early_warning_sent(candidate.task_id)
                logger.info(f"📆 Early warning sent to {recipient} | Task: \"{candidate.title}\"")
            else:
                self._store.mark_reminder_sent(candidate.task_id, now)
                logger.info(
                    f"⏰ Reminder ({decision.urgency.value}) sent to {recipient} | Task: \"{candidate.title}\""
                )
        except PersistenceFailure as e:
            # Delivered but not recorded: the next tick may send it again.
            logger.error(f"Sent reminder for task {candidate.task_id} but could not record it: {e}")
            REMINDER_FAILURES.labels(reason="persistence").inc()
            report.unrecorded += 1
