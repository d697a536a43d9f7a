"""
Notification Tier Policy

Pure decision logic: given the clock and a task's dedup state, decide whether
an early warning, a tiered reminder, or nothing should be sent.

No I/O: this module only transforms data.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .scheduler_config import (
    EARLY_WARNING_THRESHOLD_MIN,
    REMINDER_INTERVALS,
    URGENCY_APPROACHING_MIN,
    URGENCY_CRITICAL_MIN,
)

EPOCH = datetime(1970, 1, 1)


class ReminderAction(str, enum.Enum):
    skip = "skip"
    early_warning = "early_warning"
    tiered_reminder = "tiered_reminder"


class Urgency(str, enum.Enum):
    critical = "critical"
    approaching = "approaching"
    routine = "routine"


@dataclass(frozen=True)
class ReminderDecision:
    action: ReminderAction
    urgency: Optional[Urgency] = None
    interval_minutes: Optional[int] = None

    @property
    def should_send(self) -> bool:
        return self.action != ReminderAction.skip


SKIP = ReminderDecision(ReminderAction.skip)
EARLY_WARNING = ReminderDecision(ReminderAction.early_warning)


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def interval_for(minutes_to_deadline: float) -> Optional[int]:
    """Required minutes since the last send, or None once the deadline has passed."""
    for lower_bound, interval in REMINDER_INTERVALS:
        if minutes_to_deadline > lower_bound:
            return interval
    return None


def urgency_for(minutes_to_deadline: float) -> Urgency:
    if minutes_to_deadline < URGENCY_CRITICAL_MIN:
        return Urgency.critical
    if minutes_to_deadline < URGENCY_APPROACHING_MIN:
        return Urgency.approaching
    return Urgency.routine


def decide(
    now: datetime,
    deadline: datetime,
    reminder_sent_at: Optional[datetime] = None,
    two_days_reminder_sent: bool = False,
    completed_at: Optional[datetime] = None,
) -> ReminderDecision:
    """
    Decide what (if anything) to send for one task at time `now`.

    - completed tasks are always skipped
    - more than 48h out: one-shot early warning, guarded by two_days_reminder_sent
    - within 48h: tiered reminder once the dedup interval has elapsed since
      reminder_sent_at (unset counts as the epoch)
    """
    if completed_at is not None:
        return SKIP

    minutes_to_deadline = minutes_between(now, deadline)

    if minutes_to_deadline > EARLY_WARNING_THRESHOLD_MIN:
        return SKIP if two_days_reminder_sent else EARLY_WARNING

    interval = interval_for(minutes_to_deadline)
    if interval is None:
        return SKIP

    last_sent = reminder_sent_at or EPOCH
    if minutes_between(last_sent, now) < interval:
        return SKIP

    return ReminderDecision(
        ReminderAction.tiered_reminder,
        urgency=urgency_for(minutes_to_deadline),
        interval_minutes=interval,
    )
