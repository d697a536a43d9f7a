"""
Ports used by the reminder core.

The scheduler depends on these protocols, never on SQLAlchemy or the
WhatsApp client directly.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class ReminderCandidate:
    """A task joined with its owner's contact details, as seen by one tick."""

    task_id: int
    title: str
    deadline: datetime
    description: Optional[str] = None
    completed_at: Optional[datetime] = None
    reminder_sent_at: Optional[datetime] = None
    two_days_reminder_sent: bool = False
    contact_address: Optional[str] = None
    display_name: Optional[str] = None


class TaskStore(Protocol):
    def find_candidates(self, now: datetime) -> List[ReminderCandidate]: ...
    def mark_early_warning_sent(self, task_id: int) -> None: ...
    def mark_reminder_sent(self, task_id: int, sent_at: datetime) -> None: ...


class MessagingChannel(Protocol):
    def is_connected(self) -> bool: ...
    def send(self, address: str, text: str) -> bool: ...


class ConnectionState(str, enum.Enum):
    open = "open"
    closed = "closed"


@dataclass(frozen=True)
class ConnectionEvent:
    """Published by a messaging channel whenever its connection state changes."""

    state: ConnectionState
    logged_out: bool = False
