"""
SQLAlchemy implementation of the reminder TaskStore port.
"""
import logging
from datetime import datetime
from typing import Callable, List

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reminders.errors import PersistenceFailure
from reminders.ports import ReminderCandidate
from server.database import SessionLocal
from server.models import Task, User

logger = logging.getLogger(__name__)


class SqlTaskStore:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    def find_candidates(self, now: datetime) -> List[ReminderCandidate]:
        """Tasks whose deadline has not passed and that are not completed yet."""
        db = self._session_factory()
        try:
            rows = db.query(Task, User).outerjoin(User, Task.user_id == User.id).filter(
                Task.deadline >= now,
                Task.completed_at.is_(None)
            ).order_by(Task.deadline).all()

            return [
                ReminderCandidate(
                    task_id=task.id,
                    title=task.title,
                    description=task.description,
                    deadline=task.deadline,
                    completed_at=task.completed_at,
                    reminder_sent_at=task.reminder_sent_at,
                    two_days_reminder_sent=bool(task.two_days_reminder_sent),
                    contact_address=user.phone_number if user else None,
                    display_name=user.name if user else None,
                )
                for task, user in rows
            ]
        finally:
            db.close()

    def mark_early_warning_sent(self, task_id: int) -> None:
        self._update(
            task_id,
            [Task.two_days_reminder_sent.is_(False)],
            {Task.two_days_reminder_sent: True},
        )

    def mark_reminder_sent(self, task_id: int, sent_at: datetime) -> None:
        # Never move reminder_sent_at backwards
        self._update(
            task_id,
            [or_(Task.reminder_sent_at.is_(None), Task.reminder_sent_at <= sent_at)],
            {Task.reminder_sent_at: sent_at},
        )

    def _update(self, task_id: int, conditions: list, values: dict) -> None:
        db = self._session_factory()
        try:
            updated = db.query(Task).filter(Task.id == task_id, *conditions).update(
                values, synchronize_session=False
            )
            db.commit()
            if not updated:
                logger.warning(f"Task {task_id}: dedup state already newer or task missing, nothing updated")
        except SQLAlchemyError as e:
            db.rollback()
            raise PersistenceFailure(f"could not update task {task_id}: {e}") from e
        finally:
            db.close()
