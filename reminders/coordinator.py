"""
Connection coordinator.

Consumes connection events published by the messaging channel and arms the
reminder scheduler on the first OPEN. Reconnects publish OPEN again; arming
is one-shot so they never register a second timer.
"""
import logging
import queue
import threading
from typing import Optional

from .ports import ConnectionEvent, ConnectionState
from .scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

_STOP = object()


class ChannelCoordinator:
    def __init__(self, events: "queue.Queue", scheduler: ReminderScheduler) -> None:
        self._events = events
        self._scheduler = scheduler
        self._thread: Optional[threading.Thread] = None

    def handle(self, event: ConnectionEvent) -> None:
        if event.state == ConnectionState.open:
            logger.info("✅ WhatsApp connected")
            if self._scheduler.arm():
                logger.info("Reminder scheduler armed on first connection")
        elif event.logged_out:
            logger.warning("❌ WhatsApp session logged out, not reconnecting")
        else:
            logger.warning("❌ WhatsApp disconnected, waiting for reconnect")

    def run(self) -> None:
        while True:
            event = self._events.get()
            if event is _STOP:
                break
            try:
                self.handle(event)
            except Exception:
                logger.exception(f"Failed to handle connection event {event!r}")

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self.run, name="channel-coordinator", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        if self._thread is None:
            return
        self._events.put(_STOP)
        self._thread.join(timeout)
        self._thread = None
