"""
WhatsApp channel.

Tracks whether the Cloud API is usable and publishes connection events
(open / closed) onto a queue whenever that changes. A watchdog thread
re-probes periodically, so a dropped connection is picked up again once the
API answers. An auth failure (401/403) means the token was revoked: the
channel reports logged_out and stops probing.
"""
import logging
import queue
import threading
from typing import Optional

from reminders.errors import ChannelUnavailable, DeliveryRejected
from reminders.ports import ConnectionEvent, ConnectionState

from .client import check_phone_number, send_whatsapp_text
from .config import WhatsAppConfig
from .phone import normalize_phone_number

logger = logging.getLogger(__name__)

LOGGED_OUT_STATUSES = (401, 403)


class WhatsAppChannel:
    def __init__(
        self,
        config: Optional[WhatsAppConfig] = None,
        events: Optional["queue.Queue"] = None,
    ) -> None:
        self.config = config or WhatsAppConfig()
        self.events = events if events is not None else queue.Queue()
        self._connected = False
        self._logged_out = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def is_connected(self) -> bool:
        return self._connected

    @property
    def logged_out(self) -> bool:
        return self._logged_out

    def probe(self) -> bool:
        """Check the API once and publish an event if the state changed."""
        status = check_phone_number(self.config)

        if status == 200:
            self._set_state(True)
        elif status in LOGGED_OUT_STATUSES:
            self._logged_out = True
            self._set_state(False, force=True)
        else:
            self._set_state(False)
        return self._connected

    def _set_state(self, connected: bool, force: bool = False) -> None:
        if connected == self._connected and not force:
            return
        self._connected = connected
        state = ConnectionState.open if connected else ConnectionState.closed
        self.events.put(ConnectionEvent(state=state, logged_out=self._logged_out))

    def _watch(self) -> None:
        while not self._stop.is_set():
            try:
                self.probe()
            except Exception:
                logger.exception("WhatsApp probe crashed")
            if self._logged_out:
                logger.error("WhatsApp access token rejected, watchdog stopping")
                return
            self._stop.wait(self.config.PROBE_INTERVAL)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._watch, name="whatsapp-watchdog", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def send(self, address: str, text: str) -> bool:
        if not self._connected:
            raise ChannelUnavailable("WhatsApp is not connected")

        recipient = normalize_phone_number(address)
        result, status_code = send_whatsapp_text(recipient, text, self.config)
        if status_code != 200:
            raise DeliveryRejected(status_code, result)
        return True
