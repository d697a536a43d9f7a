"""
Wires the WhatsApp channel, reminder scheduler and OTP service together and
keeps them on app.state so routes receive them through dependencies.
"""
import logging
from datetime import timedelta
from typing import Optional

from reminders import ChannelCoordinator, DeliveryGateway, ReminderScheduler
from reminders.ports import TaskStore
from server.config import config
from server.otp import OtpService
from server.task_store import SqlTaskStore
from whatsapp import WhatsAppChannel, normalize_phone_number

logger = logging.getLogger(__name__)


def build_services(state, channel: Optional[WhatsAppChannel] = None, store: Optional[TaskStore] = None):
    channel = channel or WhatsAppChannel()
    gateway = DeliveryGateway(channel)
    scheduler = ReminderScheduler(
        store or SqlTaskStore(),
        gateway,
        interval_seconds=config.REMINDER_CHECK_INTERVAL,
        timezone=config.TIMEZONE,
        normalize_address=normalize_phone_number,
    )

    state.channel = channel
    state.gateway = gateway
    state.reminder_scheduler = scheduler
    state.coordinator = ChannelCoordinator(channel.events, scheduler)
    state.otp_service = OtpService(gateway, ttl=timedelta(minutes=config.OTP_TTL_MINUTES))
    return state


def start_background(state) -> None:
    """Start consuming connection events, then start watching the channel."""
    state.coordinator.start()
    state.channel.start()
    logger.info("🔁 WhatsApp watchdog started, reminders arm on first connection")


def stop_background(state) -> None:
    for name in ("channel", "coordinator", "reminder_scheduler"):
        component = getattr(state, name, None)
        if component is None:
            continue
        try:
            if name == "reminder_scheduler":
                component.shutdown()
            else:
                component.stop()
        except Exception:
            logger.exception(f"Failed to stop {name}")
