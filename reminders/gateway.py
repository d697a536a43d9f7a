import logging

from .errors import ChannelUnavailable, DeliveryRejected
from .metrics import REMINDER_FAILURES
from .ports import MessagingChannel

logger = logging.getLogger(__name__)


class DeliveryGateway:
    """
    Wraps the channel's send capability with a bool contract.

    One send attempt per call. Retrying is the caller's job (the scheduler
    simply re-evaluates the task on its next tick).
    """

    def __init__(self, channel: MessagingChannel) -> None:
        self._channel = channel

    def deliver(self, recipient: str, text: str) -> bool:
        if not self._channel.is_connected():
            logger.warning(f"Channel not connected, cannot send to {recipient}")
            REMINDER_FAILURES.labels(reason="channel_unavailable").inc()
            return False

        try:
            if self._channel.send(recipient, text):
                return True
            logger.error(f"❌ Send to {recipient} refused by channel")
            REMINDER_FAILURES.labels(reason="rejected").inc()
        except ChannelUnavailable as e:
            logger.warning(f"Channel dropped while sending to {recipient}: {e}")
            REMINDER_FAILURES.labels(reason="channel_unavailable").inc()
        except DeliveryRejected as e:
            logger.error(f"❌ Send to {recipient} rejected: {e}")
            REMINDER_FAILURES.labels(reason="rejected").inc()
        except Exception as e:
            logger.error(f"❌ Unexpected error sending to {recipient}: {e}")
            REMINDER_FAILURES.labels(reason="error").inc()
        return False
