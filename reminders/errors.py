class ReminderError(Exception):
    """Base error for the reminder pipeline."""


class DeliveryError(ReminderError):
    """A message could not be handed to the messaging channel."""


class ChannelUnavailable(DeliveryError):
    """The messaging channel is not connected yet (or dropped)."""


class DeliveryRejected(DeliveryError):
    """The messaging channel refused the send call."""

    def __init__(self, status_code: int, detail=None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"send rejected with status {status_code}: {detail}")


class PersistenceFailure(ReminderError):
    """Writing dedup state back to the task store failed."""
