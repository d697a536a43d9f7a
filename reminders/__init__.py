from .errors import ChannelUnavailable, DeliveryRejected, PersistenceFailure
from .policy import ReminderAction, ReminderDecision, Urgency, decide
from .ports import ConnectionEvent, ConnectionState, ReminderCandidate
from .gateway import DeliveryGateway
from .scheduler import ReminderScheduler, TickReport
from .coordinator import ChannelCoordinator
