"""notifyhub Core Domain Models -- public type exports

All public model types are imported from here.
"""

from .delivery import DeliveryAttempt, DeliveryCounts, DispatchReport
from .enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    AttemptStatus,
    Channel,
    SkipReason,
    parse_channels,
    validate_transition,
)
from .ledger import AttemptRecord, MessageRecord
from .message import Message
from .recipient import ContactRecord, Recipient, SkippedRecipient

__all__ = [
    # enums
    "Channel",
    "AttemptStatus",
    "SkipReason",
    "parse_channels",
    # state machine
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # message
    "Message",
    # recipients
    "ContactRecord",
    "Recipient",
    "SkippedRecipient",
    # delivery
    "DeliveryAttempt",
    "DeliveryCounts",
    "DispatchReport",
    # ledger
    "MessageRecord",
    "AttemptRecord",
]
