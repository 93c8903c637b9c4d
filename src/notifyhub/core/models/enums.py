"""Enum definitions -- delivery channels and the attempt state machine

Contains Channel, AttemptStatus, SkipReason, plus the VALID_TRANSITIONS
map and the TERMINAL_STATES set for delivery attempts.
"""

from enum import StrEnum


class Channel(StrEnum):
    """Outbound delivery channel"""

    EMAIL = "email"
    SMS = "sms"


class AttemptStatus(StrEnum):
    """Per (recipient, channel) delivery attempt status"""

    PENDING = "pending"

    # terminal
    SENT = "sent"
    FAILED = "failed"


# pending -> sent | failed, nothing leaves a terminal state
VALID_TRANSITIONS: dict[AttemptStatus, set[AttemptStatus]] = {
    AttemptStatus.PENDING: {AttemptStatus.SENT, AttemptStatus.FAILED},
    AttemptStatus.SENT: set(),
    AttemptStatus.FAILED: set(),
}

TERMINAL_STATES: set[AttemptStatus] = {
    AttemptStatus.SENT,
    AttemptStatus.FAILED,
}


class SkipReason(StrEnum):
    """Why a requested recipient id was left out of a dispatch"""

    NOT_FOUND = "not_found"
    NO_USABLE_ADDRESS = "no_usable_address"


def validate_transition(from_status: AttemptStatus, to_status: AttemptStatus) -> bool:
    """Check whether an attempt status transition is allowed

    Args:
        from_status: current status
        to_status: target status

    Returns:
        True if the transition is legal, otherwise False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed


def parse_channels(values) -> set[Channel]:
    """Turn raw channel names into a Channel set

    Raises:
        ValueError: on an unknown channel name
    """
    channels: set[Channel] = set()
    for value in values:
        try:
            channels.add(Channel(str(value).strip().lower()))
        except ValueError:
            raise ValueError(f"unknown channel: {value}") from None
    return channels
