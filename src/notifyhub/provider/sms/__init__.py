"""SMS channel -- SmsProvider plus the supported vendors"""

from .arkesel import ArkeselSmsVendor
from .base import SmsProvider, SmsVendor
from .mnotify import MnotifySmsVendor, is_affirmative_response
from .simulated import SimulatedSmsVendor
from .twilio import TwilioSmsVendor

__all__ = [
    "SmsProvider",
    "SmsVendor",
    "SimulatedSmsVendor",
    "TwilioSmsVendor",
    "ArkeselSmsVendor",
    "MnotifySmsVendor",
    "is_affirmative_response",
]
