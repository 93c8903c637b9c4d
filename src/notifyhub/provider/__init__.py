"""notifyhub Provider -- channel delivery abstraction

Public interface of the provider package.
"""

# interface
from .base import ChannelProvider

# configuration
from .config import (
    EmailConfig,
    NotificationConfig,
    SmsConfig,
    load_email_config,
    load_notification_config,
    load_sms_config,
)

# channels
from .email import ResendEmailProvider

# exceptions
from .exceptions import DeliveryFailedError, ProviderError, ProviderMisconfiguredError
from .factory import build_email_provider, build_providers, build_sms_provider
from .sms import (
    ArkeselSmsVendor,
    MnotifySmsVendor,
    SimulatedSmsVendor,
    SmsProvider,
    SmsVendor,
    TwilioSmsVendor,
)

__all__ = [
    "ChannelProvider",
    "ResendEmailProvider",
    "SmsProvider",
    "SmsVendor",
    "SimulatedSmsVendor",
    "TwilioSmsVendor",
    "ArkeselSmsVendor",
    "MnotifySmsVendor",
    "EmailConfig",
    "SmsConfig",
    "NotificationConfig",
    "load_email_config",
    "load_sms_config",
    "load_notification_config",
    "build_email_provider",
    "build_sms_provider",
    "build_providers",
    "ProviderError",
    "ProviderMisconfiguredError",
    "DeliveryFailedError",
]
