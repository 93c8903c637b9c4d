"""Provider factory -- explicit channel/vendor selection

Vendors are chosen from configuration once, at startup. The mapping below is
the full list of supported SMS vendors; there is no dynamic import.
"""

from collections.abc import Callable

import httpx
import structlog

from notifyhub.core.models import Channel

from .base import ChannelProvider
from .config import EmailConfig, NotificationConfig, SmsConfig
from .email import ResendEmailProvider
from .sms import (
    ArkeselSmsVendor,
    MnotifySmsVendor,
    SimulatedSmsVendor,
    SmsProvider,
    SmsVendor,
    TwilioSmsVendor,
)

log = structlog.get_logger()


def _simulated(config: SmsConfig, http_client: httpx.AsyncClient | None) -> SmsVendor:
    return SimulatedSmsVendor(default_country_code=config.default_country_code)


def _twilio(config: SmsConfig, http_client: httpx.AsyncClient | None) -> SmsVendor:
    return TwilioSmsVendor(
        account_sid=config.twilio_account_sid,
        auth_token=config.twilio_auth_token.get_secret_value(),
        from_number=config.twilio_from_number,
        default_country_code=config.default_country_code,
        timeout_s=config.timeout_s,
        http_client=http_client,
    )


def _arkesel(config: SmsConfig, http_client: httpx.AsyncClient | None) -> SmsVendor:
    return ArkeselSmsVendor(
        api_key=config.arkesel_api_key.get_secret_value(),
        sender_id=config.arkesel_sender_id,
        default_country_code=config.default_country_code,
        timeout_s=config.timeout_s,
        http_client=http_client,
    )


def _mnotify(config: SmsConfig, http_client: httpx.AsyncClient | None) -> SmsVendor:
    return MnotifySmsVendor(
        api_key=config.mnotify_api_key.get_secret_value(),
        sender_id=config.mnotify_sender_id,
        default_country_code=config.default_country_code,
        timeout_s=config.timeout_s,
        http_client=http_client,
    )


SMS_VENDORS: dict[str, Callable[[SmsConfig, httpx.AsyncClient | None], SmsVendor]] = {
    "none": _simulated,
    "twilio": _twilio,
    "arkesel": _arkesel,
    "mnotify": _mnotify,
}


def build_sms_provider(
    config: SmsConfig,
    http_client: httpx.AsyncClient | None = None,
) -> SmsProvider:
    """Build the SMS provider for the configured vendor

    Raises:
        ProviderMisconfiguredError: selected vendor lacks credentials
    """
    vendor = SMS_VENDORS[config.provider](config, http_client)
    if vendor.simulated:
        log.warning("sms_provider_simulated", message="SMS_PROVIDER=none, SMS sends are simulated")
    else:
        log.info("sms_provider_initialized", vendor=vendor.name)
    return SmsProvider(vendor)


def build_email_provider(
    config: EmailConfig,
    http_client: httpx.AsyncClient | None = None,
) -> ResendEmailProvider | None:
    """Build the email provider, or None if email is not configured

    A missing email configuration only becomes an error once a dispatch
    asks for the email channel.
    """
    if not config.is_configured:
        log.warning("email_provider_unconfigured", missing="RESEND_API_KEY/EMAIL_FROM")
        return None
    log.info("email_provider_initialized", provider="resend")
    return ResendEmailProvider(config, http_client=http_client)


def build_providers(
    config: NotificationConfig,
    http_client: httpx.AsyncClient | None = None,
) -> dict[Channel, ChannelProvider]:
    """All channel providers for this deployment, keyed by channel"""
    providers: dict[Channel, ChannelProvider] = {
        Channel.SMS: build_sms_provider(config.sms, http_client),
    }
    email = build_email_provider(config.email, http_client)
    if email is not None:
        providers[Channel.EMAIL] = email
    return providers
