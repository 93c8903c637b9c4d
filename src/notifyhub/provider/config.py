"""NotificationConfig -- provider configuration loading

Reads email and SMS settings from environment variables once at process
start. Credentials are SecretStr so they never show up in logs or reprs.
"""

import os
from typing import Literal, get_args

import structlog
from pydantic import BaseModel, Field, SecretStr

from .exceptions import ProviderMisconfiguredError

log = structlog.get_logger()

SmsProviderName = Literal["none", "twilio", "arkesel", "mnotify"]

DEFAULT_EMAIL_FROM = "MADPC <no-reply@example.com>"


class EmailConfig(BaseModel):
    """Transactional email settings

    Environment variables:
        RESEND_API_KEY: Resend API key
        EMAIL_FROM: fixed From address
        EMAIL_ORG_NAME: organisation name shown in the HTML template
        EMAIL_TIMEOUT_S: HTTP timeout (seconds)
    """

    api_key: SecretStr = Field(default=SecretStr(""), description="Resend API key")
    from_address: str = Field(default=DEFAULT_EMAIL_FROM, description="From address")
    org_name: str = Field(default="MADPC", description="Organisation name for templates")
    base_url: str = Field(default="https://api.resend.com", description="Resend API base URL")
    timeout_s: float = Field(default=10.0, gt=0, description="HTTP timeout (seconds)")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key.get_secret_value() and self.from_address.strip())


class SmsConfig(BaseModel):
    """SMS vendor selection + per-vendor credentials

    Only the credentials of the selected vendor are required.
    """

    provider: SmsProviderName = Field(default="none", description="Selected SMS vendor")
    default_country_code: str = Field(default="+233", description="Country code for local numbers")
    timeout_s: float = Field(default=10.0, gt=0, description="HTTP timeout (seconds)")

    twilio_account_sid: str = Field(default="")
    twilio_auth_token: SecretStr = Field(default=SecretStr(""))
    twilio_from_number: str = Field(default="")

    arkesel_api_key: SecretStr = Field(default=SecretStr(""))
    arkesel_sender_id: str = Field(default="")

    mnotify_api_key: SecretStr = Field(default=SecretStr(""))
    mnotify_sender_id: str = Field(default="")


class NotificationConfig(BaseModel):
    """Top-level provider configuration"""

    email: EmailConfig = Field(default_factory=EmailConfig)
    sms: SmsConfig = Field(default_factory=SmsConfig)


def normalize_api_key(raw: str) -> str:
    """Trim whitespace and one pair of surrounding quotes"""
    key = raw.strip()
    if len(key) >= 2 and key[0] == key[-1] and key[0] in ("'", '"'):
        key = key[1:-1]
    return key.strip()


def _float_env(name: str, default: float) -> float | None:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        return float(val)
    except ValueError:
        log.warning("invalid_timeout_config", env_var=name, value=val, fallback=default)
        return None


def load_email_config() -> EmailConfig:
    """Load EmailConfig from environment variables"""
    kwargs: dict = {}

    if val := os.environ.get("RESEND_API_KEY"):
        kwargs["api_key"] = SecretStr(normalize_api_key(val))

    if val := os.environ.get("EMAIL_FROM"):
        kwargs["from_address"] = val.strip()

    if val := os.environ.get("EMAIL_ORG_NAME"):
        kwargs["org_name"] = val.strip()

    if val := os.environ.get("RESEND_BASE_URL"):
        kwargs["base_url"] = val.rstrip("/")

    if (timeout := _float_env("EMAIL_TIMEOUT_S", 10.0)) is not None:
        kwargs["timeout_s"] = timeout

    return EmailConfig(**kwargs)


def load_sms_config() -> SmsConfig:
    """Load SmsConfig from environment variables

    Raises:
        ProviderMisconfiguredError: SMS_PROVIDER names an unknown vendor
    """
    kwargs: dict = {}

    if val := os.environ.get("SMS_PROVIDER"):
        name = val.strip().lower()
        if name not in get_args(SmsProviderName):
            raise ProviderMisconfiguredError("sms", detail=f"unknown SMS_PROVIDER {val!r}")
        kwargs["provider"] = name

    if val := os.environ.get("SMS_DEFAULT_COUNTRY_CODE"):
        kwargs["default_country_code"] = val.strip()

    if (timeout := _float_env("SMS_TIMEOUT_S", 10.0)) is not None:
        kwargs["timeout_s"] = timeout

    if val := os.environ.get("TWILIO_ACCOUNT_SID"):
        kwargs["twilio_account_sid"] = val.strip()
    if val := os.environ.get("TWILIO_AUTH_TOKEN"):
        kwargs["twilio_auth_token"] = SecretStr(normalize_api_key(val))
    if val := os.environ.get("TWILIO_PHONE_NUMBER"):
        kwargs["twilio_from_number"] = val.strip()

    if val := os.environ.get("ARKESEL_API_KEY"):
        kwargs["arkesel_api_key"] = SecretStr(normalize_api_key(val))
    if val := os.environ.get("ARKESEL_SENDER_ID"):
        kwargs["arkesel_sender_id"] = val.strip()

    if val := os.environ.get("MNOTIFY_API_KEY"):
        kwargs["mnotify_api_key"] = SecretStr(normalize_api_key(val))
    if val := os.environ.get("MNOTIFY_SENDER_ID"):
        kwargs["mnotify_sender_id"] = val.strip()

    return SmsConfig(**kwargs)


def load_notification_config() -> NotificationConfig:
    """Load the full provider configuration from the environment"""
    return NotificationConfig(email=load_email_config(), sms=load_sms_config())
