"""structlog configuration

dev mode: pretty console output
json mode: structured JSON output
Logfire APM: controlled by LOGFIRE_SEND_TO_LOGFIRE, plain local logging when false.
Phone numbers and email addresses are masked and credentials dropped before
any renderer sees an event.
"""

import logging
import os

import structlog
from fastapi import FastAPI


# event keys whose values are personnel contact details or credentials
_MASKED_KEYS = frozenset({"phone", "email", "to"})
_DROPPED_KEYS = frozenset({"api_key", "auth_token", "authorization", "key"})


def mask_contact(value: str) -> str:
    """Keep a short prefix and suffix, hide the middle"""
    if len(value) <= 7:
        return "****"
    return f"{value[:4]}****{value[-3:]}"


def redact_sensitive(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """structlog processor: mask contact details, drop credentials"""
    for key in list(event_dict):
        if key in _DROPPED_KEYS:
            event_dict[key] = "[redacted]"
        elif key in _MASKED_KEYS and isinstance(event_dict[key], str):
            event_dict[key] = mask_contact(event_dict[key])
    return event_dict


def setup_logging() -> None:
    """Configure structlog

    NOTIFYHUB_LOG_FORMAT selects the renderer:
    - "json": structured JSON (production)
    - "dev" (default): console output
    """
    log_format = os.environ.get("NOTIFYHUB_LOG_FORMAT", "dev")
    log_level = os.environ.get("NOTIFYHUB_LOG_LEVEL", "INFO")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # httpx logs every request URL at INFO, which would leak gateway query keys
    logging.getLogger("httpx").setLevel(logging.WARNING)


def setup_logfire(app: FastAPI) -> None:
    """Optional Logfire initialisation

    LOGFIRE_SEND_TO_LOGFIRE:
    - "true": enable Logfire APM (needs LOGFIRE_TOKEN)
    - "false" (default): local logging only
    """
    send_to_logfire = os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower()
    if send_to_logfire == "true":
        try:
            import logfire

            logfire.configure()
            logfire.instrument_fastapi(app)
            logfire.instrument_httpx()
        except Exception:
            # Logfire failing must not stop the service
            structlog.get_logger().warning(
                "logfire_init_failed",
                message="Logfire initialisation failed, using local logging only",
            )
