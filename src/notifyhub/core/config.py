"""Config constants -- overridable through environment variables

Holds the database path and the switches that decide whether the
delivery ledger is wired in.
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """Base data directory"""
    return Path(os.environ.get("NOTIFYHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """SQLite database path (directory + ledger)"""
    return os.environ.get(
        "NOTIFYHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "notifyhub.db"),
    )


def is_ledger_enabled() -> bool:
    """Whether dispatches are written to the delivery ledger"""
    value = os.environ.get("NOTIFYHUB_LEDGER_ENABLED", "true")
    return value.strip().lower() not in ("0", "false", "no", "off")


# Longest error text kept on a ledger row
LEDGER_ERROR_MAX_LENGTH: int = 1000


def get_max_concurrency() -> int | None:
    """Cap on in-flight sends per dispatch; None when unset or invalid"""
    value = os.environ.get("NOTIFYHUB_MAX_CONCURRENCY", "").strip()
    if not value:
        return None
    try:
        limit = int(value)
    except ValueError:
        return None
    return limit if limit > 0 else None
