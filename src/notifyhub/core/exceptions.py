"""Core exception hierarchy

Call-aborting errors of the dispatch path plus the ledger write error,
which is always logged and swallowed by callers.
"""


class NotificationError(Exception):
    """Base exception for notifyhub"""


class InvalidRequestError(NotificationError):
    """Caller input failed basic shape / non-empty validation

    ``field`` tells diagnostics which part was missing:
    "recipients", "content" or "channels".
    """

    def __init__(self, message: str, field: str) -> None:
        super().__init__(message)
        self.field = field


class NoValidRecipientsError(NotificationError):
    """No requested recipient has an address for any requested channel"""

    def __init__(self, message: str = "No valid recipients found") -> None:
        super().__init__(message)


class LedgerWriteError(NotificationError):
    """Persisting an audit record failed"""

    def __init__(self, operation: str, original_error: Exception) -> None:
        super().__init__(f"Ledger write failed during {operation}: {original_error}")
        self.operation = operation
        self.original_error = original_error
