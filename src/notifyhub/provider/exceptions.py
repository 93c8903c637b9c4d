"""Provider exception hierarchy"""


class ProviderError(Exception):
    """Base exception for the provider package"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: error description
            recoverable: whether a later attempt could succeed
        """
        super().__init__(message)
        self.recoverable = recoverable


class ProviderMisconfiguredError(ProviderError):
    """A selected channel vendor lacks required configuration

    Fatal for the deployment, never a per-recipient outcome.
    """

    def __init__(self, provider: str, missing: list[str] | None = None, detail: str = "") -> None:
        """
        Args:
            provider: provider or vendor name
            missing: names of the missing settings
            detail: free-form explanation when nothing specific is missing
        """
        self.provider = provider
        self.missing = list(missing or [])
        if self.missing:
            message = f"{provider} is not configured: missing {', '.join(self.missing)}"
        else:
            message = f"{provider} is not configured: {detail}"
        super().__init__(message, recoverable=False)


class DeliveryFailedError(ProviderError):
    """A single provider call errored or gave a non-affirmative response

    Carries the provider's own text untouched in ``provider_error``.
    """

    def __init__(self, provider: str, provider_error: str, status_code: int | None = None) -> None:
        super().__init__(provider_error, recoverable=True)
        self.provider = provider
        self.provider_error = provider_error
        self.status_code = status_code
