# src/veritas/exceptions.py
"""Exception hierarchy for the validation pipeline.

Only configuration problems escape the orchestrator. Provider failures and
data-quality problems are turned into results and findings.
"""


class VeritasError(Exception):
    """Base class for all pipeline errors."""


class CollectorConfigurationError(VeritasError):
    """Raised when a stage is requested with no providers or a bad symbol."""


class ProviderError(VeritasError):
    """Raised by a provider when its upstream call fails."""

    def __init__(self, provider_id: str, message: str):
        super().__init__(f"{provider_id}: {message}")
        self.provider_id = provider_id


class ProviderRateLimitError(ProviderError):
    """Raised by a provider when the upstream service throttles it."""


class MalformedResultError(VeritasError):
    """Raised when a validator receives a payload of the wrong shape."""
