"""Exception types raised by the chaos engine."""


class ChaosError(Exception):
    """Base class for all chaos engine errors."""


class ConfigError(ChaosError, ValueError):
    """Raised when an engine configuration fails validation."""


class ChaosFault(ChaosError):
    """Raised when a request could not be evaluated; the host should handle it like any error."""

    def __init__(self, message: str, path: str | None = None, method: str | None = None):
        self.path = path
        self.method = method
        super().__init__(message)


class HookFault(ChaosFault):
    """A custom chaos hook raised while processing a request."""


class ProcessingFault(ChaosFault):
    """Eligibility, delay, selection or response building failed unexpectedly."""
