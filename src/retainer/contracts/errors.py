"""Exception hierarchy for expiration and store operations.

Unparseable names and dangling parent references are not exceptions: they
are reported as Unrecognized results and ChainWarning values respectively,
because neither may abort a run.
"""


class RetainerError(Exception):
    """Base class for all errors raised by retainer."""


class ConfigurationError(RetainerError):
    """Raised when settings are missing or contradictory."""


# =============================================================================
# Expiration errors (fatal, raised before any listing is parsed)
# =============================================================================


class ExpiryError(RetainerError):
    """Base class for fatal expiration request errors."""


class InvalidThresholdError(ExpiryError, ValueError):
    """Raised when max_age_days is negative."""

    def __init__(self, max_age_days: int) -> None:
        super().__init__(f"max_age_days must be zero or positive, got {max_age_days}")
        self.max_age_days = max_age_days


class ScopeSelectionError(ExpiryError, ValueError):
    """Raised when the profile scope of an expiration request is unusable."""


class NoScopeSelectedError(ScopeSelectionError):
    """Raised when neither a profile nor all-profiles mode was requested."""

    def __init__(self) -> None:
        super().__init__("No scope selected: name a profile or request all profiles")


class AmbiguousScopeError(ScopeSelectionError):
    """Raised when both a profile and all-profiles mode were requested."""

    def __init__(self, profile: str) -> None:
        super().__init__(f"Ambiguous scope: profile {profile!r} given together with all-profiles mode")
        self.profile = profile


# =============================================================================
# Transport errors (raised by store collaborators, never by the core)
# =============================================================================


class TransportError(RetainerError):
    """Base class for remote store failures."""


class StoreConnectionError(TransportError):
    """Raised when the store cannot be reached or authentication fails."""


class StoreOperationError(TransportError):
    """Raised when listing, truncating or deleting a file fails.

    Attributes:
        name: File the operation targeted, or None for listing failures.
    """

    def __init__(self, message: str, *, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name
