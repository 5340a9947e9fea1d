"""Exceptions raised across the listing workflow.

Every error carries a human-readable ``message`` and, where the remote side
returned one, the raw response text in ``details``.
"""
from flippit.domain.enums.failure_kind import FailureKind


class FlippitError(Exception):
    kind: FailureKind = FailureKind.UPSTREAM_REJECTION

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(FlippitError):
    """Malformed or out-of-range listing input."""

    kind = FailureKind.VALIDATION


class AuthError(FlippitError):
    """Missing credentials or a failed OAuth token exchange."""

    kind = FailureKind.AUTH


class NetworkError(FlippitError):
    """Transport failure or non-2xx status from a remote API."""

    kind = FailureKind.NETWORK


class UpstreamRejection(FlippitError):
    """The remote API answered 2xx but its payload reports a failure."""

    kind = FailureKind.UPSTREAM_REJECTION
