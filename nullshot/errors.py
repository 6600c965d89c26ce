"""Error taxonomy shared by providers, the orchestrator and the boundary."""
from __future__ import annotations


class NullshotError(RuntimeError):
    """Base class for every failure raised by the audit pipeline."""
    pass


class InvalidSubmission(NullshotError):
    """Input was empty or otherwise unusable; no provider was called."""
    pass


class NoResponseContent(NullshotError):
    """The remote model answered with no text."""
    pass


class UnparsableResponse(NullshotError):
    """No JSON could be recovered from the model output."""
    pass


class SchemaMismatch(NullshotError):
    """Model output parsed as JSON but does not match the expected shape."""
    pass


class RemoteProviderFailure(NullshotError):
    """Transport, auth or rate-limit error from the model backend.

    The original exception is kept as ``__cause__``.
    """
    pass


class ProviderTimeout(RemoteProviderFailure):
    """The remote call exceeded the configured request timeout."""
    pass


# Failures that originate on the remote side and may be replaced by
# heuristic output at the boundary.
REMOTE_FAILURES = (
    NoResponseContent,
    UnparsableResponse,
    SchemaMismatch,
    RemoteProviderFailure,
)
