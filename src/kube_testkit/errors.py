"""Error types raised by the bootstrap and verification layers.

Cluster API failures other than "not found" and "already exists" are not
wrapped: callers see the original ``kubernetes.client.rest.ApiException``.
"""

from __future__ import annotations


class TestkitError(Exception):
    """Base class for errors raised by kube_testkit."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class VerificationTimeout(TestkitError):
    """A polled predicate did not hold within the full attempt/deadline budget."""

    def __init__(
        self,
        description: str,
        timeout: float,
        attempts: int,
        elapsed: float | None = None,
    ) -> None:
        super().__init__(f"{description} (timeout {timeout:g}s)")
        self.description = description
        self.timeout = timeout
        self.attempts = attempts
        self.elapsed = elapsed if elapsed is not None else timeout


class PollCancelled(TestkitError):
    """The caller's cancel token was set while waiting between attempts."""


class ManifestError(TestkitError):
    """A resource manifest could not be parsed into a ResourceRef."""


class UnsupportedKindError(TestkitError):
    """No typed API route exists for the given resource kind."""
