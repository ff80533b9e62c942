"""
Error types for siteprobe runs.

Probe-local failures are plain ``AssertionError`` instances; everything
below is either a classification signal raised from inside a probe
(``FeatureAbsent``, ``TransientFault``) or a run-level problem
(``ConfigurationError``).
"""

from typing import Optional


class SiteProbeError(Exception):
    """Base exception for all siteprobe errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message


class ConfigurationError(SiteProbeError):
    """
    Raised when a run cannot start.

    Examples:
    - Empty or non-http(s) target URL
    - Non-positive timeouts
    - Unknown suite name
    - Malformed siteprobe.toml

    This is the only fatal class: it aborts the run before any probe executes.
    """

    pass


class FeatureAbsent(SiteProbeError):
    """
    Raised by a probe when the optional page feature it targets is missing.

    The harness classifies it as SKIPPED, never FAILED.
    """

    pass


class TransientFault(SiteProbeError):
    """
    Raised for navigation, network and timeout problems.

    The harness classifies it as ERRORED. ``timeout`` marks faults that
    should be reported with the canonical ``"timeout"`` cause.
    """

    def __init__(self, message: str, context: Optional[str] = None, timeout: bool = False):
        self.timeout = timeout
        super().__init__(message, context)


class ResultFinalizedError(SiteProbeError):
    """Raised when a finalized SuiteResult is appended to."""

    pass
