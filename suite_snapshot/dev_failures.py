"""Signalling channel for dev-only failures raised by code under test.

Libraries call :func:`report_dev_failure` where a development-mode check
fails. Under a snapshot run the failure is recorded against the running test
instead of failing it; anywhere else it raises :class:`DevFailureError`.
"""

import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)


class DevFailureError(AssertionError):
    """Raised for a dev-only failure while suppression is off."""


@dataclass
class DevFailureEnvironment:
    """Process-wide state shared between the interceptor and code under test."""

    suppress: bool = False
    flagged: bool = False

    def start_test(self) -> None:
        """Reset the flag and suppress dev failures for the next test."""
        self.flagged = False
        self.suppress = True

    def finish_test(self) -> None:
        self.suppress = False

    def report(self, message: str) -> None:
        """Record a dev-only failure, or raise it when not suppressed."""
        if not self.suppress:
            raise DevFailureError(message)
        log.debug("Suppressed dev-only failure: %s", message)
        self.flagged = True


environment = DevFailureEnvironment()


def report_dev_failure(message: str) -> None:
    """Report a dev-only failure on the shared environment."""
    environment.report(message)
