"""Console-based reporter implementation using Rich.

Adapts the :class:`~chargefit.core.shared.reporter.Reporter` protocol to the
styled message helpers of :mod:`chargefit.ui.messages`.
"""

from __future__ import annotations

from chargefit.core.shared.reporter import Reporter
from chargefit.ui.messages import action, error, info, success, warning


class ConsoleReporter:
    """Reporter implementation using Rich console output.

    Example:
        >>> from chargefit.ui.reporter import ConsoleReporter
        >>> reporter = ConsoleReporter()
        >>> reporter.action("Fitting central row...")
        >>> reporter.success("X (central row): center 0.1234 +- 0.01")
    """

    def action(self, message: str) -> None:
        action(message)

    def info(self, message: str) -> None:
        info(message, indent=1)

    def warning(self, message: str) -> None:
        warning(message, indent=1)

    def error(self, message: str) -> None:
        error(message, indent=1)

    def success(self, message: str) -> None:
        success(message, indent=1)


# Verify protocol compliance at import time
if not isinstance(ConsoleReporter(), Reporter):
    raise TypeError("ConsoleReporter must satisfy Reporter protocol")
