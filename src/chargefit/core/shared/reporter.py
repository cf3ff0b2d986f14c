"""Progress and status reporting abstraction.

Core code reports progress through the :class:`Reporter` protocol so it
never depends on a concrete UI. ``NullReporter`` keeps quiet calls
silent; the Rich based ``ConsoleReporter`` in :mod:`chargefit.ui.reporter`
serves verbose ones.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Reporter(Protocol):
    """Protocol for progress and status reporting."""

    def action(self, message: str) -> None:
        """Report an action being performed (e.g. 'Fitting central row...')."""
        ...

    def info(self, message: str) -> None:
        """Report an informational message."""
        ...

    def warning(self, message: str) -> None:
        """Report a non-fatal issue (rejected configuration, skipped dataset)."""
        ...

    def error(self, message: str) -> None:
        """Report a failure that affects results but does not stop execution."""
        ...

    def success(self, message: str) -> None:
        """Report successful completion of an operation."""
        ...


class NullReporter:
    """Silent reporter that discards all messages."""

    def action(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass
