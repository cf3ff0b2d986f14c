"""Rich-based terminal user interface for chargefit."""

from chargefit.ui.console import Verbosity, console, set_verbosity
from chargefit.ui.logging import close_logging, log_dict, setup_logging
from chargefit.ui.messages import (
    action,
    bullet,
    error,
    info,
    show_header,
    show_version,
    success,
    warning,
)
from chargefit.ui.reporter import ConsoleReporter
from chargefit.ui.tables import print_axis_fits, print_summary

__all__ = [
    "ConsoleReporter",
    "Verbosity",
    "action",
    "bullet",
    "close_logging",
    "console",
    "error",
    "info",
    "log_dict",
    "print_axis_fits",
    "print_summary",
    "set_verbosity",
    "setup_logging",
    "show_header",
    "show_version",
    "success",
    "warning",
]
