"""Shared building blocks: exceptions, typing aliases, events and reporters."""

from chargefit.core.shared.events import (
    Event,
    EventDispatcher,
    EventHandler,
    EventType,
    ReporterEventHandler,
)
from chargefit.core.shared.exceptions import (
    ChargeFitError,
    ConfigError,
    DataIOError,
    NumericsError,
    OptimizationError,
)
from chargefit.core.shared.reporter import (
    NullReporter,
    Reporter,
)

__all__ = [
    "ChargeFitError",
    "ConfigError",
    "DataIOError",
    "Event",
    "EventDispatcher",
    "EventHandler",
    "EventType",
    "NullReporter",
    "NumericsError",
    "OptimizationError",
    "Reporter",
    "ReporterEventHandler",
]
