"""Lightweight event dispatcher for fit checkpoints.

The fitting engine emits an event at each named checkpoint of its search
(dataset selected, estimate produced, stage failed, fit accepted, ...).
Control flow never depends on who listens; the verbose flag of the public
entry points merely subscribes a handler that turns events into reporter
messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from chargefit.core.shared.reporter import Reporter


class EventType(Enum):
    """Checkpoints emitted by the fitting engine and the drivers."""

    FIT_STARTED = auto()
    INPUT_REJECTED = auto()
    OUTLIERS_FILTERED = auto()
    DATASET_STARTED = auto()
    ESTIMATE_READY = auto()
    ESTIMATE_FAILED = auto()
    STAGE_ONE_FAILED = auto()
    CONFIG_FAILED = auto()
    FIT_ACCEPTED = auto()
    FIT_EXHAUSTED = auto()
    AXIS_COMPLETED = auto()


@dataclass(slots=True)
class Event:
    """Event carrying a type, a human-readable message and metadata."""

    event_type: EventType
    message: str
    data: dict[str, Any] = field(default_factory=dict)


class EventHandler(Protocol):
    """Protocol implemented by event handlers."""

    def handle(self, event: Event) -> None:  # pragma: no cover - thin interface
        """Process an incoming event."""


class EventDispatcher:
    """Simple pub-sub dispatcher for engine checkpoints."""

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[EventHandler]] = {}
        self._catch_all: list[EventHandler] = []

    def subscribe(
        self,
        event_type: EventType | None,
        handler: EventHandler | Callable[[Event], None],
    ) -> None:
        """Register a handler for one event type, or for all of them when ``None``."""
        if callable(handler) and not hasattr(handler, "handle"):
            handler = _CallableHandler(handler)

        if event_type is None:
            self._catch_all.append(handler)
            return

        self._handlers.setdefault(event_type, []).append(handler)

    def dispatch(self, event: Event) -> None:
        """Send an event to all subscribed handlers."""
        for handler in self._handlers.get(event.event_type, []):
            handler.handle(event)
        for handler in self._catch_all:
            handler.handle(event)

    def emit(self, event_type: EventType, message: str, **data: Any) -> None:
        """Build and dispatch an event in one call."""
        if not self._handlers and not self._catch_all:
            return
        self.dispatch(Event(event_type, message, dict(data)))


class ReporterEventHandler:
    """Forward engine events to a :class:`Reporter` at a matching severity."""

    _WARNINGS = frozenset(
        {
            EventType.INPUT_REJECTED,
            EventType.ESTIMATE_FAILED,
            EventType.STAGE_ONE_FAILED,
            EventType.CONFIG_FAILED,
        }
    )

    def __init__(self, reporter: Reporter) -> None:
        self._reporter = reporter

    def handle(self, event: Event) -> None:
        if event.event_type in self._WARNINGS:
            self._reporter.warning(event.message)
        elif event.event_type is EventType.FIT_EXHAUSTED:
            self._reporter.error(event.message)
        elif event.event_type in {EventType.FIT_ACCEPTED, EventType.AXIS_COMPLETED}:
            self._reporter.success(event.message)
        elif event.event_type is EventType.FIT_STARTED:
            self._reporter.action(event.message)
        else:
            self._reporter.info(event.message)


class _CallableHandler:
    """Adapter that allows bare callables to act as event handlers."""

    def __init__(self, func: Callable[[Event], None]) -> None:
        self._func = func

    def handle(self, event: Event) -> None:  # pragma: no cover - trivial adapter
        self._func(event)
