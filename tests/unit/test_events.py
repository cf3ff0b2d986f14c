"""Test the event dispatcher and reporter adapters."""

from chargefit.core.shared.events import (
    Event,
    EventDispatcher,
    EventType,
    ReporterEventHandler,
)
from chargefit.core.shared.reporter import NullReporter, Reporter
from chargefit.ui.reporter import ConsoleReporter


class MockReporter:
    """Test double for capturing reporter calls."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def action(self, message: str) -> None:
        self.messages.append(("action", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))


class TestEventDispatcher:
    def test_typed_subscription(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.subscribe(EventType.FIT_ACCEPTED, received.append)

        dispatcher.emit(EventType.FIT_STARTED, "start")
        dispatcher.emit(EventType.FIT_ACCEPTED, "done", config="dense_qr_huber")

        assert len(received) == 1
        assert received[0].message == "done"
        assert received[0].data == {"config": "dense_qr_huber"}

    def test_catch_all_subscription(self):
        dispatcher = EventDispatcher()
        received = []
        dispatcher.subscribe(None, received.append)

        dispatcher.emit(EventType.FIT_STARTED, "start")
        dispatcher.emit(EventType.FIT_EXHAUSTED, "gave up")

        assert [event.event_type for event in received] == [
            EventType.FIT_STARTED,
            EventType.FIT_EXHAUSTED,
        ]

    def test_handler_objects(self):
        class Collector:
            def __init__(self):
                self.events = []

            def handle(self, event):
                self.events.append(event)

        dispatcher = EventDispatcher()
        collector = Collector()
        dispatcher.subscribe(EventType.DATASET_STARTED, collector)
        dispatcher.dispatch(Event(EventType.DATASET_STARTED, "dataset 0"))
        assert collector.events[0].message == "dataset 0"


class TestReporterEventHandler:
    def test_severity_mapping(self):
        reporter = MockReporter()
        handler = ReporterEventHandler(reporter)
        for event_type in (
            EventType.FIT_STARTED,
            EventType.DATASET_STARTED,
            EventType.CONFIG_FAILED,
            EventType.FIT_ACCEPTED,
            EventType.FIT_EXHAUSTED,
        ):
            handler.handle(Event(event_type, event_type.name))

        assert reporter.messages == [
            ("action", "FIT_STARTED"),
            ("info", "DATASET_STARTED"),
            ("warning", "CONFIG_FAILED"),
            ("success", "FIT_ACCEPTED"),
            ("error", "FIT_EXHAUSTED"),
        ]


class TestReporters:
    def test_protocol_compliance(self):
        for reporter in (NullReporter(), ConsoleReporter(), MockReporter()):
            assert isinstance(reporter, Reporter)

    def test_console_reporter_escapes_markup(self, capsys):
        ConsoleReporter().info("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in capsys.readouterr().out
