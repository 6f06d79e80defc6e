import logging

from rhyme_scheme.utils.logging_config import resolve_level
from rhyme_scheme.utils.observability import create_counter, get_logger
from rhyme_scheme.utils.telemetry import PhaseTelemetry, TelemetryLogger


def test_phase_telemetry_emits_logging_events(caplog):
    telemetry = PhaseTelemetry()
    telemetry.add_listener(TelemetryLogger(level=logging.INFO))

    caplog.set_level(logging.INFO, logger="rhyme_scheme.utils.telemetry")

    telemetry.start_trace("test-trace")
    with telemetry.phase("matrix"):
        pass
    telemetry.increment("candidates", 3)
    telemetry.annotate("lines", 2)

    messages = [record.getMessage() for record in caplog.records]
    assert any("Telemetry trace_started: test-trace" in message for message in messages)
    assert any("Telemetry timing: matrix" in message for message in messages)
    assert any("Telemetry counter: candidates" in message for message in messages)
    assert any("Telemetry metadata: lines" in message for message in messages)


def test_start_trace_resets_previous_measurements():
    ticks = iter([0.0, 0.5, 1.0, 1.25])
    telemetry = PhaseTelemetry(time_fn=lambda: next(ticks))

    telemetry.start_trace("first")
    with telemetry.phase("collect"):
        pass
    assert telemetry.snapshot()["timings"] == {"collect": 0.5}

    telemetry.start_trace("second")
    assert telemetry.snapshot()["timings"] == {}
    with telemetry.phase("collect"):
        pass
    snapshot = telemetry.snapshot()
    assert snapshot["timings"] == {"collect": 0.25}
    assert snapshot["trace_id"] == 2


def test_removed_listener_receives_nothing():
    events = []
    telemetry = PhaseTelemetry()
    listener = lambda event_type, payload: events.append(event_type)  # noqa: E731

    telemetry.add_listener(listener)
    telemetry.increment("x")
    telemetry.remove_listener(listener)
    telemetry.increment("x")

    assert events == ["counter"]
    assert telemetry.snapshot()["counters"] == {"x": 2.0}


def test_structured_logger_renders_bound_context(caplog):
    caplog.set_level(logging.INFO, logger="rhyme_scheme.tests")
    logger = get_logger("rhyme_scheme.tests").bind(component="demo")

    logger.info("hello", context={"count": 2})

    assert caplog.records[-1].getMessage() == 'hello | {"component": "demo", "count": 2}'


def test_counter_can_be_created_twice():
    first = create_counter("rhyme_scheme_test_events_total", "Test events.")
    second = create_counter("rhyme_scheme_test_events_total", "Test events.")

    assert first is second
    first.inc()


def test_resolve_level_accepts_names_and_numbers():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("10") == 10
    assert resolve_level(None) == logging.INFO
    assert resolve_level("nonsense") == logging.INFO
