"""
Tests for host event sinks.
"""

from guided_sim.events import (
    CallbackEventSink,
    EventSink,
    EventType,
    GameEvent,
    NullEventSink,
    RecordingEventSink,
    emit_safely,
    epoch_ms,
)

import pytest


def _event(event_type=EventType.PHASE_CHANGED):
    return GameEvent(event_type, "module", "Module", {"from": "hook", "to": "predict"}, 1.0)


class TestSinks:
    """Tests for the bundled sinks."""

    def test_interface_not_implemented(self):
        with pytest.raises(NotImplementedError):
            EventSink().emit(_event())

    def test_null_sink(self):
        NullEventSink().emit(_event())

    def test_callback_sink(self):
        seen = []
        CallbackEventSink(seen.append).emit(_event())
        assert seen[0].details["to"] == "predict"

    def test_recording_sink_filters(self):
        sink = RecordingEventSink()
        sink.emit(_event())
        sink.emit(_event(EventType.PREDICTION_MADE))
        assert len(sink.of_type(EventType.PREDICTION_MADE)) == 1
        sink.clear()
        assert sink.events == []

    def test_event_type_is_string(self):
        assert EventType.MASTERY_ACHIEVED == "mastery_achieved"

    def test_epoch_ms_positive(self):
        assert epoch_ms() > 0


class TestEmitSafely:
    """Sink errors never propagate."""

    def test_error_swallowed_and_logged(self, memory_log):
        def explode(event):
            raise RuntimeError("boom")

        emit_safely(CallbackEventSink(explode), _event())
        errors = memory_log.messages("ERROR")
        assert len(errors) == 1
        assert "phase_changed" in errors[0]

    def test_none_sink(self):
        emit_safely(None, _event())
