"""
One-way notifications to the host (analytics, coaching).

Events are fire-and-forget: no response is expected and a failing sink must
never break the session, so `emit_safely` swallows and logs sink errors.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .logger import Logger


class EventType(str, Enum):
    PHASE_CHANGED = "phase_changed"
    PREDICTION_MADE = "prediction_made"
    ANSWER_SUBMITTED = "answer_submitted"
    CORRECT_ANSWER = "correct_answer"
    INCORRECT_ANSWER = "incorrect_answer"
    MASTERY_ACHIEVED = "mastery_achieved"
    VALUE_CHANGED = "value_changed"
    SELECTION_MADE = "selection_made"
    TRIAL_COMPLETED = "trial_completed"
    TEST_SUBMITTED = "test_submitted"
    GAME_STARTED = "game_started"


@dataclass(frozen=True)
class GameEvent:
    """
    A single host notification.

    Attributes:
        event_type: What happened.
        game_type: Module identifier (e.g. "kirchhoffs_laws").
        game_title: Human-readable module title.
        details: Event payload.
        timestamp: Milliseconds since the epoch.
    """
    event_type: EventType
    game_type: str
    game_title: str
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = 0.0


def epoch_ms() -> float:
    """Current time in milliseconds since the epoch."""
    return time.time() * 1000.0


class EventSink:
    """Interface for host event collaborators."""

    def emit(self, event: GameEvent) -> None:
        raise NotImplementedError()


class NullEventSink(EventSink):
    """Discards every event."""

    def emit(self, event: GameEvent) -> None:
        pass


class CallbackEventSink(EventSink):
    """Forwards events to a plain callable."""

    def __init__(self, callback: Callable[[GameEvent], None]):
        self._callback = callback

    def emit(self, event: GameEvent) -> None:
        self._callback(event)


class RecordingEventSink(EventSink):
    """Keeps every event in order."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def emit(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType) -> List[GameEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def clear(self) -> None:
        self.events.clear()


def emit_safely(sink: Optional[EventSink], event: GameEvent) -> None:
    """Deliver `event` to `sink`; host errors are logged and dropped."""
    if sink is None:
        return
    try:
        sink.emit(event)
    except Exception as ex:
        Logger.log(
            f"Event sink raised on {event.event_type.value}: {ex!r}",
            Logger.LogPriority.ERROR,
        )
