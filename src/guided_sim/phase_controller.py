"""
Phase state machine for the guided sequence.

NAVIGATION GUARANTEES:
    1. Exactly one current phase; it only changes through this controller
    2. Invalid or racing requests are dropped silently (logged at DEBUG)
    3. After a transition, further requests are dropped until the cooldown
       timer fires (debounce against repeated clicks)
    4. go_next is gated; go_back and external sync are not
    5. After teardown no timer is pending and every request is a no-op
"""

import threading
from typing import Callable, Optional

from .events import EventSink, EventType, GameEvent, NullEventSink, emit_safely, epoch_ms
from .gates import GateContext, ProgressGate
from .logger import Logger
from .phases import (
    FIRST_PHASE,
    PHASE_ORDER,
    Phase,
    next_phase,
    parse_phase,
    phase_index,
    previous_phase,
)
from .scheduling import Scheduler, ThreadingScheduler, TimerHandle


class PhaseController:
    """
    Owns the current phase of one session.

    Args:
        gate: Forward-navigation predicates (open gate if None).
        context_provider: Returns the GateContext evaluated on go_next.
        sink: Receives phase_changed events.
        scheduler: Runs the cooldown timer.
        cooldown_s: Debounce window after each transition; 0 disables it.
        initial_phase: Externally supplied starting phase; anything that is
            not an allowed phase falls back to the first phase.
        game_type: Module id placed on emitted events.
        game_title: Module title placed on emitted events.
        clock: Event timestamp source in epoch milliseconds.
        on_phase_changed: Called with (from, to) after every change,
            including external syncs.
    """

    def __init__(
        self,
        gate: Optional[ProgressGate] = None,
        context_provider: Optional[Callable[[], GateContext]] = None,
        sink: Optional[EventSink] = None,
        scheduler: Optional[Scheduler] = None,
        cooldown_s: float = 0.3,
        initial_phase=None,
        game_type: str = "",
        game_title: str = "",
        clock: Optional[Callable[[], float]] = None,
        on_phase_changed: Optional[Callable[[Phase, Phase], None]] = None,
    ):
        self.gate = gate if gate is not None else ProgressGate.open()
        self._context_provider = context_provider or GateContext
        self._sink = sink if sink is not None else NullEventSink()
        self._scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        self.cooldown_s = max(0.0, float(cooldown_s))
        self.game_type = game_type
        self.game_title = game_title
        self._clock = clock or epoch_ms
        self._on_phase_changed = on_phase_changed

        parsed = parse_phase(initial_phase)
        if initial_phase is not None and parsed is None:
            Logger.log(f"Ignoring unknown initial phase {initial_phase!r}", Logger.LogPriority.WARNING)
        self._phase: Phase = parsed or FIRST_PHASE

        self._lock = threading.RLock()
        self._navigating = False
        self._cooldown: Optional[TimerHandle] = None
        self._torn_down = False

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def phase_index(self) -> int:
        return phase_index(self._phase)

    @property
    def progress_fraction(self) -> float:
        return (self.phase_index + 1) / len(PHASE_ORDER)

    @property
    def in_cooldown(self) -> bool:
        return self._cooldown is not None and self._cooldown.pending

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def _blocked(self) -> Optional[str]:
        if self._torn_down:
            return "controller torn down"
        if self._navigating:
            return "transition in flight"
        if self.in_cooldown:
            return "cooldown active"
        return None

    def go_to_phase(self, target) -> bool:
        """
        Move to `target`.

        Returns:
            True if the phase changed; False if the request was dropped.
        """
        with self._lock:
            parsed = parse_phase(target)
            if parsed is None:
                Logger.log(f"Navigation to {target!r} dropped: not a phase")
                return False
            reason = self._blocked()
            if reason is not None:
                Logger.log(f"Navigation to {parsed.value} dropped: {reason}")
                return False
            if parsed == self._phase:
                return False
            self._transition(parsed, emit=True)
            self._start_cooldown()
            return True

    def go_next(self) -> bool:
        """Advance one phase if the gate on the current phase allows it."""
        with self._lock:
            target = next_phase(self._phase)
            if target is None:
                return False
            if not self._gate_open():
                Logger.log(f"Advance from {self._phase.value} dropped: gate closed")
                return False
            return self.go_to_phase(target)

    def go_back(self) -> bool:
        with self._lock:
            target = previous_phase(self._phase)
            if target is None:
                return False
            return self.go_to_phase(target)

    def can_go_next(self) -> bool:
        with self._lock:
            if next_phase(self._phase) is None or self._blocked() is not None:
                return False
            return self._gate_open()

    def can_go_back(self) -> bool:
        with self._lock:
            return previous_phase(self._phase) is not None and self._blocked() is None

    def unmet_requirements(self):
        """Names of the gate predicates blocking go_next from the current phase."""
        return self.gate.explain(self._phase, self._context_provider())

    def sync_external_phase(self, value) -> bool:
        """
        Adopt a phase set by the host (e.g. a resumed session).

        Bypasses gates and the cooldown. No phase_changed event is emitted
        since the host originated the change; the local listener is notified.

        Returns:
            True if the phase changed.
        """
        with self._lock:
            if self._torn_down:
                return False
            parsed = parse_phase(value)
            if parsed is None or parsed == self._phase:
                return False
            Logger.log(f"Resyncing phase {self._phase.value} -> {parsed.value} from host",
                       Logger.LogPriority.INFO)
            self._transition(parsed, emit=False)
            return True

    def teardown(self) -> None:
        """Cancel the pending cooldown; later requests become no-ops."""
        with self._lock:
            self._torn_down = True
            if self._cooldown is not None:
                self._cooldown.cancel()
                self._cooldown = None

    def _gate_open(self) -> bool:
        return self.gate.allows_advance(self._phase, self._context_provider())

    def _transition(self, target: Phase, emit: bool) -> None:
        previous = self._phase
        self._navigating = True
        try:
            self._phase = target
            Logger.log(f"Phase {previous.value} -> {target.value}", Logger.LogPriority.INFO)
            if emit:
                timestamp = self._clock()
                emit_safely(self._sink, GameEvent(
                    event_type=EventType.PHASE_CHANGED,
                    game_type=self.game_type,
                    game_title=self.game_title,
                    details={"from": previous.value, "to": target.value, "timestamp": timestamp},
                    timestamp=timestamp,
                ))
            if self._on_phase_changed is not None:
                try:
                    self._on_phase_changed(previous, target)
                except Exception as ex:
                    Logger.log(f"Phase listener raised: {ex!r}", Logger.LogPriority.ERROR)
        finally:
            self._navigating = False

    def _start_cooldown(self) -> None:
        if self.cooldown_s <= 0:
            return
        self._cooldown = self._scheduler.call_later(self.cooldown_s, self._end_cooldown)

    def _end_cooldown(self) -> None:
        with self._lock:
            self._cooldown = None
