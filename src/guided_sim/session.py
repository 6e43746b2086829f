"""
Guided session - composition root for one learning module.

Provides:
    - Parameter edits with reactive metric/layout recomputation
    - Prediction, trial and transfer-item bookkeeping for gates
    - Knowledge test answering and scoring
    - Phase navigation and host resume
    - Read-only snapshots for rendering

RENDERING GUARANTEES:
    1. The renderer never mutates session state directly
    2. snapshot() always reflects the latest parameters
    3. Metrics and layout are replaced atomically on every change
    4. After teardown no timer fires
"""

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from .assessment import AssessmentEngine
from .config import ModuleConfig, load_config
from .content import ModuleContent, load_content
from .events import EventSink, EventType, GameEvent, NullEventSink, emit_safely, epoch_ms
from .gates import GateContext, ProgressGate
from .layout import LayoutGrid, generate_layout
from .logger import Logger
from .models.parameters import ParameterSet
from .models.registry import get_model
from .phase_controller import PhaseController
from .phases import PHASE_LABELS, Phase
from .presets import get_preset_config
from .scheduling import AnimationTicker, Scheduler, ThreadingScheduler


def correct_counter(counter: str) -> str:
    return f"{counter}_correct"


@dataclass(frozen=True)
class SessionSnapshot:
    """Session state for display (read-only snapshot)."""
    module_id: str
    title: str
    phase: Phase
    phase_label: str
    phase_index: int
    progress_fraction: float
    parameters: Dict[str, Any]
    metrics: Any
    layout: Optional[LayoutGrid]
    can_go_next: bool
    can_go_back: bool
    unmet_requirements: Tuple[str, ...]
    prediction: Optional[str]
    twist_prediction: Optional[str]
    counters: Dict[str, int]
    acknowledged_items: FrozenSet[int]
    answered_count: int
    test_submitted: bool
    score: Optional[int]
    test_passed: bool
    animation_frame: int


class GuidedSession:
    """
    One user's pass through a learning module.

    Args:
        config: Module configuration (see presets for the built-in ones).
        content: Question bank and other copy; validated against the
            configured question count. None gives an empty test.
        sink: Host event collaborator.
        scheduler: Timer source for the cooldown and animation tick.
        initial_phase: Externally supplied phase to resume at.
        clock: Event timestamp source in epoch milliseconds.
        on_state_changed: Called after every state change (for UI refresh).
    """

    def __init__(
        self,
        config: ModuleConfig,
        content: Optional[ModuleContent] = None,
        sink: Optional[EventSink] = None,
        scheduler: Optional[Scheduler] = None,
        initial_phase=None,
        clock: Optional[Callable[[], float]] = None,
        on_state_changed: Optional[Callable[[], None]] = None,
    ):
        is_valid, error = config.validate()
        if not is_valid:
            raise ValueError(f"Invalid configuration: {error}")

        self.config = config
        self.content = content or ModuleContent(questions=())
        if content is not None:
            content.validate(config.assessment.question_count)

        self._sink = sink if sink is not None else NullEventSink()
        self._scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        self._on_state_changed = on_state_changed

        # Domain model and its inputs
        self.model = get_model(config.model)
        self.params = ParameterSet(self.model.parameter_specs(), config.parameters)
        self._metrics = None
        self._layout: Optional[LayoutGrid] = None
        self._recompute()

        # Interaction state read by gates
        self._prediction: Optional[str] = None
        self._twist_prediction: Optional[str] = None
        self._counters: Dict[str, int] = {}
        self._acknowledged: set = set()

        self.assessment = AssessmentEngine(self.content.questions, config.assessment.pass_threshold)

        self.controller = PhaseController(
            gate=ProgressGate(config.gates),
            context_provider=self.gate_context,
            sink=self._sink,
            scheduler=self._scheduler,
            cooldown_s=config.timing.cooldown_s,
            initial_phase=initial_phase,
            game_type=config.module_id,
            game_title=config.title,
            clock=clock,
            on_phase_changed=self._phase_changed,
        )
        self._clock = clock or epoch_ms

        self.ticker = AnimationTicker(
            self._scheduler,
            config.timing.animation_period_s,
            config.timing.animation_frames,
        )
        self._started = False

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def from_preset(cls, name: str, content: Optional[ModuleContent] = None, **kwargs) -> "GuidedSession":
        """Build a session on a private copy of a built-in module config."""
        return cls(copy.deepcopy(get_preset_config(name)), content=content, **kwargs)

    @classmethod
    def from_config_file(cls, path: Path, **kwargs) -> "GuidedSession":
        """Load a module config and, if it names one, its content file."""
        config = load_config(path)
        content = None
        if config.content_path:
            content = load_content(Path(config.content_path), config.assessment.question_count)
        return cls(config, content=content, **kwargs)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Emit game_started and start the animation tick."""
        if self._started or self.controller.torn_down:
            return
        self._started = True
        self._emit(EventType.GAME_STARTED, {"phase": self.phase.value})
        self.ticker.start()

    def teardown(self) -> None:
        """Cancel every pending timer. The session is inert afterwards."""
        self.controller.teardown()
        self.ticker.stop()
        Logger.log(f"Session {self.config.module_id} torn down", Logger.LogPriority.INFO)

    # -------------------------------------------------------------------------
    # Parameters and metrics
    # -------------------------------------------------------------------------

    @property
    def metrics(self):
        return self._metrics

    @property
    def layout(self) -> Optional[LayoutGrid]:
        return self._layout

    def set_parameter(self, name: str, value: Any) -> Any:
        """
        Set a model input (clamped into range) and recompute.

        Returns:
            The value actually stored.

        Raises:
            UnknownParameterError: If the model does not declare `name`.
        """
        stored = self.params.set(name, value)
        self._recompute()
        self._emit(EventType.VALUE_CHANGED, {"parameter": name, "value": stored})
        self._changed()
        return stored

    def reset_parameters(self) -> None:
        self.params.reset()
        for name, value in self.config.parameters.items():
            self.params.set(name, value)
        self._recompute()
        self._changed()

    def reseed_layout(self, seed: int) -> bool:
        """
        Redraw the layout from a new seed.

        Returns:
            False if the model has no seeded layout.
        """
        if "layout_seed" not in self.params:
            return False
        self.set_parameter("layout_seed", seed)
        return True

    def _recompute(self) -> None:
        metrics = self.model.compute(self.params)
        request = self.model.layout_request(self.params, metrics)
        layout = None
        if request is not None:
            layout = generate_layout(
                request.seed, request.cell_count, request.success_probability, request.columns
            )
        self._metrics, self._layout = metrics, layout

    # -------------------------------------------------------------------------
    # Interaction state
    # -------------------------------------------------------------------------

    def gate_context(self) -> GateContext:
        return GateContext(
            prediction=self._prediction,
            twist_prediction=self._twist_prediction,
            counters=dict(self._counters),
            acknowledged_items=frozenset(self._acknowledged),
            transfer_item_count=len(self.content.transfer_items),
            test_submitted=self.assessment.submitted,
            test_passed=self.assessment.passed(),
        )

    def choose_prediction(self, option_id: str, twist: bool = False) -> bool:
        """
        Record the user's prediction (or twist prediction).

        When the content lists prediction options, ids outside that list are
        ignored.
        """
        allowed = self.content.twist_prediction_ids() if twist else self.content.prediction_ids()
        if allowed and option_id not in allowed:
            Logger.log(f"Prediction {option_id!r} ignored: not an option")
            return False
        if twist:
            self._twist_prediction = option_id
        else:
            self._prediction = option_id
        self._emit(EventType.PREDICTION_MADE, {"choice": option_id, "twist": twist})
        self._changed()
        return True

    def record_trial(self, counter: str = "trials", correct: Optional[bool] = None) -> int:
        """
        Count one completed interaction under `counter`.

        When `correct` is given, hits are also tallied under
        "<counter>_correct" so accuracy can be shown.

        Returns:
            The new count.
        """
        count = self._counters.get(counter, 0) + 1
        self._counters[counter] = count
        details: Dict[str, Any] = {"counter": counter, "count": count}
        if correct is not None:
            key = correct_counter(counter)
            self._counters[key] = self._counters.get(key, 0) + (1 if correct else 0)
            details["correct"] = bool(correct)
            details["correct_count"] = self._counters[key]
        self._emit(EventType.TRIAL_COMPLETED, details)
        self._changed()
        return count

    def counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def accuracy(self, counter: str = "trials") -> Optional[float]:
        """Fraction of scored `counter` trials marked correct; None before any."""
        total = self._counters.get(counter, 0)
        if total == 0 or correct_counter(counter) not in self._counters:
            return None
        return self._counters[correct_counter(counter)] / total

    def acknowledge_item(self, index: int) -> bool:
        """Mark transfer item `index` as seen."""
        if not (0 <= index < len(self.content.transfer_items)):
            Logger.log(f"Transfer item {index} ignored: out of range")
            return False
        first_time = index not in self._acknowledged
        self._acknowledged.add(index)
        if first_time:
            self._emit(EventType.SELECTION_MADE, {
                "item": index, "title": self.content.transfer_items[index].title,
            })
            self._changed()
        return True

    # -------------------------------------------------------------------------
    # Knowledge test
    # -------------------------------------------------------------------------

    def record_answer(self, index: int, option_id: str) -> bool:
        recorded = self.assessment.record_answer(index, option_id)
        if recorded:
            self._emit(EventType.ANSWER_SUBMITTED, {"questionIndex": index, "choice": option_id})
            self._changed()
        return recorded

    def submit_test(self) -> Optional[int]:
        """
        Score the test.

        Per-question correct/incorrect events and test_submitted are emitted
        on the first successful submission only.
        """
        already = self.assessment.submitted
        score = self.assessment.submit()
        if score is None or already:
            return score
        for row in self.assessment.review():
            event_type = EventType.CORRECT_ANSWER if row.is_correct else EventType.INCORRECT_ANSWER
            self._emit(event_type, {"questionIndex": row.index, "choice": row.chosen})
        self._emit(EventType.TEST_SUBMITTED, {
            "score": score,
            "total": self.assessment.question_count,
            "passed": self.assessment.passed(),
        })
        self._changed()
        return score

    def retake_test(self) -> None:
        self.assessment.retake()
        self._changed()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.controller.phase

    def go_next(self) -> bool:
        return self.controller.go_next()

    def go_back(self) -> bool:
        return self.controller.go_back()

    def go_to_phase(self, target) -> bool:
        return self.controller.go_to_phase(target)

    def sync_external_phase(self, value) -> bool:
        return self.controller.sync_external_phase(value)

    def _phase_changed(self, previous: Phase, current: Phase) -> None:
        if current == Phase.MASTERY and self.assessment.passed():
            self._emit(EventType.MASTERY_ACHIEVED, {"score": self.assessment.score})
        self._changed()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        """Current session state (read-only snapshot)."""
        phase = self.controller.phase
        return SessionSnapshot(
            module_id=self.config.module_id,
            title=self.config.title,
            phase=phase,
            phase_label=PHASE_LABELS[phase],
            phase_index=self.controller.phase_index,
            progress_fraction=self.controller.progress_fraction,
            parameters=self.params.as_dict(),
            metrics=self._metrics,
            layout=self._layout,
            can_go_next=self.controller.can_go_next(),
            can_go_back=self.controller.can_go_back(),
            unmet_requirements=tuple(self.controller.unmet_requirements()),
            prediction=self._prediction,
            twist_prediction=self._twist_prediction,
            counters=dict(self._counters),
            acknowledged_items=frozenset(self._acknowledged),
            answered_count=self.assessment.answered_count,
            test_submitted=self.assessment.submitted,
            score=self.assessment.score,
            test_passed=self.assessment.passed(),
            animation_frame=self.ticker.frame,
        )

    def _emit(self, event_type: EventType, details: Dict[str, Any]) -> None:
        emit_safely(self._sink, GameEvent(
            event_type=event_type,
            game_type=self.config.module_id,
            game_title=self.config.title,
            details=details,
            timestamp=self._clock(),
        ))

    def _changed(self) -> None:
        if self._on_state_changed is not None:
            try:
                self._on_state_changed()
            except Exception as ex:
                Logger.log(f"State listener raised: {ex!r}", Logger.LogPriority.ERROR)
