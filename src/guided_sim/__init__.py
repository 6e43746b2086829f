"""
Guided interactive simulation engine.

A learning module walks a user through a fixed 10-phase sequence
(hook -> predict -> play -> review -> twist_predict -> twist_play ->
twist_review -> transfer -> test -> mastery) around one domain model, gating
forward navigation on predictions, interaction counts and a scored test.

Modules:
    phases: Phase enum and ordering helpers
    phase_controller: Navigation state machine with cooldown and resume
    gates: Per-phase progress predicates
    assessment: Knowledge test scoring
    layout: Deterministic pseudo-random layout grids
    models: Domain models (circuit, spatial_audio, interconnect, chip_yield)
    session: GuidedSession composition root
    presets: Built-in learning modules
"""

__version__ = "0.1.0"

from .assessment import AssessmentEngine, Question, QuestionOption
from .config import AssessmentConfig, ModuleConfig, TimingConfig, load_config
from .content import ModuleContent, PredictionOption, TransferItem, load_content
from .events import (
    CallbackEventSink,
    EventSink,
    EventType,
    GameEvent,
    NullEventSink,
    RecordingEventSink,
)
from .exceptions import (
    InvalidContentError,
    UnknownModelError,
    UnknownParameterError,
    UnknownPresetError,
)
from .gates import GateConfig, GateContext, ProgressGate
from .layout import LayoutGrid, generate_layout
from .phase_controller import PhaseController
from .phases import Phase
from .presets import get_preset, list_presets
from .scheduling import AnimationTicker, ManualScheduler, ThreadingScheduler
from .session import GuidedSession, SessionSnapshot

__all__ = [
    "AssessmentEngine",
    "Question",
    "QuestionOption",
    "AssessmentConfig",
    "ModuleConfig",
    "TimingConfig",
    "load_config",
    "ModuleContent",
    "PredictionOption",
    "TransferItem",
    "load_content",
    "CallbackEventSink",
    "EventSink",
    "EventType",
    "GameEvent",
    "NullEventSink",
    "RecordingEventSink",
    "InvalidContentError",
    "UnknownModelError",
    "UnknownParameterError",
    "UnknownPresetError",
    "GateConfig",
    "GateContext",
    "ProgressGate",
    "LayoutGrid",
    "generate_layout",
    "PhaseController",
    "Phase",
    "get_preset",
    "list_presets",
    "AnimationTicker",
    "ManualScheduler",
    "ThreadingScheduler",
    "GuidedSession",
    "SessionSnapshot",
]
