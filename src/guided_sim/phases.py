"""
The fixed 10-step guided sequence.

Phases are totally ordered. Values are plain strings so that a phase handed
over by a host (e.g. a resume token) can be parsed without a lookup table.
"""

from enum import Enum
from typing import Optional, Tuple


class Phase(str, Enum):
    HOOK = "hook"
    PREDICT = "predict"
    PLAY = "play"
    REVIEW = "review"
    TWIST_PREDICT = "twist_predict"
    TWIST_PLAY = "twist_play"
    TWIST_REVIEW = "twist_review"
    TRANSFER = "transfer"
    TEST = "test"
    MASTERY = "mastery"


PHASE_ORDER: Tuple[Phase, ...] = tuple(Phase)
FIRST_PHASE = PHASE_ORDER[0]
LAST_PHASE = PHASE_ORDER[-1]

PHASE_LABELS = {
    Phase.HOOK: "Introduction",
    Phase.PREDICT: "Predict",
    Phase.PLAY: "Experiment",
    Phase.REVIEW: "Understanding",
    Phase.TWIST_PREDICT: "New Variable",
    Phase.TWIST_PLAY: "Twist Experiment",
    Phase.TWIST_REVIEW: "Deep Insight",
    Phase.TRANSFER: "Real World",
    Phase.TEST: "Knowledge Test",
    Phase.MASTERY: "Mastery",
}


def parse_phase(value) -> Optional[Phase]:
    """Return the Phase for `value`, or None if it is not an allowed phase."""
    if isinstance(value, Phase):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Phase(value)
    except ValueError:
        return None


def is_valid_phase(value) -> bool:
    return parse_phase(value) is not None


def phase_index(phase: Phase) -> int:
    return PHASE_ORDER.index(phase)


def next_phase(phase: Phase) -> Optional[Phase]:
    """Phase immediately after `phase`, or None at the terminal phase."""
    idx = phase_index(phase)
    if idx >= len(PHASE_ORDER) - 1:
        return None
    return PHASE_ORDER[idx + 1]


def previous_phase(phase: Phase) -> Optional[Phase]:
    """Phase immediately before `phase`, or None at the first phase."""
    idx = phase_index(phase)
    if idx == 0:
        return None
    return PHASE_ORDER[idx - 1]
