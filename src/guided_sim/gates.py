"""
Forward-navigation gates.

Each phase may carry named predicates over a GateContext. `go_next` from a
phase is allowed only when every predicate registered for that phase holds.
Phases without predicates are open. Backward navigation is never gated.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .phases import Phase, parse_phase


@dataclass(frozen=True)
class GateContext:
    """
    Read-only view of a session's interaction state.

    Attributes:
        prediction: Chosen prediction option id, if any.
        twist_prediction: Chosen twist prediction option id, if any.
        counters: Interaction counters (e.g. "trials").
        acknowledged_items: Indices of transfer items the user has opened.
        transfer_item_count: Number of transfer items in the module.
        test_submitted: Whether the knowledge test has been scored.
        test_passed: Whether the score meets the pass threshold.
    """
    prediction: Optional[str] = None
    twist_prediction: Optional[str] = None
    counters: Mapping[str, int] = field(default_factory=dict)
    acknowledged_items: FrozenSet[int] = frozenset()
    transfer_item_count: int = 0
    test_submitted: bool = False
    test_passed: bool = False

    def count(self, name: str) -> int:
        return int(self.counters.get(name, 0))


GatePredicate = Callable[[GateContext], bool]


@dataclass
class GateConfig:
    """
    Declarative gate for one phase.

    Attributes:
        phase: Phase the gate guards (forward navigation out of it).
        requires_prediction: A prediction must be chosen.
        requires_twist_prediction: A twist prediction must be chosen.
        min_counts: Counter name -> minimum value.
        requires_all_transfer_items: Every transfer item acknowledged.
        requires_passing_score: Test submitted with a passing score.
    """
    phase: str
    requires_prediction: bool = False
    requires_twist_prediction: bool = False
    min_counts: Dict[str, int] = field(default_factory=dict)
    requires_all_transfer_items: bool = False
    requires_passing_score: bool = False

    def validate(self) -> Tuple[bool, Optional[str]]:
        if parse_phase(self.phase) is None:
            return False, f"unknown phase '{self.phase}'"
        for name, minimum in self.min_counts.items():
            if not isinstance(minimum, int) or isinstance(minimum, bool) or minimum < 0:
                return False, f"min_counts[{name}] must be a non-negative integer"
        return True, None

    def predicates(self) -> List[Tuple[str, GatePredicate]]:
        """Expand into named predicates."""
        result: List[Tuple[str, GatePredicate]] = []
        if self.requires_prediction:
            result.append(("prediction", lambda ctx: ctx.prediction is not None))
        if self.requires_twist_prediction:
            result.append(("twist_prediction", lambda ctx: ctx.twist_prediction is not None))
        for name, minimum in self.min_counts.items():
            result.append((f"{name}>={minimum}", _min_count(name, minimum)))
        if self.requires_all_transfer_items:
            result.append(("all_transfer_items", _all_items_acknowledged))
        if self.requires_passing_score:
            result.append(("passing_score", lambda ctx: ctx.test_submitted and ctx.test_passed))
        return result


def _min_count(name: str, minimum: int) -> GatePredicate:
    return lambda ctx: ctx.count(name) >= minimum


def _all_items_acknowledged(ctx: GateContext) -> bool:
    return all(i in ctx.acknowledged_items for i in range(ctx.transfer_item_count))


def default_gate_configs() -> List[GateConfig]:
    """Gates shared by every built-in module."""
    return [
        GateConfig(Phase.PREDICT.value, requires_prediction=True),
        GateConfig(Phase.TWIST_PREDICT.value, requires_twist_prediction=True),
        GateConfig(Phase.TRANSFER.value, requires_all_transfer_items=True),
        GateConfig(Phase.TEST.value, requires_passing_score=True),
    ]


class ProgressGate:
    """Named predicates per phase."""

    def __init__(self, configs: Optional[List[GateConfig]] = None):
        self._predicates: Dict[Phase, Dict[str, GatePredicate]] = {}
        for config in configs or []:
            ok, error = config.validate()
            if not ok:
                raise ValueError(f"Invalid gate: {error}")
            phase = parse_phase(config.phase)
            for name, predicate in config.predicates():
                self.set_predicate(phase, name, predicate)

    @classmethod
    def open(cls) -> "ProgressGate":
        """Gate with no predicates; every phase may advance."""
        return cls()

    def set_predicate(self, phase, name: str, predicate: GatePredicate) -> None:
        """Register (or replace) predicate `name` on `phase`."""
        parsed = parse_phase(phase)
        if parsed is None:
            raise ValueError(f"Unknown phase '{phase}'")
        self._predicates.setdefault(parsed, {})[name] = predicate

    def remove_predicate(self, phase, name: str) -> None:
        parsed = parse_phase(phase)
        if parsed in self._predicates:
            self._predicates[parsed].pop(name, None)

    def predicate_names(self, phase) -> List[str]:
        parsed = parse_phase(phase)
        return list(self._predicates.get(parsed, {}))

    def explain(self, phase, context: GateContext) -> List[str]:
        """Names of the predicates on `phase` that do not hold."""
        parsed = parse_phase(phase)
        return [
            name for name, predicate in self._predicates.get(parsed, {}).items()
            if not predicate(context)
        ]

    def allows_advance(self, phase, context: GateContext) -> bool:
        return not self.explain(phase, context)
