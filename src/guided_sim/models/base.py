"""
Strategy interface for domain formulas.

A SimulationModel is a pure mapping ParameterSet -> DerivedMetrics. Models
hold no state between calls; the session recomputes on every parameter
change and keeps only the latest snapshot.
"""

import math
import sys
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .parameters import ParameterSpec

# Smallest positive normal float; exponentials are floored here instead of
# underflowing to exactly 0.
MIN_POSITIVE = sys.float_info.min


@dataclass(frozen=True)
class LayoutRequest:
    """Arguments for the layout generator derived from the current parameters."""
    seed: int
    cell_count: int
    success_probability: float
    columns: int = 0


class SimulationModel:
    """Interface for domain simulation plug-ins."""

    name = ""
    title = ""
    description = ""

    def parameter_specs(self) -> Dict[str, ParameterSpec]:
        """Declared inputs, keyed by parameter name."""
        raise NotImplementedError()

    def compute(self, params: Mapping[str, Any]):
        """Return the frozen DerivedMetrics snapshot for `params`."""
        raise NotImplementedError()

    def layout_request(self, params: Mapping[str, Any], metrics) -> Optional[LayoutRequest]:
        """Layout grid to draw for these parameters, if the domain has one."""
        return None

    def defaults(self) -> Dict[str, Any]:
        return {name: spec.default for name, spec in self.parameter_specs().items()}


def safe_exp(x: float) -> float:
    """exp(x) bounded to [MIN_POSITIVE, 1e300]."""
    if x > 690.0:
        return 1e300
    return max(math.exp(x), MIN_POSITIVE)


def safe_divide(numerator: float, denominator: float, ceiling: float) -> float:
    """numerator/denominator clamped to [-ceiling, ceiling]; 0/0 gives 0."""
    if denominator == 0.0:
        if numerator == 0.0:
            return 0.0
        return math.copysign(ceiling, numerator)
    result = numerator / denominator
    if math.isnan(result):
        return 0.0
    return max(-ceiling, min(ceiling, result))


def finite(value: float, fallback: float = 0.0) -> float:
    if math.isnan(value) or math.isinf(value):
        return fallback
    return value
