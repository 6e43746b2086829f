"""
Kirchhoff's laws circuit.

Main circuit: source V drives R1 in parallel with the series pair R2 + R3.

    node A ──┬── R1 ────────────┬── node B
             └── R2 ── R3 ──────┘

Twist (multi-loop): two sources share the middle resistor.

KCL: current entering node A equals the sum of the branch currents.
KVL: V = V(R2) + V(R3) around the series loop.

Units:
    - Voltage: V
    - Resistance: ohm
    - Current: A
    - Power: W
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .base import SimulationModel, finite
from .parameters import ParameterSpec

# Resistances are floored here before dividing
MIN_RESISTANCE_OHM = 1e-3


@dataclass(frozen=True)
class CircuitMetrics:
    """
    Derived circuit quantities.

    Attributes:
        i1: Current through R1 (A).
        i23: Current through the R2+R3 branch (A).
        r_equivalent: Equivalent resistance seen by the source (ohm).
        current_in: Source current entering the junction, V / r_equivalent (A).
        current_out: Sum of branch currents leaving the junction (A).
        v_r1: Voltage across R1 (V).
        v_r2: Voltage across R2 (V).
        v_r3: Voltage across R3 (V).
        loop_residual: V - v_r2 - v_r3, zero by KVL (V).
        power_total: Power delivered by the source (W).
        loop_i1: Twist loop 1 current (A).
        loop_i2: Twist loop 2 current (A).
        loop_shared: Current in the shared resistor (A).
    """
    i1: float
    i23: float
    r_equivalent: float
    current_in: float
    current_out: float
    v_r1: float
    v_r2: float
    v_r3: float
    loop_residual: float
    power_total: float
    loop_i1: float
    loop_i2: float
    loop_shared: float


def _r(value: float) -> float:
    return max(float(value), MIN_RESISTANCE_OHM)


class CircuitModel(SimulationModel):
    name = "circuit"
    title = "Kirchhoff's Laws"
    description = "Junction and loop rules on a parallel/series resistor network."

    def parameter_specs(self) -> Dict[str, ParameterSpec]:
        return {
            "voltage": ParameterSpec("voltage", "float", 12.0, 5.0, 24.0, 1.0, unit="V",
                                     description="Source voltage"),
            "resistance1": ParameterSpec("resistance1", "float", 200.0, 100.0, 1000.0, 50.0, unit="ohm",
                                         description="R1 (parallel branch)"),
            "resistance2": ParameterSpec("resistance2", "float", 300.0, 100.0, 1000.0, 50.0, unit="ohm",
                                         description="R2 (series branch)"),
            "resistance3": ParameterSpec("resistance3", "float", 400.0, 100.0, 1000.0, 50.0, unit="ohm",
                                         description="R3 (series branch)"),
            "loop_voltage2": ParameterSpec("loop_voltage2", "float", 9.0, 5.0, 15.0, 1.0, unit="V",
                                           description="Second source (multi-loop)"),
            "loop_r1": ParameterSpec("loop_r1", "float", 100.0, 50.0, 300.0, 25.0, unit="ohm",
                                     description="Loop 1 resistor"),
            "loop_r2": ParameterSpec("loop_r2", "float", 150.0, 50.0, 300.0, 25.0, unit="ohm",
                                     description="Shared resistor"),
            "loop_r3": ParameterSpec("loop_r3", "float", 200.0, 50.0, 300.0, 25.0, unit="ohm",
                                     description="Loop 2 resistor"),
        }

    def compute(self, params: Mapping[str, Any]) -> CircuitMetrics:
        v = float(params["voltage"])
        r1 = _r(params["resistance1"])
        r2 = _r(params["resistance2"])
        r3 = _r(params["resistance3"])

        r23 = r2 + r3
        r_eq = (r1 * r23) / (r1 + r23)
        i1 = v / r1
        i23 = v / r23
        current_in = v / r_eq

        v_r2 = i23 * r2
        v_r3 = i23 * r3

        v2 = float(params["loop_voltage2"])
        lr1 = _r(params["loop_r1"])
        lr2 = _r(params["loop_r2"])
        lr3 = _r(params["loop_r3"])
        loop_i1 = v / (lr1 + lr2)
        loop_i2 = v2 / (lr2 + lr3)

        return CircuitMetrics(
            i1=finite(i1),
            i23=finite(i23),
            r_equivalent=finite(r_eq),
            current_in=finite(current_in),
            current_out=finite(i1 + i23),
            v_r1=v,
            v_r2=finite(v_r2),
            v_r3=finite(v_r3),
            loop_residual=finite(v - v_r2 - v_r3),
            power_total=finite(v * current_in),
            loop_i1=finite(loop_i1),
            loop_i2=finite(loop_i2),
            loop_shared=finite(loop_i1 + loop_i2),
        )
