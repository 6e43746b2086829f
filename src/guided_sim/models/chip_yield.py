"""
Die yield and cost: one monolithic die versus N chiplets.

Poisson yield model:
    Y = exp(-D * A)
where D is the defect density (defects/mm^2) and A the die area (mm^2).
A chiplet system needs every chiplet to work, so system yield is Y_c^N.

Murphy's model is reported alongside for comparison:
    Y = ((1 - exp(-D A)) / (D A))^2

Large D*A drives yields towards zero; exponentials are floored at
MIN_POSITIVE and cost quotients at COST_CEILING so every metric stays finite.

Units:
    - Area: mm^2
    - Cost: $
    - Latency: ns
    - Energy: pJ/bit
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .base import LayoutRequest, SimulationModel, safe_divide, safe_exp
from .parameters import ParameterSpec

WAFER_COST = 5000.0
WAFER_USABLE_AREA_MM2 = 70000.0
COST_CEILING = 1e12

MONO_LATENCY_NS = 2.0
ADVANCED_PACKAGING_LATENCY_SCALE = 0.3
MONO_ENERGY_PJ_PER_BIT = 0.1
CHIPLET_ENERGY_PJ_PER_BIT = 2.0
ADVANCED_CHIPLET_ENERGY_PJ_PER_BIT = 0.5

# Wafer map spans this many mm across
WAFER_MAP_SPAN_MM = 200.0
LAYOUT_SEED_STRIDE = 10000


@dataclass(frozen=True)
class ChipYieldMetrics:
    """
    Yield and cost comparison.

    Yields are fractions in (0, 1]; multiply by 100 for percent.
    """
    mono_area_mm2: float
    mono_yield: float
    mono_murphy_yield: float
    mono_gross_per_wafer: int
    mono_good_per_wafer: float
    mono_cost_per_good: float
    mono_latency_ns: float
    mono_energy_pj_per_bit: float

    chiplet_area_mm2: float
    chiplet_yield: float
    chiplet_murphy_yield: float
    system_yield: float
    chiplet_gross_per_wafer: int
    chiplet_good_per_wafer: float
    chiplet_cost_per_good: float
    packaging_cost: float
    chiplet_system_cost: float
    chiplet_hops: int
    chiplet_latency_ns: float
    chiplet_energy_pj_per_bit: float

    cost_ratio: float
    chiplets_win: bool
    yield_advantage_pct: float
    latency_penalty_ns: float
    cost_saturated: bool


def poisson_yield(defect_density: float, area_mm2: float) -> float:
    return safe_exp(-defect_density * area_mm2)


def murphy_yield(defect_density: float, area_mm2: float) -> float:
    da = defect_density * area_mm2
    if da <= 0.01:
        return 1.0
    return max(((1.0 - math.exp(-da)) / da) ** 2, safe_exp(-da))


def gross_dies_per_wafer(area_mm2: float) -> int:
    if area_mm2 <= 0:
        return 0
    return int(math.floor(WAFER_USABLE_AREA_MM2 / area_mm2))


def dice_per_row(area_mm2: float) -> int:
    if area_mm2 <= 0:
        return 0
    return int(math.floor(WAFER_MAP_SPAN_MM / math.sqrt(area_mm2)))


def _cost_per_good(good_per_wafer: float) -> float:
    return safe_divide(WAFER_COST, good_per_wafer, COST_CEILING)


class ChipYieldModel(SimulationModel):
    name = "chip_yield"
    title = "Chiplets vs Monoliths"
    description = "Poisson die yield and cost per good system for monolithic and chiplet designs."

    def parameter_specs(self) -> Dict[str, ParameterSpec]:
        return {
            "total_die_area_mm2": ParameterSpec("total_die_area_mm2", "float", 400.0, 100.0, 800.0, 50.0,
                                                unit="mm2", description="Total die area"),
            "num_chiplets": ParameterSpec("num_chiplets", "int", 4, 2, 16, 1, description="Chiplet count"),
            "defect_density": ParameterSpec("defect_density", "float", 0.1, 0.01, 0.5, 0.01,
                                            unit="defects/mm2", description="Defect density"),
            "interconnect_cost": ParameterSpec("interconnect_cost", "float", 20.0, 5.0, 100.0, 5.0,
                                               unit="$", description="Packaging cost per chiplet"),
            "advanced_packaging": ParameterSpec("advanced_packaging", "bool", False,
                                                description="Advanced (2.5D/3D) packaging"),
            "packaging_cost_multiplier": ParameterSpec("packaging_cost_multiplier", "float", 2.0, 1.5, 5.0, 0.5,
                                                       description="Advanced packaging cost multiplier"),
            "latency_penalty_ns": ParameterSpec("latency_penalty_ns", "float", 5.0, 1.0, 20.0, 1.0,
                                                unit="ns", description="Die-to-die latency penalty"),
            "layout_seed": ParameterSpec("layout_seed", "int", 42, 0, 2 ** 31 - 1, 1,
                                         description="Wafer map seed"),
        }

    def compute(self, params: Mapping[str, Any]) -> ChipYieldMetrics:
        area = float(params["total_die_area_mm2"])
        n = max(1, int(params["num_chiplets"]))
        d = float(params["defect_density"])
        advanced = bool(params["advanced_packaging"])

        mono_yield = poisson_yield(d, area)
        mono_gross = gross_dies_per_wafer(area)
        mono_good = mono_gross * mono_yield
        mono_cost = _cost_per_good(mono_good)

        chiplet_area = area / n
        chiplet_yield = poisson_yield(d, chiplet_area)
        system_yield = max(chiplet_yield ** n, poisson_yield(d, area))
        chiplet_gross = gross_dies_per_wafer(chiplet_area)
        chiplet_good = chiplet_gross * chiplet_yield
        chiplet_cost = _cost_per_good(chiplet_good)

        packaging = float(params["interconnect_cost"]) * n
        if advanced:
            packaging *= float(params["packaging_cost_multiplier"])
        system_cost = min(chiplet_cost * n + packaging, COST_CEILING)

        penalty = float(params["latency_penalty_ns"])
        if advanced:
            penalty *= ADVANCED_PACKAGING_LATENCY_SCALE
        hops = int(math.ceil(math.sqrt(n)))
        chiplet_latency = (MONO_LATENCY_NS + penalty) * hops

        saturated = mono_cost >= COST_CEILING or system_cost >= COST_CEILING
        return ChipYieldMetrics(
            mono_area_mm2=area,
            mono_yield=mono_yield,
            mono_murphy_yield=murphy_yield(d, area),
            mono_gross_per_wafer=mono_gross,
            mono_good_per_wafer=mono_good,
            mono_cost_per_good=mono_cost,
            mono_latency_ns=MONO_LATENCY_NS,
            mono_energy_pj_per_bit=MONO_ENERGY_PJ_PER_BIT,
            chiplet_area_mm2=chiplet_area,
            chiplet_yield=chiplet_yield,
            chiplet_murphy_yield=murphy_yield(d, chiplet_area),
            system_yield=system_yield,
            chiplet_gross_per_wafer=chiplet_gross,
            chiplet_good_per_wafer=chiplet_good,
            chiplet_cost_per_good=chiplet_cost,
            packaging_cost=packaging,
            chiplet_system_cost=system_cost,
            chiplet_hops=hops,
            chiplet_latency_ns=chiplet_latency,
            chiplet_energy_pj_per_bit=ADVANCED_CHIPLET_ENERGY_PJ_PER_BIT if advanced else CHIPLET_ENERGY_PJ_PER_BIT,
            cost_ratio=safe_divide(mono_cost, system_cost, COST_CEILING),
            chiplets_win=system_cost < mono_cost,
            yield_advantage_pct=(chiplet_yield - mono_yield) * 100.0,
            latency_penalty_ns=chiplet_latency - MONO_LATENCY_NS,
            cost_saturated=saturated,
        )

    def layout_request(self, params: Mapping[str, Any], metrics: Optional[ChipYieldMetrics] = None) -> LayoutRequest:
        """Monolithic wafer map: one cell per die, good with probability mono_yield."""
        area = float(params["total_die_area_mm2"])
        if metrics is None:
            metrics = self.compute(params)
        per_row = dice_per_row(area)
        return LayoutRequest(
            seed=int(params["layout_seed"]) * LAYOUT_SEED_STRIDE + int(area),
            cell_count=per_row * per_row,
            success_probability=metrics.mono_yield,
            columns=per_row,
        )
