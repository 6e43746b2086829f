"""
Built-in module configurations.

Each preset wires one domain model to the phase engine with the timing,
gates and pass mark of the corresponding learning module. Question banks and
other copy are not part of a preset; hosts supply them as ModuleContent.
"""

from dataclasses import dataclass
from typing import Dict, List

from .config import AssessmentConfig, ModuleConfig, TimingConfig
from .exceptions import UnknownPresetError
from .gates import GateConfig, default_gate_configs
from .phases import Phase


@dataclass(frozen=True)
class Preset:
    """
    A built-in learning module.

    Attributes:
        name: Module identifier, also used as the event game_type.
        display_name: Human-readable title.
        description: What the module teaches.
        config: The module configuration.
    """
    name: str
    display_name: str
    description: str
    config: ModuleConfig


# =============================================================================
# Preset Definitions
# =============================================================================

PRESETS: Dict[str, Preset] = {}


def _register_preset(preset: Preset) -> None:
    """Register a preset in the global registry."""
    ok, error = preset.config.validate()
    if not ok:
        raise ValueError(f"Invalid preset '{preset.name}': {error}")
    PRESETS[preset.name] = preset


_register_preset(Preset(
    name="kirchhoffs_laws",
    display_name="Kirchhoff's Laws",
    description="Current and voltage conservation in a parallel/series circuit.",
    config=ModuleConfig(
        module_id="kirchhoffs_laws",
        title="Kirchhoff's Laws",
        model="circuit",
        timing=TimingConfig(cooldown_ms=300.0, animation_period_ms=50.0),
        assessment=AssessmentConfig(pass_threshold=7),
    ),
))

_register_preset(Preset(
    name="sound_localization",
    display_name="Sound Localization",
    description="How the brain uses timing and level differences to place a sound.",
    config=ModuleConfig(
        module_id="sound_localization",
        title="Sound Localization",
        model="spatial_audio",
        timing=TimingConfig(cooldown_ms=400.0, animation_period_ms=50.0),
        assessment=AssessmentConfig(pass_threshold=7),
        gates=default_gate_configs() + [
            GateConfig(Phase.PLAY.value, min_counts={"trials": 3}),
            GateConfig(Phase.TWIST_PLAY.value, min_counts={"low_freq_trials": 2, "high_freq_trials": 2}),
        ],
    ),
))

_register_preset(Preset(
    name="interconnect_topology",
    display_name="Interconnect Topology",
    description="Ring, tree, fat-tree and mesh fabrics for collective communication.",
    config=ModuleConfig(
        module_id="interconnect_topology",
        title="Interconnect Topology",
        model="interconnect",
        timing=TimingConfig(cooldown_ms=400.0, animation_period_ms=30.0),
        assessment=AssessmentConfig(pass_threshold=7),
    ),
))

_register_preset(Preset(
    name="chiplets_vs_monoliths",
    display_name="Chiplets vs Monoliths",
    description="Why splitting a large die into chiplets can raise yield and cut cost.",
    config=ModuleConfig(
        module_id="chiplets_vs_monoliths",
        title="Chiplets vs Monoliths",
        model="chip_yield",
        timing=TimingConfig(cooldown_ms=300.0, animation_period_ms=50.0),
        assessment=AssessmentConfig(pass_threshold=8),
    ),
))


# =============================================================================
# Public API
# =============================================================================

def list_presets() -> List[str]:
    return list(PRESETS.keys())


def get_preset(name: str) -> Preset:
    """
    Get a preset by name.

    Raises:
        UnknownPresetError: If preset not found.
    """
    if name not in PRESETS:
        available = ", ".join(PRESETS.keys())
        raise UnknownPresetError(f"Unknown preset '{name}'. Available: {available}")
    return PRESETS[name]


def get_preset_config(name: str) -> ModuleConfig:
    return get_preset(name).config


def get_preset_display_names() -> Dict[str, str]:
    return {name: p.display_name for name, p in PRESETS.items()}


__all__ = [
    "Preset",
    "PRESETS",
    "list_presets",
    "get_preset",
    "get_preset_config",
    "get_preset_display_names",
]
