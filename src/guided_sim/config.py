"""
Module configuration loading and validation.

Loads YAML config describing one learning module (model, timing, gates,
quiz threshold, initial parameters) and validates it.

Config Format (YAML):
    module_id: kirchhoffs_laws
    title: "Kirchhoff's Laws"
    model: circuit
    timing:
      cooldown_ms: 300
      animation_period_ms: 50
    assessment:
      pass_threshold: 7
    gates:
      - {phase: predict, requires_prediction: true}
      - {phase: play, min_counts: {trials: 3}}
    parameters:
      voltage: 12
    content: kirchhoff_content.yaml
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .gates import GateConfig, default_gate_configs
from .models.registry import get_model, list_models


@dataclass
class TimingConfig:
    """Navigation cooldown and animation tick."""
    cooldown_ms: float = 300.0
    animation_period_ms: float = 50.0
    animation_frames: int = 100

    def validate(self) -> tuple[bool, Optional[str]]:
        if self.cooldown_ms < 0:
            return False, "cooldown_ms must be non-negative"
        if self.animation_period_ms <= 0:
            return False, "animation_period_ms must be positive"
        if self.animation_frames < 1:
            return False, "animation_frames must be >= 1"
        return True, None

    @property
    def cooldown_s(self) -> float:
        return self.cooldown_ms / 1000.0

    @property
    def animation_period_s(self) -> float:
        return self.animation_period_ms / 1000.0


@dataclass
class AssessmentConfig:
    """Knowledge test size and pass mark."""
    pass_threshold: int = 7
    question_count: int = 10

    def validate(self) -> tuple[bool, Optional[str]]:
        if self.question_count < 1:
            return False, "question_count must be >= 1"
        if not (0 <= self.pass_threshold <= self.question_count):
            return False, f"pass_threshold must be in [0, {self.question_count}]"
        return True, None


@dataclass
class ModuleConfig:
    """Complete configuration of one learning module."""
    module_id: str
    title: str
    model: str
    timing: TimingConfig = field(default_factory=TimingConfig)
    assessment: AssessmentConfig = field(default_factory=AssessmentConfig)
    gates: List[GateConfig] = field(default_factory=default_gate_configs)
    parameters: Dict[str, Any] = field(default_factory=dict)
    content_path: Optional[str] = None

    def validate(self) -> tuple[bool, Optional[str]]:
        if not self.module_id:
            return False, "module_id is required"
        if self.model not in list_models():
            return False, f"Unknown model '{self.model}'. Available: {', '.join(list_models())}"
        for section_name in ["timing", "assessment"]:
            is_valid, error = getattr(self, section_name).validate()
            if not is_valid:
                return False, f"{section_name}: {error}"
        for gate in self.gates:
            is_valid, error = gate.validate()
            if not is_valid:
                return False, f"gates: {error}"
        specs = get_model(self.model).parameter_specs()
        unknown = [name for name in self.parameters if name not in specs]
        if unknown:
            return False, f"parameters: unknown for model '{self.model}': {unknown}"
        return True, None


def _gate_from_dict(raw: Dict[str, Any]) -> GateConfig:
    return GateConfig(
        phase=str(raw.get("phase", "")),
        requires_prediction=bool(raw.get("requires_prediction", False)),
        requires_twist_prediction=bool(raw.get("requires_twist_prediction", False)),
        min_counts=dict(raw.get("min_counts") or {}),
        requires_all_transfer_items=bool(raw.get("requires_all_transfer_items", False)),
        requires_passing_score=bool(raw.get("requires_passing_score", False)),
    )


def config_from_dict(raw: Dict[str, Any], base_dir: Optional[Path] = None) -> ModuleConfig:
    """
    Build and validate a ModuleConfig from plain data.

    Raises:
        ValueError: If config is invalid.
    """
    if not isinstance(raw, dict):
        raise ValueError("Invalid configuration: expected a mapping")

    timing_raw = raw.get("timing", {}) or {}
    timing = TimingConfig(
        cooldown_ms=float(timing_raw.get("cooldown_ms", 300.0)),
        animation_period_ms=float(timing_raw.get("animation_period_ms", 50.0)),
        animation_frames=int(timing_raw.get("animation_frames", 100)),
    )

    assess_raw = raw.get("assessment", {}) or {}
    assessment = AssessmentConfig(
        pass_threshold=int(assess_raw.get("pass_threshold", 7)),
        question_count=int(assess_raw.get("question_count", 10)),
    )

    if "gates" in raw:
        gates = [_gate_from_dict(g) for g in raw.get("gates") or []]
    else:
        gates = default_gate_configs()

    content_path = raw.get("content")
    if content_path and base_dir is not None:
        content_path = str(Path(base_dir) / content_path)

    config = ModuleConfig(
        module_id=str(raw.get("module_id", "")),
        title=str(raw.get("title", "")),
        model=str(raw.get("model", "")),
        timing=timing,
        assessment=assessment,
        gates=gates,
        parameters=dict(raw.get("parameters") or {}),
        content_path=content_path,
    )

    is_valid, error = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error}")

    return config


def load_config(path: Path) -> ModuleConfig:
    """
    Load and validate module configuration from YAML file.

    A relative `content` path is resolved against the config file's directory.

    Raises:
        ValueError: If config is invalid.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)
    return config_from_dict(raw, base_dir=Path(path).parent)
