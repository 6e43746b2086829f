"""
Registry of simulation models.

Provides a centralized lookup for domain models by name, with
parameter validation against the declared specs.

Usage:
    from guided_sim.models.registry import get_model, list_models

    model = get_model("interconnect")
    metrics = model.compute(model.defaults())
"""

from typing import Any, Dict, List, Optional

from ..exceptions import UnknownModelError
from .base import SimulationModel
from .chip_yield import ChipYieldModel
from .circuit import CircuitModel
from .interconnect import InterconnectModel
from .parameters import ParameterSpec
from .spatial_audio import SpatialAudioModel


# Registry of all simulation models
_MODEL_REGISTRY: Dict[str, SimulationModel] = {}


def _register_model(model: SimulationModel) -> None:
    """Register a model instance under its name."""
    _MODEL_REGISTRY[model.name] = model


def register_model(model: SimulationModel) -> None:
    """
    Register a host-supplied model.

    Raises:
        ValueError: If the model has no name or a declared spec is invalid.
    """
    if not model.name:
        raise ValueError("Model must declare a name")
    for spec in model.parameter_specs().values():
        ok, error = spec.validate()
        if not ok:
            raise ValueError(f"Invalid parameter spec: {error}")
    _register_model(model)


_register_model(CircuitModel())
_register_model(SpatialAudioModel())
_register_model(InterconnectModel())
_register_model(ChipYieldModel())


def get_model(name: str) -> SimulationModel:
    """
    Retrieve a simulation model by name.

    Args:
        name: Model name (e.g., "circuit", "chip_yield")

    Returns:
        The shared, stateless model instance

    Raises:
        UnknownModelError: If name not in registry
    """
    if name not in _MODEL_REGISTRY:
        available = ", ".join(_MODEL_REGISTRY.keys())
        raise UnknownModelError(f"Unknown simulation model '{name}'. Available: {available}")
    return _MODEL_REGISTRY[name]


def get_model_spec(name: str) -> Dict[str, ParameterSpec]:
    """Declared parameter specs of model `name`."""
    return get_model(name).parameter_specs()


def list_models() -> List[str]:
    return list(_MODEL_REGISTRY.keys())


def validate_params(name: str, params: Dict[str, Any]) -> Optional[str]:
    """
    Check `params` against model `name` without clamping.

    Returns:
        None if valid, error message string if invalid
    """
    if name not in _MODEL_REGISTRY:
        return f"Unknown simulation model '{name}'"

    specs = _MODEL_REGISTRY[name].parameter_specs()
    unknown = [p for p in params if p not in specs]
    if unknown:
        return f"Unknown parameters: {unknown}"

    for param_name, value in params.items():
        spec = specs[param_name]
        if spec.kind == "choice":
            if value not in spec.choices:
                return f"Parameter '{param_name}' = {value!r} not one of {list(spec.choices)}"
        elif spec.kind in ("float", "int"):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return f"Parameter '{param_name}' must be numeric, got {type(value)}"
            if value < spec.minimum or value > spec.maximum:
                return f"Parameter '{param_name}' = {value} outside range [{spec.minimum}, {spec.maximum}]"

    return None
