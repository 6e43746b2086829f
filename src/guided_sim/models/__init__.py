"""Domain simulation models and their parameter declarations."""

from .base import LayoutRequest, SimulationModel
from .chip_yield import ChipYieldMetrics, ChipYieldModel
from .circuit import CircuitMetrics, CircuitModel
from .interconnect import InterconnectMetrics, InterconnectModel
from .parameters import ParameterSet, ParameterSpec
from .registry import get_model, get_model_spec, list_models, register_model, validate_params
from .spatial_audio import SpatialAudioMetrics, SpatialAudioModel

__all__ = [
    "LayoutRequest",
    "SimulationModel",
    "ParameterSpec",
    "ParameterSet",
    "CircuitModel",
    "CircuitMetrics",
    "SpatialAudioModel",
    "SpatialAudioMetrics",
    "InterconnectModel",
    "InterconnectMetrics",
    "ChipYieldModel",
    "ChipYieldMetrics",
    "get_model",
    "get_model_spec",
    "list_models",
    "register_model",
    "validate_params",
]
