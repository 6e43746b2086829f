"""
Binaural sound localization.

The azimuth of a source produces two cues:
- ITD (interaural time difference): the two ears hear the sound at
  different times. Head diameter ~17 cm gives a maximum of ~0.7 ms. The
  channel on the source side carries the delay.
- ILD (interaural level difference): the head shadows high frequencies,
  so the far ear hears them quieter.

Angle convention: -90 (hard left) .. 0 (straight ahead) .. +90 (hard right).

Units:
    - Angle: degrees
    - Frequency: Hz
    - Time: s (itd_ms in ms)
    - Level: dB
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence

from ..layout import seeded_generator
from .base import SimulationModel
from .parameters import ParameterSpec

MAX_ITD_S = 0.0007
MIN_EAR_GAIN = 0.1
HEAD_SHADOW_HIGH = 0.4
HEAD_SHADOW_LOW = 0.15
SHADOW_CUTOFF_HZ = 1000.0

PLAY_TOLERANCE_DEG = 15.0
TWIST_TOLERANCE_DEG = 20.0
LOW_TWIST_FREQUENCY_HZ = 200.0
HIGH_TWIST_FREQUENCY_HZ = 4000.0

TRIAL_ANGLES = (-60, -45, -30, -15, 0, 15, 30, 45, 60)
TWIST_TRIAL_ANGLES = (-60, -45, -30, -15, 15, 30, 45, 60)


@dataclass(frozen=True)
class SpatialAudioMetrics:
    """
    Binaural cues for one source position.

    Attributes:
        itd_s: Signed ITD; positive for a source right of center (s).
        itd_ms: Same in milliseconds.
        left_delay_s: Delay applied to the left channel, max(0, -itd_s) (s).
        right_delay_s: Delay applied to the right channel, max(0, itd_s) (s).
        head_shadow_factor: Strength of the level cue at this frequency.
        left_gain: Linear gain at the left ear.
        right_gain: Linear gain at the right ear.
        ild_db: Right-minus-left level difference (dB).
        dominant_cue: "ild" above the shadow cutoff, otherwise "itd".
    """
    itd_s: float
    itd_ms: float
    left_delay_s: float
    right_delay_s: float
    head_shadow_factor: float
    left_gain: float
    right_gain: float
    ild_db: float
    dominant_cue: str


class SpatialAudioModel(SimulationModel):
    name = "spatial_audio"
    title = "Sound Localization"
    description = "Interaural time and level differences as a function of azimuth and pitch."

    def parameter_specs(self) -> Dict[str, ParameterSpec]:
        return {
            "angle_deg": ParameterSpec("angle_deg", "float", 0.0, -90.0, 90.0, 5.0, unit="deg",
                                       description="Source azimuth"),
            "frequency_hz": ParameterSpec("frequency_hz", "float", 1000.0, 200.0, 4000.0, 100.0, unit="Hz",
                                          description="Tone frequency"),
        }

    def compute(self, params: Mapping[str, Any]) -> SpatialAudioMetrics:
        angle = float(params["angle_deg"])
        frequency = float(params["frequency_hz"])
        s = math.sin(math.radians(angle))

        shadow = HEAD_SHADOW_HIGH if frequency > SHADOW_CUTOFF_HZ else HEAD_SHADOW_LOW
        left_gain = max(MIN_EAR_GAIN, 1.0 - s * shadow)
        right_gain = max(MIN_EAR_GAIN, 1.0 + s * shadow)

        itd = s * MAX_ITD_S
        return SpatialAudioMetrics(
            itd_s=itd,
            itd_ms=itd * 1000.0,
            left_delay_s=max(0.0, -itd),
            right_delay_s=max(0.0, itd),
            head_shadow_factor=shadow,
            left_gain=left_gain,
            right_gain=right_gain,
            ild_db=20.0 * math.log10(right_gain / left_gain),
            dominant_cue="ild" if frequency > SHADOW_CUTOFF_HZ else "itd",
        )


def localization_error(actual_deg: float, guess_deg: float) -> float:
    """Absolute azimuth error in degrees."""
    return abs(float(guess_deg) - float(actual_deg))


def is_accurate(error_deg: float, tolerance_deg: float = PLAY_TOLERANCE_DEG) -> bool:
    return error_deg <= tolerance_deg


def trial_angle(seed: int, pool: Sequence[int] = TRIAL_ANGLES) -> int:
    """Pick a trial azimuth from `pool`; same seed, same angle."""
    rng = seeded_generator(seed)
    return int(pool[int(rng.integers(0, len(pool)))])


def trial_tolerance(twist: bool = False) -> float:
    """Accepted localization error for a play or twist-play trial."""
    return TWIST_TOLERANCE_DEG if twist else PLAY_TOLERANCE_DEG


def twist_frequency(high: bool) -> float:
    """Tone used for a low- or high-frequency twist trial."""
    return HIGH_TWIST_FREQUENCY_HZ if high else LOW_TWIST_FREQUENCY_HZ
