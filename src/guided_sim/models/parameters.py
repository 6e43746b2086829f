"""
Declared inputs of a simulation model.

Every value held by a ParameterSet stays inside its declared bounds. Out of
range input is clamped and snapped to the step grid, never rejected.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from ..exceptions import UnknownParameterError


@dataclass(frozen=True)
class ParameterSpec:
    """
    Declared range of one model input.

    Attributes:
        name: Parameter key.
        kind: "float", "int", "bool" or "choice".
        default: Value used at start and for unusable input (NaN, wrong type).
        minimum: Lower bound (numeric kinds).
        maximum: Upper bound (numeric kinds).
        step: Grid spacing measured from `minimum`; None for a continuous range.
        choices: Allowed values for "choice" parameters.
        unit: Display unit.
        description: Short human-readable label.
    """
    name: str
    kind: str
    default: Any
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    choices: Tuple[str, ...] = ()
    unit: str = ""
    description: str = ""

    def validate(self) -> Tuple[bool, Optional[str]]:
        if self.kind not in ("float", "int", "bool", "choice"):
            return False, f"{self.name}: unknown kind '{self.kind}'"
        if self.kind == "choice":
            if not self.choices:
                return False, f"{self.name}: choice parameter needs choices"
            if self.default not in self.choices:
                return False, f"{self.name}: default not among choices"
            return True, None
        if self.kind == "bool":
            return True, None
        if self.minimum is None or self.maximum is None:
            return False, f"{self.name}: numeric parameter needs minimum and maximum"
        if self.minimum > self.maximum:
            return False, f"{self.name}: minimum exceeds maximum"
        if self.step is not None and self.step <= 0:
            return False, f"{self.name}: step must be positive"
        if not (self.minimum <= self.default <= self.maximum):
            return False, f"{self.name}: default outside [{self.minimum}, {self.maximum}]"
        return True, None

    def coerce(self, value: Any, current: Any = None) -> Any:
        """
        Map arbitrary input onto the declared domain.

        Args:
            value: Requested value.
            current: Value to keep when a choice is not allowed
                (defaults to `default`).

        Returns:
            A value inside the declared bounds.
        """
        if self.kind == "choice":
            if value in self.choices:
                return value
            return self.default if current is None else current

        if self.kind == "bool":
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            return bool(value)

        try:
            x = float(value)
        except (TypeError, ValueError):
            return self.default
        except OverflowError:
            # Ints beyond float range clamp to the matching bound
            x = math.inf if value > 0 else -math.inf
        if math.isnan(x):
            return self.default

        x = min(max(x, self.minimum), self.maximum)
        if self.step:
            n = round((x - self.minimum) / self.step)
            x = self.minimum + n * self.step
            # Snapping may overshoot by one step at the top end
            if x > self.maximum:
                x -= self.step
            x = round(x, 10)

        if self.kind == "int":
            return int(round(x))
        return x


class ParameterSet(Mapping):
    """
    Current values of a model's parameters.

    Read like a dict; write only through `set`, which clamps.
    """

    def __init__(self, specs: Mapping[str, ParameterSpec], initial: Optional[Mapping[str, Any]] = None):
        self._specs: Dict[str, ParameterSpec] = dict(specs)
        self._values: Dict[str, Any] = {name: spec.default for name, spec in self._specs.items()}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def specs(self) -> Dict[str, ParameterSpec]:
        return dict(self._specs)

    def spec(self, name: str) -> ParameterSpec:
        if name not in self._specs:
            available = ", ".join(self._specs)
            raise UnknownParameterError(f"Unknown parameter '{name}'. Available: {available}")
        return self._specs[name]

    def set(self, name: str, value: Any) -> Any:
        """
        Set `name` to `value` clamped into its declared bounds.

        Returns:
            The value actually stored.

        Raises:
            UnknownParameterError: If the model does not declare `name`.
        """
        spec = self.spec(name)
        stored = spec.coerce(value, current=self._values.get(name))
        self._values[name] = stored
        return stored

    def reset(self) -> None:
        for name, spec in self._specs.items():
            self._values[name] = spec.default

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)
