"""
Tests for parameter declarations and clamping.

These tests verify:
- Values are clamped into range and snapped to the step grid
- NaN and non-numeric input fall back to the default
- Invalid choices keep the current value
- Unknown names raise UnknownParameterError
"""

import math

import pytest

from guided_sim.exceptions import UnknownParameterError
from guided_sim.models.parameters import ParameterSet, ParameterSpec
from guided_sim.models.registry import get_model, list_models


VOLTAGE = ParameterSpec("voltage", "float", 12.0, 5.0, 24.0, 1.0)
NODES = ParameterSpec("node_count", "int", 8, 4, 16, 1)
TOPOLOGY = ParameterSpec("topology", "choice", "ring", choices=("ring", "tree"))
FLAG = ParameterSpec("advanced", "bool", False)


class TestCoerce:
    """Tests for ParameterSpec.coerce."""

    def test_in_range_value_kept(self):
        assert VOLTAGE.coerce(10.0) == 10.0

    def test_above_max_clamped(self):
        assert VOLTAGE.coerce(100.0) == 24.0

    def test_below_min_clamped(self):
        assert VOLTAGE.coerce(-3.0) == 5.0

    def test_snapped_to_step(self):
        assert VOLTAGE.coerce(10.4) == 10.0
        assert VOLTAGE.coerce(10.6) == 11.0

    def test_fractional_step_has_no_float_noise(self):
        spec = ParameterSpec("d", "float", 0.1, 0.01, 0.5, 0.01)
        assert spec.coerce(0.07) == 0.07

    def test_nan_gives_default(self):
        assert VOLTAGE.coerce(float("nan")) == 12.0

    def test_non_numeric_gives_default(self):
        assert VOLTAGE.coerce("abc") == 12.0
        assert VOLTAGE.coerce(None) == 12.0

    def test_numeric_string_accepted(self):
        assert VOLTAGE.coerce("15") == 15.0

    def test_infinity_clamped(self):
        assert VOLTAGE.coerce(float("inf")) == 24.0
        assert VOLTAGE.coerce(float("-inf")) == 5.0

    def test_huge_int_clamped(self):
        assert VOLTAGE.coerce(10 ** 400) == 24.0
        assert VOLTAGE.coerce(-(10 ** 400)) == 5.0
        assert NODES.coerce(10 ** 400) == NODES.maximum

    def test_int_kind_returns_int(self):
        value = NODES.coerce(7.6)
        assert value == 8
        assert isinstance(value, int)

    def test_invalid_choice_keeps_current(self):
        assert TOPOLOGY.coerce("star", current="tree") == "tree"
        assert TOPOLOGY.coerce("star") == "ring"

    def test_bool_from_string(self):
        assert FLAG.coerce("true") is True
        assert FLAG.coerce("no") is False
        assert FLAG.coerce(1) is True


class TestSpecValidation:
    """Tests for ParameterSpec.validate."""

    def test_valid_spec(self):
        is_valid, err = VOLTAGE.validate()
        assert is_valid
        assert err is None

    def test_default_outside_range_rejected(self):
        spec = ParameterSpec("x", "float", 50.0, 0.0, 10.0)
        is_valid, err = spec.validate()
        assert not is_valid
        assert "default" in err

    def test_choice_without_choices_rejected(self):
        spec = ParameterSpec("x", "choice", "a")
        is_valid, _ = spec.validate()
        assert not is_valid

    def test_all_model_specs_valid(self):
        for name in list_models():
            for spec in get_model(name).parameter_specs().values():
                is_valid, err = spec.validate()
                assert is_valid, f"{name}: {err}"


class TestParameterSet:
    """Tests for ParameterSet."""

    def test_starts_at_defaults(self):
        params = ParameterSet({"voltage": VOLTAGE, "node_count": NODES})
        assert params["voltage"] == 12.0
        assert params["node_count"] == 8

    def test_set_returns_stored_value(self):
        params = ParameterSet({"voltage": VOLTAGE})
        assert params.set("voltage", 99) == 24.0
        assert params["voltage"] == 24.0

    def test_initial_values_clamped(self):
        params = ParameterSet({"voltage": VOLTAGE}, {"voltage": 1.0})
        assert params["voltage"] == 5.0

    def test_unknown_name_raises(self):
        params = ParameterSet({"voltage": VOLTAGE})
        with pytest.raises(UnknownParameterError):
            params.set("current", 1.0)

    def test_unknown_name_is_key_error(self):
        params = ParameterSet({"voltage": VOLTAGE})
        with pytest.raises(KeyError):
            params.set("current", 1.0)

    def test_reset(self):
        params = ParameterSet({"voltage": VOLTAGE})
        params.set("voltage", 20)
        params.reset()
        assert params["voltage"] == 12.0

    def test_values_always_within_bounds(self):
        params = ParameterSet({"voltage": VOLTAGE})
        for value in (-1e308, -1.0, 0.0, 7.3, 23.9, 1e308, float("nan"), float("inf")):
            stored = params.set("voltage", value)
            assert 5.0 <= stored <= 24.0
            assert not math.isnan(stored)
