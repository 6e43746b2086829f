"""
Tests for module configuration, content loading and presets.
"""

from pathlib import Path

import pytest
import yaml

from guided_sim.config import (
    AssessmentConfig,
    ModuleConfig,
    TimingConfig,
    config_from_dict,
    load_config,
)
from guided_sim.content import ModuleContent, content_from_dict, load_content
from guided_sim.exceptions import InvalidContentError, UnknownPresetError
from guided_sim.gates import GateConfig
from guided_sim.presets import get_preset, get_preset_config, get_preset_display_names, list_presets
from guided_sim.scheduling import ManualScheduler
from guided_sim.session import GuidedSession

from conftest import make_questions


def _content_dict(count=10, correct="b"):
    return {
        "predictions": [{"id": "a", "label": "Up"}, {"id": "b", "label": "Down"}],
        "transfer_items": [{"title": "Grid"}, {"title": "Phones"}],
        "questions": [
            {
                "prompt": f"Q{i}",
                "options": [{"id": "a", "label": "A"}, {"id": "b", "label": "B"}],
                "correct": correct,
                "explanation": "E",
            }
            for i in range(count)
        ],
    }


class TestTimingConfigValidation:
    """Tests for timing config."""

    def test_valid_config(self):
        is_valid, err = TimingConfig().validate()
        assert is_valid
        assert err is None

    def test_negative_cooldown_rejected(self):
        is_valid, err = TimingConfig(cooldown_ms=-1).validate()
        assert not is_valid
        assert "cooldown_ms" in err

    def test_zero_period_rejected(self):
        is_valid, err = TimingConfig(animation_period_ms=0).validate()
        assert not is_valid
        assert "animation_period_ms" in err

    def test_seconds(self):
        assert TimingConfig(cooldown_ms=400).cooldown_s == pytest.approx(0.4)


class TestAssessmentConfigValidation:
    """Tests for assessment config."""

    def test_threshold_above_count_rejected(self):
        is_valid, err = AssessmentConfig(pass_threshold=11).validate()
        assert not is_valid
        assert "pass_threshold" in err


class TestModuleConfigValidation:
    """Tests for complete module config."""

    def test_unknown_model_rejected(self):
        is_valid, err = ModuleConfig("m", "M", "pendulum").validate()
        assert not is_valid
        assert "pendulum" in err

    def test_unknown_parameter_rejected(self):
        cfg = ModuleConfig("m", "M", "circuit", parameters={"frequency_hz": 1})
        is_valid, err = cfg.validate()
        assert not is_valid
        assert "frequency_hz" in err

    def test_bad_gate_rejected(self):
        cfg = ModuleConfig("m", "M", "circuit", gates=[GateConfig("warmup")])
        is_valid, err = cfg.validate()
        assert not is_valid
        assert err.startswith("gates")

    def test_default_gates(self):
        cfg = ModuleConfig("m", "M", "circuit")
        phases = [g.phase for g in cfg.gates]
        assert phases == ["predict", "twist_predict", "transfer", "test"]


class TestLoadConfig:
    """Tests for YAML config loading."""

    def test_load(self, tmp_path):
        path = tmp_path / "module.yaml"
        path.write_text(yaml.safe_dump({
            "module_id": "kirchhoff",
            "title": "Kirchhoff",
            "model": "circuit",
            "timing": {"cooldown_ms": 250},
            "assessment": {"pass_threshold": 8},
            "gates": [{"phase": "play", "min_counts": {"trials": 2}}],
            "parameters": {"voltage": 20},
            "content": "content.yaml",
        }))
        cfg = load_config(path)
        assert cfg.timing.cooldown_ms == 250
        assert cfg.assessment.pass_threshold == 8
        assert cfg.gates[0].min_counts == {"trials": 2}
        assert cfg.parameters == {"voltage": 20}
        assert cfg.content_path == str(tmp_path / "content.yaml")

    def test_invalid_raises_value_error(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"module_id": "x", "model": "nope"}))
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError):
            config_from_dict(["not", "a", "mapping"])


class TestContent:
    """Tests for content validation and loading."""

    def test_from_dict(self):
        content = content_from_dict(_content_dict())
        assert len(content.questions) == 10
        assert content.prediction_ids() == ["a", "b"]
        assert content.transfer_items[1].title == "Phones"

    def test_wrong_question_count(self):
        with pytest.raises(InvalidContentError):
            content_from_dict(_content_dict(count=9))

    def test_correct_option_missing(self):
        with pytest.raises(InvalidContentError, match="correct option"):
            content_from_dict(_content_dict(correct="z"))

    def test_duplicate_option_ids(self):
        raw = _content_dict()
        raw["questions"][0]["options"].append({"id": "a", "label": "again"})
        with pytest.raises(InvalidContentError, match="duplicate"):
            content_from_dict(raw)

    def test_option_without_id(self):
        raw = _content_dict()
        raw["questions"][0]["options"] = [{"label": "no id"}]
        with pytest.raises(InvalidContentError):
            content_from_dict(raw)

    def test_validate_direct(self):
        ModuleContent(questions=make_questions()).validate()
        with pytest.raises(InvalidContentError):
            ModuleContent(questions=make_questions(3)).validate()

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "content.yaml"
        path.write_text(yaml.safe_dump(_content_dict()))
        assert len(load_content(path).questions) == 10


class TestPresets:
    """Tests for built-in modules."""

    def test_four_presets(self):
        assert list_presets() == [
            "kirchhoffs_laws", "sound_localization", "interconnect_topology", "chiplets_vs_monoliths",
        ]

    def test_thresholds(self):
        assert get_preset_config("kirchhoffs_laws").assessment.pass_threshold == 7
        assert get_preset_config("chiplets_vs_monoliths").assessment.pass_threshold == 8

    def test_timing(self):
        assert get_preset_config("sound_localization").timing.cooldown_ms == 400
        assert get_preset_config("interconnect_topology").timing.animation_period_ms == 30

    def test_audio_trial_gates(self):
        gates = {g.phase: g for g in get_preset_config("sound_localization").gates}
        assert gates["play"].min_counts == {"trials": 3}
        assert gates["twist_play"].min_counts == {"low_freq_trials": 2, "high_freq_trials": 2}

    def test_all_valid(self):
        for name in list_presets():
            is_valid, err = get_preset(name).config.validate()
            assert is_valid, err

    def test_unknown_preset(self):
        with pytest.raises(UnknownPresetError):
            get_preset("nonexistent")

    def test_display_names(self):
        assert get_preset_display_names()["interconnect_topology"] == "Interconnect Topology"


class TestBundledExample:
    """The example module under examples/ loads and validates."""

    def test_example_loads(self):
        path = Path(__file__).parent.parent / "examples" / "sound_localization.yaml"
        session = GuidedSession.from_config_file(path, scheduler=ManualScheduler())
        assert session.config.gates[1].min_counts == {"trials": 5}
        assert len(session.content.transfer_items) == 4
        assert session.params["angle_deg"] == 30.0
