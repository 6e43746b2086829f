"""
Tests for phase ordering helpers.
"""

from guided_sim.phases import (
    FIRST_PHASE,
    LAST_PHASE,
    PHASE_LABELS,
    PHASE_ORDER,
    Phase,
    is_valid_phase,
    next_phase,
    parse_phase,
    previous_phase,
)


class TestOrdering:

    def test_ten_phases(self):
        assert len(PHASE_ORDER) == 10
        assert FIRST_PHASE == Phase.HOOK
        assert LAST_PHASE == Phase.MASTERY

    def test_next_and_previous(self):
        assert next_phase(Phase.TRANSFER) == Phase.TEST
        assert previous_phase(Phase.PLAY) == Phase.PREDICT
        assert next_phase(Phase.MASTERY) is None
        assert previous_phase(Phase.HOOK) is None

    def test_every_phase_labelled(self):
        assert set(PHASE_LABELS) == set(Phase)


class TestParsing:

    def test_strings_parse(self):
        assert parse_phase("twist_play") == Phase.TWIST_PLAY
        assert parse_phase(Phase.TEST) == Phase.TEST

    def test_invalid_values(self):
        for value in ("Hook", "", "warmup", None, 3):
            assert parse_phase(value) is None
            assert not is_valid_phase(value)
