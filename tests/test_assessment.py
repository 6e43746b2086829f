"""
Tests for knowledge test scoring.

These tests verify:
- Score equals the number of matching answers
- Submission is idempotent and freezes answers
- Zero-answer submission is a no-op
- Pass thresholds and retake
"""

import pytest

from guided_sim.assessment import AssessmentEngine


def _answer(engine, correct_count, correct="b", wrong="a"):
    for i in range(engine.question_count):
        engine.record_answer(i, correct if i < correct_count else wrong)


class TestScoring:
    """Score correctness."""

    @pytest.mark.parametrize("k", [0, 3, 7, 10])
    def test_k_matches_gives_score_k(self, questions, k):
        engine = AssessmentEngine(questions)
        _answer(engine, k)
        assert engine.submit() == k

    def test_submit_twice_same_score(self, questions):
        engine = AssessmentEngine(questions)
        _answer(engine, 6)
        first = engine.submit()
        assert engine.submit() == first

    def test_partial_answers_scored(self, questions):
        engine = AssessmentEngine(questions)
        engine.record_answer(0, "b")
        engine.record_answer(1, "b")
        assert not engine.can_submit()
        assert engine.submit() == 2

    def test_zero_answers_no_op(self, questions):
        engine = AssessmentEngine(questions)
        assert engine.submit() is None
        assert not engine.submitted


class TestAnswering:
    """Answer recording rules."""

    def test_overwrite_answer(self, questions):
        engine = AssessmentEngine(questions)
        engine.record_answer(0, "a")
        engine.record_answer(0, "b")
        assert engine.answer_for(0) == "b"

    def test_out_of_range_ignored(self, questions):
        engine = AssessmentEngine(questions)
        assert not engine.record_answer(10, "b")
        assert not engine.record_answer(-1, "b")

    def test_frozen_after_submit(self, questions):
        engine = AssessmentEngine(questions)
        _answer(engine, 5)
        engine.submit()
        assert not engine.record_answer(9, "b")
        assert engine.score == 5

    def test_can_submit_when_complete(self, questions):
        engine = AssessmentEngine(questions)
        _answer(engine, 0)
        assert engine.can_submit()


class TestPassing:
    """Thresholds and retake."""

    def test_not_passed_before_submit(self, questions):
        assert not AssessmentEngine(questions).passed()

    def test_default_threshold(self, questions):
        engine = AssessmentEngine(questions, pass_threshold=7)
        _answer(engine, 7)
        engine.submit()
        assert engine.passed()
        assert not engine.passed(threshold=8)

    def test_retake_clears(self, questions):
        engine = AssessmentEngine(questions)
        _answer(engine, 9)
        engine.submit()
        engine.retake()
        assert engine.score is None
        assert engine.answered_count == 0
        assert engine.questions == questions

    def test_review_rows(self, questions):
        engine = AssessmentEngine(questions)
        assert engine.review() == []
        _answer(engine, 1)
        engine.submit()
        rows = engine.review()
        assert len(rows) == 10
        assert rows[0].is_correct
        assert not rows[1].is_correct
        assert rows[1].correct_option_id == "b"
        assert engine.is_correct(0) is True
