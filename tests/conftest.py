"""
Pytest configuration for guided_sim tests.

This file ensures the src directory is in sys.path for all tests and
provides shared content fixtures.
"""

import os
import sys

import pytest

# Add src directory to sys.path for imports
_src_root = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if _src_root not in sys.path:
    sys.path.insert(0, _src_root)

from guided_sim.assessment import Question, QuestionOption  # noqa: E402
from guided_sim.content import ModuleContent, PredictionOption, TransferItem  # noqa: E402
from guided_sim.logger import Logger, MemoryStrategy  # noqa: E402


def make_questions(count=10, correct="b"):
    """Bank where every question offers a/b/c/d and `correct` is right."""
    return tuple(
        Question(
            prompt=f"Question {i + 1}",
            options=tuple(QuestionOption(id=o, label=o.upper()) for o in "abcd"),
            correct_option_id=correct,
            explanation=f"Because {i + 1}",
        )
        for i in range(count)
    )


@pytest.fixture
def questions():
    return make_questions()


@pytest.fixture
def content():
    return ModuleContent(
        questions=make_questions(),
        transfer_items=tuple(TransferItem(title=f"Application {i}") for i in range(4)),
        predictions=(PredictionOption("a", "Increases"), PredictionOption("b", "Decreases")),
        twist_predictions=(PredictionOption("a", "Same"), PredictionOption("b", "Different")),
    )


@pytest.fixture(autouse=True)
def memory_log():
    """Route logs to memory for each test and restore the logger afterwards."""
    strategy = MemoryStrategy()
    Logger.set_log_storage_strategy(strategy)
    yield strategy
    Logger.reset()
