"""
Knowledge test scoring.

The engine holds the answer set for a fixed question bank and computes the
score exactly once, at submission. After submission the answers are frozen
until `retake()`.

The engine is total: every call is safe in every state. Calls that make no
sense in the current state (answering after submission, submitting with no
answers) are ignored and return False/None.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .logger import Logger


@dataclass(frozen=True)
class QuestionOption:
    id: str
    label: str


@dataclass(frozen=True)
class Question:
    """
    One multiple-choice question.

    Attributes:
        prompt: Question text.
        options: Ordered answer options.
        correct_option_id: Id of the single canonical-correct option.
        explanation: Shown after submission.
        scenario: Optional context paragraph shown above the prompt.
    """
    prompt: str
    options: Tuple[QuestionOption, ...]
    correct_option_id: str
    explanation: str = ""
    scenario: str = ""

    def option_ids(self) -> List[str]:
        return [o.id for o in self.options]


@dataclass(frozen=True)
class ReviewRow:
    index: int
    chosen: Optional[str]
    correct_option_id: str
    is_correct: bool
    explanation: str


class AssessmentEngine:
    """
    Answer recording and scoring for one question bank.

    Args:
        questions: Fixed, ordered bank.
        pass_threshold: Default minimum score for `passed()`.
    """

    def __init__(self, questions: Sequence[Question], pass_threshold: int = 7):
        self._questions: Tuple[Question, ...] = tuple(questions)
        self.pass_threshold = int(pass_threshold)
        self._answers: List[Optional[str]] = [None] * len(self._questions)
        self._score: Optional[int] = None

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def answers(self) -> Tuple[Optional[str], ...]:
        return tuple(self._answers)

    @property
    def answered_count(self) -> int:
        return sum(1 for a in self._answers if a is not None)

    @property
    def submitted(self) -> bool:
        return self._score is not None

    @property
    def score(self) -> Optional[int]:
        return self._score

    def record_answer(self, index: int, option_id: str) -> bool:
        """
        Record (or overwrite) the answer to question `index`.

        Returns:
            True if recorded; False after submission or for an index outside
            the bank.
        """
        if self.submitted:
            Logger.log(f"Answer to question {index} ignored: test already submitted")
            return False
        if not (0 <= index < len(self._questions)):
            Logger.log(f"Answer ignored: question index {index} out of range")
            return False
        self._answers[index] = option_id
        return True

    def answer_for(self, index: int) -> Optional[str]:
        if 0 <= index < len(self._answers):
            return self._answers[index]
        return None

    def can_submit(self) -> bool:
        """True once every question has an answer and the test is still open."""
        return not self.submitted and all(a is not None for a in self._answers)

    def submit(self) -> Optional[int]:
        """
        Score the answer set and freeze it.

        Returns:
            The score; the same score again on repeat calls; None when no
            question has been answered.
        """
        if self._score is not None:
            return self._score
        if self.answered_count == 0:
            Logger.log("Submit ignored: no answers recorded")
            return None
        self._score = sum(
            1 for q, a in zip(self._questions, self._answers) if a == q.correct_option_id
        )
        Logger.log(f"Test submitted: {self._score}/{len(self._questions)}", Logger.LogPriority.INFO)
        return self._score

    def passed(self, threshold: Optional[int] = None) -> bool:
        if self._score is None:
            return False
        limit = self.pass_threshold if threshold is None else threshold
        return self._score >= limit

    def retake(self) -> None:
        """Clear answers and score; the bank and its order are unchanged."""
        self._answers = [None] * len(self._questions)
        self._score = None

    def is_correct(self, index: int) -> Optional[bool]:
        """Per-question result after submission, None before."""
        if self._score is None or not (0 <= index < len(self._questions)):
            return None
        return self._answers[index] == self._questions[index].correct_option_id

    def review(self) -> List[ReviewRow]:
        """Per-question results; empty before submission."""
        if self._score is None:
            return []
        return [
            ReviewRow(
                index=i,
                chosen=a,
                correct_option_id=q.correct_option_id,
                is_correct=a == q.correct_option_id,
                explanation=q.explanation,
            )
            for i, (q, a) in enumerate(zip(self._questions, self._answers))
        ]
