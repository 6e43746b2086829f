"""
Read-only presentation content of a learning module.

The engine never interprets question or item text; it only needs the shape
(how many questions, which option is correct, how many transfer items).
Content is validated once when loaded.

Content Format (YAML):
    predictions:
      - {id: a, label: "The current doubles"}
    twist_predictions:
      - {id: a, label: "Both loops are independent"}
    transfer_items:
      - {title: "Power grids", description: "..."}
    questions:
      - prompt: "..."
        scenario: "..."
        options:
          - {id: a, label: "..."}
          - {id: b, label: "..."}
        correct: b
        explanation: "..."
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .assessment import Question, QuestionOption
from .exceptions import InvalidContentError

QUESTION_COUNT = 10


@dataclass(frozen=True)
class PredictionOption:
    id: str
    label: str


@dataclass(frozen=True)
class TransferItem:
    """A real-world application card."""
    title: str
    description: str = ""


@dataclass(frozen=True)
class ModuleContent:
    """
    Everything a module shows that is not computed.

    Attributes:
        questions: Knowledge test bank, in order.
        transfer_items: Applications that must each be acknowledged.
        predictions: Options for the predict phase.
        twist_predictions: Options for the twist_predict phase.
    """
    questions: Tuple[Question, ...]
    transfer_items: Tuple[TransferItem, ...] = ()
    predictions: Tuple[PredictionOption, ...] = ()
    twist_predictions: Tuple[PredictionOption, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def validate(self, question_count: int = QUESTION_COUNT) -> None:
        """
        Check authoring invariants.

        Raises:
            InvalidContentError: On the first violated invariant.
        """
        if len(self.questions) != question_count:
            raise InvalidContentError(
                f"Expected {question_count} questions, got {len(self.questions)}"
            )
        for i, q in enumerate(self.questions):
            ids = q.option_ids()
            if len(ids) < 2:
                raise InvalidContentError(f"Question {i}: needs at least 2 options")
            if len(set(ids)) != len(ids):
                raise InvalidContentError(f"Question {i}: duplicate option ids")
            if q.correct_option_id not in ids:
                raise InvalidContentError(
                    f"Question {i}: correct option '{q.correct_option_id}' not among {ids}"
                )
        for label, options in (("predictions", self.predictions), ("twist_predictions", self.twist_predictions)):
            ids = [o.id for o in options]
            if len(set(ids)) != len(ids):
                raise InvalidContentError(f"{label}: duplicate option ids")

    def prediction_ids(self) -> List[str]:
        return [o.id for o in self.predictions]

    def twist_prediction_ids(self) -> List[str]:
        return [o.id for o in self.twist_predictions]


def _options(raw: Any, where: str) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        raise InvalidContentError(f"{where}: expected a list")
    for entry in raw:
        if not isinstance(entry, dict) or "id" not in entry:
            raise InvalidContentError(f"{where}: every option needs an id")
    return raw


def content_from_dict(raw: Dict[str, Any], question_count: int = QUESTION_COUNT) -> ModuleContent:
    """
    Build and validate ModuleContent from plain data.

    Raises:
        InvalidContentError: If the data is malformed or fails validation.
    """
    if not isinstance(raw, dict):
        raise InvalidContentError("Content must be a mapping")

    questions = []
    for i, q in enumerate(raw.get("questions") or []):
        if not isinstance(q, dict):
            raise InvalidContentError(f"Question {i}: expected a mapping")
        options = tuple(
            QuestionOption(id=str(o["id"]), label=str(o.get("label", "")))
            for o in _options(q.get("options"), f"Question {i}")
        )
        questions.append(Question(
            prompt=str(q.get("prompt", "")),
            options=options,
            correct_option_id=str(q.get("correct", "")),
            explanation=str(q.get("explanation", "")),
            scenario=str(q.get("scenario", "")),
        ))

    content = ModuleContent(
        questions=tuple(questions),
        transfer_items=tuple(
            TransferItem(title=str(t.get("title", "")), description=str(t.get("description", "")))
            for t in raw.get("transfer_items") or []
        ),
        predictions=tuple(
            PredictionOption(id=str(o["id"]), label=str(o.get("label", "")))
            for o in _options(raw.get("predictions") or [], "predictions")
        ),
        twist_predictions=tuple(
            PredictionOption(id=str(o["id"]), label=str(o.get("label", "")))
            for o in _options(raw.get("twist_predictions") or [], "twist_predictions")
        ),
        metadata=dict(raw.get("metadata") or {}),
    )
    content.validate(question_count)
    return content


def load_content(path: Path, question_count: int = QUESTION_COUNT) -> ModuleContent:
    """
    Load and validate module content from a YAML file.

    Raises:
        InvalidContentError: If content is invalid.
        FileNotFoundError: If file doesn't exist.
    """
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)
    return content_from_dict(raw, question_count)
