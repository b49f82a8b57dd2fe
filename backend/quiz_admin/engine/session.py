"""
In-memory edit session over one quiz tree.

An `EditSession` owns a working copy of a loaded quiz: its scalar fields,
an arena of question slots (each owning an arena of choices) and a
`TombstoneTracker`. Every mutation is synchronous and happens in place;
nothing is sent anywhere until the session is compiled and saved by the
caller.

Questions and choices are addressed by their current position, the way an
editing surface sees them. A removed entity that was already persisted is
tombstoned in the same call that drops it from the tree; an entity created
in this session is simply dropped.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Type

from pydantic import BaseModel

from quiz_admin.engine.arena import Arena
from quiz_admin.engine.compiler import compile_update
from quiz_admin.engine.tombstones import TombstoneTracker
from quiz_admin.errors import FieldNotEditable, SessionClosed
from quiz_admin.models.payload_models import UpdatePayload
from quiz_admin.models.quiz_models import Choice, Question, Quiz

logger = logging.getLogger(__name__)

NEW_QUESTION_TEXT = "New Question"
NEW_QUESTION_POINTS = 1
NEW_QUESTION_CHOICES = (("Choice 1", True), ("Choice 2", False))

QUIZ_FIELDS = frozenset({"title", "description", "subject", "time_limit", "passing_score", "max_attempts"})
QUESTION_FIELDS = frozenset({"text", "explanation", "points"})
CHOICE_FIELDS = frozenset({"text", "is_correct"})


def _resolve_field(model: Type[BaseModel], name: str, editable: FrozenSet[str]) -> str:
    """Map a field name or its wire alias to an editable attribute name."""
    for attr, info in model.model_fields.items():
        if name == attr or name == info.alias:
            if attr in editable:
                return attr
            break
    raise FieldNotEditable(f"{model.__name__}.{name} cannot be edited (editable: {', '.join(sorted(editable))})")


@dataclass
class QuestionSlot:
    # `question.choices` stays empty; the arena below is the live list.
    question: Question
    choices: Arena[Choice] = field(default_factory=lambda: Arena("choice"))


class EditSession:
    def __init__(self, quiz: Quiz):
        self.quiz_id = quiz.id
        self._details = quiz.model_copy(update={"questions": []})
        self._questions: Arena[QuestionSlot] = Arena("question")
        self.tombstones = TombstoneTracker()
        self.closed = False

        for question in quiz.questions:
            slot = QuestionSlot(question.model_copy(update={"choices": []}))
            for choice in question.choices:
                slot.choices.append(choice.model_copy())
            self._questions.append(slot)

        logger.info("Edit session opened for quiz %s (%d questions)", self.quiz_id, len(self._questions))

    def _ensure_open(self) -> None:
        if self.closed:
            raise SessionClosed(f"Edit session for quiz {self.quiz_id} is closed")

    # ── quiz details ──────────────────────────────────────────────────────

    def update_quiz(self, field_name: str, value: Any) -> None:
        self._ensure_open()
        attr = _resolve_field(Quiz, field_name, QUIZ_FIELDS)
        setattr(self._details, attr, value)
        logger.debug("Quiz %s: %s updated", self.quiz_id, attr)

    # ── questions ─────────────────────────────────────────────────────────

    def add_question(self) -> int:
        """Append a fresh, answerable question and return its index."""
        self._ensure_open()
        slot = QuestionSlot(Question(text=NEW_QUESTION_TEXT, points=NEW_QUESTION_POINTS))
        for text, is_correct in NEW_QUESTION_CHOICES:
            slot.choices.append(Choice(text=text, is_correct=is_correct))
        self._questions.append(slot)
        logger.debug("Quiz %s: question added at %d", self.quiz_id, len(self._questions) - 1)
        return len(self._questions) - 1

    def remove_question(self, index: int) -> None:
        self._ensure_open()
        slot = self._questions.at(index)
        if slot.question.id is not None:
            self.tombstones.record_question_deleted(slot.question.id)
        self._questions.pop(index)
        logger.debug("Quiz %s: question %d removed (id=%s)", self.quiz_id, index, slot.question.id)

    def update_question(self, index: int, field_name: str, value: Any) -> None:
        self._ensure_open()
        slot = self._questions.at(index)
        attr = _resolve_field(Question, field_name, QUESTION_FIELDS)
        setattr(slot.question, attr, value)

    def move_question(self, from_index: int, to_index: int) -> None:
        self._ensure_open()
        self._questions.move(from_index, to_index)

    # ── choices ───────────────────────────────────────────────────────────

    def add_choice(self, question_index: int) -> int:
        self._ensure_open()
        choices = self._questions.at(question_index).choices
        choices.append(Choice(text=f"Option {len(choices) + 1}", is_correct=False))
        return len(choices) - 1

    def remove_choice(self, question_index: int, choice_index: int) -> None:
        self._ensure_open()
        slot = self._questions.at(question_index)
        choice = slot.choices.at(choice_index)
        if choice.id is not None and slot.question.id is not None:
            self.tombstones.record_choice_deleted(slot.question.id, choice.id)
        slot.choices.pop(choice_index)
        logger.debug(
            "Quiz %s: choice %d of question %d removed (id=%s)",
            self.quiz_id,
            choice_index,
            question_index,
            choice.id,
        )

    def update_choice(self, question_index: int, choice_index: int, field_name: str, value: Any) -> None:
        self._ensure_open()
        choice = self._questions.at(question_index).choices.at(choice_index)
        attr = _resolve_field(Choice, field_name, CHOICE_FIELDS)
        setattr(choice, attr, value)

    def move_choice(self, question_index: int, from_index: int, to_index: int) -> None:
        self._ensure_open()
        self._questions.at(question_index).choices.move(from_index, to_index)

    # ── views ─────────────────────────────────────────────────────────────

    @property
    def question_count(self) -> int:
        return len(self._questions)

    def choice_count(self, question_index: int) -> int:
        return len(self._questions.at(question_index).choices)

    def snapshot(self) -> Quiz:
        """Detached copy of the working tree, positions filled from current order."""
        self._ensure_open()
        questions = []
        for position, slot in enumerate(self._questions):
            choices = [
                choice.model_copy(update={"position": choice_position})
                for choice_position, choice in enumerate(slot.choices)
            ]
            questions.append(slot.question.model_copy(update={"position": position, "choices": choices}))
        return self._details.model_copy(update={"questions": questions})

    def compile(self) -> UpdatePayload:
        self._ensure_open()
        return compile_update(self.snapshot(), self.tombstones)

    # ── lifecycle ─────────────────────────────────────────────────────────

    def close(self) -> None:
        self.tombstones.clear()
        self._questions.clear()
        self.closed = True

    def discard(self) -> None:
        self._ensure_open()
        self.close()
        logger.info("Edit session for quiz %s discarded", self.quiz_id)

