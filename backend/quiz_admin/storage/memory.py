import copy
import itertools
import logging
import threading
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from quiz_admin.engine.session import EditSession
from quiz_admin.models.payload_models import ChoiceDelete, QuestionDelete, QuestionUpsert, UpdatePayload
from quiz_admin.storage.backend import BackendError, QuizNotFound

logger = logging.getLogger(__name__)

QUIZ_SCALARS = ("title", "description", "subject", "timeLimit", "passingScore", "maxAttempts")


class InMemoryQuizBackend:
    """
    Reference backend keeping quizzes as wire-shaped dicts.

    Applies partial updates the way the real service does: entries with an
    id update or delete that row, entries without one create it, deleting a
    question deletes its choices, and `correctChoiceIndexes` decides which
    choices are correct.
    """

    def __init__(self, total_users: int = 0, online_users: int = 0):
        self.quizzes: Dict[int, Dict[str, Any]] = {}
        self.total_users = total_users
        self.online_users = online_users
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _new_id(self) -> int:
        return next(self._ids)

    def _get(self, quiz_id: int) -> Dict[str, Any]:
        quiz = self.quizzes.get(quiz_id)
        if quiz is None:
            raise QuizNotFound(f"Quiz {quiz_id} not found")
        return quiz

    @staticmethod
    def _summary(quiz: Dict[str, Any]) -> Dict[str, Any]:
        summary = {key: quiz.get(key) for key in ("id",) + QUIZ_SCALARS}
        summary["_count"] = {"questions": len(quiz["questions"])}
        return summary

    def list_quizzes(self) -> List[Dict[str, Any]]:
        return [self._summary(quiz) for quiz in self.quizzes.values()]

    def fetch_quiz_detail(self, quiz_id: int) -> Dict[str, Any]:
        return copy.deepcopy(self._get(quiz_id))

    def delete_quiz(self, quiz_id: int) -> None:
        with self._lock:
            self._get(quiz_id)
            del self.quizzes[quiz_id]
        logger.info("Deleted quiz %s", quiz_id)

    def fetch_user_stats(self) -> Dict[str, Any]:
        return {"totalUsers": self.total_users, "onlineUsers": self.online_users}

    # ── bulk import ───────────────────────────────────────────────────────

    def import_quizzes(self, definitions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        created = []
        with self._lock:
            for definition in definitions:
                quiz = {key: definition.get(key) for key in QUIZ_SCALARS}
                quiz["id"] = self._new_id()
                quiz["questions"] = []
                for order, qdef in enumerate(definition.get("questions") or []):
                    correct = set(qdef.get("correctChoiceIndexes") or [])
                    quiz["questions"].append({
                        "id": self._new_id(),
                        "text": qdef["text"],
                        "explanation": qdef.get("explanation"),
                        "points": qdef.get("points", 1),
                        "order": order,
                        "choices": [
                            {"id": self._new_id(), "text": cdef["text"], "isCorrect": i in correct, "order": i}
                            for i, cdef in enumerate(qdef.get("choices") or [])
                        ],
                    })
                self.quizzes[quiz["id"]] = quiz
                created.append(self._summary(quiz))
        logger.info("Imported %d quizzes", len(created))
        return created

    # ── partial update ────────────────────────────────────────────────────

    def submit_quiz_update(self, quiz_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            update = UpdatePayload.model_validate(payload)
        except PydanticValidationError as e:
            raise BackendError(f"Malformed update payload: {e}") from e

        with self._lock:
            # Work on a copy so a rejected update leaves the stored quiz untouched.
            quiz = copy.deepcopy(self._get(quiz_id))
            wire = update.to_wire()
            for key in QUIZ_SCALARS:
                quiz[key] = wire[key]

            questions = {q["id"]: q for q in quiz["questions"]}
            for entry in update.questions:
                if isinstance(entry, QuestionDelete):
                    if questions.pop(entry.id, None) is None:
                        raise BackendError(f"Question {entry.id} is not part of quiz {quiz_id}")
                    continue
                question = self._upsert_question(quiz_id, questions, entry)
                questions[question["id"]] = question

            quiz["questions"] = sorted(questions.values(), key=lambda q: q["order"])
            self.quizzes[quiz_id] = quiz

        logger.info("Applied update to quiz %s (%d questions)", quiz_id, len(quiz["questions"]))
        return copy.deepcopy(quiz)

    def _upsert_question(self, quiz_id: int, questions: Dict[int, Dict[str, Any]], entry: QuestionUpsert) -> Dict[str, Any]:
        if entry.id is None:
            question = {"id": self._new_id(), "choices": []}
        elif entry.id in questions:
            question = questions[entry.id]
        else:
            raise BackendError(f"Question {entry.id} is not part of quiz {quiz_id}")

        question.update(text=entry.text, explanation=entry.explanation, points=entry.points, order=entry.position)

        choices = {c["id"]: c for c in question["choices"]}
        for centry in entry.choices:
            if isinstance(centry, ChoiceDelete):
                if choices.pop(centry.id, None) is None:
                    raise BackendError(f"Choice {centry.id} is not part of question {question['id']}")
                continue
            if centry.id is None:
                choice = {"id": self._new_id()}
            elif centry.id in choices:
                choice = choices[centry.id]
            else:
                raise BackendError(f"Choice {centry.id} is not part of question {question['id']}")
            choice.update(text=centry.text, order=centry.position)
            choices[choice["id"]] = choice

        correct = set(entry.correct_positions)
        for choice in choices.values():
            choice["isCorrect"] = choice["order"] in correct
        question["choices"] = sorted(choices.values(), key=lambda c: c["order"])
        return question


# In-memory registries for the running service
BACKEND = InMemoryQuizBackend()
EDIT_SESSIONS: Dict[str, EditSession] = {}
# One lock per open edit session; routes run in a threadpool
SESSION_LOCKS: Dict[str, threading.Lock] = {}
