"""
Load, save and discard edit sessions against a `QuizBackend`, plus the
read-only admin queries (quiz list, statistics).

Backend failures are translated into `LoadError` / `SaveError` here; the
engine itself never talks to the backend.
"""
import logging
from collections import defaultdict
from typing import Dict, List

from pydantic import ValidationError as PydanticValidationError

from quiz_admin.engine.session import EditSession
from quiz_admin.errors import LoadError, SaveError, ValidationError
from quiz_admin.models.quiz_models import Quiz, QuizOverview, QuizSummary, SubjectCount, UserStats
from quiz_admin.storage.backend import BackendError, QuizBackend

logger = logging.getLogger(__name__)


def fetch_quiz(backend: QuizBackend, quiz_id: int) -> Quiz:
    try:
        detail = backend.fetch_quiz_detail(quiz_id)
    except BackendError as e:
        logger.warning("Failed to fetch quiz %s: %s", quiz_id, e)
        raise LoadError(f"Failed to load quiz {quiz_id}: {e}") from e
    try:
        return Quiz.model_validate(detail)
    except PydanticValidationError as e:
        logger.warning("Quiz %s detail is malformed: %s", quiz_id, e)
        raise LoadError(f"Quiz {quiz_id} detail is malformed") from e


def load_session(backend: QuizBackend, quiz_id: int) -> EditSession:
    return EditSession(fetch_quiz(backend, quiz_id))


def save_session(backend: QuizBackend, session: EditSession) -> Quiz:
    """
    Submit the session's compiled diff and return the canonical quiz.

    On `SaveError` the session is left exactly as it was so the save can be
    retried. Once the backend has accepted the update the session is closed,
    even if the response turns out to be malformed or the re-fetch fails.
    """
    payload = session.compile()
    try:
        response = backend.submit_quiz_update(session.quiz_id, payload.to_wire())
    except BackendError as e:
        logger.error("Saving quiz %s failed: %s", session.quiz_id, e)
        raise SaveError(f"Failed to update quiz {session.quiz_id}: {e}") from e

    session.close()
    try:
        Quiz.model_validate(response)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Backend accepted the update to quiz {session.quiz_id} but returned a malformed quiz",
            errors=e.errors(),
        ) from e

    logger.info("Quiz %s saved", session.quiz_id)
    # Re-fetch rather than trust the response; the backend may derive fields.
    return fetch_quiz(backend, session.quiz_id)


def discard_session(session: EditSession) -> None:
    session.discard()


def list_quizzes(backend: QuizBackend) -> List[QuizSummary]:
    try:
        rows = backend.list_quizzes()
    except BackendError as e:
        raise LoadError(f"Failed to fetch quizzes: {e}") from e
    try:
        return [QuizSummary.model_validate(row) for row in rows]
    except PydanticValidationError as e:
        logger.warning("Quiz list is malformed: %s", e)
        raise LoadError("Quiz list from backend is malformed") from e


def delete_quiz(backend: QuizBackend, quiz_id: int) -> None:
    try:
        backend.delete_quiz(quiz_id)
    except BackendError as e:
        raise SaveError(f"Failed to delete quiz {quiz_id}: {e}") from e


def fetch_user_stats(backend: QuizBackend) -> UserStats:
    try:
        raw = backend.fetch_user_stats()
    except BackendError as e:
        raise LoadError(f"Failed to load user stats: {e}") from e
    try:
        return UserStats.model_validate(raw)
    except PydanticValidationError as e:
        logger.warning("User stats are malformed: %s", e)
        raise LoadError("User stats from backend are malformed") from e


def quiz_overview(backend: QuizBackend) -> QuizOverview:
    quizzes = list_quizzes(backend)
    per_subject: Dict[str, Dict[str, int]] = defaultdict(lambda: {"quizzes": 0, "questions": 0})
    for quiz in quizzes:
        stats = per_subject[quiz.subject or "unassigned"]
        stats["quizzes"] += 1
        stats["questions"] += quiz.question_count

    return QuizOverview(
        total_quizzes=len(quizzes),
        total_questions=sum(q.question_count for q in quizzes),
        subjects=[SubjectCount(subject=name, **stats) for name, stats in sorted(per_subject.items())],
    )
