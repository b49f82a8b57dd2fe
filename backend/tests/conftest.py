import pytest

from quiz_admin.engine.session import EditSession
from quiz_admin.models.quiz_models import Quiz
from quiz_admin.seed import seed
from quiz_admin.storage.memory import InMemoryQuizBackend


def quiz_detail():
    """Wire-shaped detail of a persisted quiz with two questions."""
    return {
        "id": 1,
        "title": "Fractions",
        "description": "Adding fractions",
        "subject": "maths",
        "timeLimit": 60,
        "passingScore": 1,
        "maxAttempts": None,
        "questions": [
            {
                "id": 10,
                "text": "Q10",
                "points": 1,
                "order": 0,
                "choices": [
                    {"id": 100, "text": "A", "isCorrect": True, "order": 0},
                    {"id": 101, "text": "B", "isCorrect": False, "order": 1},
                ],
            },
            {
                "id": 20,
                "text": "Q20",
                "explanation": "why",
                "points": 2,
                "order": 1,
                "choices": [
                    {"id": 200, "text": "C", "isCorrect": False, "order": 0},
                    {"id": 201, "text": "D", "isCorrect": True, "order": 1},
                    {"id": 202, "text": "E", "isCorrect": False, "order": 2},
                ],
            },
        ],
    }


@pytest.fixture
def quiz():
    return Quiz.model_validate(quiz_detail())


@pytest.fixture
def session(quiz):
    return EditSession(quiz)


@pytest.fixture
def single_question_session():
    """Quiz{id:1, questions:[{id:10, choices:[{id:100, correct}, {id:101}]}]}."""
    detail = quiz_detail()
    detail["questions"] = detail["questions"][:1]
    return EditSession(Quiz.model_validate(detail))


@pytest.fixture
def backend():
    backend = InMemoryQuizBackend(total_users=42, online_users=5)
    seed(backend)
    return backend


@pytest.fixture
def first_quiz_id(backend):
    return backend.list_quizzes()[0]["id"]
