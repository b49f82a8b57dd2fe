import logging
from typing import Any, Dict, List

from quiz_admin.storage.backend import QuizBackend

logger = logging.getLogger(__name__)

# Same shape as the bulk upload format
DEMO_QUIZZES: List[Dict[str, Any]] = [
    {
        "title": "Fractions Warm-up",
        "description": "Quick check on adding and simplifying fractions.",
        "subject": "maths",
        "timeLimit": 120,
        "passingScore": 2,
        "maxAttempts": 3,
        "questions": [
            {
                "text": "What is 1/2 + 1/4?",
                "explanation": "Convert to quarters: 2/4 + 1/4 = 3/4.",
                "points": 1,
                "choices": [{"text": "3/4"}, {"text": "2/6"}, {"text": "1/6"}],
                "correctChoiceIndexes": [0],
            },
            {
                "text": "Which fractions are equal to 1/2?",
                "points": 2,
                "choices": [{"text": "2/4"}, {"text": "3/5"}, {"text": "4/8"}],
                "correctChoiceIndexes": [0, 2],
            },
        ],
    },
    {
        "title": "Cell Biology Basics",
        "description": "Organelles and what they do.",
        "subject": "biology",
        "timeLimit": None,
        "passingScore": 1,
        "maxAttempts": None,
        "questions": [
            {
                "text": "Which organelle produces most of the cell's ATP?",
                "explanation": "Mitochondria host oxidative phosphorylation.",
                "points": 1,
                "choices": [{"text": "Ribosome"}, {"text": "Mitochondrion"}, {"text": "Golgi apparatus"}],
                "correctChoiceIndexes": [1],
            },
        ],
    },
]


def seed(backend: QuizBackend) -> List[Dict[str, Any]]:
    created = backend.import_quizzes(DEMO_QUIZZES)
    for quiz in created:
        logger.info("[seed] Created quiz %r id=%s", quiz["title"], quiz["id"])
    return created
