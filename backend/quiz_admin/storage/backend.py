"""
Contract of the quiz backend the admin tool talks to.

Every method takes and returns plain JSON-shaped data using the backend's
camelCase field names; parsing into models happens on the caller's side.
Implementations raise `BackendError` (or a subclass) on failure.
"""
from typing import Any, Dict, List, Protocol


class BackendError(Exception):
    pass


class QuizNotFound(BackendError):
    pass


class QuizBackend(Protocol):
    def list_quizzes(self) -> List[Dict[str, Any]]:
        ...

    def fetch_quiz_detail(self, quiz_id: int) -> Dict[str, Any]:
        ...

    def submit_quiz_update(self, quiz_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def delete_quiz(self, quiz_id: int) -> None:
        ...

    def import_quizzes(self, definitions: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ...

    def fetch_user_stats(self) -> Dict[str, Any]:
        ...
