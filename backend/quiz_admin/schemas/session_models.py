from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional

from quiz_admin.models.quiz_models import Quiz, QuizSummary


class EditSessionCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quiz_id: int = Field(alias="quizId")


class EditSessionView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    quiz: Quiz
    pending_deletions: int = Field(0, alias="pendingDeletions")


class FieldUpdate(BaseModel):
    field: str
    value: Any = None


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to_index: int = Field(alias="toIndex")


class UploadResult(BaseModel):
    count: int
    quizzes: List[QuizSummary]


class SaveResult(BaseModel):
    quiz: Quiz
    message: Optional[str] = None
