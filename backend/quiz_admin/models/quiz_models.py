from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field
from typing import Optional, List, Union


class Choice(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: Optional[int] = None
    text: str
    is_correct: bool = Field(False, alias="isCorrect")
    position: int = Field(0, alias="order")


class Question(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: Optional[int] = None
    text: str
    explanation: Optional[str] = None
    points: Union[int, float] = 1
    position: int = Field(0, alias="order")
    choices: List[Choice] = []


class Quiz(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: int
    title: str
    description: Optional[str] = ""
    subject: Optional[str] = ""
    time_limit: Optional[int] = Field(None, alias="timeLimit")
    passing_score: Optional[Union[int, float]] = Field(None, alias="passingScore")
    max_attempts: Optional[int] = Field(None, alias="maxAttempts")
    questions: List[Question] = []


class QuizSummary(BaseModel):
    """One row of the quiz list; the backend reports the question count under `_count`."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = ""
    subject: Optional[str] = ""
    time_limit: Optional[int] = Field(None, alias="timeLimit")
    passing_score: Optional[Union[int, float]] = Field(None, alias="passingScore")
    max_attempts: Optional[int] = Field(None, alias="maxAttempts")
    question_count: int = Field(
        0,
        validation_alias=AliasChoices(AliasPath("_count", "questions"), "questionCount", "question_count"),
        serialization_alias="questionCount",
    )


class UserStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(alias="totalUsers")
    online_users: int = Field(alias="onlineUsers")


class SubjectCount(BaseModel):
    subject: str
    quizzes: int
    questions: int


class QuizOverview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_quizzes: int = Field(alias="totalQuizzes")
    total_questions: int = Field(alias="totalQuestions")
    subjects: List[SubjectCount] = []
