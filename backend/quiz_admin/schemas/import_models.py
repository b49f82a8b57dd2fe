from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Union


class ChoiceDefinition(BaseModel):
    text: str = Field(..., min_length=1)


class QuestionDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1, description="Question text (required)")
    explanation: Optional[str] = None
    points: Union[int, float] = 1
    choices: List[ChoiceDefinition] = Field(..., min_length=1)
    correct_choice_indexes: List[int] = Field(
        default_factory=list,
        alias="correctChoiceIndexes",
        description="0-based positions of the correct choices",
    )

    @model_validator(mode="after")
    def indexes_point_at_choices(self):
        bad = [i for i in self.correct_choice_indexes if not 0 <= i < len(self.choices)]
        if bad:
            raise ValueError(f"correctChoiceIndexes {bad} out of range for {len(self.choices)} choices")
        if len(set(self.correct_choice_indexes)) != len(self.correct_choice_indexes):
            raise ValueError("correctChoiceIndexes contains duplicates")
        return self


class QuizDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, description="Quiz title (required)")
    description: Optional[str] = None
    subject: Optional[str] = None
    time_limit: Optional[int] = Field(None, alias="timeLimit")
    passing_score: Optional[Union[int, float]] = Field(None, alias="passingScore")
    max_attempts: Optional[int] = Field(None, alias="maxAttempts")
    questions: List[QuestionDefinition] = []
