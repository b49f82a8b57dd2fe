"""
Partial-update payload sent to the backend when an edit session is saved.

Every question and choice entry is either an upsert or a delete. The two
shapes are separate models so a delete entry can never carry text fields
and an upsert can never be flagged for deletion. On the wire the variant
is told apart by `_delete`; upserts without an `id` create new rows.
"""
from pydantic import BaseModel, ConfigDict, Field, model_serializer
from typing import Optional, List, Literal, Union


class ChoiceUpsert(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    id: Optional[int] = None
    text: str
    position: int = Field(alias="order")
    delete: Literal[False] = Field(False, alias="_delete")

    @model_serializer(mode="wrap")
    def omit_missing_id(self, handler):
        data = handler(self)
        if self.id is None:
            data.pop("id", None)
        return data


class ChoiceDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    id: int
    delete: Literal[True] = Field(True, alias="_delete")


ChoiceEntry = Union[ChoiceUpsert, ChoiceDelete]


class QuestionUpsert(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    id: Optional[int] = None
    text: str
    explanation: Optional[str] = None
    points: Union[int, float]
    position: int = Field(alias="order")
    choices: List[ChoiceEntry] = []
    correct_positions: List[int] = Field(default_factory=list, alias="correctChoiceIndexes")
    delete: Literal[False] = Field(False, alias="_delete")

    @model_serializer(mode="wrap")
    def omit_missing_id(self, handler):
        data = handler(self)
        if self.id is None:
            data.pop("id", None)
        return data


class QuestionDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    id: int
    delete: Literal[True] = Field(True, alias="_delete")


QuestionEntry = Union[QuestionUpsert, QuestionDelete]


class UpdatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    title: str
    description: Optional[str] = ""
    subject: Optional[str] = ""
    time_limit: Optional[int] = Field(None, alias="timeLimit")
    passing_score: Optional[Union[int, float]] = Field(None, alias="passingScore")
    max_attempts: Optional[int] = Field(None, alias="maxAttempts")
    questions: List[QuestionEntry] = []

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
