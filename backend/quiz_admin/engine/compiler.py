"""
Diff compiler: turns the current quiz tree plus the session's tombstones
into one partial-update payload.

Positions and correct-answer indexes are always derived from the order of
the tree handed in; whatever `position` values the tree carries are ignored.
"""
from typing import List

from quiz_admin.engine.tombstones import TombstoneTracker
from quiz_admin.models.payload_models import (
    ChoiceDelete,
    ChoiceEntry,
    ChoiceUpsert,
    QuestionDelete,
    QuestionEntry,
    QuestionUpsert,
    UpdatePayload,
)
from quiz_admin.models.quiz_models import Question, Quiz


def compile_question(question: Question, position: int, tombstones: TombstoneTracker) -> QuestionUpsert:
    choices: List[ChoiceEntry] = []
    correct_positions: List[int] = []
    for choice_position, choice in enumerate(question.choices):
        choices.append(ChoiceUpsert(id=choice.id, text=choice.text, position=choice_position))
        if choice.is_correct:
            correct_positions.append(choice_position)

    if question.id is not None:
        choices.extend(ChoiceDelete(id=cid) for cid in tombstones.choice_tombstones_for(question.id))

    return QuestionUpsert(
        id=question.id,
        text=question.text,
        explanation=question.explanation,
        points=question.points,
        position=position,
        choices=choices,
        correct_positions=correct_positions,
    )


def compile_update(quiz: Quiz, tombstones: TombstoneTracker) -> UpdatePayload:
    entries: List[QuestionEntry] = [
        compile_question(question, position, tombstones)
        for position, question in enumerate(quiz.questions)
    ]
    entries.extend(QuestionDelete(id=qid) for qid in tombstones.question_tombstones())

    return UpdatePayload(
        title=quiz.title,
        description=quiz.description,
        subject=quiz.subject,
        time_limit=quiz.time_limit,
        passing_score=quiz.passing_score,
        max_attempts=quiz.max_attempts,
        questions=entries,
    )
