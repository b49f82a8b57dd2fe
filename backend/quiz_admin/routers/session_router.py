# ==== EDIT SESSION ENDPOINTS (one in-memory session per open quiz editor) ====

import threading
from contextlib import contextmanager
from fastapi import APIRouter, HTTPException
from pydantic import ValidationError as PydanticValidationError
from typing import Callable, Iterator
from uuid import uuid4

from quiz_admin.engine.session import EditSession
from quiz_admin.errors import FieldNotEditable, IndexOutOfRange, LoadError, SaveError, SessionClosed, ValidationError
from quiz_admin.schemas.session_models import (
    EditSessionCreateRequest,
    EditSessionView,
    FieldUpdate,
    MoveRequest,
    SaveResult,
)
from quiz_admin.services import quiz_service
from quiz_admin.storage import memory
from quiz_admin.storage.backend import QuizNotFound

session_router = APIRouter(prefix="/edit-sessions", tags=["edit-sessions"])


def _get_session(session_id: str) -> EditSession:
    session = memory.EDIT_SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Edit session not found")
    return session


@contextmanager
def _locked_session(session_id: str) -> Iterator[EditSession]:
    """Hold the session's lock; 404 if it was saved or discarded meanwhile."""
    session = _get_session(session_id)
    lock = memory.SESSION_LOCKS.setdefault(session_id, threading.Lock())
    with lock:
        if memory.EDIT_SESSIONS.get(session_id) is not session or session.closed:
            raise HTTPException(status_code=404, detail="Edit session not found")
        yield session


def _forget(session_id: str) -> None:
    memory.EDIT_SESSIONS.pop(session_id, None)
    memory.SESSION_LOCKS.pop(session_id, None)


def _view(session_id: str, session: EditSession) -> dict:
    return {
        "session_id": session_id,
        "quiz": session.snapshot(),
        "pending_deletions": len(session.tombstones),
    }


def _mutate(session_id: str, action: Callable[[EditSession], None]) -> dict:
    with _locked_session(session_id) as session:
        try:
            action(session)
        except IndexOutOfRange as e:
            raise HTTPException(status_code=404, detail=str(e))
        except (FieldNotEditable, PydanticValidationError) as e:
            raise HTTPException(status_code=422, detail=str(e))
        except SessionClosed as e:
            raise HTTPException(status_code=409, detail=str(e))
        return _view(session_id, session)


@session_router.post("/", response_model=EditSessionView)
def open_session(req: EditSessionCreateRequest):
    try:
        session = quiz_service.load_session(memory.BACKEND, req.quiz_id)
    except LoadError as e:
        if isinstance(e.__cause__, QuizNotFound):
            raise HTTPException(status_code=404, detail="Quiz not found")
        raise HTTPException(status_code=502, detail="Failed to load quiz details")

    session_id = str(uuid4())
    memory.EDIT_SESSIONS[session_id] = session
    return _view(session_id, session)


@session_router.get("/{session_id}", response_model=EditSessionView)
def get_session(session_id: str):
    with _locked_session(session_id) as session:
        return _view(session_id, session)


@session_router.delete("/{session_id}")
def discard_session(session_id: str):
    with _locked_session(session_id) as session:
        quiz_service.discard_session(session)
        _forget(session_id)
    return {"discarded": session_id}


@session_router.patch("/{session_id}/quiz", response_model=EditSessionView)
def update_quiz(session_id: str, update: FieldUpdate):
    return _mutate(session_id, lambda s: s.update_quiz(update.field, update.value))


@session_router.post("/{session_id}/questions", response_model=EditSessionView)
def add_question(session_id: str):
    return _mutate(session_id, lambda s: s.add_question())


@session_router.patch("/{session_id}/questions/{question_index}", response_model=EditSessionView)
def update_question(session_id: str, question_index: int, update: FieldUpdate):
    return _mutate(session_id, lambda s: s.update_question(question_index, update.field, update.value))


@session_router.delete("/{session_id}/questions/{question_index}", response_model=EditSessionView)
def remove_question(session_id: str, question_index: int):
    return _mutate(session_id, lambda s: s.remove_question(question_index))


@session_router.post("/{session_id}/questions/{question_index}/move", response_model=EditSessionView)
def move_question(session_id: str, question_index: int, req: MoveRequest):
    return _mutate(session_id, lambda s: s.move_question(question_index, req.to_index))


@session_router.post("/{session_id}/questions/{question_index}/choices", response_model=EditSessionView)
def add_choice(session_id: str, question_index: int):
    return _mutate(session_id, lambda s: s.add_choice(question_index))


@session_router.patch(
    "/{session_id}/questions/{question_index}/choices/{choice_index}",
    response_model=EditSessionView,
)
def update_choice(session_id: str, question_index: int, choice_index: int, update: FieldUpdate):
    return _mutate(session_id, lambda s: s.update_choice(question_index, choice_index, update.field, update.value))


@session_router.delete(
    "/{session_id}/questions/{question_index}/choices/{choice_index}",
    response_model=EditSessionView,
)
def remove_choice(session_id: str, question_index: int, choice_index: int):
    return _mutate(session_id, lambda s: s.remove_choice(question_index, choice_index))


@session_router.post(
    "/{session_id}/questions/{question_index}/choices/{choice_index}/move",
    response_model=EditSessionView,
)
def move_choice(session_id: str, question_index: int, choice_index: int, req: MoveRequest):
    return _mutate(session_id, lambda s: s.move_choice(question_index, choice_index, req.to_index))


@session_router.get("/{session_id}/diff")
def preview_diff(session_id: str):
    """The payload a save would submit right now."""
    with _locked_session(session_id) as session:
        return session.compile().to_wire()


@session_router.post("/{session_id}/save", response_model=SaveResult)
def save_session(session_id: str):
    with _locked_session(session_id) as session:
        try:
            quiz = quiz_service.save_session(memory.BACKEND, session)
        except SaveError as e:
            # Session stays open with every edit intact so the save can be retried.
            raise HTTPException(status_code=502, detail=str(e))
        except (ValidationError, LoadError) as e:
            _forget(session_id)
            raise HTTPException(status_code=502, detail=str(e))
        _forget(session_id)

    return {"quiz": quiz, "message": "Quiz updated successfully"}
