from fastapi import APIRouter, File, HTTPException, UploadFile
from typing import List

from quiz_admin.errors import LoadError, SaveError, ValidationError
from quiz_admin.models.quiz_models import QuizOverview, QuizSummary, UserStats
from quiz_admin.schemas.session_models import UploadResult
from quiz_admin.services import quiz_import, quiz_service
from quiz_admin.storage import memory
from quiz_admin.storage.backend import QuizNotFound

admin_router = APIRouter(tags=["admin"])


@admin_router.get("/admin/quizzes", response_model=List[QuizSummary])
def list_quizzes():
    try:
        return quiz_service.list_quizzes(memory.BACKEND)
    except LoadError as e:
        raise HTTPException(status_code=502, detail=str(e))


@admin_router.delete("/admin/quizzes/{quiz_id}")
def delete_quiz(quiz_id: int):
    try:
        quiz_service.delete_quiz(memory.BACKEND, quiz_id)
    except SaveError as e:
        if isinstance(e.__cause__, QuizNotFound):
            raise HTTPException(status_code=404, detail="Quiz not found")
        raise HTTPException(status_code=502, detail=str(e))
    return {"deleted": quiz_id}


@admin_router.post("/quizzes/upload", response_model=UploadResult)
async def upload_quizzes(file: UploadFile = File(...)):
    raw = await file.read()
    try:
        definitions = quiz_import.parse_quiz_upload(file.filename, file.content_type, raw)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors or str(e))
    try:
        created = quiz_import.import_quizzes(memory.BACKEND, definitions)
    except SaveError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"count": len(created), "quizzes": created}


@admin_router.get("/admin/stats/users", response_model=UserStats)
def user_stats():
    try:
        return quiz_service.fetch_user_stats(memory.BACKEND)
    except LoadError as e:
        raise HTTPException(status_code=502, detail=str(e))


@admin_router.get("/admin/stats/quizzes", response_model=QuizOverview)
def quiz_stats():
    try:
        return quiz_service.quiz_overview(memory.BACKEND)
    except LoadError as e:
        raise HTTPException(status_code=502, detail=str(e))
