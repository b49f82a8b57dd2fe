import json
import logging
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from quiz_admin.errors import SaveError, ValidationError
from quiz_admin.models.quiz_models import QuizSummary
from quiz_admin.schemas.import_models import QuizDefinition
from quiz_admin.storage.backend import BackendError, QuizBackend

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPES = ("application/json", "text/json")

_definitions = TypeAdapter(List[QuizDefinition])


def _format_errors(errors: List[dict]) -> List[str]:
    messages = []
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return messages


def parse_quiz_upload(filename: Optional[str], content_type: Optional[str], raw: bytes) -> List[QuizDefinition]:
    """
    Parse an uploaded JSON file into quiz definitions.

    The file must be JSON (by content type or `.json` name) holding a list of
    quizzes; a single quiz object is treated as a list of one.
    """
    if content_type not in JSON_CONTENT_TYPES and not (filename or "").lower().endswith(".json"):
        raise ValidationError("Please upload a valid JSON file.")

    try:
        data: Any = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Upload is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not data:
        raise ValidationError("Expected a non-empty list of quizzes.")

    try:
        return _definitions.validate_python(data)
    except PydanticValidationError as e:
        errors = _format_errors(e.errors())
        raise ValidationError("; ".join(errors), errors=errors) from e


def import_quizzes(backend: QuizBackend, definitions: List[QuizDefinition]) -> List[QuizSummary]:
    wire = [d.model_dump(mode="json", by_alias=True) for d in definitions]
    try:
        created = backend.import_quizzes(wire)
    except BackendError as e:
        logger.error("Bulk import of %d quizzes failed: %s", len(wire), e)
        raise SaveError(f"Failed to upload quizzes: {e}") from e
    logger.info("Uploaded %d quizzes", len(created))
    try:
        return [QuizSummary.model_validate(row) for row in created]
    except PydanticValidationError as e:
        logger.error("Bulk import response is malformed: %s", e)
        raise SaveError("Backend accepted the upload but returned malformed quizzes") from e
