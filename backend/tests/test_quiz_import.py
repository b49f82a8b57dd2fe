import json

import pytest

from quiz_admin.errors import SaveError, ValidationError
from quiz_admin.services.quiz_import import import_quizzes, parse_quiz_upload
from quiz_admin.storage.memory import InMemoryQuizBackend

VALID = [
    {
        "title": "Quiz Title",
        "description": "Quiz Description",
        "subject": "maths",
        "timeLimit": 120,
        "passingScore": 7,
        "maxAttempts": 3,
        "questions": [
            {
                "text": "Question Text",
                "explanation": "Optional explanation",
                "points": 1,
                "choices": [{"text": "Choice 1"}, {"text": "Choice 2"}],
                "correctChoiceIndexes": [0],
            }
        ],
    }
]


def _raw(data):
    return json.dumps(data).encode("utf-8")


class TestParseUpload:

    def test_parse_when_valid_list_then_definitions(self):
        quizzes = parse_quiz_upload("quizzes.json", "application/json", _raw(VALID))
        assert len(quizzes) == 1
        assert quizzes[0].time_limit == 120
        assert quizzes[0].questions[0].correct_choice_indexes == [0]

    def test_parse_when_single_object_then_list_of_one(self):
        quizzes = parse_quiz_upload("one.json", None, _raw(VALID[0]))
        assert [q.title for q in quizzes] == ["Quiz Title"]

    def test_parse_when_utf8_bom_then_accepted(self):
        quizzes = parse_quiz_upload("excel-export.json", "application/json", b"\xef\xbb\xbf" + _raw(VALID))
        assert [q.title for q in quizzes] == ["Quiz Title"]

    def test_parse_when_json_extension_only_then_accepted(self):
        assert parse_quiz_upload("QUIZZES.JSON", "application/octet-stream", _raw(VALID))

    def test_parse_when_not_json_file_then_rejected(self):
        with pytest.raises(ValidationError, match="valid JSON file"):
            parse_quiz_upload("quizzes.txt", "text/plain", _raw(VALID))

    def test_parse_when_body_not_json_then_rejected(self):
        with pytest.raises(ValidationError, match="not valid JSON"):
            parse_quiz_upload("quizzes.json", "application/json", b"[{")

    @pytest.mark.parametrize("data", [[], "quiz", 3])
    def test_parse_when_not_a_list_of_quizzes_then_rejected(self, data):
        with pytest.raises(ValidationError, match="non-empty list"):
            parse_quiz_upload("quizzes.json", "application/json", _raw(data))

    def test_parse_when_title_missing_then_error_names_location(self):
        data = [{"questions": []}]
        with pytest.raises(ValidationError) as excinfo:
            parse_quiz_upload("quizzes.json", "application/json", _raw(data))
        assert any(msg.startswith("0.title") for msg in excinfo.value.errors)

    @pytest.mark.parametrize("indexes", [[2], [-1], [0, 0]])
    def test_parse_when_correct_indexes_bad_then_rejected(self, indexes):
        data = json.loads(json.dumps(VALID))
        data[0]["questions"][0]["correctChoiceIndexes"] = indexes
        with pytest.raises(ValidationError, match="correctChoiceIndexes"):
            parse_quiz_upload("quizzes.json", "application/json", _raw(data))


class TestImport:

    def test_import_when_parsed_then_created_in_backend(self):
        backend = InMemoryQuizBackend()
        definitions = parse_quiz_upload("quizzes.json", "application/json", _raw(VALID))

        created = import_quizzes(backend, definitions)

        assert [(q.title, q.question_count) for q in created] == [("Quiz Title", 1)]
        detail = backend.fetch_quiz_detail(created[0].id)
        assert detail["passingScore"] == 7
        assert [c["isCorrect"] for c in detail["questions"][0]["choices"]] == [True, False]

    def test_import_when_response_malformed_then_save_error(self, monkeypatch):
        backend = InMemoryQuizBackend()
        definitions = parse_quiz_upload("quizzes.json", "application/json", _raw(VALID))
        monkeypatch.setattr(backend, "import_quizzes", lambda defs: [{"title": "no id"}])

        with pytest.raises(SaveError, match="malformed"):
            import_quizzes(backend, definitions)
