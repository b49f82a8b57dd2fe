import pytest

from quiz_admin.errors import LoadError, SaveError, SessionClosed, ValidationError
from quiz_admin.services import quiz_service
from quiz_admin.storage.backend import BackendError, QuizNotFound
from quiz_admin.storage.memory import InMemoryQuizBackend


class FlakyBackend(InMemoryQuizBackend):
    """In-memory backend whose submit can be made to fail or misbehave."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.fail_submit = False
        self.fail_fetch = False
        self.bad_response = False

    def submit_quiz_update(self, quiz_id, payload):
        if self.fail_submit:
            raise BackendError("connection reset")
        result = super().submit_quiz_update(quiz_id, payload)
        return {"unexpected": True} if self.bad_response else result

    def fetch_quiz_detail(self, quiz_id):
        if self.fail_fetch:
            raise BackendError("timeout")
        return super().fetch_quiz_detail(quiz_id)


@pytest.fixture
def flaky():
    from quiz_admin.seed import seed

    backend = FlakyBackend(total_users=3, online_users=1)
    seed(backend)
    return backend


@pytest.fixture
def quiz_id(flaky):
    return flaky.list_quizzes()[0]["id"]


class TestLoad:

    def test_load_when_quiz_exists_then_session_started(self, flaky, quiz_id):
        session = quiz_service.load_session(flaky, quiz_id)
        assert session.quiz_id == quiz_id
        assert session.question_count == 2
        assert not session.closed

    def test_load_when_quiz_missing_then_load_error(self, flaky):
        with pytest.raises(LoadError) as excinfo:
            quiz_service.load_session(flaky, 999)
        assert isinstance(excinfo.value.__cause__, QuizNotFound)

    def test_load_when_detail_malformed_then_load_error(self, flaky, quiz_id):
        del flaky.quizzes[quiz_id]["title"]
        with pytest.raises(LoadError, match="malformed"):
            quiz_service.load_session(flaky, quiz_id)

    def test_load_when_choice_flags_loaded_then_authoritative(self, flaky, quiz_id):
        session = quiz_service.load_session(flaky, quiz_id)
        flags = [[c.is_correct for c in q.choices] for q in session.snapshot().questions]
        assert flags == [[True, False, False], [True, False, True]]


class TestSave:

    def test_save_when_accepted_then_closed_and_refetched(self, flaky, quiz_id):
        session = quiz_service.load_session(flaky, quiz_id)
        session.update_quiz("title", "Fractions II")
        session.remove_question(1)

        quiz = quiz_service.save_session(flaky, session)

        assert quiz.title == "Fractions II"
        assert len(quiz.questions) == 1
        assert session.closed
        with pytest.raises(SessionClosed):
            session.add_question()

    def test_save_when_backend_fails_then_session_untouched(self, flaky, quiz_id):
        session = quiz_service.load_session(flaky, quiz_id)
        session.remove_choice(0, 1)
        session.remove_question(1)
        session.add_question()
        before = session.compile().to_json()

        flaky.fail_submit = True
        with pytest.raises(SaveError):
            quiz_service.save_session(flaky, session)

        assert not session.closed
        assert session.compile().to_json() == before
        assert len(session.tombstones) == 2

        flaky.fail_submit = False
        quiz = quiz_service.save_session(flaky, session)
        assert [q.text for q in quiz.questions] == ["What is 1/2 + 1/4?", "New Question"]

    def test_save_when_response_malformed_then_validation_error(self, flaky, quiz_id):
        session = quiz_service.load_session(flaky, quiz_id)
        flaky.bad_response = True

        with pytest.raises(ValidationError) as excinfo:
            quiz_service.save_session(flaky, session)

        assert excinfo.value.errors
        assert session.closed

    def test_save_when_refetch_fails_then_load_error(self, flaky, quiz_id):
        session = quiz_service.load_session(flaky, quiz_id)
        session.update_quiz("subject", "arithmetic")
        flaky.fail_fetch = True

        with pytest.raises(LoadError):
            quiz_service.save_session(flaky, session)
        assert session.closed
        assert flaky.quizzes[quiz_id]["subject"] == "arithmetic"


class TestQueries:

    def test_list_when_seeded_then_summaries(self, flaky):
        summaries = quiz_service.list_quizzes(flaky)
        assert [(s.title, s.question_count) for s in summaries] == [
            ("Fractions Warm-up", 2),
            ("Cell Biology Basics", 1),
        ]

    def test_overview_when_seeded_then_grouped_by_subject(self, flaky):
        overview = quiz_service.quiz_overview(flaky)
        assert overview.total_quizzes == 2
        assert overview.total_questions == 3
        assert [(s.subject, s.quizzes, s.questions) for s in overview.subjects] == [
            ("biology", 1, 1),
            ("maths", 1, 2),
        ]

    def test_user_stats_when_requested_then_parsed(self, flaky):
        stats = quiz_service.fetch_user_stats(flaky)
        assert (stats.total_users, stats.online_users) == (3, 1)

    def test_list_when_rows_malformed_then_load_error(self, flaky, monkeypatch):
        monkeypatch.setattr(flaky, "list_quizzes", lambda: [{"id": 1}])
        with pytest.raises(LoadError, match="malformed"):
            quiz_service.list_quizzes(flaky)

    def test_user_stats_when_malformed_then_load_error(self, flaky, monkeypatch):
        monkeypatch.setattr(flaky, "fetch_user_stats", lambda: {"totalUsers": "many"})
        with pytest.raises(LoadError, match="malformed"):
            quiz_service.fetch_user_stats(flaky)

    def test_delete_when_missing_then_save_error(self, flaky):
        with pytest.raises(SaveError):
            quiz_service.delete_quiz(flaky, 999)
