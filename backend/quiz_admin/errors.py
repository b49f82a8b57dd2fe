class QuizAdminError(Exception):
    """Base class for every error raised by quiz_admin."""


class IndexOutOfRange(QuizAdminError, IndexError):
    """A mutation referenced a question or choice position that does not exist."""


class FieldNotEditable(QuizAdminError, ValueError):
    """An update named a field that cannot be edited in place."""


class SessionClosed(QuizAdminError):
    """The edit session was already saved or discarded."""


class LoadError(QuizAdminError):
    """Fetching a quiz from the backend failed."""


class SaveError(QuizAdminError):
    """Submitting an update payload to the backend failed."""


class ValidationError(QuizAdminError):
    """External data (a backend response or an uploaded file) has the wrong shape."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or []
