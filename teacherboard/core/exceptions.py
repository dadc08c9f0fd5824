# /teacherboard/core/exceptions.py

"""
Application-specific exceptions.

Services raise these; routers translate them into HTTP responses. Anything
raised towards the student surface must carry no internal detail, which is
why the student-facing errors share one localised message.
"""

STUDENT_ACCESS_ERROR_MESSAGE = "세션 코드가 올바르지 않거나 비활성화된 세션입니다."


class TeacherBoardError(Exception):
    """Base exception for all Teacher Board errors."""

    pass


# --- Session / student view ---

class NotFoundError(TeacherBoardError):
    """Raised when a public session code does not resolve."""

    def __init__(self, session_code: str):
        self.session_code = session_code
        super().__init__(STUDENT_ACCESS_ERROR_MESSAGE)


class InactiveSessionError(TeacherBoardError):
    """Raised when a session resolves but has been deactivated or superseded."""

    def __init__(self, session_code: str):
        self.session_code = session_code
        super().__init__(STUDENT_ACCESS_ERROR_MESSAGE)


class SessionNotFoundError(TeacherBoardError):
    """Raised when a teacher operates on a session they have not created yet."""

    def __init__(self, teacher_id: str):
        self.teacher_id = teacher_id
        super().__init__("No student session exists yet. Create one first.")


class CodeGenerationError(TeacherBoardError):
    """Raised when no unused session code could be found within the retry budget."""

    pass


# --- Workspace content ---

class ContentNotFoundError(TeacherBoardError):
    """Raised when a content item does not exist under the teacher's path."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} with ID {item_id} not found")


class DuplicateLinkError(TeacherBoardError):
    """Raised when a quick link with the same URL is already saved."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"A link to {url} is already saved.")


class ValidationError(TeacherBoardError):
    """Raised when input fails a business rule not covered by the request model."""

    pass


# --- Document store ---

class WriteFailure(TeacherBoardError):
    """Raised when a write to the document store fails after all retries."""

    pass


class DocumentExistsError(TeacherBoardError):
    """Raised when a create-if-absent write hits an existing document."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document already exists: {path}")


class DocumentNotFoundError(TeacherBoardError):
    """Raised when an update targets a document that does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document not found: {path}")


# --- Identity ---

class AuthenticationError(TeacherBoardError):
    """Raised when an ID token or bearer token cannot be verified."""

    pass


# --- Classroom tools ---

class NoStudentsAvailableError(TeacherBoardError):
    """Raised when the picker or group maker has nobody left to choose from."""

    pass


# --- AI services ---

class AIServiceError(TeacherBoardError):
    """Raised when the generative AI endpoint fails."""

    status_code = 500


class InvalidAPIKeyError(AIServiceError):
    status_code = 401


class QuotaExceededError(AIServiceError):
    status_code = 429


class ModelUnavailableError(AIServiceError):
    status_code = 400


class InappropriateContentError(AIServiceError):
    """Raised when an image prompt is not suitable for classroom use."""

    status_code = 400
