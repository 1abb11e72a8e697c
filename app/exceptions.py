"""
Application error taxonomy

Services raise these; the handlers in app.main render them with a shared
JSON envelope.
"""


class QuizAppError(Exception):
    """Base class for expected, client-visible failures"""

    status_code = 500
    error = "internal_server_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            "error": self.error,
            "message": self.message,
            "status_code": self.status_code,
        }


class NotFoundError(QuizAppError):
    status_code = 404
    error = "not_found"


class InvalidInputError(QuizAppError):
    status_code = 400
    error = "invalid_input"


class ConflictError(InvalidInputError):
    """Input is well-formed but clashes with existing state"""

    status_code = 409
    error = "conflict"


class UnauthorizedError(QuizAppError):
    status_code = 401
    error = "unauthorized"


class ForbiddenError(UnauthorizedError):
    status_code = 403
    error = "forbidden"


class InternalError(QuizAppError):
    status_code = 500
    error = "internal_server_error"
