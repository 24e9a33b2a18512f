"""Domain errors raised by the quiz, progress, voting and badge logic.

Each error carries the HTTP status and a short machine code so the API
layer can render it without knowing where it came from.
"""


class LearnFlowError(Exception):

    status_code = 400
    code = "error"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.message = message


class AuthenticationRequired(LearnFlowError):

    status_code = 401
    code = "auth_required"

    def __init__(self, message: str = "User must be authenticated"):
        super().__init__(message)


class AccessDenied(LearnFlowError):

    status_code = 403
    code = "access_denied"


class NotFound(LearnFlowError):

    status_code = 404
    code = "not_found"


class ValidationFailed(LearnFlowError):

    status_code = 400
    code = "validation_failed"


class ExternalServiceError(LearnFlowError):

    status_code = 502
    code = "external_service_error"
