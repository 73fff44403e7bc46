"""
Error kinds surfaced to the user.

Each error carries a short human-readable message and the HTTP status the
backend answers with. None of them is fatal: the user can always retry with
corrected input.
"""


class InsightError(Exception):
    status_code: int = 500
    default_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class EmptyInput(InsightError):
    status_code = 400
    default_message = "Please fill in the required field."


class InvalidCredential(InsightError):
    status_code = 401
    default_message = "API key appears invalid. Please check and try again."


class StudyNotFound(InsightError):
    status_code = 404
    default_message = "Study not found"


class CallFailed(InsightError):
    status_code = 502
    default_message = "Failed to generate insights. Please try again."


class MalformedResponse(InsightError):
    status_code = 502
    default_message = "The AI service returned a response that could not be read. Please try again."
