# errors.py
class VibeCheckError(Exception):
    """Base class for errors raised by the audit pipeline."""


class AIServiceError(VibeCheckError):
    """The completion API failed; clients should retry later."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
