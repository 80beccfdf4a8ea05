# aptitude_core/errors.py

from typing import Optional


class AssessmentError(Exception):
    """Base class for every error raised by the assessment engine."""


class GenerationError(AssessmentError):
    """
    The generation collaborator returned no usable content: transport failure,
    wrong number of questions or malformed structure. Recoverable by retry.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        expected: Optional[int] = None,
        received: Optional[int] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.expected = expected
        self.received = received


class InvalidIndexError(AssessmentError, IndexError):
    """A question or option index outside the valid range."""

    def __init__(self, index: int, size: int, what: str = "question"):
        super().__init__(f"{what} index {index} out of range (size={size})")
        self.index = index
        self.size = size
        self.what = what


class GenerationPendingError(AssessmentError):
    """start()/advance() called while a generation request is still outstanding."""


class SessionStateError(AssessmentError):
    """Operation not allowed in the current lifecycle state of the session."""

    def __init__(self, operation: str, status: str):
        super().__init__(f"Cannot {operation}() while session is '{status}'")
        self.operation = operation
        self.status = status
