"""Custom exceptions for request composition and Gemini API errors."""
from typing import Optional


class BananaStudioError(RuntimeError):
    """Base exception for all Banana Studio errors."""
    pass


class MissingInputError(BananaStudioError):
    """
    Raised by the composer when a mode's required input is absent.

    Attributes:
        missing: Names of the missing slots (e.g. "reference image", "prompt").
    """
    def __init__(self, message: str, missing: Optional[tuple] = None):
        super().__init__(message)
        self.missing = tuple(missing or ())


class GeminiAPIError(BananaStudioError):
    """
    Raised when a Gemini API call fails.

    Attributes:
        status_code: HTTP status of the response, if one was received.
        api_status: Google error status string (e.g. "RESOURCE_EXHAUSTED").
    """
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        api_status: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.api_status = api_status


class NoImageReturnedError(GeminiAPIError):
    """
    Raised when Gemini answers successfully but without an image part.

    Attributes:
        finish_reason: finishReason of the first candidate, if any
            (e.g. "SAFETY", "IMAGE_SAFETY").
    """
    def __init__(self, message: str, finish_reason: Optional[str] = None):
        super().__init__(message, status_code=200)
        self.finish_reason = finish_reason
