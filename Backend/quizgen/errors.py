from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    EXTRACTION_FAILED = "extraction_failed"
    UNREADABLE_CONTENT = "unreadable_content"
    COMPLETION_UNAVAILABLE = "completion_unavailable"
    INVALID_COMPLETION_SHAPE = "invalid_completion_shape"


class QuizGenerationError(Exception):
    """Base class for every error raised inside the quiz pipeline"""


class ConfigurationMissing(QuizGenerationError):
    """Required configuration (the API credential) is absent.

    This is the only error the pipeline lets reach its caller.
    """


class ExtractionFailed(QuizGenerationError):
    """Payload could not be decoded or parsed as a paginated document"""

    reason = FailureReason.EXTRACTION_FAILED


class UnreadableContent(QuizGenerationError):
    """Text was decoded but did not pass the meaningfulness gate"""

    reason = FailureReason.UNREADABLE_CONTENT


class CompletionUnavailable(QuizGenerationError):
    reason = FailureReason.COMPLETION_UNAVAILABLE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransientCompletionError(CompletionUnavailable):
    """5xx, 429 or a transport failure: worth another attempt"""


class InvalidCompletionShape(QuizGenerationError):
    """The service answered but the content is not a valid quiz"""

    reason = FailureReason.INVALID_COMPLETION_SHAPE


class TitleUnavailable(QuizGenerationError):
    pass
