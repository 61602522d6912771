"""Custom exceptions for the Sparkle Studio pipeline."""


class SparkleStudioError(Exception):
    """Base class for pipeline errors."""


class GenerationFailed(SparkleStudioError):
    """Raised when the generation service returns no usable image.

    Content-policy blocks land here too; at this layer they look the same as
    an empty response.
    """


class EmptyResult(SparkleStudioError):
    """Raised when a text generation call succeeds but carries no content."""


class TransientServiceError(SparkleStudioError):
    """Raised when the service reports overload or unavailability."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PermanentError(SparkleStudioError):
    """Raised for any other rejection by the service."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyInstruction(SparkleStudioError, ValueError):
    """Raised when a customization has nothing to generate from."""


class DesignStoreError(SparkleStudioError):
    """Raised when saved designs cannot be written or read."""
