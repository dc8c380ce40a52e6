"""Custom TTS exceptions."""


class TTSError(Exception):
    """Base exception for TTS-related errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class SynthesisFailure(TTSError):
    """Exception raised when the synthesizer does not return usable audio.

    This typically occurs when:
    - The provider call fails (network, quota, server errors)
    - The provider answers without an audio payload

    Failures are never cached and never retried by the cache service.
    """

    pass


class TTSAuthError(SynthesisFailure):
    """Exception raised for authentication failures.

    This typically occurs when:
    - API key or service account credentials are missing or invalid
    - Account has insufficient credits
    - Credential permissions are insufficient
    """

    pass


class TTSAPIError(SynthesisFailure):
    """Exception raised for API communication errors.

    This typically occurs when:
    - API server is unavailable (5xx errors)
    - Rate limits are exceeded (429 error)
    - Request format is invalid (4xx errors)
    - Network connectivity issues
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class CacheIntegrityError(TTSError):
    """Raised when the cache store grows past its configured capacity."""

    pass
