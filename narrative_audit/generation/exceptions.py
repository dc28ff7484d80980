class GenerationError(Exception):
    """Raised when report generation fails."""


class GenerationServiceError(GenerationError):
    """Raised by a client adapter when the model service call fails.

    Carries the HTTP-like status and/or provider error code so the caller can
    decide whether the failure is worth retrying.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
