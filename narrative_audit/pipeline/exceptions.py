class PipelineError(Exception):
    """Base exception for fatal analysis pipeline failures."""

    status_code = 500
    public_error = "Analysis failed"


class InputError(PipelineError):
    """Raised when the request cannot be served; no analysis record is created."""

    status_code = 400


class MissingUserIdError(InputError):
    public_error = "Missing userId"


class UserNotFoundError(InputError):
    status_code = 404
    public_error = "User not found"


class NoUploadsFoundError(InputError):
    public_error = "No uploaded files found for this user"


class DownloadError(PipelineError):
    """Raised when an uploaded file cannot be fetched from the object store."""


class ExtractionFailedError(PipelineError):
    """Raised when no uploaded file yielded any text."""


class ReportGenerationError(PipelineError):
    """Raised when the model service did not produce a report."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code
