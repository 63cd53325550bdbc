from typing import Optional


class PipelineError(Exception):
    """Base error for a failed request; rendered as {"error", "stderr"?}."""

    status_code = 500

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stderr = stderr

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.stderr:
            body["stderr"] = self.stderr
        return body


class ValidationError(PipelineError):
    status_code = 400


class FetchError(PipelineError):
    pass


class TranscodeError(PipelineError):
    pass


class UploadError(PipelineError):
    pass
