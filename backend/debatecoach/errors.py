# debatecoach/errors.py
from typing import Optional


class DebateCoachError(Exception):
    """Base error rendered to the client as {"error": message, "details": details}."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


# ---------- Validation (400, no upstream call made) ----------
class RequestValidationFailed(DebateCoachError):
    status_code = 400


class MissingFile(RequestValidationFailed):
    def __init__(self):
        super().__init__("Missing audio file")


class TooSmall(RequestValidationFailed):
    def __init__(self, size: int):
        super().__init__("Audio too small. Speak louder/closer and try again.")
        self.size = size


# ---------- Upstream (OpenAI) ----------
class UpstreamError(DebateCoachError):
    status_code = 500


class TranscriptionFailed(UpstreamError):
    def __init__(self, details: str, status_code: Optional[int] = None):
        super().__init__("STT failed", details=details, status_code=status_code or 500)


class ServiceNotConfigured(DebateCoachError):
    status_code = 500

    def __init__(self):
        super().__init__("Service not configured", details="Missing OPENAI_API_KEY")
