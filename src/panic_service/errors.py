"""Error taxonomy for the panic service.

Intake and lookup turn every one of these into an HTTP response. The worker
lets ``DependencyUpdateError`` escape a message so SQS redelivers it, and
skips messages that raise ``MalformedMessageError`` or
``TransitionRejectedError``.
"""
from typing import Optional


class PanicServiceError(Exception):
    """Base class for all panic service errors."""


class ConfigurationError(PanicServiceError, RuntimeError):
    """A required dependency is not configured (missing environment)."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}"
        )


class ValidationError(PanicServiceError):
    """Client-caused request problem; always a 4xx."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DependencyError(PanicServiceError):
    """A call to DynamoDB or SQS failed."""

    def __init__(self, operation: str, panic_id: Optional[str] = None, detail: str = ""):
        self.operation = operation
        self.panic_id = panic_id
        msg = f"{operation} failed"
        if panic_id:
            msg += f" for panicId={panic_id}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class DependencyWriteError(DependencyError):
    """Store put or queue publish failed."""


class DependencyReadError(DependencyError):
    """Store get failed."""


class DependencyUpdateError(DependencyError):
    """Worker status update failed; the message must be redelivered."""


class TransitionRejectedError(PanicServiceError):
    """Conditional update refused: record missing or status would regress."""

    def __init__(self, panic_id: str, target_status: str):
        self.panic_id = panic_id
        self.target_status = target_status
        super().__init__(
            f"Record {panic_id} does not exist or cannot move to {target_status}"
        )


class MalformedMessageError(PanicServiceError):
    """Queue message that can never be processed."""

    def __init__(self, reason: str, message_id: Optional[str] = None):
        self.reason = reason
        self.message_id = message_id
        super().__init__(reason)
