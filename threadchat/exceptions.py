"""Error kinds raised by the conversation core.

Every remote or store failure is translated into one of these at the
operation boundary. The HTTP layer maps ``error_code`` to a status code.
"""

from typing import Any, Dict, Optional


class ChatError(Exception):
    """Base exception for conversation operations."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class Unauthorized(ChatError):
    """Raised when no verified owner identity is present."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, "UNAUTHORIZED")


class NotFoundOrUnauthorized(ChatError):
    """Raised when a conversation is absent or owned by someone else.

    The two cases share one error so callers cannot tell them apart.
    """

    def __init__(self, conversation_id: str):
        super().__init__(
            "Thread not found or unauthorized",
            "NOT_FOUND_OR_UNAUTHORIZED",
            {"conversation_id": conversation_id},
        )


class RemoteUnavailable(ChatError):
    """Raised when a call to the assistant service fails."""

    def __init__(self, operation: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"Assistant service error during {operation}: {message}"
        super().__init__(full_message, "REMOTE_UNAVAILABLE", {"operation": operation, **(details or {})})


class RemoteThreadMissing(ChatError):
    """Raised when the local record exists but its remote thread does not."""

    def __init__(self, conversation_id: str, message: str = "Thread not found in assistant service"):
        super().__init__(message, "REMOTE_THREAD_MISSING", {"conversation_id": conversation_id})


class PersistenceError(ChatError):
    """Raised when the local store fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PERSISTENCE_ERROR", details)


class GenerationFailed(ChatError):
    """Raised when a run did not produce usable text."""

    def __init__(
        self,
        message: str = "No valid response generated",
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "GENERATION_FAILED"
    ):
        super().__init__(message, error_code, details)


class RunFailed(GenerationFailed):
    """Raised when a run ends failed, cancelled, expired or incomplete."""

    def __init__(self, run_id: str, status: str, last_error: Optional[str] = None):
        message = f"Run {run_id} ended with status '{status}'"
        if last_error:
            message = f"{message}: {last_error}"
        super().__init__(
            message,
            {"run_id": run_id, "status": status, "last_error": last_error},
            "RUN_FAILED",
        )


class RunRequiresAction(GenerationFailed):
    """Raised when a run stops to ask for tool outputs."""

    def __init__(self, run_id: str):
        super().__init__(
            f"Run {run_id} requires action, which is not supported",
            {"run_id": run_id, "status": "requires_action"},
            "RUN_REQUIRES_ACTION",
        )


class RunTimeout(GenerationFailed):
    """Raised when a run does not finish within the wait budget."""

    def __init__(self, run_id: Optional[str], max_wait_ms: int, last_status: Optional[str] = None):
        if run_id is None:
            message = f"Run could not be started within {max_wait_ms}ms"
        else:
            message = f"Run {run_id} did not finish within {max_wait_ms}ms"
        super().__init__(
            message,
            {"run_id": run_id, "max_wait_ms": max_wait_ms, "last_status": last_status},
            "RUN_TIMEOUT",
        )


class ValidationError(ChatError):
    """Raised when input validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)
