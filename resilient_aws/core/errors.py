"""Error Hierarchy — typed, categorized exceptions for every failure the clients surface.

Invariants:
    - Every error has a code (str), category (ErrorCategory) and an ErrorContext
    - NotFoundError subclasses always carry the missing resource identifier
    - asyncio.CancelledError is never wrapped by anything in this module
    - to_dict() is the single serialization shape (logs, JSON surfaces)

Design Decisions:
    - Single hierarchy with ResilientAWSError base: callers catch one type, branch on subclasses
    - RemoteError is a frozen value, not an exception: the classifier reads it before
      anything decides whether it becomes a raised error
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    REMOTE_SERVICE = "remote_service"
    RESOURCE_NOT_FOUND = "resource_not_found"
    BATCH_FAILURE = "batch_failure"
    CAPACITY = "capacity"
    RETRIES_EXHAUSTED = "retries_exhausted"
    TIMEOUT = "timeout"
    CONFIGURATION = "configuration"
    CLIENT_STATE = "client_state"


@dataclass(frozen=True)
class RemoteError:
    """Structured error reported by the wrapped AWS service."""
    code: str
    message: str
    operation: str = ""

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.code}: {self.message}"
        return f"{self.code}: {self.message}"


@dataclass
class ErrorContext:
    """Observability context attached to every error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    attempt: int | None = None
    resource_id: str | None = None


class ResilientAWSError(Exception):
    """Base exception for all resilient_aws errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "attempt": self.context.attempt,
                    "resource_id": self.context.resource_id,
                },
            }
        }


# ─── Remote Service Errors ──────────────────────────────────────

class RemoteServiceError(ResilientAWSError):
    """The AWS service rejected the request."""
    def __init__(self, remote: RemoteError, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or remote.operation or None
        super().__init__(
            str(remote), "REMOTE_SERVICE_ERROR",
            ErrorCategory.REMOTE_SERVICE, ctx,
        )
        self.remote = remote

    @property
    def remote_code(self) -> str:
        return self.remote.code


class NotFoundError(ResilientAWSError):
    """Requested resource does not exist. Callers branch on this for idempotent deletes."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND, ctx,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class TaskNotFoundError(NotFoundError):
    """ECS task cannot be found (never existed, or stopped long ago)."""
    def __init__(self, task_id: str, context: ErrorContext | None = None):
        super().__init__("ECS task", task_id, context)


class SecretNotFoundError(NotFoundError):
    """Secrets Manager secret cannot be found."""
    def __init__(self, secret_id: str, context: ErrorContext | None = None):
        super().__init__("secret", secret_id, context)


# ─── Batch / Capacity Errors ────────────────────────────────────

class ECSFailureError(ResilientAWSError):
    """An item in an ECS batch response failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ECS_FAILURE", ErrorCategory.BATCH_FAILURE, context,
        )


class InsufficientResourcesError(ResilientAWSError):
    """Cluster lacked CPU or memory to place a task."""
    def __init__(self, failures: list[Exception], context: ErrorContext | None = None):
        details = "; ".join(str(f) for f in failures)
        super().__init__(
            f"cluster has insufficient resources: {details}",
            "INSUFFICIENT_RESOURCES", ErrorCategory.CAPACITY, context,
        )
        self.failures = list(failures)


# ─── Retry Loop Errors ──────────────────────────────────────────

class RetriesExhaustedError(ResilientAWSError):
    """Every attempt allowed by the retry policy failed transiently."""
    def __init__(
        self, attempts: int, last_error: BaseException, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"after {attempts} attempts, operation failed: {last_error}",
            "RETRIES_EXHAUSTED", ErrorCategory.RETRIES_EXHAUSTED, context,
        )
        self.attempts = attempts
        self.last_error = last_error


class OperationTimeoutError(ResilientAWSError):
    """The overall deadline for an operation expired."""
    def __init__(self, operation: str, timeout_seconds: float, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"{operation} did not complete within {timeout_seconds}s",
            "OPERATION_TIMEOUT", ErrorCategory.TIMEOUT, ctx,
        )
        self.timeout_seconds = timeout_seconds


# ─── Client Lifecycle Errors ────────────────────────────────────

class ClientSetupError(ResilientAWSError):
    """The AWS session or service client could not be created."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"setting up client: {message}",
            "CLIENT_SETUP_ERROR", ErrorCategory.CONFIGURATION, context,
        )


class ClientClosedError(ResilientAWSError):
    """An operation was attempted after close()."""
    def __init__(self, service: str, context: ErrorContext | None = None):
        super().__init__(
            f"{service} client is closed",
            "CLIENT_CLOSED", ErrorCategory.CLIENT_STATE, context,
        )
