"""ECS Failure Handling — failure translation and the task-launch capacity heuristic.

Invariants:
    - convert_failure_to_error is PURE and idempotent: same Failure → same error content
    - reason MISSING + arn present → TaskNotFoundError, nothing else does
    - The capacity heuristic only ever applies when count == 1 was requested explicitly
      (an absent count never triggers it): a batch may have partially launched, so
      retrying it could launch duplicates
    - "provisioning capacity limit exceeded" is transient regardless of error code

Docs: https://docs.aws.amazon.com/AmazonECS/latest/developerguide/api_failures_messages.html
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from resilient_aws.core.classify import is_permanent_ecs_code
from resilient_aws.core.errors import (
    ECSFailureError,
    InsufficientResourcesError,
    RemoteError,
    RemoteServiceError,
    TaskNotFoundError,
)
from resilient_aws.core.retry_policy import AttemptOutcome, RetryDecision

# A task cannot be found because it never existed or stopped long ago.
REASON_TASK_MISSING = "MISSING"
INSUFFICIENT_RESOURCE_REASONS: frozenset[str] = frozenset({
    "RESOURCE:CPU",
    "RESOURCE:MEMORY",
})

CAPACITY_LIMIT_MESSAGE = "provisioning capacity limit exceeded"
TASK_NOT_FOUND_MESSAGE = "The referenced task was not found"
INVALID_PARAMETER_EXCEPTION = "InvalidParameterException"

NO_FAILURE_INFO_MESSAGE = "ECS failure did not contain any additional failure information"


@dataclass(frozen=True)
class Failure:
    """One per-item failure from an ECS batch response."""
    arn: str | None = None
    reason: str | None = None
    detail: str | None = None

    @classmethod
    def from_api(cls, raw: Mapping[str, Any]) -> "Failure":
        return cls(
            arn=raw.get("arn"), reason=raw.get("reason"), detail=raw.get("detail"),
        )


def _as_failure(failure: "Failure | Mapping[str, Any]") -> Failure:
    if isinstance(failure, Failure):
        return failure
    return Failure.from_api(failure)


def is_task_not_found_failure(failure: Failure) -> bool:
    return failure.arn is not None and failure.reason == REASON_TASK_MISSING


def convert_failure_to_error(failure: "Failure | Mapping[str, Any]") -> Exception:
    """Convert an ECS failure into an error. MISSING tasks become TaskNotFoundError."""
    f = _as_failure(failure)
    if is_task_not_found_failure(f):
        return TaskNotFoundError(f.arn)

    parts = []
    if f.arn:
        parts.append(f"task '{f.arn}'")
    if f.reason:
        parts.append(f"(reason) {f.reason}")
    if f.detail:
        parts.append(f"(detail) {f.detail}")
    if not parts:
        return ECSFailureError(NO_FAILURE_INFO_MESSAGE)
    return ECSFailureError(": ".join(parts))


# ─── Remote Error Special Cases ─────────────────────────────────

def is_capacity_limit_error(remote: RemoteError) -> bool:
    """Cluster has too many tasks in PROVISIONING; clears as tasks start."""
    return CAPACITY_LIMIT_MESSAGE in remote.message


def is_task_not_found_error(remote: RemoteError) -> bool:
    return (
        remote.code == INVALID_PARAMETER_EXCEPTION
        and TASK_NOT_FOUND_MESSAGE in remote.message
    )


def classify_ecs_error(remote: RemoteError) -> RetryDecision:
    """Generic ECS classification: table-listed codes stop, the rest retry."""
    if is_permanent_ecs_code(remote.code):
        return RetryDecision.STOP
    return RetryDecision.RETRY


def classify_run_task_error(remote: RemoteError) -> RetryDecision:
    if is_capacity_limit_error(remote):
        return RetryDecision.RETRY
    return classify_ecs_error(remote)


def evaluate_stop_task_error(remote: RemoteError, task_id: str) -> AttemptOutcome:
    """StopTask on a missing task fails fast with TaskNotFoundError."""
    if is_task_not_found_error(remote):
        return AttemptOutcome.stop(TaskNotFoundError(task_id))
    return AttemptOutcome(classify_ecs_error(remote), error=RemoteServiceError(remote))


# ─── Task-Launch Capacity Heuristic ─────────────────────────────

def evaluate_run_task_response(count: int | None, response: Mapping[str, Any]) -> AttemptOutcome:
    """Decide whether a structurally successful RunTask response should be retried.

    Only a single-task request that launched nothing and failed for lack of
    CPU/memory is retried; autoscaling is expected to free capacity. Any
    other response is returned to the caller as-is.
    """
    requested = 0 if count is None else count
    tasks = response.get("tasks") or []
    failures = response.get("failures") or []

    if requested == 1 and not tasks and failures:
        resource_errors = [
            convert_failure_to_error(f)
            for f in failures
            if f and _as_failure(f).reason in INSUFFICIENT_RESOURCE_REASONS
        ]
        if resource_errors:
            return AttemptOutcome.retry(InsufficientResourcesError(resource_errors))

    return AttemptOutcome.success(response)
