"""ECS Client — resilient wrapper around the AWS ECS task and task definition APIs.

Invariants:
    - Every method retries transient failures with exponential backoff and jitter
    - Codes in ECS_PERMANENT_CODES fail fast as RemoteServiceError
    - run_task: "provisioning capacity limit exceeded" always retries; a single-task
      launch that failed only for RESOURCE:CPU / RESOURCE:MEMORY retries; batches never do
    - stop_task on a missing task raises TaskNotFoundError without retrying

Design Decisions:
    - Methods take boto3 request parameters as keyword arguments and return the boto3
      response dict unchanged; request/response shapes belong to boto3
"""

from typing import Any

from resilient_aws.core.ecs_failures import (
    classify_ecs_error,
    classify_run_task_error,
    evaluate_run_task_response,
    evaluate_stop_task_error,
)
from resilient_aws.core.errors import RemoteError, RemoteServiceError
from resilient_aws.core.retry_policy import AttemptOutcome
from resilient_aws.infrastructure.aws_base import BaseAWSClient


def _ecs_outcome(remote: RemoteError) -> AttemptOutcome:
    return AttemptOutcome(classify_ecs_error(remote), error=RemoteServiceError(remote))


def _run_task_outcome(remote: RemoteError) -> AttemptOutcome:
    return AttemptOutcome(classify_run_task_error(remote), error=RemoteServiceError(remote))


class ECSClient(BaseAWSClient):
    """Wraps the AWS ECS API with classified retry."""

    service_name = "ecs"

    async def register_task_definition(self, **params: Any) -> dict:
        """Register a new task definition."""
        return await self._call("RegisterTaskDefinition", params, _ecs_outcome)

    async def describe_task_definition(self, **params: Any) -> dict:
        return await self._call("DescribeTaskDefinition", params, _ecs_outcome)

    async def list_task_definitions(self, **params: Any) -> dict:
        """ARNs of the task definitions matching the filters."""
        return await self._call("ListTaskDefinitions", params, _ecs_outcome)

    async def deregister_task_definition(self, **params: Any) -> dict:
        return await self._call("DeregisterTaskDefinition", params, _ecs_outcome)

    async def run_task(self, **params: Any) -> dict:
        """Run new task(s).

        The response may still carry `failures` (e.g. a batch that partially
        launched); callers check `tasks` and `failures` together.
        """
        count = params.get("count")
        return await self._call(
            "RunTask", params, _run_task_outcome,
            on_response=lambda response: evaluate_run_task_response(count, response),
        )

    async def describe_tasks(self, **params: Any) -> dict:
        return await self._call("DescribeTasks", params, _ecs_outcome)

    async def list_tasks(self, **params: Any) -> dict:
        return await self._call("ListTasks", params, _ecs_outcome)

    async def stop_task(self, **params: Any) -> dict:
        """Stop a running task. Raises TaskNotFoundError if ECS does not know it."""
        task_id = params.get("task", "")
        return await self._call(
            "StopTask", params,
            lambda remote: evaluate_stop_task_error(remote, task_id),
        )

    async def tag_resource(self, **params: Any) -> dict:
        return await self._call("TagResource", params, _ecs_outcome)
