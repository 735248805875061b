"""Base AWS Client — one-attempt adapter shared by the ECS and Secrets Manager wrappers.

Invariants:
    - Each remote call runs in a worker thread (asyncio.to_thread) so awaiting it is cancellable
    - botocore ClientError / BotoCoreError → RemoteError before any classification
    - Exceptions that are not botocore errors propagate unchanged (no retry)
    - attempt_timeout expiry is a transient failure, retried like any other
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from botocore import xform_name
from botocore.exceptions import BotoCoreError, ClientError, ParamValidationError

from resilient_aws.config import get_settings
from resilient_aws.core.classify import INVALID_PARAMETER_CODE, PARAM_REQUIRED_CODE
from resilient_aws.core.errors import RemoteError, RemoteServiceError
from resilient_aws.core.retry_policy import AttemptOutcome
from resilient_aws.infrastructure.aws_session import (
    AWSSession,
    ClientFactory,
    ClientOptions,
)
from resilient_aws.infrastructure.observability import make_api_log_message
from resilient_aws.infrastructure.retry import RetryExecutor

logger = logging.getLogger(__name__)

ATTEMPT_TIMEOUT_CODE = "AttemptTimeout"

ErrorHandler = Callable[[RemoteError], AttemptOutcome]
ResponseHandler = Callable[[dict], AttemptOutcome]


def to_remote_error(exc: Exception, operation: str) -> RemoteError:
    """Flatten a botocore exception into a RemoteError."""
    if isinstance(exc, ClientError):
        err = exc.response.get("Error", {})
        return RemoteError(
            code=err.get("Code", "Unknown"),
            message=err.get("Message", str(exc)),
            operation=operation,
        )
    if isinstance(exc, ParamValidationError):
        report = str(exc)
        code = PARAM_REQUIRED_CODE if "Missing required parameter" in report else INVALID_PARAMETER_CODE
        return RemoteError(code=code, message=report, operation=operation)
    return RemoteError(code=type(exc).__name__, message=str(exc), operation=operation)


class BaseAWSClient:
    """Shared plumbing: lazy session, retry executor, one-attempt adapter."""

    service_name: str = ""

    def __init__(
        self,
        options: ClientOptions | None = None,
        *,
        session: AWSSession | None = None,
        client_factory: ClientFactory | None = None,
    ):
        self.options = options or ClientOptions.from_settings(get_settings())
        self.session = session or AWSSession(self.options, client_factory=client_factory)
        self.executor = RetryExecutor(self.options.retry_policy)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def ensure_ready(self) -> None:
        """Eagerly build the session and service client (otherwise done on first call)."""
        self.session.get_client(self.service_name)

    async def close(self) -> None:
        """Clean up all resources owned by the client."""
        self.session.close()

    async def _call(
        self,
        operation: str,
        params: Mapping[str, Any],
        on_error: ErrorHandler,
        on_response: ResponseHandler | None = None,
    ) -> dict:
        """Run `operation` under the retry policy and return the boto3 response."""
        return await self.executor.run(
            operation,
            lambda: self._attempt(operation, params, on_error, on_response),
        )

    async def _attempt(
        self,
        operation: str,
        params: Mapping[str, Any],
        on_error: ErrorHandler,
        on_response: ResponseHandler | None,
    ) -> AttemptOutcome:
        try:
            response = await self._invoke(operation, params)
        except (ClientError, BotoCoreError) as e:
            remote = to_remote_error(e, operation)
            logger.debug(
                f"AWS API error: {remote}",
                extra={
                    **make_api_log_message(operation, params),
                    "service": self.service_name,
                    "error_code": remote.code,
                },
            )
            return on_error(remote)
        except TimeoutError:
            timeout = self.options.retry_policy.attempt_timeout
            if timeout is None:
                raise
            return AttemptOutcome.retry(RemoteServiceError(RemoteError(
                ATTEMPT_TIMEOUT_CODE,
                f"no response within {timeout}s",
                operation,
            )))

        if on_response is not None:
            return on_response(response)
        return AttemptOutcome.success(response)

    async def _invoke(self, operation: str, params: Mapping[str, Any]) -> dict:
        call = asyncio.to_thread(self._invoke_sync, operation, dict(params))
        timeout = self.options.retry_policy.attempt_timeout
        if timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout)

    def _invoke_sync(self, operation: str, params: dict) -> dict:
        client = self.session.get_client(self.service_name)
        return getattr(client, xform_name(operation))(**params)
