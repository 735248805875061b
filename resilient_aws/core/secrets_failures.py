"""Secrets Manager error evaluation — classification plus the not-found mapping."""

from resilient_aws.core.classify import is_permanent_secrets_manager_code
from resilient_aws.core.errors import RemoteError, RemoteServiceError, SecretNotFoundError
from resilient_aws.core.retry_policy import AttemptOutcome, RetryDecision

RESOURCE_NOT_FOUND_EXCEPTION = "ResourceNotFoundException"


def evaluate_secrets_manager_error(
    remote: RemoteError, secret_id: str | None = None,
) -> AttemptOutcome:
    """Map a Secrets Manager error to a retry outcome.

    ResourceNotFoundException for a known secret id surfaces as
    SecretNotFoundError so callers can treat "already gone" as success.
    """
    if remote.code == RESOURCE_NOT_FOUND_EXCEPTION and secret_id:
        return AttemptOutcome.stop(SecretNotFoundError(secret_id))
    if is_permanent_secrets_manager_code(remote.code):
        return AttemptOutcome(RetryDecision.STOP, error=RemoteServiceError(remote))
    return AttemptOutcome.retry(RemoteServiceError(remote))
