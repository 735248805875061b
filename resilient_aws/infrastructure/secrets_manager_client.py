"""Secrets Manager Client — resilient wrapper around the AWS Secrets Manager API.

Invariants:
    - Every method retries transient failures with exponential backoff and jitter
    - Codes in SECRETS_MANAGER_PERMANENT_CODES fail fast
    - ResourceNotFoundException for a request naming a SecretId raises SecretNotFoundError
    - SecretString / SecretBinary never reach the logs
"""

from typing import Any

from resilient_aws.core.secrets_failures import evaluate_secrets_manager_error
from resilient_aws.infrastructure.aws_base import BaseAWSClient


class SecretsManagerClient(BaseAWSClient):
    """Wraps the AWS Secrets Manager API with classified retry."""

    service_name = "secretsmanager"

    async def _secret_call(self, operation: str, params: dict[str, Any]) -> dict:
        secret_id = params.get("SecretId")
        return await self._call(
            operation, params,
            lambda remote: evaluate_secrets_manager_error(remote, secret_id),
        )

    async def create_secret(self, **params: Any) -> dict:
        """Create a new secret."""
        return await self._secret_call("CreateSecret", params)

    async def get_secret_value(self, **params: Any) -> dict:
        """Decrypted value of an existing secret."""
        return await self._secret_call("GetSecretValue", params)

    async def describe_secret(self, **params: Any) -> dict:
        """Metadata about a secret (never its value)."""
        return await self._secret_call("DescribeSecret", params)

    async def list_secrets(self, **params: Any) -> dict:
        return await self._secret_call("ListSecrets", params)

    async def update_secret_value(self, **params: Any) -> dict:
        """Update the value of an existing secret (UpdateSecret)."""
        return await self._secret_call("UpdateSecret", params)

    async def delete_secret(self, **params: Any) -> dict:
        return await self._secret_call("DeleteSecret", params)

    async def tag_resource(self, **params: Any) -> dict:
        return await self._secret_call("TagResource", params)

    async def untag_resource(self, **params: Any) -> dict:
        return await self._secret_call("UntagResource", params)
