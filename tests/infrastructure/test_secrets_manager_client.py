"""Secrets Manager Client — operation adapters over a scripted boto3 client."""

import logging

import pytest

from resilient_aws.core.errors import (
    NotFoundError,
    RemoteServiceError,
    RetriesExhaustedError,
    SecretNotFoundError,
)
from resilient_aws.infrastructure.secrets_manager_client import SecretsManagerClient

from tests.infrastructure.fake_aws import FakeAWSClient, client_error, make_client


@pytest.mark.parametrize("method, boto_method, params", [
    ("create_secret", "create_secret", {"Name": "n", "SecretString": "s3cr3t"}),
    ("get_secret_value", "get_secret_value", {"SecretId": "n"}),
    ("describe_secret", "describe_secret", {"SecretId": "n"}),
    ("list_secrets", "list_secrets", {"MaxResults": 10}),
    ("update_secret_value", "update_secret", {"SecretId": "n", "SecretString": "new"}),
    ("delete_secret", "delete_secret", {"SecretId": "n", "ForceDeleteWithoutRecovery": True}),
    ("tag_resource", "tag_resource", {"SecretId": "n", "Tags": [{"Key": "k", "Value": "v"}]}),
    ("untag_resource", "untag_resource", {"SecretId": "n", "TagKeys": ["k"]}),
])
async def test_operation_calls_boto_method(method, boto_method, params):
    fake = FakeAWSClient({boto_method: [{"ARN": "arn:secret"}]})
    client = make_client(SecretsManagerClient, fake)

    out = await getattr(client, method)(**params)

    assert out == {"ARN": "arn:secret"}
    assert fake.calls == [{"method": boto_method, "params": params}]


async def test_missing_secret_raises_secret_not_found():
    fake = FakeAWSClient({"get_secret_value": [
        client_error("ResourceNotFoundException", "Secrets Manager can't find the specified secret."),
    ]})
    client = make_client(SecretsManagerClient, fake)

    with pytest.raises(SecretNotFoundError) as exc_info:
        await client.get_secret_value(SecretId="gone")
    assert exc_info.value.resource_id == "gone"
    assert len(fake.calls) == 1


async def test_delete_of_missing_secret_can_be_treated_as_success():
    fake = FakeAWSClient({"delete_secret": [client_error("ResourceNotFoundException", "nope")]})
    client = make_client(SecretsManagerClient, fake)

    try:
        await client.delete_secret(SecretId="gone")
    except NotFoundError:
        pass
    assert len(fake.calls) == 1


@pytest.mark.parametrize("code", [
    "AccessDeniedException", "InvalidParameterException",
    "InvalidRequestException", "ResourceExistsException",
])
async def test_permanent_codes_fail_fast(code):
    fake = FakeAWSClient({"create_secret": [client_error(code, "nope")]})
    client = make_client(SecretsManagerClient, fake)

    with pytest.raises(RemoteServiceError) as exc_info:
        await client.create_secret(Name="n", SecretString="v")
    assert exc_info.value.remote_code == code
    assert len(fake.calls) == 1


async def test_internal_error_retries():
    fake = FakeAWSClient({"describe_secret": [
        client_error("InternalServiceError", "oops"),
        {"Name": "n"},
    ]})
    client = make_client(SecretsManagerClient, fake)

    assert await client.describe_secret(SecretId="n") == {"Name": "n"}
    assert len(fake.calls) == 2


async def test_retries_exhausted():
    fake = FakeAWSClient({"list_secrets": [client_error("ThrottlingException", "slow")]})
    client = make_client(SecretsManagerClient, fake, max_attempts=4)

    with pytest.raises(RetriesExhaustedError):
        await client.list_secrets()
    assert len(fake.calls) == 4


async def test_secret_value_not_logged(caplog):
    fake = FakeAWSClient({"create_secret": [
        client_error("InternalServiceError", "oops"),
        {"ARN": "arn"},
    ]})
    client = make_client(SecretsManagerClient, fake)

    with caplog.at_level(logging.DEBUG, logger="resilient_aws"):
        await client.create_secret(Name="n", SecretString="hunter2")

    api_records = [r for r in caplog.records if hasattr(r, "api_input")]
    assert api_records
    assert api_records[0].api_input["SecretString"] == "<redacted>"
    assert "hunter2" not in caplog.text
