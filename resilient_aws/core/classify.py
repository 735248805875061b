"""Error Classification — static permanent/transient tables per wrapped service.

Invariants:
    - Tables are frozensets built at import: read-only, no locking needed
    - A code not listed in a table is transient (retried)
    - InvalidParameter / ParamRequiredError are botocore client-side validation
      codes: the request never left the process, so retrying cannot help
"""

from collections.abc import Iterable

# botocore parameter validation (raised before any request is sent)
INVALID_PARAMETER_CODE = "InvalidParameter"
PARAM_REQUIRED_CODE = "ParamRequiredError"

ACCESS_DENIED_CODE = "AccessDeniedException"

ECS_PERMANENT_CODES: frozenset[str] = frozenset({
    ACCESS_DENIED_CODE,
    "ClientException",
    "InvalidParameterException",
    "ClusterNotFoundException",
    INVALID_PARAMETER_CODE,
    PARAM_REQUIRED_CODE,
})

SECRETS_MANAGER_PERMANENT_CODES: frozenset[str] = frozenset({
    ACCESS_DENIED_CODE,
    "InvalidParameterException",
    "InvalidRequestException",
    "ResourceNotFoundException",
    "ResourceExistsException",
    INVALID_PARAMETER_CODE,
    PARAM_REQUIRED_CODE,
})


def is_permanent(code: str, permanent_codes: Iterable[str]) -> bool:
    """True if `code` is listed as non-retryable."""
    return code in permanent_codes


def is_permanent_ecs_code(code: str) -> bool:
    return is_permanent(code, ECS_PERMANENT_CODES)


def is_permanent_secrets_manager_code(code: str) -> bool:
    return is_permanent(code, SECRETS_MANAGER_PERMANENT_CODES)
