"""AWS Session — client options and the lazily-initialized, exclusively-owned boto3 session.

Invariants:
    - The boto3 session and each service client are created at most once, even under
      concurrent first use (double-checked under a threading.Lock)
    - No client is handed out before the session exists, and none after close()
    - close() is idempotent: the underlying botocore clients are closed exactly once
    - boto3's own retry handler is disabled (total_max_attempts=1); RetryExecutor owns retries

Design Decisions:
    - threading.Lock, not asyncio.Lock: clients are built inside asyncio.to_thread workers
    - client_factory hook replaces boto3 client construction in tests
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError
from pydantic import BaseModel, ConfigDict, Field

from resilient_aws.config import Settings
from resilient_aws.core.errors import ClientClosedError, ClientSetupError
from resilient_aws.core.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], Any]


class ClientOptions(BaseModel):
    """Per-client configuration: where to connect, how to sign, how to retry."""

    model_config = ConfigDict(frozen=True)

    region: str | None = None
    profile: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    endpoint_url: str | None = None
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientOptions":
        return cls(
            region=settings.aws_region,
            profile=settings.aws_profile,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            session_token=settings.aws_session_token,
            endpoint_url=settings.aws_endpoint_url,
            retry_policy=RetryPolicy(
                max_attempts=settings.retry_max_attempts,
                min_delay=settings.retry_min_delay_ms / 1000,
                max_delay=settings.retry_max_delay_ms / 1000,
                jitter=settings.retry_jitter,
                attempt_timeout=settings.retry_attempt_timeout_seconds,
                overall_timeout=settings.retry_overall_timeout_seconds,
            ),
        )

    def botocore_config(self) -> Config:
        return Config(
            region_name=self.region,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )


class AWSSession:
    """Owns one boto3 session and the service clients built from it."""

    def __init__(
        self, options: ClientOptions, client_factory: ClientFactory | None = None,
    ):
        self.options = options
        self._client_factory = client_factory
        self._lock = threading.Lock()
        self._session: boto3.session.Session | None = None
        self._clients: dict[str, Any] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def ensure_ready(self) -> None:
        """Create the boto3 session if it does not exist yet. Idempotent."""
        if self._session is not None or self._client_factory is not None:
            self._check_open()
            return
        with self._lock:
            self._check_open()
            if self._session is None:
                self._session = self._create_session()

    def get_client(self, service: str) -> Any:
        """Service client for `service`, created on first request."""
        client = self._clients.get(service)
        if client is not None and not self._closed:
            return client
        self.ensure_ready()
        with self._lock:
            self._check_open()
            client = self._clients.get(service)
            if client is None:
                client = self._create_client(service)
                self._clients[service] = client
                logger.debug(
                    f"Created {service} client", extra={"service": service},
                )
            return client

    def close(self) -> None:
        """Release all service clients. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            clients = list(self._clients.values())
            self._clients.clear()
            self._session = None
        for client in clients:
            close = getattr(client, "close", None)
            if callable(close):
                close()

    def _check_open(self) -> None:
        if self._closed:
            raise ClientClosedError("AWS")

    def _create_session(self) -> boto3.session.Session:
        opts = self.options
        try:
            return boto3.session.Session(
                aws_access_key_id=opts.access_key_id,
                aws_secret_access_key=opts.secret_access_key,
                aws_session_token=opts.session_token,
                region_name=opts.region,
                profile_name=opts.profile,
            )
        except BotoCoreError as e:
            raise ClientSetupError(f"initializing session: {e}") from e

    def _create_client(self, service: str) -> Any:
        if self._client_factory is not None:
            return self._client_factory(service)
        try:
            return self._session.client(
                service,
                config=self.options.botocore_config(),
                endpoint_url=self.options.endpoint_url,
            )
        except BotoCoreError as e:
            raise ClientSetupError(f"creating {service} client: {e}") from e
