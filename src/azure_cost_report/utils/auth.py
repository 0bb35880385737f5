"""
Azure authentication utilities.

Resolves a token credential for the Azure management API and the subscription
a report should run against, including the Azure CLI "current account" fallback.
"""

import json
import logging
import shutil
import subprocess
from collections.abc import Callable
from typing import Any
from uuid import UUID

from azure.identity import (
    AzureCliCredential,
    ClientSecretCredential,
    DefaultAzureCredential,
    EnvironmentCredential,
)
from pydantic import BaseModel, ConfigDict, Field

from ..providers.base import CredentialError

logger = logging.getLogger(__name__)

MANAGEMENT_SCOPE = "https://management.azure.com/.default"

# Zero-argument side channel returning a subscription identifier string
SubscriptionResolver = Callable[[], str]


class AuthenticationResult(BaseModel):
    """Result of an authentication attempt."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = Field(..., description="Whether authentication was successful")
    method: str = Field(..., min_length=1, max_length=100, description="Authentication method used")
    error_message: str | None = Field(None, description="Error message if authentication failed")
    credentials: Any | None = Field(None, description="Authenticated credentials object")

    @classmethod
    def create_success(cls, method: str, credentials: Any) -> "AuthenticationResult":
        """Create a successful authentication result."""
        return cls(success=True, method=method, credentials=credentials)

    @classmethod
    def create_failure(cls, method: str, error_message: str) -> "AuthenticationResult":
        """Create a failed authentication result."""
        return cls(success=False, method=method, error_message=error_message)


class AzureAuthenticator:
    """Azure authentication handler trying several credential sources in order."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or {}
        self.scope = self.config.get("token_scope") or MANAGEMENT_SCOPE

    def authenticate(self) -> AuthenticationResult:
        """Return the first credential source that yields a token."""
        auth_methods = [
            ("service_principal", self._service_principal_credential),
            ("environment", EnvironmentCredential),
            ("azure_cli", AzureCliCredential),
            ("default_credential", DefaultAzureCredential),
        ]

        errors = []
        for method, factory in auth_methods:
            try:
                credential = factory()
                if credential is None:
                    continue
                credential.get_token(self.scope)
            except Exception as e:
                logger.debug(f"Azure authentication method {method} failed: {e}")
                errors.append(f"{method}: {e}")
                continue

            logger.info(f"Azure authentication successful using {method}")
            return AuthenticationResult.create_success(method=method, credentials=credential)

        return AuthenticationResult.create_failure(
            method="none",
            error_message="; ".join(errors) or "All Azure authentication methods failed",
        )

    def _service_principal_credential(self) -> ClientSecretCredential | None:
        """Service principal from config, or None when not fully configured."""
        tenant_id = self.config.get("tenant_id")
        client_id = self.config.get("client_id")
        client_secret = self.config.get("client_secret")

        if not all([tenant_id, client_id, client_secret]):
            return None

        return ClientSecretCredential(
            tenant_id=tenant_id, client_id=client_id, client_secret=client_secret
        )


def resolve_credential(config: dict[str, Any] | None = None):
    """
    Resolve a usable token credential for the management API.

    Raises:
        CredentialError: If no credential source produces a token
    """
    result = AzureAuthenticator(config).authenticate()
    if not result.success:
        raise CredentialError(f"No usable Azure credentials found ({result.error_message})")
    return result.credentials


def azure_cli_subscription_id() -> str:
    """Subscription id of the Azure CLI's current account (``az account show``)."""
    az = shutil.which("az")
    if az is None:
        raise CredentialError("Azure CLI (az) not found on PATH")

    try:
        completed = subprocess.run(
            [az, "account", "show", "--output", "json"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise CredentialError(f"Error executing 'az account show': {e}") from e

    if completed.returncode != 0:
        raise CredentialError(f"Error executing 'az account show': {completed.stderr.strip()}")

    try:
        subscription_id = json.loads(completed.stdout)["id"]
    except (ValueError, KeyError, TypeError) as e:
        raise CredentialError("Unable to find the 'id' property in 'az account show' output") from e

    return subscription_id


def resolve_subscription_id(
    explicit: UUID | str | None = None,
    configured: str | None = None,
    fallback: SubscriptionResolver = azure_cli_subscription_id,
) -> UUID:
    """
    Pick the subscription to report on.

    Precedence is the explicit value, then the configured default, then the
    fallback resolver.

    Raises:
        CredentialError: If no subscription could be resolved or it is not a UUID
    """
    if explicit:
        candidate, source = explicit, "command line"
    elif configured:
        candidate, source = configured, "configuration"
    else:
        try:
            candidate, source = fallback(), "fallback lookup"
        except CredentialError as e:
            raise CredentialError(
                "Missing subscription ID. Please specify a subscription ID or login to Azure CLI."
            ) from e

    if isinstance(candidate, UUID):
        return candidate

    try:
        subscription_id = UUID(str(candidate).strip())
    except ValueError as e:
        raise CredentialError(f"Invalid subscription ID from {source}: {candidate!r}") from e

    logger.debug(f"Using subscription {subscription_id} from {source}")
    return subscription_id
