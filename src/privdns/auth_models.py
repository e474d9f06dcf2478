"""Authentication data models for privdns.

This module defines the service principal settings used to sign in to
Azure Resource Manager. Values come from the environment:

- CLIENT_ID: Application (client) ID of the service principal
- TENANT_ID: Directory (tenant) ID
- SUBSCRIPTION_ID: Subscription that receives the sample resources
- CLIENT_SECRET: Read only by the credential factory, never stored here

Security features:
- Frozen dataclass for immutability
- UUID validation in __post_init__
- Masked dict for logging
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from uuid import UUID

CLIENT_ID_ENV = "CLIENT_ID"
CLIENT_SECRET_ENV = "CLIENT_SECRET"  # noqa: S105 - Variable name, not a secret
TENANT_ID_ENV = "TENANT_ID"
SUBSCRIPTION_ID_ENV = "SUBSCRIPTION_ID"


class AuthConfigError(Exception):
    """Raised when service principal settings are missing or invalid."""

    pass


def validate_uuid(value: str, field_name: str) -> None:
    """Validate UUID format. Raises ValueError if invalid.

    Args:
        value: The string to validate as UUID
        field_name: Name of the field for error messages

    Raises:
        ValueError: If value is not a valid UUID format
    """
    if not value:
        raise ValueError(f"{field_name} must be valid UUID format, got empty string")

    try:
        UUID(value)
    except (ValueError, AttributeError) as e:
        raise ValueError(f"{field_name} must be valid UUID format, got: {value}") from e


@dataclass(frozen=True)
class ServicePrincipalConfig:
    """Service principal authentication configuration.

    Security:
    - No client_secret storage - must come from environment
    - tenant_id, client_id and subscription_id validated as UUIDs
    - Frozen to prevent mutation
    """

    tenant_id: str
    client_id: str
    subscription_id: str

    def __post_init__(self):
        """Validate UUIDs for every identifier."""
        validate_uuid(self.tenant_id, "tenant_id")
        validate_uuid(self.client_id, "client_id")
        validate_uuid(self.subscription_id, "subscription_id")

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "ServicePrincipalConfig":
        """Build configuration from CLIENT_ID, TENANT_ID and SUBSCRIPTION_ID.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            ServicePrincipalConfig

        Raises:
            AuthConfigError: If a variable is missing or not a UUID
        """
        env = os.environ if environ is None else environ

        missing = [
            name
            for name in (CLIENT_ID_ENV, TENANT_ID_ENV, SUBSCRIPTION_ID_ENV)
            if not env.get(name, "").strip()
        ]
        if missing:
            raise AuthConfigError(
                f"Missing environment variables: {', '.join(missing)}. "
                "Set CLIENT_ID, CLIENT_SECRET, TENANT_ID and SUBSCRIPTION_ID "
                "for the service principal."
            )

        try:
            return cls(
                tenant_id=env[TENANT_ID_ENV].strip(),
                client_id=env[CLIENT_ID_ENV].strip(),
                subscription_id=env[SUBSCRIPTION_ID_ENV].strip(),
            )
        except ValueError as e:
            raise AuthConfigError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary. Contains no secrets."""
        return {
            "tenant_id": self.tenant_id,
            "client_id": self.client_id,
            "subscription_id": self.subscription_id,
        }

    def to_dict_masked(self) -> dict[str, Any]:
        """Convert to dictionary with identifiers partially masked for logging."""
        return {key: f"{value[:8]}-****" for key, value in self.to_dict().items()}
