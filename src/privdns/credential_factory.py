"""Credential factory for Azure authentication.

This module creates the Azure Identity credential used by every management
client. The sample signs in as a service principal with a client secret:

- tenant and client IDs come from ServicePrincipalConfig
- the client secret comes from the CLIENT_SECRET environment variable only

Security:
- No token storage - delegates to Azure Identity SDK
- Client secret from environment only
- Log sanitization for all error messages
"""

import logging
import os
from collections.abc import Mapping

from azure.identity import ClientSecretCredential

from privdns.auth_models import CLIENT_SECRET_ENV, ServicePrincipalConfig
from privdns.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


class CredentialFactoryError(Exception):
    """Raised when credential creation fails."""

    pass


class CredentialFactory:
    """Factory for creating Azure Identity credentials.

    Philosophy:
    - Delegate to Azure SDK, don't reinvent
    - No token storage
    - Fail fast on configuration errors
    """

    @staticmethod
    def create_credential(
        config: ServicePrincipalConfig, environ: Mapping[str, str] | None = None
    ) -> ClientSecretCredential:
        """Create a service principal credential with client secret.

        Args:
            config: Service principal configuration
            environ: Environment mapping (defaults to os.environ)

        Returns:
            ClientSecretCredential

        Raises:
            CredentialFactoryError: If the secret is missing or the SDK rejects the input
        """
        env = os.environ if environ is None else environ
        client_secret = env.get(CLIENT_SECRET_ENV)

        if not client_secret:
            raise CredentialFactoryError(
                "Client secret not found in environment. Set the CLIENT_SECRET environment variable."
            )

        try:
            credential = ClientSecretCredential(
                tenant_id=config.tenant_id,
                client_id=config.client_id,
                client_secret=client_secret,
            )
        except Exception as e:
            safe_error = LogSanitizer.redact_value(LogSanitizer.sanitize_exception(e), client_secret)
            raise CredentialFactoryError(
                f"Failed to create service principal credential: {safe_error}"
            ) from e

        logger.debug(
            "Created service principal credential for client %s",
            LogSanitizer.sanitize_client_id(config.client_id),
        )
        return credential
