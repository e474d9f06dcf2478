"""Log sanitization module for preventing secret leakage.

This module redacts sensitive data from log lines and error messages:
- Client secrets
- Client IDs and other UUIDs (partial masking)
- VM admin passwords
- Access tokens and Authorization headers

Azure SDK errors can echo request bodies, and a VM create request carries
the admin password, so every error message that reaches a log goes through
LogSanitizer first.
"""

import re
from re import Pattern
from typing import Any


class LogSanitizer:
    """Sanitize sensitive data from logs and error messages.

    All methods are class methods and can be called without instantiation.
    """

    REDACTED = "[REDACTED]"

    # Order matters: more specific patterns come first
    SECRET_PATTERNS: dict[str, Pattern] = {
        "client_secret_assignment": re.compile(
            r'(client[_-]?secret["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)]+)',
            re.IGNORECASE,
        ),
        "client_secret_env": re.compile(
            r"((?:AZURE_)?CLIENT_SECRET[\"']?\s*[:=]\s*[\"']?)([^\s\"'&,\)]+)",
            re.IGNORECASE,
        ),
        # Matches both admin_password= and the JSON "adminPassword": "..."
        "password": re.compile(
            r'((?:admin[_-]?)?password["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)]+)',
            re.IGNORECASE,
        ),
        "authorization_bearer": re.compile(r"(Authorization:\s*Bearer\s+)([^\s]+)", re.IGNORECASE),
        "access_token": re.compile(
            r'(access[_-]?token["\']?\s*[:=]\s*["\']?)([^\s"\'&,\)]+)',
            re.IGNORECASE,
        ),
    }

    UUID_PATTERN: Pattern = re.compile(
        r"\b([0-9a-f]{8})-([0-9a-f]{4})-([0-9a-f]{4})-([0-9a-f]{4})-([0-9a-f]{12})\b",
        re.IGNORECASE,
    )

    @classmethod
    def sanitize(cls, message: str) -> str:
        """Sanitize message by redacting sensitive patterns.

        Args:
            message: The message to sanitize

        Returns:
            Sanitized message with secrets replaced by [REDACTED]

        Examples:
            >>> LogSanitizer.sanitize("client_secret=abc123")
            'client_secret=[REDACTED]'
            >>> LogSanitizer.sanitize('"adminPassword": "P@ss"')
            '"adminPassword": "[REDACTED]"'
        """
        if not isinstance(message, str):
            message = str(message)

        result = message
        for pattern in cls.SECRET_PATTERNS.values():
            result = pattern.sub(r"\1" + cls.REDACTED, result)
        return result

    @classmethod
    def sanitize_client_id(cls, message: str) -> str:
        """Partially mask UUIDs (client, tenant and subscription IDs).

        Examples:
            >>> LogSanitizer.sanitize_client_id("client_id=12345678-1234-1234-1234-123456789abc")
            'client_id=12345678-****-****-****-************'
        """

        def uuid_replacer(match):
            return f"{match.group(1)}-****-****-****-************"

        return cls.UUID_PATTERN.sub(uuid_replacer, message)

    @classmethod
    def redact_value(cls, message: str, secret: str | None) -> str:
        """Remove a known secret value wherever it appears in message."""
        if not secret:
            return message
        return message.replace(secret, cls.REDACTED)

    @classmethod
    def sanitize_dict(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Sanitize dictionary values recursively.

        Examples:
            >>> data = {"os_profile": {"admin_password": "abc123", "computer_name": "vm001"}}
            >>> LogSanitizer.sanitize_dict(data)["os_profile"]["admin_password"]
            '[REDACTED]'
        """
        sensitive_keys = {
            "client_secret",
            "password",
            "access_token",
            "secret",
            "authorization",
        }

        result: dict[str, Any] = {}
        for key, value in data.items():
            key_lower = key.lower()
            if any(word in key_lower for word in sensitive_keys):
                result[key] = cls.REDACTED
            elif isinstance(value, dict):
                result[key] = cls.sanitize_dict(value)
            elif isinstance(value, str):
                result[key] = cls.sanitize(value)
            elif isinstance(value, (list, tuple)):
                result[key] = type(value)(
                    cls.sanitize_dict(item)
                    if isinstance(item, dict)
                    else cls.sanitize(item)
                    if isinstance(item, str)
                    else item
                    for item in value
                )
            else:
                result[key] = value

        return result

    @classmethod
    def create_safe_error_message(cls, error: Exception, context: str = "") -> str:
        """Create error message with secrets sanitized.

        Examples:
            >>> err = ValueError("Auth failed with client_secret=abc123")
            >>> LogSanitizer.create_safe_error_message(err, "Authentication")
            'Authentication: Auth failed with client_secret=[REDACTED]'
        """
        sanitized_msg = cls.sanitize(str(error))
        if context:
            return f"{context}: {sanitized_msg}"
        return sanitized_msg

    @classmethod
    def sanitize_exception(cls, exc: Exception) -> str:
        """Sanitize exception message."""
        return cls.sanitize(str(exc))
