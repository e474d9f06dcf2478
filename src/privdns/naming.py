"""Resource naming helpers.

Azure names in the sample are a readable prefix plus a random numeric
suffix, so repeated runs never collide on resource group or zone names.
"""

import re
import secrets
import string

DEFAULT_SUFFIX_LENGTH = 5
MAX_NAME_LENGTH = 60

# Windows VM admin passwords need 3 of: lower, upper, digit, special
PASSWORD_SPECIALS = "!@#$%^&*-_"

# Letters, digits and inner hyphens; optional trailing dot for a rooted name
DNS_NAME_PATTERN = re.compile(
    r"[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\.?"
)


def create_random_name(prefix: str, suffix_length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    """Return prefix followed by random digits.

    Args:
        prefix: Readable name prefix, e.g. "PrivateDnsTemplateRG"
        suffix_length: Number of random digits to append

    Returns:
        Name such as "PrivateDnsTemplateRG48213"

    Raises:
        ValueError: If the prefix is empty or the name would be too long
    """
    if not prefix:
        raise ValueError("prefix cannot be empty")
    if suffix_length < 1:
        raise ValueError("suffix_length must be at least 1")
    if len(prefix) + suffix_length > MAX_NAME_LENGTH:
        raise ValueError(
            f"Name prefix too long: {prefix} (max {MAX_NAME_LENGTH - suffix_length} characters)"
        )

    suffix = "".join(secrets.choice(string.digits) for _ in range(suffix_length))
    return f"{prefix}{suffix}"


def generate_admin_password(length: int = 20) -> str:
    """Generate a VM admin password that satisfies Azure complexity rules.

    The password is never logged or persisted; it only travels in the VM
    create request.
    """
    if length < 12:
        raise ValueError("password length must be at least 12")

    classes = [string.ascii_lowercase, string.ascii_uppercase, string.digits, PASSWORD_SPECIALS]
    chars = [secrets.choice(group) for group in classes]
    alphabet = "".join(classes)
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(chars)))

    # Shuffle so the guaranteed characters are not always at the front
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def is_valid_dns_name(name: str) -> bool:
    """Return True if name is one or more dot-separated DNS labels."""
    return isinstance(name, str) and DNS_NAME_PATTERN.fullmatch(name) is not None
