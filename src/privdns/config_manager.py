"""Configuration management module.

This module loads the sample settings from an optional TOML file. Every
setting has a default, so running without a config file provisions the
standard sample layout:

    location = "eastus"
    vm_size = "Standard_D2s_v3"
    admin_username = "azureadmin"
    vnet_address_prefix = "10.10.0.0/16"
    a_record_name = "vm001arecord"
    a_record_ip = "10.10.2.4"
    a_record_ttl = 3600

    [subnets]
    default = "10.10.1.0/24"
    subnet1 = "10.10.2.0/24"
    subnet2 = "10.10.3.0/24"

    [zone_tags]
    key = "value"
    key2 = "value"

Security:
- Path validation
- No secrets in the config file (credentials come from the environment)
"""

import ipaddress
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import tomli

from privdns.naming import is_valid_dns_name

logger = logging.getLogger(__name__)

DEFAULT_SUBNETS = {
    "default": "10.10.1.0/24",
    "subnet1": "10.10.2.0/24",
    "subnet2": "10.10.3.0/24",
}

DEFAULT_ZONE_TAGS = {"key": "value", "key2": "value"}

# NIC 1 lives in subnet1 and NIC 2 in subnet2
REQUIRED_SUBNETS = ("subnet1", "subnet2")

STRING_SETTINGS = (
    "location",
    "vm_size",
    "admin_username",
    "vnet_address_prefix",
    "a_record_name",
    "a_record_ip",
)


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


@dataclass
class SampleConfig:
    """Sample configuration data."""

    location: str = "eastus"
    vm_size: str = "Standard_D2s_v3"
    admin_username: str = "azureadmin"
    vnet_address_prefix: str = "10.10.0.0/16"
    subnets: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUBNETS))
    a_record_name: str = "vm001arecord"
    a_record_ip: str = "10.10.2.4"
    a_record_ttl: int = 3600
    zone_tags: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ZONE_TAGS))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SampleConfig":
        """Create from dictionary, falling back to defaults for absent keys."""
        defaults = cls()
        return cls(
            location=data.get("location", defaults.location),
            vm_size=data.get("vm_size", defaults.vm_size),
            admin_username=data.get("admin_username", defaults.admin_username),
            vnet_address_prefix=data.get("vnet_address_prefix", defaults.vnet_address_prefix),
            subnets=dict(data.get("subnets", defaults.subnets)),
            a_record_name=data.get("a_record_name", defaults.a_record_name),
            a_record_ip=data.get("a_record_ip", defaults.a_record_ip),
            a_record_ttl=int(data.get("a_record_ttl", defaults.a_record_ttl)),
            zone_tags=dict(data.get("zone_tags", defaults.zone_tags)),
        )

    def validate(self) -> None:
        """Check address layout and record settings.

        Raises:
            ConfigError: If any setting is inconsistent
        """
        for key in STRING_SETTINGS:
            value = getattr(self, key)
            if not isinstance(value, str):
                raise ConfigError(f"{key} must be a string, got {type(value).__name__}")

        if not self.location.strip():
            raise ConfigError("location cannot be empty")

        try:
            vnet = ipaddress.IPv4Network(self.vnet_address_prefix)
        except ValueError as e:
            raise ConfigError(f"Invalid vnet_address_prefix: {self.vnet_address_prefix}") from e

        for name in REQUIRED_SUBNETS:
            if name not in self.subnets:
                raise ConfigError(f"Missing required subnet: {name}")

        for name, prefix in self.subnets.items():
            if not isinstance(prefix, str):
                raise ConfigError(f"Invalid address prefix for subnet {name}: {prefix!r}")
            try:
                subnet = ipaddress.ip_network(prefix)
            except ValueError as e:
                raise ConfigError(f"Invalid address prefix for subnet {name}: {prefix}") from e
            if subnet.version != vnet.version:
                raise ConfigError(
                    f"Subnet {name} ({prefix}) is not IPv{vnet.version} like the virtual network "
                    f"({self.vnet_address_prefix})"
                )
            if not subnet.subnet_of(vnet):
                raise ConfigError(
                    f"Subnet {name} ({prefix}) is outside the virtual network "
                    f"({self.vnet_address_prefix})"
                )

        try:
            record_ip = ipaddress.IPv4Address(self.a_record_ip)
        except ValueError as e:
            raise ConfigError(f"Invalid a_record_ip: {self.a_record_ip}") from e
        if record_ip not in vnet:
            raise ConfigError(
                f"a_record_ip {self.a_record_ip} is outside the virtual network "
                f"({self.vnet_address_prefix})"
            )

        # Record name must be valid before provisioning starts
        if not is_valid_dns_name(self.a_record_name):
            raise ConfigError(f"Invalid a_record_name: {self.a_record_name!r}")

        if isinstance(self.a_record_ttl, bool) or not isinstance(self.a_record_ttl, int):
            raise ConfigError(f"a_record_ttl must be an integer, got {self.a_record_ttl!r}")
        if self.a_record_ttl <= 0:
            raise ConfigError(f"a_record_ttl must be positive, got {self.a_record_ttl}")


class ConfigManager:
    """Load the sample configuration file.

    Configuration is read from ~/.privdns/config.toml unless a path is given.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".privdns"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file

        Raises:
            ConfigError: If a custom path does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return cls.DEFAULT_CONFIG_FILE

    @classmethod
    def load_config(
        cls, custom_path: str | None = None, location: str | None = None
    ) -> SampleConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)
            location: Region override from the CLI (takes precedence)

        Returns:
            Validated SampleConfig

        Raises:
            ConfigError: If loading or validation fails
        """
        config_path = cls.get_config_path(custom_path)

        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                raise ConfigError(f"Failed to load config: {e}") from e
            logger.debug(f"Loaded config from: {config_path}")
        else:
            logger.debug("Config file not found, using defaults")
            data = {}

        try:
            config = SampleConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config values: {e}") from e

        if location:
            config.location = location

        config.validate()
        return config
