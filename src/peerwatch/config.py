"""
Configuration management for peerwatch.

Loads router credentials and classification tables from environment
variables or a .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field

from peerwatch.peers.models import (
    DEFAULT_INFRASTRUCTURE_PREFIXES,
    DEFAULT_POOL_CAPACITY,
    DEFAULT_RESERVED_IDS,
    DEFAULT_STATIC_OVERRIDES,
    ClassificationRules,
)

# Try to load from .env file if python-dotenv is available
try:
    from dotenv import load_dotenv
    # Check common locations for .env
    env_locations = [
        Path.home() / ".peerwatch" / ".env",
        Path.home() / ".config" / "peerwatch" / ".env",
        Path.cwd() / ".env",
    ]
    for env_path in env_locations:
        if env_path.exists():
            load_dotenv(env_path)
            break
except ImportError:
    pass


class ConfigError(ValueError):
    """Raised when a configuration value cannot be parsed."""


def parse_id_set(value: str) -> frozenset[int]:
    """Parse "2,7,14" into a set of tunnel numbers."""
    try:
        return frozenset(int(part) for part in value.split(",") if part.strip())
    except ValueError as e:
        raise ConfigError(f"Invalid tunnel number list: {value!r}") from e


def parse_override_table(value: str) -> dict[int, str]:
    """Parse "5=172.16.100.26,8=190.2.221.40:10554" into a table."""
    table: dict[int, str] = {}
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        number, sep, address = part.partition("=")
        if not sep or not address.strip():
            raise ConfigError(f"Invalid static override entry: {part!r}")
        try:
            table[int(number)] = address.strip()
        except ValueError as e:
            raise ConfigError(f"Invalid static override entry: {part!r}") from e
    return table


def parse_prefixes(value: str) -> tuple[str, str]:
    """Parse exactly two comma-separated infrastructure prefixes."""
    prefixes = [part.strip() for part in value.split(",") if part.strip()]
    if len(prefixes) != 2:
        raise ConfigError(f"Expected two infrastructure prefixes: {value!r}")
    return prefixes[0], prefixes[1]


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


@dataclass
class PeerwatchConfig:
    """Router connection and peer classification settings."""

    # RouterOS REST API
    router_url: str = ""
    router_username: str = ""
    router_password: str = ""
    verify_ssl: bool = True
    timeout: float = 10.0

    # Classification
    pool_capacity: int = DEFAULT_POOL_CAPACITY
    reserved_ids: frozenset[int] = DEFAULT_RESERVED_IDS
    static_overrides: dict[int, str] = field(
        default_factory=lambda: dict(DEFAULT_STATIC_OVERRIDES)
    )
    infrastructure_prefixes: tuple[str, str] = DEFAULT_INFRASTRUCTURE_PREFIXES

    # Tunnel overlay, used by the free-address report
    tunnel_subnet: str = ""

    @classmethod
    def from_env(cls) -> "PeerwatchConfig":
        """Load configuration from environment variables."""
        reserved = os.getenv("PEERWATCH_RESERVED_IDS")
        overrides = os.getenv("PEERWATCH_STATIC_OVERRIDES")
        prefixes = os.getenv("PEERWATCH_INFRA_PREFIXES")

        return cls(
            router_url=os.getenv("PEERWATCH_ROUTER_URL", ""),
            router_username=os.getenv("PEERWATCH_ROUTER_USERNAME", ""),
            router_password=os.getenv("PEERWATCH_ROUTER_PASSWORD", ""),
            verify_ssl=_env_bool("PEERWATCH_VERIFY_SSL", True),
            timeout=_env_float("PEERWATCH_TIMEOUT", 10.0),
            pool_capacity=_env_int("PEERWATCH_POOL_CAPACITY", DEFAULT_POOL_CAPACITY),
            reserved_ids=parse_id_set(reserved) if reserved is not None else DEFAULT_RESERVED_IDS,
            static_overrides=(
                parse_override_table(overrides)
                if overrides is not None
                else dict(DEFAULT_STATIC_OVERRIDES)
            ),
            infrastructure_prefixes=(
                parse_prefixes(prefixes) if prefixes else DEFAULT_INFRASTRUCTURE_PREFIXES
            ),
            tunnel_subnet=os.getenv("PEERWATCH_TUNNEL_SUBNET", ""),
        )

    def rules(self) -> ClassificationRules:
        """Build the classification rules for this configuration."""
        return ClassificationRules(
            reserved_ids=self.reserved_ids,
            static_overrides=self.static_overrides,
            pool_capacity=self.pool_capacity,
            infrastructure_prefixes=self.infrastructure_prefixes,
        )


# Global config instance
_config: PeerwatchConfig | None = None


def get_config() -> PeerwatchConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = PeerwatchConfig.from_env()
    return _config


def set_config(config: PeerwatchConfig | None) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
