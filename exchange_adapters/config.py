"""
Exchange Adapters - Configuration.

============================================================
PURPOSE
============================================================
Configuration consumed by exchange adapters.

LAYERS:
- ExchangeConfig: raw sections as loaded from YAML or env
- NetworkConfig:  parsed network settings (shared base)
- AdapterConfig:  parsed, immutable adapter settings

CRITICAL CONSTRAINTS:
- Parsed once at adapter init
- Immutable afterwards (no hot reload of keys or fees)

============================================================
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple

import yaml
from dotenv import load_dotenv

from .types import ConfigurationError


# ============================================================
# RAW EXCHANGE CONFIGURATION
# ============================================================

@dataclass
class ExchangeConfig:
    """
    Raw exchange configuration sections.

    Values are kept as loaded; adapters parse and validate them.
    """

    name: str = "Binance"
    """Display name of the exchange."""

    adapter: str = "binance"
    """Adapter id understood by AdapterFactory."""

    authentication_config: Dict[str, Any] = field(default_factory=dict)
    """key, secret, simulate-mode."""

    network_config: Dict[str, Any] = field(default_factory=dict)
    """connection-timeout, max-retries, non-fatal-error-codes, non-fatal-error-messages."""

    optional_config: Dict[str, Any] = field(default_factory=dict)
    """buy-fee, sell-fee."""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExchangeConfig":
        """Build from a mapping using the YAML key layout."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Exchange config must be a mapping, got {type(data).__name__}")

        return cls(
            name=data.get("name", "Binance"),
            adapter=data.get("adapter", "binance"),
            authentication_config=dict(data.get("authenticationConfig") or {}),
            network_config=dict(data.get("networkConfig") or {}),
            optional_config=dict(data.get("optionalConfig") or {}),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "ExchangeConfig":
        """
        Load configuration from a YAML file.

        Expected layout:

            exchange:
              name: Binance
              adapter: binance
              authenticationConfig:
                key: ...
                secret: ...
                simulate-mode: "true"
              networkConfig:
                connection-timeout: 30
              optionalConfig:
                buy-fee: "0.1"
                sell-fee: "0.1"
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load exchange config from {path}: {e}", cause=e)

        if isinstance(data, dict) and "exchange" in data:
            data = data["exchange"]

        return cls.from_dict(data)

    @classmethod
    def from_env(cls, prefix: str = "BINANCE", dotenv: bool = True) -> "ExchangeConfig":
        """
        Create config from environment variables.

        Reads {prefix}_API_KEY, {prefix}_API_SECRET, {prefix}_SIMULATE_MODE,
        {prefix}_BUY_FEE, {prefix}_SELL_FEE and {prefix}_CONNECTION_TIMEOUT.
        """
        if dotenv:
            load_dotenv()

        prefix = prefix.upper()

        def env(name: str) -> Optional[str]:
            return os.environ.get(f"{prefix}_{name}")

        authentication = {
            "key": env("API_KEY"),
            "secret": env("API_SECRET"),
        }
        if env("SIMULATE_MODE") is not None:
            authentication["simulate-mode"] = env("SIMULATE_MODE")

        network = {}
        if env("CONNECTION_TIMEOUT") is not None:
            network["connection-timeout"] = env("CONNECTION_TIMEOUT")

        optional = {}
        if env("BUY_FEE") is not None:
            optional["buy-fee"] = env("BUY_FEE")
        if env("SELL_FEE") is not None:
            optional["sell-fee"] = env("SELL_FEE")

        return cls(
            name=prefix.capitalize(),
            adapter=prefix.lower(),
            authentication_config=authentication,
            network_config=network,
            optional_config=optional,
        )


# ============================================================
# NETWORK CONFIGURATION
# ============================================================

DEFAULT_NON_FATAL_ERROR_CODES: FrozenSet[int] = frozenset({502, 503, 504, 520, 522, 525})


@dataclass(frozen=True)
class NetworkConfig:
    """Network settings shared by all adapters."""

    connection_timeout: float = 30.0
    """Request timeout in seconds."""

    max_retries: int = 3
    """Retries for transport faults and non-fatal HTTP codes."""

    non_fatal_error_codes: FrozenSet[int] = DEFAULT_NON_FATAL_ERROR_CODES
    """HTTP status codes treated as transient."""

    non_fatal_error_messages: Tuple[str, ...] = (
        "Connection reset",
        "Connection refused",
        "Remote host closed connection during handshake",
        "Unexpected end of file from server",
    )
    """Transport error message fragments treated as transient."""


# ============================================================
# ADAPTER CONFIGURATION
# ============================================================

@dataclass(frozen=True)
class AdapterConfig:
    """
    Parsed adapter configuration.

    Fee percentages are stored as fractions (0.1% -> 0.00100000).
    """

    api_key: str
    api_secret: str = field(repr=False)
    simulate_mode: bool = True
    buy_fee_percentage: Decimal = Decimal("0")
    sell_fee_percentage: Decimal = Decimal("0")
    network: NetworkConfig = field(default_factory=NetworkConfig)


# ============================================================
# VALUE PARSERS
# ============================================================

def parse_bool(value: Any, name: str, default: bool) -> bool:
    """
    Parse a boolean config item.

    Raises:
        ConfigurationError: If value is present and not true/false
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        return value

    text = str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ConfigurationError(f"Error while loading {name}: '{value}' is not true or false")
