"""
Exchange Adapters - Secure Logging Utilities.

============================================================
SECURITY REQUIREMENTS
============================================================
1. NEVER log raw API keys or secrets
2. Mask credentials in the config before the init log line
3. Mask signed request parameters before tracing them

============================================================
"""

import re
from typing import Any, Dict

from .config import ExchangeConfig


# Parameter / config item names that should be masked
SENSITIVE_PARAMS = {
    "key",
    "apikey",
    "api_key",
    "secret",
    "secretkey",
    "secret_key",
    "signature",
}

# HMAC-SHA256 hex digests
_HMAC_PATTERN = re.compile(r"\b[a-f0-9]{64}\b", re.IGNORECASE)


def mask_value(value: str, show_chars: int = 4) -> str:
    """
    Mask a sensitive value, showing only first few chars.

    Args:
        value: Value to mask
        show_chars: Number of chars to show at start

    Returns:
        Masked value
    """
    if not value or len(value) <= show_chars:
        return "***"
    return f"{value[:show_chars]}...***"


def mask_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Mask sensitive parameters.

    Args:
        params: Request parameters or config section

    Returns:
        Parameters with sensitive values masked
    """
    if not params:
        return {}

    masked = {}
    for key, value in params.items():
        if key.lower() in SENSITIVE_PARAMS:
            masked[key] = mask_value(str(value)) if value else value
        elif isinstance(value, dict):
            masked[key] = mask_params(value)
        elif isinstance(value, str):
            masked[key] = _HMAC_PATTERN.sub("***HMAC***", value)
        else:
            masked[key] = value
    return masked


def mask_config(config: ExchangeConfig) -> Dict[str, Any]:
    """Loggable view of an exchange config with credentials masked."""
    return {
        "name": config.name,
        "adapter": config.adapter,
        "authentication_config": mask_params(config.authentication_config),
        "network_config": dict(config.network_config),
        "optional_config": dict(config.optional_config),
    }
