"""
Configuration constants for the CTCP courier

This module contains the defaults used when building settings. Each constant
can be overridden by setting an environment variable with the same name.
"""

import os

from . import __version__


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is not None and value.strip():
        return value.strip()
    return default


# Reply throttling
CTCP_REPLY_QUEUE_SIZE = _get_env_int(
    "CTCP_REPLY_QUEUE_SIZE", 10
)  # Pending replies kept per connection before new ones are dropped
CTCP_REPLY_RATE = _get_env_float(
    "CTCP_REPLY_RATE", 0.25
)  # Minimum seconds between two replies on the same connection

# Built-in reply content
CTCP_CLIENT_NAME = _get_env_str("CTCP_CLIENT_NAME", "ctcp-courier")
CTCP_CLIENT_VERSION = _get_env_str("CTCP_CLIENT_VERSION", __version__)
CTCP_SOURCE_URL = _get_env_str(
    "CTCP_SOURCE_URL", "https://pypi.org/project/ctcp-courier/"
)
