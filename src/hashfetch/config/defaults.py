"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default worker settings
DEFAULT_PARALLEL = 10
DEFAULT_ALGORITHM = "md5"

# Default HTTP settings
DEFAULT_TIMEOUT = 5.0
DEFAULT_FOLLOW_REDIRECTS = True
DEFAULT_USER_AGENT = "hashfetch/0.1"

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "parallel": DEFAULT_PARALLEL,
        "algorithm": DEFAULT_ALGORITHM,
        "timeout": DEFAULT_TIMEOUT,
        "follow_redirects": DEFAULT_FOLLOW_REDIRECTS,
        "user_agent": DEFAULT_USER_AGENT,
        "log_level": DEFAULT_LOG_LEVEL,
    }
