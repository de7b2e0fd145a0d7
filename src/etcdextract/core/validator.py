from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between the command line and the scheduler. Merges domain
defaults, coerces raw values into typed parameters and rejects values
the extraction loop cannot run with.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from etcdextract.domain.config import get_default_config
from etcdextract.domain.constants import STDOUT_SINK

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(config: Any) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.

    Raises:
        TypeError: If config is not a dictionary.
        ValueError: On the first value the loop cannot run with.
    """
    if not isinstance(config, dict):
        raise TypeError(f"Invalid config type: expected dict, received {type(config).__name__}.")

    warnings: List[str] = []
    merged: Dict[str, Any] = get_default_config()
    merged.update({k: v for k, v in config.items() if v is not None})

    merged["roots"] = _as_roots(merged.get("roots"), warnings)
    merged["interval"] = _as_interval(merged.get("interval"))
    merged["timeout"] = _as_timeout(merged.get("timeout"))
    merged["destination"] = _as_destination(merged.get("destination"))
    merged["endpoint"] = _as_url(merged.get("endpoint"), "endpoint")
    merged["log_level"] = _as_log_level(merged.get("log_level"))
    merged["once"] = bool(merged.get("once"))

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_roots(value: Any, warnings: List[str]) -> List[str]:
    """Accept a comma-separated string or a list of root paths."""
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = [str(v) for v in value]
    else:
        raw = []

    roots = [r.strip() for r in raw if r and r.strip()]
    if not roots:
        raise ValueError("No document roots provided.")

    for root in roots:
        if not root.startswith("/"):
            warnings.append(f"Root '{root}' is not absolute; it will be queried as '/{root}'.")
    return roots


def _as_interval(value: Any) -> int:
    """Interval must be a whole, non-negative number of seconds."""
    interval: Optional[int] = None
    if isinstance(value, str):
        try:
            interval = int(value.strip())
        except ValueError:
            interval = None
    elif isinstance(value, int) and not isinstance(value, bool):
        interval = value

    if interval is None or interval < 0:
        raise ValueError(f"Invalid interval value: {value}")
    return interval


def _as_timeout(value: Any) -> float:
    """Per-request deadline in seconds, strictly positive."""
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid timeout value: {value}")

    if timeout <= 0:
        raise ValueError(f"Invalid timeout value: {value}")
    return timeout


def _as_destination(value: Any) -> str:
    """Destination is either the console sink or an HTTP(S) URL."""
    if isinstance(value, str) and value.strip() == STDOUT_SINK:
        return STDOUT_SINK
    return _as_url(value, "destination")


def _as_url(value: Any, field: str) -> str:
    """Validate an absolute http/https URL."""
    if isinstance(value, str):
        v = value.strip()
        parsed = urlparse(v)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return v

    raise ValueError(f"Invalid {field} URL: {value}")


def _as_log_level(value: Any) -> str:
    level = str(value).strip().upper() if value else None
    if level in _LOG_LEVELS:
        return level
    raise ValueError(f"Invalid log level: {value}")
