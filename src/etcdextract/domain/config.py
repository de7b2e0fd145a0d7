from __future__ import annotations

"""
Configuration Domain Defaults.

The extractor is driven by a plain configuration dictionary assembled
from the command line. This module owns the schema defaults that every
other layer falls back to.
"""

from typing import Any, Dict

from etcdextract.domain.constants import (
    DEFAULT_ETCD_ENDPOINT,
    DEFAULT_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    STDOUT_SINK,
)

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Extraction
        "roots": [],
        "interval": DEFAULT_INTERVAL,
        "destination": STDOUT_SINK,

        # Store
        "endpoint": DEFAULT_ETCD_ENDPOINT,
        "timeout": DEFAULT_REQUEST_TIMEOUT,

        # Diagnostics
        "log_level": "INFO",
        "log_file": None,

        # Execution
        "once": False,
    }
