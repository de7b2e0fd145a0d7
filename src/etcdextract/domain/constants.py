from __future__ import annotations

"""
Domain Constants.

Provides centralized access to application-wide constants: versioning,
collaborator defaults (store endpoint, deadlines) and the console sink
sentinel recognised by the publisher.
"""

APP_NAME = "etcdextract"
APP_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# STORE DEFAULTS
# -----------------------------------------------------------------------------
DEFAULT_ETCD_ENDPOINT = "http://127.0.0.1:2379"
ETCD_KEYS_PREFIX = "/v2/keys"

# Per-request deadline for each root fetch (seconds)
DEFAULT_REQUEST_TIMEOUT = 5

# -----------------------------------------------------------------------------
# PUBLICATION DEFAULTS
# -----------------------------------------------------------------------------
STDOUT_SINK = "stdout://"
DEFAULT_INTERVAL = 60
PUBLISH_TIMEOUT = 10
JSON_CONTENT_TYPE = "application/json"
