from __future__ import annotations

"""
Network Communication Infrastructure.

Thin HTTP transport used by the publisher to deliver snapshots.
"""

from etcdextract.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT
from etcdextract.infra.network.http_client import post_json

__all__ = [
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
    "post_json",
]
