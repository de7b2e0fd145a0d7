from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared store fixtures (node trees and an in-memory store client).
3. A logging reset fixture for tests that bootstrap the logging subsystem.
"""

import logging
import os
import sys
from logging.handlers import QueueListener
from typing import Dict, Iterator, List, Optional, Union

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from etcdextract.domain.snapshot_models import RemoteNode  # noqa: E402
from etcdextract.infra.store import StoreError  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class FakeStoreClient:
    """In-memory stand-in for EtcdClient recording every query."""

    def __init__(self, answers: Dict[str, Union[RemoteNode, Exception]]) -> None:
        self.answers = answers
        self.calls: List[Dict[str, object]] = []

    def get(self, key: str, recursive: bool = True, timeout: Optional[float] = None) -> RemoteNode:
        self.calls.append({"key": key, "recursive": recursive, "timeout": timeout})
        answer = self.answers.get(key)
        if answer is None:
            raise StoreError(key, "Key not found", 100)
        if isinstance(answer, Exception):
            raise answer
        return answer


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def config_tree() -> RemoteNode:
    """
    Return a recursive store answer for '/config'.

    Structure:
    /config
      /db
        host = localhost
        port = 5432
      /feature = on
    """
    return RemoteNode.directory(
        "/config",
        RemoteNode.directory(
            "/config/db",
            RemoteNode.leaf("/config/db/host", "localhost"),
            RemoteNode.leaf("/config/db/port", "5432"),
        ),
        RemoteNode.leaf("/config/feature", "on"),
    )


@pytest.fixture
def fake_store(config_tree: RemoteNode) -> FakeStoreClient:
    return FakeStoreClient({
        "/config": config_tree,
        "/services": RemoteNode.directory(
            "/services",
            RemoteNode.leaf("/services/api", "10.0.0.1"),
        ),
        "/down": StoreError("/down", "Request timed out after 5s"),
    })


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Detach the extractor's handlers and stop its listener after the test."""
    yield
    root = logging.getLogger()

    listener = getattr(root, "_etcdextract_queue_listener", None)
    if isinstance(listener, QueueListener) and getattr(listener, "_thread", None) is not None:
        listener.stop()
    setattr(root, "_etcdextract_queue_listener", None)

    for h in list(root.handlers):
        if getattr(h, "_etcdextract_handler", False):
            root.removeHandler(h)
            h.close()

    if hasattr(root, "_etcdextract_configured"):
        delattr(root, "_etcdextract_configured")
    root.setLevel(logging.WARNING)


@pytest.fixture
def store_factory():
    """Return the FakeStoreClient class for tests that need custom answers."""
    return FakeStoreClient
