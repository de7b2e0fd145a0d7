from __future__ import annotations

"""
Root Fetcher.

Retrieves configured roots from the hierarchical store, one bounded
recursive query per root, in the order they were configured. A failing
root is reported and skipped; it never stops the remaining roots.
"""

import logging
from typing import Iterator, List, Optional, Protocol, Tuple

from etcdextract.domain.constants import DEFAULT_REQUEST_TIMEOUT
from etcdextract.domain.snapshot_models import RemoteNode
from etcdextract.infra.store import StoreError

logger = logging.getLogger(__name__)


class StoreClient(Protocol):
    def get(self, key: str, recursive: bool = True, timeout: Optional[float] = None) -> RemoteNode:
        ...


def fetch_root(
        client: StoreClient,
        root: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> RemoteNode:
    """
    Issue a single recursive query for one root.

    Raises:
        StoreError: If the root cannot be read within the deadline.
    """
    return client.get(root, recursive=True, timeout=timeout)


def fetch_roots(
        client: StoreClient,
        roots: List[str],
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        log: Optional[logging.Logger] = None,
) -> Iterator[Tuple[str, RemoteNode]]:
    """
    Fetch every root sequentially, yielding the successful ones.

    Args:
        client: Store client shared across cycles.
        roots: Root paths in caller order.
        timeout: Per-request deadline in seconds.
        log: Injected logger; defaults to the module logger.

    Yields:
        Tuple[str, RemoteNode]: The root and its fetched subtree.
    """
    log = log or logger
    for root in roots:
        try:
            node = fetch_root(client, root, timeout)
        except StoreError as e:
            log.error(f"Cannot get root: {root}. Error: {e}")
            continue

        if log.isEnabledFor(logging.DEBUG):
            log.debug(f"Fetched root {root} ({_count_leaves(node)} leaves)")
        yield root, node


def _count_leaves(node: RemoteNode) -> int:
    if not node.is_dir:
        return 1
    return sum(_count_leaves(child) for child in node.children)
