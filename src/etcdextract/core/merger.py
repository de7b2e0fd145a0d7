from __future__ import annotations

"""
Tree Merger.

Rebuilds a nested document out of the flat, absolute key paths of the
store. Every node is inserted segment by segment into a document shared
by all roots of a cycle:

- intermediate segments descend into (or create) a nested mapping; a
  Scalar found on the way is replaced by an empty mapping;
- a directory recurses into its children, which carry their own
  absolute paths, against the same document root;
- a leaf stores its value under the last segment, replacing whatever
  was there.

The last write to a key decides its type. Earlier content of the other
type is discarded, never merged.
"""

import logging
from typing import Iterable, List, Optional

from etcdextract.domain.snapshot_models import Document, RemoteNode, Scalar

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def merge_node(doc: Document, node: RemoteNode, log: Optional[logging.Logger] = None) -> None:
    """
    Contribute the subtree rooted at node to doc, in place.

    Args:
        doc: Root document of the current cycle.
        node: Store entry to insert.
        log: Injected logger; defaults to the module logger.
    """
    segments = _split_path(node.path)
    if segments is None:
        (log or logger).debug(f"Ignoring node with relative path: {node.path!r}")
        return

    level = doc
    for segment in segments[:-1]:
        level = _descend(level, segment, log or logger)

    if node.is_dir:
        for child in node.children:
            merge_node(doc, child, log)
    elif segments:
        level[segments[-1]] = Scalar(node.value or "")


def build_document(nodes: Iterable[RemoteNode], log: Optional[logging.Logger] = None) -> Document:
    """Merge nodes, in order, into a fresh document."""
    doc: Document = {}
    for node in nodes:
        merge_node(doc, node, log)
    return doc


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _split_path(path: str) -> Optional[List[str]]:
    """
    Return the key segments of an absolute path, or None if it is relative.

    Walking stops at the first empty segment, so '/' yields no segments
    and '/a/' or '/a//b' both yield ['a'].
    """
    parts = path.split("/")
    if parts[0] != "":
        return None

    segments: List[str] = []
    for part in parts[1:]:
        if not part:
            break
        segments.append(part)
    return segments


def _descend(level: Document, key: str, log: logging.Logger) -> Document:
    """Return the mapping stored under key, creating or replacing as needed."""
    slot = level.get(key)
    if isinstance(slot, dict):
        return slot

    if isinstance(slot, Scalar):
        log.debug(f"Key '{key}' held a scalar; replacing it with a mapping")

    nested: Document = {}
    level[key] = nested
    return nested
