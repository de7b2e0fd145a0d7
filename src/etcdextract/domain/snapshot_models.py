from __future__ import annotations

"""
Snapshot Domain Data Models.

Defines the entries returned by the hierarchical store, the nested
document they are merged into, and the timestamped envelope that is
published at the end of every cycle.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union

# -----------------------------------------------------------------------------
# STORE ENTRIES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RemoteNode:
    """
    One entry (directory or leaf) of the hierarchical store.

    Attributes:
        path: Absolute slash-delimited key path.
        is_dir: True for directories, which carry children and no value.
        value: Scalar payload of a leaf. Always None for directories.
        children: Ordered child entries. Always empty for leaves.
    """
    path: str
    is_dir: bool = False
    value: Optional[str] = None
    children: Tuple["RemoteNode", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.is_dir and self.value is not None:
            raise ValueError(f"Directory node '{self.path}' cannot carry a value.")
        if not self.is_dir and self.children:
            raise ValueError(f"Leaf node '{self.path}' cannot carry children.")

    @classmethod
    def leaf(cls, path: str, value: str) -> "RemoteNode":
        return cls(path=path, is_dir=False, value=value)

    @classmethod
    def directory(cls, path: str, *children: "RemoteNode") -> "RemoteNode":
        return cls(path=path, is_dir=True, children=tuple(children))

    @classmethod
    def from_etcd(cls, payload: Dict[str, Any]) -> "RemoteNode":
        """
        Build a node (and its whole subtree) from an etcd v2 node object.

        The store root is returned without a 'key' attribute and maps to '/'.

        Args:
            payload: The 'node' object of an etcd v2 keys response.

        Returns:
            RemoteNode: The decoded subtree.
        """
        path = str(payload.get("key") or "/")
        if payload.get("dir"):
            children = tuple(cls.from_etcd(child) for child in payload.get("nodes") or [])
            return cls(path=path, is_dir=True, children=children)

        value = payload.get("value")
        return cls(path=path, is_dir=False, value="" if value is None else str(value))


# -----------------------------------------------------------------------------
# MERGE TARGET
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Scalar:
    """
    Leaf slot of a Document.

    Attributes:
        value: The string value copied from the store.
    """
    value: str

Document = Dict[str, Union["Document", Scalar]]


def document_to_plain(doc: Document) -> Dict[str, Any]:
    """Unwrap every Scalar so the document can be handed to a JSON encoder."""
    plain: Dict[str, Any] = {}
    for key, slot in doc.items():
        if isinstance(slot, Scalar):
            plain[key] = slot.value
        else:
            plain[key] = document_to_plain(slot)
    return plain


# -----------------------------------------------------------------------------
# PUBLICATION UNIT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Envelope:
    """
    Timestamped wrapper around the document of one cycle.

    Attributes:
        timestamp: Capture time in unix seconds.
        data: The merged document.
    """
    timestamp: int
    data: Document = field(default_factory=dict)

    @classmethod
    def capture(cls, data: Document, clock: Callable[[], float] = time.time) -> "Envelope":
        return cls(timestamp=int(clock()), data=data)

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "data": document_to_plain(self.data)}
