from __future__ import annotations

"""
Unit tests for the Snapshot Domain Models.

Verifies decoding of etcd node objects and envelope construction.
"""

import pytest

from etcdextract.domain.snapshot_models import Envelope, RemoteNode, Scalar, document_to_plain


def test_from_etcd_decodes_nested_directories() -> None:
    """TC-01: Directory payloads keep child order and absolute paths."""
    payload = {
        "key": "/app",
        "dir": True,
        "nodes": [
            {"key": "/app/b", "value": "2", "modifiedIndex": 7},
            {"key": "/app/a", "dir": True, "nodes": [{"key": "/app/a/x", "value": "1"}]},
        ],
    }

    node = RemoteNode.from_etcd(payload)

    assert node.is_dir and node.value is None
    assert [c.path for c in node.children] == ["/app/b", "/app/a"]
    assert node.children[0] == RemoteNode.leaf("/app/b", "2")
    assert node.children[1].children[0].value == "1"


def test_from_etcd_handles_store_root_and_empty_dirs() -> None:
    """TC-02: The keyless root maps to '/', a dir without 'nodes' is empty."""
    root = RemoteNode.from_etcd({"dir": True})

    assert root.path == "/"
    assert root.is_dir
    assert root.children == ()


def test_from_etcd_leaf_without_value_is_empty_string() -> None:
    assert RemoteNode.from_etcd({"key": "/k"}).value == ""


def test_node_kind_invariant() -> None:
    """TC-03: A node is a directory or a leaf, never both."""
    with pytest.raises(ValueError):
        RemoteNode(path="/a", is_dir=True, value="x")
    with pytest.raises(ValueError):
        RemoteNode(path="/a", is_dir=False, value="x", children=(RemoteNode.leaf("/a/b", "y"),))


def test_envelope_capture_truncates_to_unix_seconds() -> None:
    """TC-04: Capture time is an integer number of seconds."""
    env = Envelope.capture({"k": Scalar("v")}, clock=lambda: 1700000000.987)

    assert env.timestamp == 1700000000
    assert env.to_dict() == {"timestamp": 1700000000, "data": {"k": "v"}}


def test_document_to_plain_unwraps_nested_scalars() -> None:
    doc = {"a": {"b": {"c": Scalar("1")}}, "d": Scalar("2"), "e": {}}

    assert document_to_plain(doc) == {"a": {"b": {"c": "1"}}, "d": "2", "e": {}}
