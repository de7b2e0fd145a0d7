from __future__ import annotations

"""
Unit tests for the Tree Merger.

Verifies:
1. Reconstruction of nested documents from absolute key paths.
2. Last-write-wins overwrite rule between scalars and mappings.
3. Path edge cases (root, relative, trailing and double slashes).
"""

import logging

import pytest

from etcdextract.core.merger import build_document, merge_node
from etcdextract.domain.snapshot_models import RemoteNode, Scalar, document_to_plain


def test_sibling_leaves_share_parent_mapping() -> None:
    """TC-01: Two leaves under the same parent land in one mapping."""
    doc = build_document([
        RemoteNode.leaf("/a/b", "1"),
        RemoteNode.leaf("/a/c", "2"),
    ])

    assert document_to_plain(doc) == {"a": {"b": "1", "c": "2"}}


def test_leaf_values_are_tagged_scalars(config_tree: RemoteNode) -> None:
    """TC-02: Leaves are stored as Scalar slots, directories as dicts."""
    doc = build_document([config_tree])

    assert isinstance(doc["config"], dict)
    assert doc["config"]["db"]["host"] == Scalar("localhost")
    assert doc["config"]["feature"] == Scalar("on")


def test_disjoint_roots_mirror_path_hierarchy(config_tree: RemoteNode) -> None:
    """TC-03: Disjoint roots produce the union of their hierarchies."""
    other = RemoteNode.directory(
        "/services",
        RemoteNode.directory("/services/web", RemoteNode.leaf("/services/web/port", "80")),
    )

    doc = build_document([config_tree, other])

    assert document_to_plain(doc) == {
        "config": {"db": {"host": "localhost", "port": "5432"}, "feature": "on"},
        "services": {"web": {"port": "80"}},
    }


def test_merge_is_idempotent(config_tree: RemoteNode) -> None:
    """TC-04: Merging the same node twice equals merging it once."""
    once = build_document([config_tree])

    twice: dict = {}
    merge_node(twice, config_tree)
    merge_node(twice, config_tree)

    assert twice == once


def test_leaf_after_directory_discards_directory() -> None:
    """TC-05: A leaf write replaces a mapping at the same key."""
    doc = build_document([
        RemoteNode.directory("/a", RemoteNode.leaf("/a/x", "1")),
        RemoteNode.leaf("/a", "flat"),
    ])

    assert doc == {"a": Scalar("flat")}


def test_directory_after_leaf_discards_leaf() -> None:
    """TC-06: A directory whose children descend through a scalar replaces it."""
    doc = build_document([
        RemoteNode.leaf("/a", "flat"),
        RemoteNode.directory("/a", RemoteNode.leaf("/a/x", "1")),
    ])

    assert document_to_plain(doc) == {"a": {"x": "1"}}


def test_intermediate_scalar_is_replaced_by_mapping() -> None:
    """TC-07: Descending through a scalar turns it into an empty mapping first."""
    doc = build_document([
        RemoteNode.leaf("/a", "old"),
        RemoteNode.leaf("/a/b/c", "new"),
    ])

    assert document_to_plain(doc) == {"a": {"b": {"c": "new"}}}


def test_later_root_wins_on_overlap() -> None:
    """TC-08: Overlapping roots resolve in configured order."""
    doc = build_document([
        RemoteNode.directory("/app", RemoteNode.leaf("/app/mode", "blue")),
        RemoteNode.leaf("/app/mode", "green"),
    ])

    assert document_to_plain(doc) == {"app": {"mode": "green"}}


def test_store_root_recurses_without_empty_key() -> None:
    """TC-09: The '/' directory contributes only its children."""
    doc = build_document([
        RemoteNode.directory("/", RemoteNode.leaf("/x", "v")),
    ])

    assert "" not in doc
    assert document_to_plain(doc) == {"x": "v"}


def test_empty_directory_materialises_only_ancestors() -> None:
    """TC-10: A childless directory never creates its own key."""
    doc = build_document([RemoteNode.directory("/a/b")])

    assert doc == {"a": {}}


def test_relative_path_is_ignored() -> None:
    """TC-11: Paths without a leading slash contribute nothing."""
    doc = build_document([
        RemoteNode.leaf("a/b", "1"),
        RemoteNode.directory("rel", RemoteNode.leaf("/ok", "1")),
    ])

    assert doc == {}


def test_walk_stops_at_first_empty_segment() -> None:
    """TC-12: Trailing and doubled slashes truncate the path."""
    doc = build_document([
        RemoteNode.leaf("/a/", "trailing"),
        RemoteNode.leaf("/b//c", "double"),
    ])

    assert document_to_plain(doc) == {"a": "trailing", "b": "double"}


def test_root_leaf_writes_nothing() -> None:
    """TC-13: A leaf at '/' has no key to be stored under."""
    doc = build_document([RemoteNode(path="/", is_dir=False, value="orphan")])

    assert doc == {}


def test_scalar_replacement_is_reported_on_injected_logger(caplog: pytest.LogCaptureFixture) -> None:
    """TC-14: Replacement notices go to the caller's logger, not the module one."""
    log = logging.getLogger("test.merger")
    doc = build_document([RemoteNode.leaf("/a", "old")])

    with caplog.at_level(logging.DEBUG, logger="test.merger"):
        merge_node(doc, RemoteNode.leaf("/a/b", "new"), log)

    replaced = [r for r in caplog.records if "held a scalar" in r.getMessage()]
    assert [r.name for r in replaced] == ["test.merger"]
    assert document_to_plain(doc) == {"a": {"b": "new"}}
