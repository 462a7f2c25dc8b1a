"""Tests for quickrest.tree.merge -- prefix-tree merging.

Covers:
- Shared prefixes are stored once
- Leaves are promoted when a deeper path passes through them
- Internal nodes are never demoted by a shorter path
- Longest-first ordering is stable for equal lengths
- Empty sequences are ignored
- Options are keyed by full path, later declarations winning
"""

from __future__ import annotations

from quickrest.models import EndpointConfig
from quickrest.tree.merge import (
    LEAF,
    collect_options,
    is_leaf,
    merge_sequences,
    order_sequences,
)
from quickrest.tree.paths import SegmentSequence


def _seqs(*paths: str) -> list[SegmentSequence]:
    return [SegmentSequence(tuple(p.split("/")) if p else ()) for p in paths]


class TestOrderSequences:
    def test_longest_first(self) -> None:
        ordered = order_sequences(_seqs("a", "a/b/c", "a/b"))
        assert [s.segments for s in ordered] == [("a", "b", "c"), ("a", "b"), ("a",)]

    def test_ties_keep_declaration_order(self) -> None:
        ordered = order_sequences(_seqs("x", "b/c", "a", "a/d"))
        assert [s.segments for s in ordered] == [("b", "c"), ("a", "d"), ("x",), ("a",)]


class TestMergeSequences:
    def test_shared_prefix_stored_once(self) -> None:
        tree = merge_sequences(_seqs("users/posts", "users/comments"))
        assert tree == {"users": {"posts": LEAF, "comments": LEAF}}

    def test_standalone_and_parent_declaration_is_internal(self) -> None:
        tree = merge_sequences(order_sequences(_seqs("users", "users/posts")))
        assert tree == {"users": {"posts": LEAF}}

    def test_leaf_promoted_when_descended_through(self) -> None:
        # Deliberately unsorted: the leaf exists before the deeper path arrives.
        tree = merge_sequences(_seqs("users", "posts", "users/posts"))
        assert tree == {"users": {"posts": LEAF}, "posts": LEAF}
        assert list(tree) == ["users", "posts"]

    def test_internal_not_demoted(self) -> None:
        tree = merge_sequences(_seqs("users/posts", "users"))
        assert tree == {"users": {"posts": LEAF}}

    def test_deep_hierarchy(self) -> None:
        tree = merge_sequences(
            order_sequences(_seqs("users", "users/posts", "users/posts/comments", "posts"))
        )
        assert tree == {
            "users": {"posts": {"comments": LEAF}},
            "posts": LEAF,
        }

    def test_empty_sequences_ignored(self) -> None:
        assert merge_sequences(_seqs("", "users")) == {"users": LEAF}

    def test_no_sequences(self) -> None:
        assert merge_sequences([]) == {}


class TestLeaf:
    def test_singleton(self) -> None:
        assert type(LEAF)() is LEAF

    def test_repr(self) -> None:
        assert repr(LEAF) == "LEAF"

    def test_is_leaf(self) -> None:
        assert is_leaf(LEAF)
        assert not is_leaf({})


class TestCollectOptions:
    def test_keyed_by_full_path(self) -> None:
        options = EndpointConfig(resource="users/posts", createMethod="put")
        mapping = collect_options(
            [SegmentSequence(("users", "posts"), options), SegmentSequence(("users",))]
        )
        assert mapping == {("users", "posts"): options}

    def test_later_declaration_wins(self) -> None:
        first = EndpointConfig(resource="users", createMethod="put")
        second = EndpointConfig(resource="users", createMethod="patch")
        mapping = collect_options(
            [SegmentSequence(("users",), first), SegmentSequence(("users",), second)]
        )
        assert mapping[("users",)] is second
