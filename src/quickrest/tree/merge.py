"""Fold segment sequences into a single resource prefix tree.

The tree is a plain mapping from segment name to either a nested mapping
(the resource has children) or the :data:`LEAF` sentinel::

    >>> merge_sequences(order_sequences([
    ...     SegmentSequence(("users", "posts")),
    ...     SegmentSequence(("users", "comments")),
    ...     SegmentSequence(("users",)),
    ... ]))
    {'users': {'posts': LEAF, 'comments': LEAF}}

Shared prefixes are stored once.  A leaf that a later sequence descends
through is promoted in place to an (initially empty) internal node, and an
internal node is never demoted back to a leaf.
"""

from __future__ import annotations

import logging
from typing import Iterable, Union

from quickrest.models import EndpointConfig
from quickrest.tree.paths import SegmentSequence

logger = logging.getLogger(__name__)


class _Leaf:
    """Marker for a resource without children."""

    _instance: "_Leaf | None" = None

    def __new__(cls) -> "_Leaf":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "LEAF"


LEAF = _Leaf()

ResourceTree = dict[str, Union["ResourceTree", _Leaf]]


def order_sequences(sequences: Iterable[SegmentSequence]) -> list[SegmentSequence]:
    """Sort *sequences* longest first, keeping declaration order for ties."""
    return sorted(sequences, key=len, reverse=True)


def merge_sequences(sequences: Iterable[SegmentSequence]) -> ResourceTree:
    """Build a :data:`ResourceTree` from *sequences*, in the order given.

    Empty sequences are skipped.  Callers normally pass the output of
    :func:`order_sequences`, so deeper hierarchies are placed before
    shallower ones.
    """
    tree: ResourceTree = {}

    for sequence in sequences:
        if not sequence.segments:
            continue

        node = tree
        *parents, last = sequence.segments
        for segment in parents:
            child = node.get(segment)
            if child is None or child is LEAF:
                child = {}
                node[segment] = child
            node = child

        if last not in node:
            node[last] = LEAF

    return tree


def collect_options(
    sequences: Iterable[SegmentSequence],
) -> dict[tuple[str, ...], EndpointConfig]:
    """Map each configured resource path to its options.

    When the same path is configured twice the later declaration wins.
    """
    options: dict[tuple[str, ...], EndpointConfig] = {}
    for sequence in sequences:
        if sequence.options is None or not sequence.segments:
            continue
        if sequence.segments in options:
            logger.debug(
                "Resource '%s' configured more than once, keeping the last declaration",
                "/".join(sequence.segments),
            )
        options[sequence.segments] = sequence.options
    return options


def is_leaf(node: object) -> bool:
    """Return ``True`` if *node* is the :data:`LEAF` sentinel."""
    return node is LEAF
