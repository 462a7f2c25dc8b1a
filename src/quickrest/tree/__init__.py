"""Resource-tree construction -- from endpoint declarations to a compiled graph.

Sub-modules, in pipeline order:

* :mod:`~quickrest.tree.paths` -- normalize declarations into segment
  sequences and replicate simple endpoints per version alias.
* :mod:`~quickrest.tree.merge` -- fold segment sequences into one prefix
  tree so shared prefixes exist once.
* :mod:`~quickrest.tree.compiler` -- compile the prefix tree into immutable
  :class:`~quickrest.tree.compiler.CompiledResource` nodes.

Typical usage::

    from quickrest.tree import build_tree

    resources = build_tree(config)
"""

from __future__ import annotations

from typing import Mapping

from quickrest.models import ClientConfig
from quickrest.tree.compiler import CompiledResource, clean_root, compile_tree
from quickrest.tree.merge import LEAF, collect_options, merge_sequences, order_sequences
from quickrest.tree.paths import normalize_endpoints, split_segments


def build_tree(config: ClientConfig) -> Mapping[str, CompiledResource]:
    """Run the whole construction pipeline for *config*."""
    normalized = normalize_endpoints(config.endpoints, config.versions)
    sequences = order_sequences(normalized.all_sequences())
    return compile_tree(
        merge_sequences(sequences),
        headers=config.headers,
        alt_method_names=config.alt_method_names,
        options=collect_options(normalized.configured),
        max_depth=config.max_depth,
    )


__all__ = [
    "LEAF",
    "CompiledResource",
    "build_tree",
    "clean_root",
    "collect_options",
    "compile_tree",
    "merge_sequences",
    "normalize_endpoints",
    "order_sequences",
    "split_segments",
]
