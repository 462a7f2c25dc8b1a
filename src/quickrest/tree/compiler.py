"""Compile a merged resource tree into an immutable resource graph.

This is the last construction step.  :func:`compile_tree` walks the
:data:`~quickrest.tree.merge.ResourceTree` with an explicit worklist (no
recursion) and produces one :class:`CompiledResource` per node.  Children
are compiled before their parents so every parent can be created with its
final, read-only child mapping.

Compiled resources carry everything a verb call needs apart from the route:
the verb table, the merged headers and the declaration options.  Routes are
computed at call time by the runtime views in
:mod:`quickrest.client.resource`, which walk their ancestor chain.

The traversal depth is bounded by ``max_depth``; a deeper tree is rejected
with :class:`~quickrest.exceptions.ConfigError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from quickrest.exceptions import ConfigError
from quickrest.models import DEFAULT_MAX_DEPTH, EndpointConfig
from quickrest.tree.merge import ResourceTree, is_leaf
from quickrest.verbs import VerbTable, bind_verbs

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class CompiledResource:
    """A resource node of the compiled graph.

    Attributes:
        name: Segment name of the resource.
        path: Full segment path from the root, including *name*.
        verbs: Verb lookup table for this resource.
        headers: Default headers for this resource's requests.
        options: Declaration options when the resource was configured.
        children: Compiled sub-resources in declaration order.
    """

    name: str
    path: tuple[str, ...]
    verbs: VerbTable
    headers: Mapping[str, str]
    options: Optional[EndpointConfig] = None
    children: Mapping[str, "CompiledResource"] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def is_leaf(self) -> bool:
        return not self.children


def clean_root(root: str) -> str:
    """Strip surrounding whitespace and every trailing ``/`` from *root*.

    ``"https://api.example.com//"`` -> ``"https://api.example.com"``
    """
    return root.strip().rstrip("/")


def compile_tree(
    tree: ResourceTree,
    *,
    headers: Optional[Mapping[str, str]] = None,
    alt_method_names: Optional[Mapping[str, str]] = None,
    options: Optional[Mapping[tuple[str, ...], EndpointConfig]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Mapping[str, CompiledResource]:
    """Compile *tree* into top-level :class:`CompiledResource` nodes.

    Args:
        tree: Merged resource tree.
        headers: Client-level headers, merged over :data:`DEFAULT_HEADERS`.
        alt_method_names: Verb renames applied to every resource.
        options: Declaration options keyed by full segment path.
        max_depth: Deepest allowed resource path.

    Returns:
        A read-only mapping of top-level resource name to compiled node,
        in declaration order.

    Raises:
        ConfigError: If the tree is deeper than *max_depth* or a verb rename
            produces a name clash.
    """
    base_headers = {**DEFAULT_HEADERS, **(headers or {})}
    options = options or {}

    # Pre-order walk recording every internal/leaf node with its path.
    order: list[tuple[tuple[str, ...], object]] = []
    stack: list[tuple[tuple[str, ...], object]] = [
        ((name,), node) for name, node in reversed(list(tree.items()))
    ]
    while stack:
        path, node = stack.pop()
        if len(path) > max_depth:
            raise ConfigError(
                f"Resource '{'/'.join(path)}' is nested deeper than the "
                f"maximum depth of {max_depth}"
            )
        order.append((path, node))
        if not is_leaf(node):
            stack.extend(
                (path + (name,), child) for name, child in reversed(list(node.items()))
            )

    # Reverse pre-order visits every child before its parent.
    compiled: dict[tuple[str, ...], CompiledResource] = {}
    for path, node in reversed(order):
        name = path[-1]
        node_options = options.get(path)
        children: dict[str, CompiledResource] = {}
        if not is_leaf(node):
            children = {child: compiled.pop(path + (child,)) for child in node}

        resource_headers = dict(base_headers)
        if node_options is not None:
            resource_headers.update(node_options.headers)

        compiled[path] = CompiledResource(
            name=name,
            path=path,
            verbs=bind_verbs(name, alt_method_names, node_options),
            headers=MappingProxyType(resource_headers),
            options=node_options,
            children=MappingProxyType(children),
        )

    logger.debug("Compiled %d resource node(s)", len(order))
    return MappingProxyType({name: compiled[(name,)] for name in tree})
