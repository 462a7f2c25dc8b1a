"""Normalize endpoint declarations into segment sequences.

Endpoint declarations come in two shapes: a plain path string
(``"users/posts"``) or an :class:`~quickrest.models.EndpointConfig` record.
:func:`declare` resolves each into a tagged variant,
:class:`SimpleDeclaration` or :class:`ConfiguredDeclaration`, and
:func:`normalize_endpoints` turns those into :class:`SegmentSequence` values
ready for the tree merger.

Version aliases are collected from the client's ``versions`` option and
from every configured declaration.  Each simple declaration is then
replicated once per alias with the alias prepended::

    >>> normalized = normalize_endpoints(["users"], ["v2"])
    >>> [s.segments for s in normalized.simple]
    [('users',), ('v2', 'users')]

Configured declarations are never replicated.  Declarations whose path has
no segments (``""``, ``"/"``) produce nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

from quickrest.models import EndpointConfig


@dataclass(frozen=True)
class SimpleDeclaration:
    """A plain path declaration such as ``"users/posts"``."""

    path: str


@dataclass(frozen=True)
class ConfiguredDeclaration:
    """A declaration carrying per-resource options."""

    path: str
    options: EndpointConfig


Declaration = Union[SimpleDeclaration, ConfiguredDeclaration]


@dataclass(frozen=True)
class SegmentSequence:
    """An ordered run of path segments, with options carried side-band.

    Attributes:
        segments: Non-empty path segments, outermost first.
        options: The declaration's options when it was configured.
    """

    segments: tuple[str, ...]
    options: Optional[EndpointConfig] = None

    def __len__(self) -> int:
        return len(self.segments)


@dataclass
class NormalizedEndpoints:
    """Output of :func:`normalize_endpoints`.

    Attributes:
        simple: Sequences from plain declarations, each followed by its
            version replicas.
        configured: Sequences from configured declarations.
        versions: The complete version alias set, in discovery order.
    """

    simple: list[SegmentSequence] = field(default_factory=list)
    configured: list[SegmentSequence] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)

    def all_sequences(self) -> list[SegmentSequence]:
        """Configured sequences first, then simple ones."""
        return self.configured + self.simple


def split_segments(path: str) -> tuple[str, ...]:
    """Split a path into non-empty segments.

    ``"/users/posts/"`` -> ``("users", "posts")``
    ``"/"``             -> ``()``
    """
    return tuple(s for s in path.split("/") if s)


def declare(endpoint: Union[str, EndpointConfig]) -> Declaration:
    """Resolve a raw endpoint into its declaration variant."""
    if isinstance(endpoint, EndpointConfig):
        return ConfiguredDeclaration(path=endpoint.resource, options=endpoint)
    return SimpleDeclaration(path=endpoint)


def collect_versions(
    declarations: Iterable[Declaration],
    versions: Sequence[str] = (),
) -> list[str]:
    """Build the version alias set.

    Client-level aliases come first, followed by those found on configured
    declarations in declaration order.  Duplicates keep their first position.
    """
    aliases = list(dict.fromkeys(v for v in versions if v))
    for declaration in declarations:
        if not isinstance(declaration, ConfiguredDeclaration):
            continue
        for alias in declaration.options.versions:
            if alias not in aliases:
                aliases.append(alias)
    return aliases


def normalize_endpoints(
    endpoints: Sequence[Union[str, EndpointConfig]],
    versions: Sequence[str] = (),
) -> NormalizedEndpoints:
    """Convert endpoint declarations into segment sequences.

    Args:
        endpoints: Plain path strings and/or
            :class:`~quickrest.models.EndpointConfig` records.
        versions: Client-level version aliases.

    Returns:
        A :class:`NormalizedEndpoints` with empty declarations dropped.
    """
    declarations = [declare(endpoint) for endpoint in endpoints]
    result = NormalizedEndpoints(versions=collect_versions(declarations, versions))

    for declaration in declarations:
        segments = split_segments(declaration.path)
        if not segments:
            continue

        if isinstance(declaration, ConfiguredDeclaration):
            result.configured.append(
                SegmentSequence(segments=segments, options=declaration.options)
            )
            continue

        result.simple.append(SegmentSequence(segments=segments))
        for alias in result.versions:
            result.simple.append(SegmentSequence(segments=(alias, *segments)))

    return result
