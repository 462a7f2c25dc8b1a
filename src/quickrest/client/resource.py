"""Runtime resource views over the compiled graph.

The compiled graph (:mod:`quickrest.tree.compiler`) is shared and
read-only.  What callers navigate are lightweight view objects:

* :class:`Client` -- the object returned by :func:`quickrest.quickrest`.  Its
  attributes are the top-level resources; it has no verbs of its own.
* :class:`Resource` -- one resource at one position in a navigation chain.
  Calling it with an identifier returns a *new* view bound to that
  identifier; attribute access yields sub-resources and verbs.

Example::

    api.users.create({"name": "ada"})         # POST   {root}/users
    api.users(9000).get()                     # GET    {root}/users/9000
    api.users(9000).posts(3).comments.list()  # GET    {root}/users/9000/posts/3/comments

Views never change after creation.  Their route is computed on demand by
walking the parent chain, so two views bound to different identifiers never
interfere with each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

from quickrest.client.dispatch import Dispatcher
from quickrest.tree.compiler import CompiledResource
from quickrest.verbs import Payload, VerbBinding

_UNBOUND = object()


@dataclass(frozen=True)
class ClientContext:
    """State shared by every view of one client."""

    root: str
    dispatcher: Dispatcher


def _split_callback(value: Any, callback: Optional[Callable[..., Any]]) -> tuple[Any, Any]:
    """Allow the callback to be passed in place of the first argument."""
    if callback is None and callable(value):
        return None, value
    return value, callback


def _bind_verb(node: Resource, binding: VerbBinding) -> Callable[..., Any]:
    """Return the callable for *binding* operating on *node*'s route."""
    if binding.payload is Payload.BODY:

        def verb(properties: Optional[Mapping[str, Any]] = None, callback: Optional[Callable[..., Any]] = None) -> Any:
            properties, callback = _split_callback(properties, callback)
            return node._invoke(binding, properties or {}, {}, callback)

    elif binding.payload is Payload.QUERY:

        def verb(query: Optional[Mapping[str, Any]] = None, callback: Optional[Callable[..., Any]] = None) -> Any:
            query, callback = _split_callback(query, callback)
            return node._invoke(binding, {}, query or {}, callback)

    else:

        def verb(callback: Optional[Callable[..., Any]] = None) -> Any:
            return node._invoke(binding, {}, {}, callback)

    verb.__name__ = binding.name
    verb.__qualname__ = f"{node._compiled.name}.{binding.name}"
    verb.__doc__ = f"{binding.method.upper()} the resource ({binding.verb.value})."
    return verb


class Resource:
    """A resource reachable from a :class:`Client`.

    Args:
        compiled: The compiled node this view exposes.
        context: Root URL and dispatcher of the owning client.
        parent: The view this one was reached from; ``None`` at the top level.
        identifier: Identifier the view is bound to, if any.
    """

    __slots__ = ("_compiled", "_context", "_parent", "_identifier")

    def __init__(
        self,
        compiled: CompiledResource,
        context: ClientContext,
        parent: Optional[Resource] = None,
        identifier: Any = _UNBOUND,
    ) -> None:
        object.__setattr__(self, "_compiled", compiled)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_identifier", identifier)

    def __call__(self, identifier: Any) -> Resource:
        """Return a new view of this resource bound to *identifier*."""
        return Resource(self._compiled, self._context, self._parent, identifier)

    def get_url(self) -> str:
        """Compute this view's URL from its ancestor chain."""
        if self._parent is not None:
            base = self._parent.get_url()
        else:
            base = self._context.root
        url = f"{base}/{self._compiled.name}"
        if self._identifier is not _UNBOUND:
            url = f"{url}/{self._identifier}"
        return url

    def _invoke(
        self,
        binding: VerbBinding,
        properties: Mapping[str, Any],
        query: Mapping[str, Any],
        callback: Optional[Callable[..., Any]],
    ) -> Any:
        return self._context.dispatcher.dispatch(
            self.get_url(),
            binding.method,
            properties,
            query,
            self._compiled.headers,
            callback,
        )

    def _child(self, name: str) -> Optional[Resource]:
        compiled = self._compiled.children.get(name)
        if compiled is None:
            return None
        return Resource(compiled, self._context, parent=self)

    # ------------------------------------------------------------------ #
    # Attribute protocol
    # ------------------------------------------------------------------ #

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        # Sub-resources shadow verbs of the same name.
        child = self._child(name)
        if child is not None:
            return child
        binding = self._compiled.verbs.lookup(name)
        if binding is not None:
            return _bind_verb(self, binding)
        raise AttributeError(
            f"resource '{'/'.join(self._compiled.path)}' has no sub-resource or verb '{name}'"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("resource views are immutable")

    def __getitem__(self, name: str) -> Resource:
        child = self._child(name)
        if child is None:
            raise KeyError(name)
        return child

    def __contains__(self, name: object) -> bool:
        return name in self._compiled.children

    def __dir__(self) -> list[str]:
        return sorted(
            set(super().__dir__())
            | set(self._compiled.children)
            | set(self._compiled.verbs.names())
        )

    def __repr__(self) -> str:
        return f"<Resource {'/'.join(self._compiled.path)} url={self.get_url()!r}>"


class Client:
    """Top-level object of a quickrest client.

    Top-level resources are available as attributes (``api.users``) or
    items (``api["user-groups"]``).  Sub-resources are only reachable through
    their parent.
    """

    __slots__ = ("_resources", "_context")

    def __init__(self, resources: Mapping[str, CompiledResource], context: ClientContext) -> None:
        object.__setattr__(self, "_resources", resources)
        object.__setattr__(self, "_context", context)

    def _resource(self, name: str) -> Optional[Resource]:
        compiled = self._resources.get(name)
        if compiled is None:
            return None
        return Resource(compiled, self._context)

    def __getattr__(self, name: str) -> Resource:
        if name.startswith("_"):
            raise AttributeError(name)
        resource = self._resource(name)
        if resource is None:
            raise AttributeError(f"no top-level resource named '{name}'")
        return resource

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("clients are immutable")

    def __getitem__(self, name: str) -> Resource:
        resource = self._resource(name)
        if resource is None:
            raise KeyError(name)
        return resource

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(self._resources)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._resources))

    def __repr__(self) -> str:
        return f"<Client root={self._context.root!r} resources={list(self._resources)!r}>"
