"""quickrest -- build a callable client hierarchy from REST resource names.

Give quickrest a base URL, a list of resource paths and a request function,
and it returns an object whose attributes mirror the API's URL structure::

    from quickrest import quickrest

    api = quickrest(
        root="https://api.example.com",
        endpoints=["users", "users/posts", "comments"],
        request=my_request,
    )
    api.users(9000).posts.create({"title": "t"})
    # -> my_request("https://api.example.com/users/9000/posts", "post",
    #               {"title": "t"}, {}, {...headers}, callback)

Every resource exposes ``create``, ``get``, ``list``, ``update``, ``patch``
and ``delete`` (also reachable as ``del``).  Verbs take an optional trailing
``callback(error, result)``; without one they return a promise produced by
the configured promise factory.

Modules:
    models: Pydantic configuration and result models.
    config: Option resolution and JSON/YAML definition files.
    tree: Declaration normalization, prefix-tree merging and compilation.
    verbs: Per-resource verb tables.
    client: Runtime resource views and request dispatch.
    promise: Executor-based promise factories.
    transport: Optional httpx request functions.
    exceptions: Exception hierarchy.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from quickrest.client import Client, ClientContext, Dispatcher, Resource
from quickrest.config import load_definition, resolve_config
from quickrest.exceptions import ConfigError, QuickrestError
from quickrest.models import ClientConfig, EndpointConfig, Modification, Result
from quickrest.tree import build_tree, clean_root

__version__ = "0.3.0"

logger = logging.getLogger(__name__)


def create_client(config: ClientConfig) -> Client:
    """Build a :class:`~quickrest.client.Client` from a validated configuration."""
    resources = build_tree(config)
    context = ClientContext(
        root=clean_root(config.root),
        dispatcher=Dispatcher(
            request=config.request,
            promise=config.promise,
            before_each=config.before_each,
            log=config.get_logger(),
        ),
    )
    logger.debug(
        "Built client for %s with top-level resources: %s",
        context.root,
        ", ".join(resources),
    )
    return Client(resources, context)


def quickrest(
    config: Union[ClientConfig, Mapping[str, Any], None] = None,
    **options: Any,
) -> Client:
    """Build a client from a configuration mapping and/or keyword options.

    Args:
        config: Optional base configuration (mapping or ``ClientConfig``).
        **options: Configuration options, e.g. ``root``, ``endpoints``,
            ``request``, ``versions``, ``headers``, ``altMethodNames``,
            ``beforeEach``, ``promise``, ``logger``, ``maxDepth``.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    return create_client(resolve_config(config, **options))


def from_file(path: Union[str, Path], config: Optional[Mapping[str, Any]] = None, **options: Any) -> Client:
    """Build a client from a JSON/YAML definition file plus code-supplied options.

    The file provides the declarative options; *config* and *options*
    supply the request function, hooks, and any overrides.
    """
    definition = load_definition(path)
    definition.update(config or {})
    return quickrest(definition, **options)


__all__ = [
    "Client",
    "ClientConfig",
    "ConfigError",
    "EndpointConfig",
    "Modification",
    "QuickrestError",
    "Resource",
    "Result",
    "create_client",
    "from_file",
    "quickrest",
]
