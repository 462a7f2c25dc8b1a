"""Resolve the REST verbs of a resource into a method-name lookup table.

Every resource node exposes the same fixed set of verbs (see
:class:`~quickrest.models.Verb`).  :func:`bind_verbs` decides, once per
resource at compile time, which attribute name each verb lives under and
which HTTP method it issues:

=========  ===================================  ==========  =======
verb       HTTP method                          body        query
=========  ===================================  ==========  =======
create     ``createMethod`` or ``post``         properties  --
get        ``get``                              --          query
list       ``get``                              --          query
update     ``updateMethod`` or ``put``          properties  --
patch      ``patch``                            properties  --
del        ``delete``                           --          --
delete     ``delete``                           --          --
=========  ===================================  ==========  =======

``alt_method_names`` renames verbs by canonical name, e.g.
``{"get": "fetch"}``.  Renaming ``del`` renames ``delete`` too.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from quickrest.exceptions import ConfigError
from quickrest.models import EndpointConfig, HTTPMethod, Verb


class Payload(str, enum.Enum):
    """What a verb sends besides headers."""

    BODY = "body"
    QUERY = "query"
    NONE = "none"


VERB_PAYLOAD: dict[Verb, Payload] = {
    Verb.CREATE: Payload.BODY,
    Verb.GET: Payload.QUERY,
    Verb.LIST: Payload.QUERY,
    Verb.UPDATE: Payload.BODY,
    Verb.PATCH: Payload.BODY,
    Verb.DEL: Payload.NONE,
    Verb.DELETE: Payload.NONE,
}

DEFAULT_METHODS: dict[Verb, str] = {
    Verb.CREATE: HTTPMethod.POST.value,
    Verb.GET: HTTPMethod.GET.value,
    Verb.LIST: HTTPMethod.GET.value,
    Verb.UPDATE: HTTPMethod.PUT.value,
    Verb.PATCH: HTTPMethod.PATCH.value,
    Verb.DEL: HTTPMethod.DELETE.value,
    Verb.DELETE: HTTPMethod.DELETE.value,
}


@dataclass(frozen=True)
class VerbBinding:
    """One verb as exposed on a resource.

    Attributes:
        verb: The canonical verb.
        name: Attribute name the verb is reachable under.
        method: HTTP method sent to the request function.
        payload: Whether the verb sends properties, a query, or neither.
    """

    verb: Verb
    name: str
    method: str
    payload: Payload


@dataclass(frozen=True)
class VerbTable:
    """Read-only mapping of attribute name to :class:`VerbBinding`."""

    resource: str
    bindings: Mapping[str, VerbBinding]

    def lookup(self, name: str) -> Optional[VerbBinding]:
        return self.bindings.get(name)

    def names(self) -> list[str]:
        return list(self.bindings)

    def __contains__(self, name: object) -> bool:
        return name in self.bindings


def _attribute_name(verb: Verb, alt_method_names: Mapping[str, str]) -> str:
    if verb is Verb.DELETE:
        return alt_method_names.get(Verb.DEL.value, verb.value)
    return alt_method_names.get(verb.value, verb.value)


def bind_verbs(
    resource: str,
    alt_method_names: Optional[Mapping[str, str]] = None,
    options: Optional[EndpointConfig] = None,
) -> VerbTable:
    """Build the :class:`VerbTable` for *resource*.

    Args:
        resource: Segment name of the resource, used in error messages.
        alt_method_names: Canonical verb name -> replacement attribute name.
        options: The resource's declaration options, if it was configured.

    Raises:
        ConfigError: If two different verbs end up under the same name.
    """
    alt_method_names = alt_method_names or {}
    methods = dict(DEFAULT_METHODS)
    if options is not None:
        if options.create_method:
            methods[Verb.CREATE] = options.create_method
        if options.update_method:
            methods[Verb.UPDATE] = options.update_method

    bindings: dict[str, VerbBinding] = {}
    for verb in Verb:
        name = _attribute_name(verb, alt_method_names)
        existing = bindings.get(name)
        # del and delete legitimately share a name once del is renamed.
        if existing is not None and {existing.verb, verb} != {Verb.DEL, Verb.DELETE}:
            raise ConfigError(
                f"Resource '{resource}': verbs '{existing.verb.value}' and "
                f"'{verb.value}' both map to method name '{name}'"
            )
        bindings[name] = VerbBinding(
            verb=verb,
            name=name,
            method=methods[verb],
            payload=VERB_PAYLOAD[verb],
        )

    return VerbTable(resource=resource, bindings=MappingProxyType(bindings))
