"""Canonical Pydantic models shared across all quickrest modules.

The models fall into three groups:

**Enumerations** -- :class:`HTTPMethod` and :class:`Verb`, the fixed set of
REST verbs every resource node exposes.

**Configuration models** -- :class:`EndpointConfig` (a per-resource
declaration with overrides) and :class:`ClientConfig` (everything the client
factory consumes).  Both accept the camelCase keys used in JSON/YAML client
definitions (``createMethod``, ``altMethodNames``, ``beforeEach``, ...) as
well as their snake_case field names.

**Request models** -- :class:`Modification`, the shape a before-each hook
may hand back, and :class:`Result`, the value produced by the shipped
transports.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quickrest.promise import default_promise

DEFAULT_MAX_DEPTH = 32
"""Deepest resource hierarchy the compiler accepts unless overridden."""


class HTTPMethod(str, enum.Enum):
    """HTTP methods issued by the resource verbs."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


class Verb(str, enum.Enum):
    """Canonical verb names attached to every resource node.

    ``DEL`` and ``DELETE`` are the same operation under two names; ``del`` is
    a Python keyword so it is only reachable through ``getattr``.
    """

    CREATE = "create"
    GET = "get"
    LIST = "list"
    UPDATE = "update"
    PATCH = "patch"
    DEL = "del"
    DELETE = "delete"


# Keys accepted in ``alt_method_names``.  Renaming ``del`` renames ``delete``
# as well.
RENAMEABLE_VERBS = frozenset(v.value for v in Verb if v is not Verb.DELETE)


def _as_version_list(value: Any) -> list[str]:
    """Coerce ``None``, a single string or a list into a clean alias list."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError("versions must be a string or a list of strings")

    seen: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"version alias must be a string, got {item!r}")
        alias = item.strip().strip("/")
        if alias and alias not in seen:
            seen.append(alias)
    return seen


class EndpointConfig(BaseModel):
    """A configured endpoint declaration.

    Example::

        EndpointConfig(resource="users/posts", createMethod="put",
                       headers={"X-Team": "core"})
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    resource: str = Field(description="Slash-delimited resource path")
    versions: list[str] = Field(
        default_factory=list,
        description="Version aliases applied to the simple endpoints of the client",
    )
    create_method: Optional[str] = Field(
        default=None, alias="createMethod", description="HTTP method used by create"
    )
    update_method: Optional[str] = Field(
        default=None, alias="updateMethod", description="HTTP method used by update"
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers merged over the client defaults"
    )

    @field_validator("versions", mode="before")
    @classmethod
    def _coerce_versions(cls, value: Any) -> list[str]:
        return _as_version_list(value)

    @field_validator("create_method", "update_method")
    @classmethod
    def _lower_method(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().lower()
        if not value:
            raise ValueError("method override must not be blank")
        return value


class ClientConfig(BaseModel):
    """Everything :func:`quickrest.quickrest` needs to build a client.

    ``root``, ``endpoints`` and ``request`` are required.  The remaining
    fields have defaults: no version aliases, no extra headers, no renamed
    verbs, no before-each hook, :func:`~quickrest.promise.default_promise`
    and the ``quickrest`` logger.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",
    )

    root: str = Field(default="", validate_default=True, description="Base URL of the API")
    endpoints: list[Union[EndpointConfig, str]] = Field(
        default_factory=list,
        validate_default=True,
        description="Endpoint declarations: paths or EndpointConfig records",
    )
    versions: list[str] = Field(default_factory=list)
    headers: dict[str, str] = Field(default_factory=dict)
    alt_method_names: dict[str, str] = Field(default_factory=dict, alias="altMethodNames")
    before_each: Optional[Callable[..., Any]] = Field(default=None, alias="beforeEach")
    request: Optional[Callable[..., Any]] = Field(default=None, validate_default=True)
    promise: Callable[..., Any] = Field(default=default_promise)
    logger: Optional[logging.Logger] = None
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, alias="maxDepth")

    @field_validator("root", mode="before")
    @classmethod
    def _require_root(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("api root is required")
        return value

    @field_validator("endpoints", mode="before")
    @classmethod
    def _require_endpoints(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)) or not value:
            raise ValueError("endpoints must be a non-empty list")
        return list(value)

    @field_validator("versions", mode="before")
    @classmethod
    def _coerce_versions(cls, value: Any) -> list[str]:
        return _as_version_list(value)

    @field_validator("alt_method_names")
    @classmethod
    def _check_aliases(cls, value: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(value) - RENAMEABLE_VERBS)
        if unknown:
            raise ValueError(
                f"unknown verb(s) in altMethodNames: {', '.join(unknown)}"
            )
        for verb, name in value.items():
            if not name.isidentifier():
                raise ValueError(f"alternate name for {verb!r} is not an identifier: {name!r}")
        return value

    @field_validator("request")
    @classmethod
    def _require_request(cls, value: Optional[Callable[..., Any]]) -> Callable[..., Any]:
        if value is None:
            raise ValueError("request handler must be provided")
        return value

    def get_logger(self) -> logging.Logger:
        """Return the configured logger, or the package logger."""
        return self.logger or logging.getLogger("quickrest")


class Modification(BaseModel):
    """Overrides a before-each hook may return.

    Each present map is shallow-merged over the original request part.
    """

    model_config = ConfigDict(extra="forbid")

    headers: Optional[dict[str, Any]] = None
    properties: Optional[dict[str, Any]] = None
    query: Optional[dict[str, Any]] = None


class Result(BaseModel):
    """Outcome of a request made by one of the shipped transports.

    Attributes:
        status: HTTP status code.
        model: Decoded response body (JSON value, text, or ``None``).
    """

    status: int
    model: Any = None
