"""Tests for quickrest.models -- configuration validation.

Covers:
- EndpointConfig accepts camelCase and snake_case keys
- versions coerced from a string, cleaned and de-duplicated
- ClientConfig required fields: root, endpoints, request
- altMethodNames validation
- Defaults: promise factory, logger, max depth
"""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from quickrest.models import (
    DEFAULT_MAX_DEPTH,
    ClientConfig,
    EndpointConfig,
    Modification,
    Result,
)
from quickrest.promise import default_promise


def _noop_request(*args, **kwargs) -> None:
    return None


class TestEndpointConfig:
    def test_camel_case_keys(self) -> None:
        config = EndpointConfig.model_validate(
            {"resource": "users", "createMethod": "PUT", "updateMethod": "Post"}
        )
        assert config.create_method == "put"
        assert config.update_method == "post"

    def test_snake_case_keys(self) -> None:
        config = EndpointConfig(resource="users", create_method="patch")
        assert config.create_method == "patch"

    def test_versions_from_string(self) -> None:
        assert EndpointConfig(resource="users", versions="v2").versions == ["v2"]

    def test_versions_cleaned(self) -> None:
        config = EndpointConfig(resource="users", versions=["/v1/", "", "v1", "v2"])
        assert config.versions == ["v1", "v2"]

    def test_blank_method_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EndpointConfig(resource="users", createMethod="  ")

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EndpointConfig.model_validate({"resource": "users", "method": "put"})

    def test_frozen(self) -> None:
        config = EndpointConfig(resource="users")
        with pytest.raises(ValidationError):
            config.resource = "posts"  # type: ignore[misc]


class TestClientConfig:
    def test_minimal(self) -> None:
        config = ClientConfig(root="https://api.example.com", endpoints=["users"], request=_noop_request)
        assert config.versions == []
        assert config.headers == {}
        assert config.alt_method_names == {}
        assert config.before_each is None
        assert config.promise is default_promise
        assert config.max_depth == DEFAULT_MAX_DEPTH

    def test_endpoint_records_parsed(self) -> None:
        config = ClientConfig.model_validate(
            {
                "root": "https://api.example.com",
                "endpoints": ["users", {"resource": "posts", "createMethod": "put"}],
                "request": _noop_request,
            }
        )
        assert config.endpoints[0] == "users"
        assert isinstance(config.endpoints[1], EndpointConfig)

    @pytest.mark.parametrize("root", [None, "", "   "])
    def test_root_required(self, root) -> None:
        data = {"endpoints": ["users"], "request": _noop_request}
        if root is not None:
            data["root"] = root
        with pytest.raises(ValidationError, match="api root is required"):
            ClientConfig.model_validate(data)

    @pytest.mark.parametrize("endpoints", [None, [], "users"])
    def test_endpoints_required(self, endpoints) -> None:
        data = {"root": "https://api.example.com", "request": _noop_request}
        if endpoints is not None:
            data["endpoints"] = endpoints
        with pytest.raises(ValidationError, match="endpoints must be a non-empty list"):
            ClientConfig.model_validate(data)

    def test_request_required(self) -> None:
        with pytest.raises(ValidationError, match="request handler must be provided"):
            ClientConfig(root="https://api.example.com", endpoints=["users"])

    def test_request_must_be_callable(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(root="https://api.example.com", endpoints=["users"], request="httpx")

    def test_invalid_endpoint_type(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(root="https://api.example.com", endpoints=[42], request=_noop_request)

    def test_unknown_alt_method_name(self) -> None:
        with pytest.raises(ValidationError, match="unknown verb"):
            ClientConfig(
                root="https://api.example.com",
                endpoints=["users"],
                request=_noop_request,
                altMethodNames={"fetch": "get"},
            )

    def test_alt_method_name_must_be_identifier(self) -> None:
        with pytest.raises(ValidationError, match="not an identifier"):
            ClientConfig(
                root="https://api.example.com",
                endpoints=["users"],
                request=_noop_request,
                altMethodNames={"get": "fetch-one"},
            )

    def test_max_depth_positive(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(
                root="https://api.example.com",
                endpoints=["users"],
                request=_noop_request,
                maxDepth=0,
            )

    def test_logger(self) -> None:
        config = ClientConfig(root="https://api.example.com", endpoints=["users"], request=_noop_request)
        assert config.get_logger() is logging.getLogger("quickrest")
        custom = logging.getLogger("custom")
        config = ClientConfig(
            root="https://api.example.com", endpoints=["users"], request=_noop_request, logger=custom
        )
        assert config.get_logger() is custom


class TestRequestModels:
    def test_modification_partial(self) -> None:
        mod = Modification.model_validate({"headers": {"X-Token": "abc"}})
        assert mod.headers == {"X-Token": "abc"}
        assert mod.properties is None
        assert mod.query is None

    def test_modification_rejects_unknown(self) -> None:
        with pytest.raises(ValidationError):
            Modification.model_validate({"body": {}})

    def test_result(self) -> None:
        result = Result(status=201, model={"id": 1})
        assert result.status == 201
        assert result.model == {"id": 1}
