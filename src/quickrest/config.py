"""Client configuration: option resolution and definition files.

* :func:`resolve_config` merges a base configuration (mapping or
  :class:`~quickrest.models.ClientConfig`) with keyword overrides and
  validates the result.  Validation failures are re-raised as
  :class:`~quickrest.exceptions.ConfigError` so callers only ever have to
  catch one exception type at construction time.
* :func:`load_definition` reads the declarative part of a client (``root``,
  ``endpoints``, ``versions``, ``headers``, ``altMethodNames``, ``maxDepth``)
  from a JSON or YAML file.  The request function, promise factory and hook
  are code and always come from the caller.

Option keys may use either the camelCase names of the definition files
(``altMethodNames``) or the snake_case field names (``alt_method_names``).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Union

import yaml
from pydantic import ValidationError

from quickrest.exceptions import ConfigError
from quickrest.models import ClientConfig

DEFINITION_KEYS = frozenset(
    {"root", "endpoints", "versions", "headers", "alt_method_names", "max_depth"}
)
"""Fields a definition file may set."""


def _field_names(options: Mapping[str, Any]) -> dict[str, Any]:
    """Translate camelCase aliases in *options* to field names."""
    aliases = {
        info.alias: name
        for name, info in ClientConfig.model_fields.items()
        if info.alias
    }
    return {aliases.get(key, key): value for key, value in options.items()}


def resolve_config(
    config: Union[ClientConfig, Mapping[str, Any], None] = None,
    **options: Any,
) -> ClientConfig:
    """Build a validated :class:`~quickrest.models.ClientConfig`.

    Args:
        config: Base configuration, either a mapping or a ready
            ``ClientConfig``.
        **options: Overrides applied on top of *config*.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the merged options fail validation (blank root,
            empty endpoints, missing request function, ...).
    """
    if isinstance(config, ClientConfig):
        if not options:
            return config
        data = dict(config)
    elif config is None:
        data = {}
    elif isinstance(config, Mapping):
        data = _field_names(config)
    else:
        raise ConfigError(
            f"configuration must be a mapping or ClientConfig, got {type(config).__name__}"
        )

    data.update(_field_names(options))
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


def load_definition(path: Union[str, Path]) -> dict[str, Any]:
    """Load a client definition from a JSON or YAML file.

    The format is chosen from the file extension (``.json``, ``.yaml``,
    ``.yml``); other extensions are tried as JSON first, then YAML.

    Args:
        path: Path to the definition file.

    Returns:
        The definition with keys translated to field names.

    Raises:
        ConfigError: If the file is missing, unreadable, unparsable, not a
            mapping, or contains keys a definition may not set.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigError(f"Definition file not found: {file_path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read definition file {file_path}: {exc}") from exc

    if not content.strip():
        raise ConfigError(f"Definition file is empty: {file_path}")

    data = _parse_content(content, file_path.suffix.lower(), str(file_path))
    if not isinstance(data, dict):
        raise ConfigError(f"Definition in {file_path} must be a mapping")

    definition = _field_names(data)
    unknown = sorted(set(definition) - DEFINITION_KEYS)
    if unknown:
        raise ConfigError(
            f"Unsupported key(s) in {file_path}: {', '.join(unknown)}"
        )
    return definition


def _parse_content(content: str, suffix: str, source: str) -> Any:
    """Parse *content* as JSON or YAML based on *suffix*."""
    if suffix == ".json":
        return _parse_json(content, source)
    if suffix in (".yaml", ".yml"):
        return _parse_yaml(content, source)

    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass
    return _parse_yaml(content, source)


def _parse_json(content: str, source: str) -> Any:
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {source}: {exc}") from exc


def _parse_yaml(content: str, source: str) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source}: {exc}") from exc

