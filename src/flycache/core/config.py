# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Cache configuration: YAML/TOML files over packaged defaults, env overrides.

Keys are dot paths into a nested mapping (``flycache.cache.provider``).
Lookup order for :meth:`Config.get`, first hit wins:

1. ``FLYCACHE_`` environment variable (``FLYCACHE_CACHE_PROVIDER``)
2. the loaded file, deep-merged over
3. ``flycache/resources/flycache-defaults.yaml``

String values may embed ``${VAR}`` or ``${VAR:fallback}``, expanded from
the environment on lookup.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_ENV_PREFIX = "FLYCACHE_"
_PREFIX_ATTR = "__flycache_config_prefix__"
_ENV_PLACEHOLDER = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})

_COERCERS: dict[Any, Callable[[str], Any]] = {
    int: int,
    float: float,
    bool: lambda raw: raw.strip().lower() in _TRUE_STRINGS,
}


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to the config section at *prefix*."""

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Read-only view over nested configuration data."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    @classmethod
    def defaults(cls) -> Config:
        return cls(_packaged_defaults())

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load *path* (``.toml`` or YAML) merged over the packaged defaults.

        A missing file is not an error; the result then holds only the
        defaults, or nothing when *load_defaults* is false.
        """
        path = Path(path)
        data = _packaged_defaults() if load_defaults else {}
        if path.exists():
            data = _deep_merge(data, _read_file(path))
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        env_value = os.environ.get(_env_name(key))
        if env_value is not None:
            return env_value

        value = _walk(self._data, key.split("."))
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return _expand_env(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """The mapping under *prefix*; empty when absent or not a mapping."""
        section = _walk(self._data, prefix.split("."))
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Build a ``@config_properties`` dataclass from its section.

        Mapping-valued fields are taken from the section with placeholders
        expanded. Scalar fields go through :meth:`get`, so environment
        overrides apply, and strings are coerced to ``int``, ``float`` or
        ``bool`` fields.
        Fields absent from the config keep their dataclass default.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)
        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            if isinstance(section.get(field.name), dict):
                kwargs[field.name] = _expand_tree(section[field.name])
                continue
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            coerce = _COERCERS.get(hints.get(field.name))
            if coerce is not None and isinstance(value, str):
                value = coerce(value)
            kwargs[field.name] = value
        return config_cls(**kwargs)


def _env_name(key: str) -> str:
    # flycache.cache.default_ttl -> FLYCACHE_CACHE_DEFAULT_TTL
    return _ENV_PREFIX + key.removeprefix("flycache.").upper().replace(".", "_").replace("-", "_")


def _walk(data: Any, parts: list[str]) -> Any:
    for part in parts:
        if not isinstance(data, dict):
            return None
        data = data.get(part)
    return data


def _expand_env(value: str) -> str:
    def replace(match: re.Match[str]) -> str:
        name, fallback = match.group(1), match.group(2)
        resolved = os.environ.get(name, fallback)
        if resolved is None:
            raise ValueError(f"Environment variable '{name}' is not set and '${{{name}}}' has no fallback")
        return resolved

    return _ENV_PLACEHOLDER.sub(replace, value)


def _expand_tree(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _expand_tree(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_tree(item) for item in value]
    if isinstance(value, str) and "${" in value:
        return _expand_env(value)
    return value


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _packaged_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("flycache.resources").joinpath("flycache-defaults.yaml")
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
