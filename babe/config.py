from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .utils import parse_int

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

CONFIG_STEMS = ("local.babe", "babe")
CONFIG_SUFFIXES = (".json", ".toml", ".yaml", ".yml")


@dataclass(frozen=True)
class DynamicConfigurationItem:
    source: str = ""
    sort_by: str | None = None
    order: str = "asc"
    group_by: str | None = None
    limit: int | None = None

    @property
    def descending(self) -> bool:
        return self.order == "desc"


@dataclass(frozen=True)
class Configuration:
    static: dict = field(default_factory=dict)
    dynamic: dict[str, DynamicConfigurationItem] = field(default_factory=dict)


def find_config(base_dir: Path) -> Path | None:
    for stem in CONFIG_STEMS:
        for suffix in CONFIG_SUFFIXES:
            path = base_dir / f"{stem}{suffix}"
            if path.is_file():
                return path
    return None


def read_document(path: Path) -> object:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            raise ConfigError(path, "TOML config requires tomllib (Python 3.11+) or tomli.")
        try:
            return toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(path, str(exc)) from exc
    if suffix in {".yml", ".yaml"}:
        if yaml is None:
            raise ConfigError(path, "YAML config requires PyYAML.")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(path, str(exc)) from exc
        return {} if data is None else data
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(path, str(exc)) from exc


def parse_dynamic_item(path: Path, name: str, raw: object) -> DynamicConfigurationItem:
    if not isinstance(raw, dict):
        raise ConfigError(path, f"dynamic entry '{name}' must be a mapping")
    for key in ("from", "sortBy", "groupBy", "order"):
        value = raw.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(path, f"dynamic entry '{name}': '{key}' must be a string")
    limit = raw.get("limit")
    if limit is not None:
        limit = parse_int(limit, -1)
        if limit <= 0:
            raise ConfigError(path, f"dynamic entry '{name}': 'limit' must be a positive integer")
    return DynamicConfigurationItem(
        source=(raw.get("from") or "").strip().strip("/"),
        sort_by=(raw.get("sortBy") or "").strip() or None,
        order="desc" if raw.get("order") == "desc" else "asc",
        group_by=(raw.get("groupBy") or "").strip() or None,
        limit=limit,
    )


def load_config(base_dir: Path) -> Configuration:
    path = find_config(base_dir)
    if path is None:
        return Configuration()
    data = read_document(path)
    if not isinstance(data, dict):
        raise ConfigError(path, "config must be a mapping")
    static = data.get("static") or {}
    dynamic = data.get("dynamic") or {}
    if not isinstance(static, dict):
        raise ConfigError(path, "'static' must be a mapping")
    if not isinstance(dynamic, dict):
        raise ConfigError(path, "'dynamic' must be a mapping")
    return Configuration(
        static=static,
        dynamic={name: parse_dynamic_item(path, name, raw) for name, raw in dynamic.items()},
    )
