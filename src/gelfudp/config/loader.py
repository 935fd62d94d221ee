"""Configuration loading pipeline."""

from __future__ import annotations

import importlib
import json
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterator, Mapping, cast

from platformdirs import user_config_dir

from .schema import DEFAULT_CONFIG, GELFConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module

__all__ = ["load_configuration"]

_APP_NAME = "gelfudp"
_ENV_PREFIX = "GELFUDP__"
_SECTIONS = frozenset(DEFAULT_CONFIG)

Reader = Callable[[Path], Any]


def _read_toml(path: Path) -> Any:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _read_yaml(path: Path) -> Any:
    if yaml is None:
        return None
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


_READERS: Dict[str, Reader] = {
    ".toml": _read_toml,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
}


def _sections(data: Any) -> Dict[str, Any]:
    """Keep the known top-level sections of a parsed document."""

    if not isinstance(data, Mapping):
        return {}
    return {str(key): value for key, value in data.items() if str(key) in _SECTIONS}


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        existing = base.get(key)
        if isinstance(value, Mapping):
            nested = existing if isinstance(existing, dict) else {}
            base[key] = _merge(nested, value)
        else:
            base[key] = value
    return base


def _config_files(directory: Path) -> Iterator[Path]:
    for suffix in _READERS:
        path = directory / f"{_APP_NAME}{suffix}"
        if path.is_file():
            yield path


def _directory_layer(directory: Path) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for path in _config_files(directory):
        _merge(data, _sections(_READERS[path.suffix](path)))
    return data


def _pyproject_layer(directory: Path) -> Dict[str, Any]:
    path = directory / "pyproject.toml"
    if not path.is_file():
        return {}
    tool = _read_toml(path).get("tool", {})
    return _sections(tool.get(_APP_NAME) if isinstance(tool, Mapping) else None)


def _parse_env_value(raw: str) -> Any:
    value = raw.strip()
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value


def _env_layer(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Turn ``GELFUDP__TRANSPORT__PORT=12201`` into ``{"transport": {"port": 12201}}``."""

    data: Dict[str, Any] = {}
    for env_key, raw_value in environ.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        *parents, leaf = env_key[len(_ENV_PREFIX) :].lower().split("__")
        if not parents or parents[0] not in _SECTIONS:
            continue
        target = data
        for segment in parents:
            target = cast(Dict[str, Any], target.setdefault(segment, {}))
        target[leaf] = _parse_env_value(raw_value)
    return data


def load_configuration(overrides: Mapping[str, Any] | None = None) -> GELFConfig:
    """Load configuration from supported sources in precedence order.

    Later sources win: user config directory, working directory files,
    ``[tool.gelfudp]`` in ``pyproject.toml``, ``GELFUDP__`` environment
    variables, then ``overrides``.
    """

    cwd = Path.cwd()
    layers = (
        _directory_layer(Path(user_config_dir(_APP_NAME))),
        _directory_layer(cwd),
        _pyproject_layer(cwd),
        _env_layer(os.environ),
        dict(overrides or {}),
    )
    merged = default_config()
    for layer in layers:
        _merge(merged, layer)
    return build_config(merged)
