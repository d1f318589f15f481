"""Configuration loading for runecho (.runecho.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from .generator import GeneratorConfig
from .stores import DEFAULT_IR_PATH

CONFIG_FILENAME = ".runecho.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RunEchoConfig:
    """Settings read from .runecho.yml.

    ``ignored_paths`` are directory base names; empty means the generator defaults.
    ``output`` is where the IR lives, relative to ``root`` unless absolute.
    """

    root: Path
    ignored_paths: List[str] = field(default_factory=list)
    output: Path = DEFAULT_IR_PATH

    @property
    def ir_path(self) -> Path:
        return self.output if self.output.is_absolute() else self.root / self.output

    def generator_config(self) -> GeneratorConfig:
        return GeneratorConfig(ignored_paths=tuple(self.ignored_paths))


def load_config(config_path: Path) -> RunEchoConfig:
    """Load configuration from a repository directory or a config file path."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RunEchoConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    ir_data = data.get("ir")
    if ir_data is None:
        ir_data = {}
    if not isinstance(ir_data, dict):
        raise ConfigError("'ir' must be a mapping")

    ignored = _as_str_list(ir_data.get("ignored_paths"))
    output = _as_str(ir_data.get("output"))

    return RunEchoConfig(
        root=root,
        ignored_paths=ignored,
        output=Path(output) if output else DEFAULT_IR_PATH,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir() or config_path.name != CONFIG_FILENAME:
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    raise ConfigError("'ignored_paths' must be a list of directory names")


__all__ = ["CONFIG_FILENAME", "ConfigError", "RunEchoConfig", "load_config"]
