"""Configuration loading for ipcgen (.ipcgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".ipcgen.yml"
DEFAULT_OUTPUT = Path("output.ts")
DEFAULT_EXTENSIONS = (".ts",)
DEFAULT_QUIET_MS = 1000
DEFAULT_DEBOUNCE_MS = 1600


@dataclass
class WatchConfig:
    """Watch loop settings.

    `quiet_ms` is how long the tree must stay unchanged before a batch is
    delivered; `debounce_ms` caps how long a single batch may keep growing.
    """

    quiet_ms: int = DEFAULT_QUIET_MS
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


@dataclass
class IpcgenConfig:
    """Effective settings for a generation pass."""

    input: Optional[Path] = None
    output: Path = DEFAULT_OUTPUT
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude_paths: List[str] = field(default_factory=list)
    watch: WatchConfig = field(default_factory=WatchConfig)
    log_file: Optional[Path] = None

    def with_overrides(
        self,
        *,
        input: Optional[Path] = None,
        output: Optional[Path] = None,
        log_file: Optional[Path] = None,
    ) -> "IpcgenConfig":
        """Return a copy with command-line values taking precedence."""
        return replace(
            self,
            input=input if input is not None else self.input,
            output=output if output is not None else self.output,
            log_file=log_file if log_file is not None else self.log_file,
        )


def load_config(config_path: Path) -> IpcgenConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent

    if not config_file.exists():
        return IpcgenConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = IpcgenConfig()

    input_value = _as_str(data.get("input"))
    if input_value:
        config.input = root / input_value

    output_value = _as_str(data.get("output"))
    if output_value:
        config.output = root / output_value

    if "extensions" in data:
        extensions = [_normalise_extension(ext) for ext in _as_str_list(data.get("extensions"))]
        if not extensions:
            raise ConfigError("extensions must list at least one file suffix")
        config.extensions = extensions

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    log_file_value = _as_str(data.get("log_file"))
    if log_file_value:
        config.log_file = root / log_file_value

    watch_data = _as_dict(data.get("watch"))
    if watch_data:
        config.watch = WatchConfig(
            quiet_ms=_as_millis(watch_data, "quiet_ms", DEFAULT_QUIET_MS),
            debounce_ms=_as_millis(watch_data, "debounce_ms", DEFAULT_DEBOUNCE_MS),
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
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


def _as_millis(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"watch.{key} must be a non-negative integer")
    return value


def _normalise_extension(value: str) -> str:
    value = value.strip()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_OUTPUT",
    "DEFAULT_QUIET_MS",
    "IpcgenConfig",
    "WatchConfig",
    "load_config",
]
