"""Configuration loading for fluentgen (.fluentgen.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".fluentgen.yml"

STRATEGIES = ("syntax", "resolved")
UNSUPPORTED_POLICIES = ("skip", "error")
OUTPUT_MODES = ("combined", "per-file")

_GO_KEYWORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)
_GO_IDENTIFIER = re.compile(r"^[^\W\d]\w*$")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or holds invalid values."""


@dataclass
class OutputConfig:
    """Where and how generated code is emitted."""

    mode: str = "combined"
    path: Optional[Path] = None
    file_suffix: str = "_fluent"


@dataclass
class FluentGenConfig:
    """Represents the settings defined in .fluentgen.yml merged with CLI overrides."""

    root: Optional[Path] = None
    suffix: str = "Style"
    receiver: str = "style"
    strategy: str = "syntax"
    unsupported_types: str = "skip"
    workers: int = 4
    skip_marker: str = "fluent"
    exclude_paths: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None
    output: OutputConfig = field(default_factory=OutputConfig)

    def with_overrides(self, **overrides: Any) -> "FluentGenConfig":
        """Return a copy with every non-``None`` override applied and validated."""
        output_overrides = {
            key[len("output_") :]: value
            for key, value in overrides.items()
            if key.startswith("output_") and value is not None
        }
        plain = {
            key: value
            for key, value in overrides.items()
            if not key.startswith("output_") and value is not None
        }
        updated = replace(self, **plain)
        if output_overrides:
            updated = replace(updated, output=replace(self.output, **output_overrides))
        validate_config(updated)
        return updated


def load_config(config_path: Path) -> FluentGenConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return FluentGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = FluentGenConfig()
    output_data = _as_dict(data.get("output"))
    output = OutputConfig()
    if output_data:
        output_path = _as_str(output_data.get("path"))
        output = OutputConfig(
            mode=_as_str(output_data.get("mode")) or output.mode,
            path=root / output_path if output_path else None,
            file_suffix=_as_str(output_data.get("file_suffix")) or output.file_suffix,
        )

    templates_dir_str = _as_str(data.get("templates_dir"))
    workers = _as_int(data.get("workers"))

    config = FluentGenConfig(
        root=root,
        suffix=_as_str(data.get("suffix")) or defaults.suffix,
        receiver=_as_str(data.get("receiver")) or defaults.receiver,
        strategy=_as_str(data.get("strategy")) or defaults.strategy,
        unsupported_types=_as_str(data.get("unsupported_types")) or defaults.unsupported_types,
        workers=workers if workers is not None else defaults.workers,
        skip_marker=_as_str(data.get("skip_marker")) or defaults.skip_marker,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        output=output,
    )
    validate_config(config)
    return config


def validate_config(config: FluentGenConfig) -> None:
    """Raise :class:`ConfigError` when a setting cannot drive a generation run."""
    if not config.suffix:
        raise ConfigError("suffix must not be empty")
    if not is_go_identifier(config.receiver):
        raise ConfigError(f"receiver {config.receiver!r} is not a valid Go identifier")
    if config.strategy not in STRATEGIES:
        raise ConfigError(
            f"strategy must be one of {', '.join(STRATEGIES)} (got {config.strategy!r})"
        )
    if config.unsupported_types not in UNSUPPORTED_POLICIES:
        raise ConfigError(
            "unsupported_types must be one of "
            f"{', '.join(UNSUPPORTED_POLICIES)} (got {config.unsupported_types!r})"
        )
    if config.output.mode not in OUTPUT_MODES:
        raise ConfigError(
            f"output.mode must be one of {', '.join(OUTPUT_MODES)} (got {config.output.mode!r})"
        )
    if (
        config.output.mode == "per-file"
        and config.output.path is not None
        and config.output.path.suffix == ".go"
    ):
        raise ConfigError(
            f"output.path must be a directory in per-file mode (got {config.output.path})"
        )
    if config.workers < 1:
        raise ConfigError("workers must be at least 1")


def is_go_identifier(name: str) -> bool:
    """Return True for a usable Go identifier (not blank, not a keyword)."""
    if not name or name == "_":
        return False
    if name in _GO_KEYWORDS:
        return False
    return bool(_GO_IDENTIFIER.match(name))


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix in {".yml", ".yaml"}:
        return config_path.resolve()
    return (config_path.parent / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


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
    "FluentGenConfig",
    "OutputConfig",
    "is_go_identifier",
    "load_config",
    "validate_config",
]
