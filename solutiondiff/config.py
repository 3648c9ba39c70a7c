"""Configuration loading for solutiondiff (.solutiondiff.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".solutiondiff.yml"
DEFAULT_ENTRY_NAME = "solution.xml"
DEFAULT_COMPONENT_ELEMENT = "RootComponent"
DEFAULT_MAX_EXACT_LINES = 5000
DEFAULT_REPORT_TITLE = "Solution Diff Report"

_ENV_MAX_EXACT_LINES = "SOLUTIONDIFF_MAX_EXACT_LINES"
_ENV_SCRATCH_DIR = "SOLUTIONDIFF_SCRATCH_DIR"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DescriptorConfig:
    """Where the descriptor lives inside a package and how components are declared."""

    entry_name: str = DEFAULT_ENTRY_NAME
    component_element: str = DEFAULT_COMPONENT_ELEMENT


@dataclass
class DiffConfig:
    max_exact_lines: int = DEFAULT_MAX_EXACT_LINES


@dataclass
class ArchiveConfig:
    scratch_dir: Optional[Path] = None


@dataclass
class ReportConfig:
    title: str = DEFAULT_REPORT_TITLE
    template: Optional[Path] = None


@dataclass
class SolutionDiffConfig:
    """Represents the settings defined in .solutiondiff.yml."""

    root: Path
    descriptor: DescriptorConfig = field(default_factory=DescriptorConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(
    config_path: Path, *, environ: Mapping[str, str] | None = None
) -> SolutionDiffConfig:
    """Load configuration from disk, then apply environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    config = SolutionDiffConfig(root=root)
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{config_file.name} must contain a mapping at the root")
        _apply_mapping(config, data)

    _apply_environment(config, env)
    return config


def _apply_mapping(config: SolutionDiffConfig, data: Dict[str, Any]) -> None:
    root = config.root

    descriptor_data = _as_dict(data.get("descriptor"))
    entry_name = _as_str(descriptor_data.get("entry_name"))
    if entry_name:
        config.descriptor.entry_name = entry_name
    component_element = _as_str(descriptor_data.get("component_element"))
    if component_element:
        config.descriptor.component_element = component_element

    diff_data = _as_dict(data.get("diff"))
    max_lines = _as_int(diff_data.get("max_exact_lines"))
    if max_lines is not None:
        if max_lines < 0:
            raise ConfigError("diff.max_exact_lines must not be negative")
        config.diff.max_exact_lines = max_lines

    archive_data = _as_dict(data.get("archive"))
    scratch_dir = _as_str(archive_data.get("scratch_dir"))
    if scratch_dir:
        config.archive.scratch_dir = root / scratch_dir

    report_data = _as_dict(data.get("report"))
    title = _as_str(report_data.get("title"))
    if title:
        config.report.title = title
    template = _as_str(report_data.get("template"))
    if template:
        config.report.template = root / template


def _apply_environment(config: SolutionDiffConfig, env: Mapping[str, str]) -> None:
    raw_max = env.get(_ENV_MAX_EXACT_LINES)
    if raw_max:
        max_lines = _as_int(raw_max)
        if max_lines is None or max_lines < 0:
            raise ConfigError(f"{_ENV_MAX_EXACT_LINES} must be a non-negative integer")
        config.diff.max_exact_lines = max_lines
    scratch = env.get(_ENV_SCRATCH_DIR)
    if scratch:
        config.archive.scratch_dir = Path(scratch).expanduser()


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


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
            return int(value.strip())
        except ValueError:
            return None
    return None


__all__ = [
    "ArchiveConfig",
    "ConfigError",
    "DescriptorConfig",
    "DiffConfig",
    "ReportConfig",
    "SolutionDiffConfig",
    "load_config",
]
