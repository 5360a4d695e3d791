"""Configuration loading for tenantaudit (.tenantaudit.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .aggregator import DEFAULT_REMEDIATION_LIMIT
from .module_scanner import DEFAULT_EXCLUDES, DEFAULT_EXTENSIONS
from .rules import DEFAULT_TENANT_COLUMN, DEFAULT_TENANT_PARAMETER

CONFIG_FILENAME = ".tenantaudit.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be read or is malformed."""


@dataclass
class TenantConfig:
    """Names used to recognise tenant threading in source text."""

    parameter: str = DEFAULT_TENANT_PARAMETER
    column: str = DEFAULT_TENANT_COLUMN


@dataclass
class ReportConfig:
    """Rendering options for the text report."""

    remediation_limit: int = DEFAULT_REMEDIATION_LIMIT
    bar_width: int = 30
    name_width: int = 35
    ascii: bool = False


@dataclass
class AuditConfig:
    """Represents the settings defined in .tenantaudit.yml."""

    root: Path
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))
    recursive: bool = False
    jobs: int = 1
    tenant: TenantConfig = field(default_factory=TenantConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(path: Path, *, explicit: bool = False) -> AuditConfig:
    """Load configuration from a directory or a file path.

    A missing file yields defaults unless ``explicit`` is set, in which case
    the caller named the file and its absence is an error.
    """
    config_file = _resolve_config_path(path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        if explicit:
            raise ConfigError(f"Configuration file not found: {config_file}")
        return AuditConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = AuditConfig(root=root)
    if "extensions" in data:
        config.extensions = _as_str_list(data["extensions"], "extensions")
    if "exclude" in data:
        config.exclude = _as_str_list(data["exclude"], "exclude")
    if "recursive" in data:
        config.recursive = _as_bool(data["recursive"], "recursive")
    if "jobs" in data:
        config.jobs = _as_int(data["jobs"], "jobs", minimum=1)

    tenant_data = _as_dict(data.get("tenant"), "tenant")
    if "parameter" in tenant_data:
        config.tenant.parameter = _as_name(tenant_data["parameter"], "tenant.parameter")
    if "column" in tenant_data:
        config.tenant.column = _as_name(tenant_data["column"], "tenant.column")

    report_data = _as_dict(data.get("report"), "report")
    if "remediation_limit" in report_data:
        config.report.remediation_limit = _as_int(
            report_data["remediation_limit"], "report.remediation_limit", minimum=0
        )
    if "bar_width" in report_data:
        config.report.bar_width = _as_int(report_data["bar_width"], "report.bar_width", minimum=1)
    if "name_width" in report_data:
        config.report.name_width = _as_int(
            report_data["name_width"], "report.name_width", minimum=8
        )
    if "ascii" in report_data:
        config.report.ascii = _as_bool(report_data["ascii"], "report.ascii")

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any, key: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _as_name(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' must be a non-empty string")
    return value.strip()


def _as_int(value: Any, key: str, *, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer")
    if minimum is not None and value < minimum:
        raise ConfigError(f"'{key}' must be at least {minimum}")
    return value


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"'{key}' must be true or false")


def _as_str_list(value: Any, key: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ConfigError(f"'{key}' must be a string or a list of strings")


__all__ = [
    "AuditConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "ReportConfig",
    "TenantConfig",
    "load_config",
]
