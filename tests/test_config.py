"""Tests for tenantaudit.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from tenantaudit.config import AuditConfig, ConfigError, load_config
from tenantaudit.module_scanner import DEFAULT_EXCLUDES, DEFAULT_EXTENSIONS


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, AuditConfig)
    assert config.root == tmp_path.resolve()
    assert config.extensions == list(DEFAULT_EXTENSIONS)
    assert config.exclude == list(DEFAULT_EXCLUDES)
    assert config.recursive is False
    assert config.jobs == 1
    assert config.tenant.parameter == "tenantId"
    assert config.tenant.column == "tenant_id"
    assert config.report.remediation_limit == 5
    assert config.report.bar_width == 30
    assert config.report.name_width == 35
    assert config.report.ascii is False


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".tenantaudit.yml"
    config_file.write_text(
        """
extensions: [".js", ".ts"]
exclude:
  - "*EXAMPLE*"
  - "legacy/*"
recursive: true
jobs: 4
tenant:
  parameter: "organizationId"
  column: "organization_id"
report:
  remediation_limit: 10
  bar_width: 20
  name_width: 40
  ascii: true
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.extensions == [".js", ".ts"]
    assert config.exclude == ["*EXAMPLE*", "legacy/*"]
    assert config.recursive is True
    assert config.jobs == 4
    assert config.tenant.parameter == "organizationId"
    assert config.tenant.column == "organization_id"
    assert config.report.remediation_limit == 10
    assert config.report.bar_width == 20
    assert config.report.name_width == 40
    assert config.report.ascii is True


def test_load_config_accepts_single_string_lists(tmp_path: Path) -> None:
    (tmp_path / ".tenantaudit.yml").write_text("extensions: .js\nexclude: []\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.extensions == [".js"]
    assert config.exclude == []


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".tenantaudit.yml").write_text("\n# nothing here\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.report.remediation_limit == 5


def test_explicit_missing_config_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "custom.yml", explicit=True)


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "jobs: [1, 2\n",
        "jobs: 0\n",
        "jobs: true\n",
        "recursive: maybe\n",
        "tenant: tenantId\n",
        "tenant:\n  column: ''\n",
        "report:\n  remediation_limit: -1\n",
        "report:\n  bar_width: wide\n",
        "extensions: [1, 2]\n",
    ],
)
def test_malformed_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".tenantaudit.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
