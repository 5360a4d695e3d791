"""Tests for tenantaudit.module_scanner."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tenantaudit.module_scanner import ExclusionRule, ModuleScanner


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_scan_filters_extensions_and_reference_modules(tmp_path: Path) -> None:
    _write(tmp_path / "ordersService.js", "async a(tenantId) {}\n")
    _write(tmp_path / "billing.ts", "async b() {}\n")
    _write(tmp_path / "empresasService.EXAMPLE.js", "async c(tenantId) {}\n")
    _write(tmp_path / "tenantsService.js", "async d() {}\n")
    _write(tmp_path / "notes.md", "async e() {}\n")

    modules = {module.name: module for module in ModuleScanner().scan(tmp_path)}

    assert sorted(modules) == ["billing.ts", "ordersService.js"]
    assert modules["ordersService.js"].content == "async a(tenantId) {}\n"


def test_scan_is_not_recursive_by_default(tmp_path: Path) -> None:
    _write(tmp_path / "top.js", "")
    _write(tmp_path / "nested" / "inner.js", "")

    names = [module.name for module in ModuleScanner().scan(tmp_path)]

    assert names == ["top.js"]


def test_recursive_scan_uses_relative_names_and_skips_vendor_dirs(tmp_path: Path) -> None:
    _write(tmp_path / "top.js", "")
    _write(tmp_path / "nested" / "inner.js", "")
    _write(tmp_path / "node_modules" / "dep" / "index.js", "")

    names = sorted(module.name for module in ModuleScanner(recursive=True).scan(tmp_path))

    assert names == ["nested/inner.js", "top.js"]


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    with pytest.raises(FileNotFoundError) as excinfo:
        ModuleScanner().scan(missing)
    assert str(missing) in str(excinfo.value)


def test_scan_rejects_file_path(tmp_path: Path) -> None:
    target = tmp_path / "service.js"
    _write(target, "")
    with pytest.raises(NotADirectoryError):
        ModuleScanner().scan(target)


def test_scan_skips_undecodable_file_with_warning(tmp_path: Path, caplog) -> None:
    _write(tmp_path / "good.js", "async a() {}\n")
    (tmp_path / "binary.js").write_bytes(b"\xff\xfe\x00async")

    with caplog.at_level(logging.WARNING, logger="tenantaudit"):
        names = [module.name for module in ModuleScanner().scan(tmp_path)]

    assert names == ["good.js"]
    assert any("binary.js" in record.getMessage() for record in caplog.records)


def test_scan_skips_file_that_fails_to_read(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path / "good.js", "")
    _write(tmp_path / "locked.js", "")

    original = Path.read_text

    def _read_text(self: Path, *args, **kwargs) -> str:
        if self.name == "locked.js":
            raise PermissionError(13, "Permission denied")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", _read_text)

    names = [module.name for module in ModuleScanner().scan(tmp_path)]

    assert names == ["good.js"]


def test_scan_is_lazy(tmp_path: Path, monkeypatch) -> None:
    _write(tmp_path / "a.js", "")
    scanner = ModuleScanner()
    calls = []
    monkeypatch.setattr(scanner, "read", lambda path, root: calls.append(path))

    modules = scanner.scan(tmp_path)

    assert calls == []
    list(modules)
    assert len(calls) == 1


def test_custom_extensions_are_normalised(tmp_path: Path) -> None:
    _write(tmp_path / "repo.PY", "")
    _write(tmp_path / "repo.js", "")

    names = [module.name for module in ModuleScanner(extensions=["py"], excludes=[]).scan(tmp_path)]

    assert names == ["repo.PY"]


@pytest.mark.parametrize(
    ("pattern", "path", "expected"),
    [
        ("*EXAMPLE*", "empresasService.EXAMPLE.js", True),
        ("*EXAMPLE*", "nested/empresasService.EXAMPLE.js", True),
        ("*EXAMPLE*", "examples.js", False),
        ("legacy/*", "legacy/old.js", True),
        ("legacy/*", "old.js", False),
        ("", "anything.js", False),
        ("*tenantsService*", "v2.tenantsService.js", True),
        ("*tenantsService*", "legacyTenantsService.js", False),
    ],
)
def test_exclusion_rule_matching(pattern: str, path: str, expected: bool) -> None:
    assert ExclusionRule(pattern).matches(path) is expected


def test_default_excludes_skip_tenant_registry_anywhere_in_name(tmp_path: Path) -> None:
    _write(tmp_path / "tenantsService.js", "async a() {}\n")
    _write(tmp_path / "v2.tenantsService.js", "async b() {}\n")
    _write(tmp_path / "legacyTenantsService.js", "async c() {}\n")

    names = [module.name for module in ModuleScanner().scan(tmp_path)]

    assert names == ["legacyTenantsService.js"]


def test_unreadable_module_is_logged_as_skipped(tmp_path: Path, caplog) -> None:
    (tmp_path / "binary.js").write_bytes(b"\xff\xfe")

    with caplog.at_level(logging.WARNING, logger="tenantaudit"):
        list(ModuleScanner().scan(tmp_path))

    (record,) = caplog.records
    assert record.name == "tenantaudit.skipped"
    assert record.module_name == "binary.js"
