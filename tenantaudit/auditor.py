"""Pipeline driver: scan, count, score and aggregate in one batch pass."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from .aggregator import build_report, scorable
from .config import AuditConfig
from .counter import count_signatures
from .logging import get_logger
from .models import AggregateReport, ModuleAnalysis, SourceModule
from .module_scanner import ModuleScanner
from .rules import (
    DEFAULT_RULE_SET,
    DEFAULT_TENANT_COLUMN,
    DEFAULT_TENANT_PARAMETER,
    RuleSet,
    build_rule_set,
)
from .scoring import analyze_module


class Auditor:
    """Runs the tenant-scoping audit over a directory of modules."""

    def __init__(
        self,
        config: AuditConfig,
        rules: RuleSet | None = None,
        scanner: ModuleScanner | None = None,
    ) -> None:
        self.config = config
        self.rules = rules or _rule_set_for(config)
        self.scanner = scanner or ModuleScanner(
            config.extensions, config.exclude, recursive=config.recursive
        )
        self._logger = get_logger("auditor")

    def analyze(self, directory: str | Path | None = None) -> List[ModuleAnalysis]:
        """Return analyses for every scorable module under ``directory``.

        ``directory`` defaults to the configuration root. The result order is
        unspecified; ``build_report`` sorts it.
        """
        if directory is None:
            directory = self.config.root
        if self.config.jobs > 1:
            analyses = self._analyze_parallel(directory)
        else:
            analyses = [self._analyze(module) for module in self.scanner.scan(directory)]
        return scorable(analysis for analysis in analyses if analysis is not None)

    def run(self, directory: str | Path | None = None) -> AggregateReport:
        analyses = self.analyze(directory)
        report = build_report(analyses, remediation_limit=self.config.report.remediation_limit)
        self._logger.info(
            "Scored %d module(s); average score %d%%",
            report.summary.total_scored,
            report.summary.average_score,
        )
        return report

    def _analyze(self, module: SourceModule) -> Optional[ModuleAnalysis]:
        counts = count_signatures(module.content, self.rules)
        if counts.total == 0:
            self._logger.debug("No method signatures in %s; not scored", module.name)
            return None
        return analyze_module(module.name, counts)

    def _analyze_parallel(self, directory: str | Path) -> List[Optional[ModuleAnalysis]]:
        root = Path(directory).expanduser().resolve()
        paths = self.scanner.candidates(root)
        if not paths:
            return []

        def _worker(path: Path) -> Optional[ModuleAnalysis]:
            module = self.scanner.read(path, root)
            if module is None:
                return None
            return self._analyze(module)

        max_workers = min(len(paths), self.config.jobs)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(_worker, paths))


def _rule_set_for(config: AuditConfig) -> RuleSet:
    if (
        config.tenant.parameter == DEFAULT_TENANT_PARAMETER
        and config.tenant.column == DEFAULT_TENANT_COLUMN
    ):
        return DEFAULT_RULE_SET
    return build_rule_set(config.tenant.parameter, config.tenant.column)


__all__ = ["Auditor"]
