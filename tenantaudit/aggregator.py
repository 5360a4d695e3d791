"""Aggregation of per-module analyses into a single report."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import (
    AggregateReport,
    ComplianceBand,
    ModuleAnalysis,
    RemediationList,
    ReportSummary,
)
from .scoring import COMPLIANT_THRESHOLD, round_half_up

DEFAULT_REMEDIATION_LIMIT = 5


def scorable(analyses: Iterable[ModuleAnalysis]) -> List[ModuleAnalysis]:
    """Drop analyses with no signatures before any aggregation happens."""
    return [analysis for analysis in analyses if analysis.is_scored]


def sort_analyses(analyses: Iterable[ModuleAnalysis]) -> List[ModuleAnalysis]:
    """Order least-compliant first, ties broken by module name."""
    return sorted(analyses, key=lambda analysis: (analysis.score, analysis.module_name))


def summarize(analyses: Sequence[ModuleAnalysis]) -> ReportSummary:
    if not analyses:
        return ReportSummary()

    counts = {band: 0 for band in ComplianceBand}
    for analysis in analyses:
        counts[analysis.band] += 1  # type: ignore[index]

    total_score = sum(analysis.score for analysis in analyses)  # type: ignore[misc]
    return ReportSummary(
        total_scored=len(analyses),
        compliant=counts[ComplianceBand.COMPLIANT],
        partial=counts[ComplianceBand.PARTIALLY_COMPLIANT],
        in_progress=counts[ComplianceBand.IN_PROGRESS],
        not_compliant=counts[ComplianceBand.NOT_COMPLIANT],
        average_score=round_half_up(total_score / len(analyses)),
    )


def remediate(
    ordered: Sequence[ModuleAnalysis], limit: int = DEFAULT_REMEDIATION_LIMIT
) -> RemediationList:
    """Select modules below the compliant threshold, keeping the given order."""
    if limit < 0:
        raise ValueError("Remediation limit must be non-negative")
    pending = [
        analysis
        for analysis in ordered
        if analysis.score is not None and analysis.score < COMPLIANT_THRESHOLD
    ]
    return RemediationList(entries=tuple(pending[:limit]), pending=len(pending), limit=limit)


def build_report(
    analyses: Iterable[ModuleAnalysis], *, remediation_limit: int = DEFAULT_REMEDIATION_LIMIT
) -> AggregateReport:
    ordered = sort_analyses(scorable(analyses))
    return AggregateReport(
        modules=tuple(ordered),
        summary=summarize(ordered),
        remediation=remediate(ordered, remediation_limit),
    )


__all__ = [
    "DEFAULT_REMEDIATION_LIMIT",
    "build_report",
    "remediate",
    "scorable",
    "sort_analyses",
    "summarize",
]
