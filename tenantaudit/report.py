"""Text and JSON rendering of aggregate reports."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from .models import AggregateReport, ComplianceBand, ModuleAnalysis
from .scoring import round_half_up

EMOJI_GLYPHS: Mapping[ComplianceBand, str] = {
    ComplianceBand.COMPLIANT: "✅",
    ComplianceBand.PARTIALLY_COMPLIANT: "⚠️",
    ComplianceBand.IN_PROGRESS: "🔄",
    ComplianceBand.NOT_COMPLIANT: "❌",
}

ASCII_GLYPHS: Mapping[ComplianceBand, str] = {
    ComplianceBand.COMPLIANT: "OK",
    ComplianceBand.PARTIALLY_COMPLIANT: "PART",
    ComplianceBand.IN_PROGRESS: "WIP",
    ComplianceBand.NOT_COMPLIANT: "NONE",
}

BANNER = "Tenant isolation audit"


@dataclass(frozen=True)
class _Column:
    title: str
    width: int


@dataclass
class ReportRenderer:
    """Formats an AggregateReport as a fixed-width console report."""

    name_width: int = 35
    bar_width: int = 30
    glyphs: Mapping[ComplianceBand, str] = field(default_factory=lambda: dict(EMOJI_GLYPHS))
    filled_cell: str = "█"
    empty_cell: str = "░"

    @classmethod
    def ascii(cls, *, name_width: int = 35, bar_width: int = 30) -> "ReportRenderer":
        return cls(
            name_width=name_width,
            bar_width=bar_width,
            glyphs=dict(ASCII_GLYPHS),
            filled_cell="#",
            empty_cell="-",
        )

    def render(self, report: AggregateReport) -> str:
        lines: List[str] = [BANNER, ""]
        lines.extend(self.render_table(report.modules))
        lines.append("")
        lines.extend(self.render_summary(report))
        lines.append("")
        lines.append(self.render_progress(report))
        lines.append("")
        lines.extend(self.render_remediation(report))
        return "\n".join(lines) + "\n"

    def render_table(self, modules: Sequence[ModuleAnalysis]) -> List[str]:
        columns = self._columns()
        lines = [
            self._border(columns, "┌", "┬", "┐"),
            self._row(columns, [column.title for column in columns]),
            self._border(columns, "├", "┼", "┤"),
        ]
        for analysis in modules:
            lines.append(
                self._row(
                    columns,
                    [
                        analysis.module_name,
                        self.glyphs[analysis.band] if analysis.band else "",
                        f"{analysis.scoped_signature_count}/{analysis.total_signature_count}",
                        str(analysis.scoped_query_clause_count),
                        str(analysis.scoped_insert_clause_count),
                        f"{analysis.score}%",
                    ],
                )
            )
        lines.append(self._border(columns, "└", "┴", "┘"))
        return lines

    def render_summary(self, report: AggregateReport) -> List[str]:
        summary = report.summary
        compliant = self.glyphs[ComplianceBand.COMPLIANT]
        partial = self.glyphs[ComplianceBand.PARTIALLY_COMPLIANT]
        pending = self.glyphs[ComplianceBand.NOT_COMPLIANT]
        return [
            "Statistics:",
            f"  Modules scored: {summary.total_scored}",
            f"  {compliant} Compliant (>=80%): {summary.compliant}",
            f"  {partial} Partial (50-79%): {summary.partial}",
            f"  {pending} Not migrated (<50%): {summary.not_migrated}",
            f"  Average score: {summary.average_score}%",
        ]

    def render_progress(self, report: AggregateReport) -> str:
        summary = report.summary
        if summary.total_scored:
            ratio = summary.compliant / summary.total_scored
        else:
            ratio = 0.0
        filled = min(self.bar_width, round_half_up(ratio * self.bar_width))
        bar = self.filled_cell * filled + self.empty_cell * (self.bar_width - filled)
        return f"Progress: [{bar}] {round_half_up(ratio * 100)}%"

    def render_remediation(self, report: AggregateReport) -> List[str]:
        lines = ["Next steps:"]
        if not report.modules:
            lines.append("  No data-access modules found.")
            return lines

        remediation = report.remediation
        if not remediation.pending:
            lines.append("  All modules are tenant-scoped.")
            return lines

        lines.append("  Modules that still need tenant scoping:")
        for index, analysis in enumerate(remediation.entries, start=1):
            lines.append(
                f"  {index}. {analysis.module_name} ({analysis.score}%) - "
                f"{analysis.scoped_signature_count}/{analysis.total_signature_count} methods scoped"
            )
        if remediation.overflow:
            noun = "module" if remediation.overflow == 1 else "modules"
            lines.append(f"  ... and {remediation.overflow} more {noun}")
        return lines

    def _columns(self) -> List[_Column]:
        return [
            _Column("Module", self.name_width),
            _Column("Band", 6),
            _Column("Methods", 8),
            _Column("WHERE", 8),
            _Column("INSERT", 8),
            _Column("Score", 7),
        ]

    @staticmethod
    def _border(columns: Sequence[_Column], left: str, middle: str, right: str) -> str:
        return left + middle.join("─" * (column.width + 2) for column in columns) + right

    @staticmethod
    def _row(columns: Sequence[_Column], values: Sequence[str]) -> str:
        cells = [value.ljust(column.width)[: column.width] for column, value in zip(columns, values)]
        return "│ " + " │ ".join(cells) + " │"


def report_to_dict(report: AggregateReport) -> Dict[str, object]:
    summary = report.summary
    return {
        "modules": [_analysis_to_dict(analysis) for analysis in report.modules],
        "summary": {
            "total_scored": summary.total_scored,
            "compliant": summary.compliant,
            "partial": summary.partial,
            "in_progress": summary.in_progress,
            "not_compliant": summary.not_compliant,
            "not_migrated": summary.not_migrated,
            "average_score": summary.average_score,
        },
        "remediation": {
            "modules": [analysis.module_name for analysis in report.remediation.entries],
            "pending": report.remediation.pending,
            "limit": report.remediation.limit,
            "overflow": report.remediation.overflow,
        },
    }


def render_json(report: AggregateReport) -> str:
    return json.dumps(report_to_dict(report), indent=2, sort_keys=True) + "\n"


def _analysis_to_dict(analysis: ModuleAnalysis) -> Dict[str, object]:
    return {
        "module": analysis.module_name,
        "band": analysis.band.value if analysis.band else None,
        "score": analysis.score,
        "total_signatures": analysis.total_signature_count,
        "scoped_signatures": analysis.scoped_signature_count,
        "scoped_query_clauses": analysis.scoped_query_clause_count,
        "scoped_insert_clauses": analysis.scoped_insert_clause_count,
    }


__all__ = [
    "ASCII_GLYPHS",
    "BANNER",
    "EMOJI_GLYPHS",
    "ReportRenderer",
    "render_json",
    "report_to_dict",
]
