"""Core data models shared across tenantaudit components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ComplianceBand(str, Enum):
    """Remediation-priority tier derived from a module score."""

    COMPLIANT = "compliant"
    PARTIALLY_COMPLIANT = "partially_compliant"
    IN_PROGRESS = "in_progress"
    NOT_COMPLIANT = "not_compliant"


@dataclass(frozen=True)
class SourceModule:
    """A named unit of source text to analyze."""

    name: str
    content: str


@dataclass(frozen=True)
class SignatureCounts:
    """Raw per-category counts for one module."""

    total: int
    scoped_methods: int
    scoped_queries: int
    scoped_inserts: int


@dataclass(frozen=True)
class ModuleAnalysis:
    """Score and diagnostic counts for one module."""

    module_name: str
    total_signature_count: int
    scoped_signature_count: int
    scoped_query_clause_count: int
    scoped_insert_clause_count: int
    score: Optional[int]
    band: Optional[ComplianceBand]

    @property
    def is_scored(self) -> bool:
        return self.score is not None


@dataclass(frozen=True)
class ReportSummary:
    """Counts per band and the average score of scored modules."""

    total_scored: int = 0
    compliant: int = 0
    partial: int = 0
    in_progress: int = 0
    not_compliant: int = 0
    average_score: int = 0

    @property
    def not_migrated(self) -> int:
        """Modules scoring below 50, whether untouched or in progress."""
        return self.in_progress + self.not_compliant


@dataclass(frozen=True)
class RemediationList:
    """Modules below the compliant threshold, capped for display."""

    entries: Tuple[ModuleAnalysis, ...] = ()
    pending: int = 0
    limit: int = 0

    @property
    def overflow(self) -> int:
        return max(0, self.pending - self.limit)


@dataclass(frozen=True)
class AggregateReport:
    """Derived view of one analysis run, recomputed on every run."""

    modules: Tuple[ModuleAnalysis, ...] = ()
    summary: ReportSummary = field(default_factory=ReportSummary)
    remediation: RemediationList = field(default_factory=RemediationList)
