"""Compliance score computation and band classification."""

from __future__ import annotations

import math
from typing import Optional

from .models import ComplianceBand, ModuleAnalysis, SignatureCounts

COMPLIANT_THRESHOLD = 80
PARTIAL_THRESHOLD = 50


def round_half_up(value: float) -> int:
    """Round non-negative ``value`` to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))


def compute_score(counts: SignatureCounts) -> Optional[int]:
    """Return the 0-100 score, or None when the module has no signatures."""
    if counts.total <= 0:
        return None
    return round_half_up(counts.scoped_methods / counts.total * 100)


def classify(score: int) -> ComplianceBand:
    if score >= COMPLIANT_THRESHOLD:
        return ComplianceBand.COMPLIANT
    if score >= PARTIAL_THRESHOLD:
        return ComplianceBand.PARTIALLY_COMPLIANT
    if score > 0:
        return ComplianceBand.IN_PROGRESS
    return ComplianceBand.NOT_COMPLIANT


def analyze_module(module_name: str, counts: SignatureCounts) -> ModuleAnalysis:
    """Build the analysis record for one module.

    Only signature-level scoping enters the score. Clause counts are carried
    through for display.
    """
    score = compute_score(counts)
    return ModuleAnalysis(
        module_name=module_name,
        total_signature_count=counts.total,
        scoped_signature_count=counts.scoped_methods,
        scoped_query_clause_count=counts.scoped_queries,
        scoped_insert_clause_count=counts.scoped_inserts,
        score=score,
        band=classify(score) if score is not None else None,
    )


__all__ = [
    "COMPLIANT_THRESHOLD",
    "PARTIAL_THRESHOLD",
    "analyze_module",
    "classify",
    "compute_score",
    "round_half_up",
]
