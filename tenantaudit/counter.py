"""Signature counting over module text."""

from __future__ import annotations

from .models import SignatureCounts
from .rules import PatternCategory, RuleSet


def count_signatures(content: str, rule_set: RuleSet) -> SignatureCounts:
    """Apply every rule in ``rule_set`` to ``content`` and return raw counts."""
    counts = {rule.category: rule.count(content) for rule in rule_set}
    total = counts[PatternCategory.METHOD_SIGNATURE]
    return SignatureCounts(
        total=total,
        scoped_methods=min(counts[PatternCategory.SCOPED_METHOD_SIGNATURE], total),
        scoped_queries=counts[PatternCategory.SCOPED_QUERY_CLAUSE],
        scoped_inserts=counts[PatternCategory.SCOPED_INSERT_CLAUSE],
    )


__all__ = ["count_signatures"]
