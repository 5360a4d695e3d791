"""Textual signature rules used to detect tenant scoping."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

DEFAULT_TENANT_PARAMETER = "tenantId"
DEFAULT_TENANT_COLUMN = "tenant_id"


class PatternCategory(str, Enum):
    """Kind of signature a rule detects."""

    METHOD_SIGNATURE = "method_signature"
    SCOPED_METHOD_SIGNATURE = "scoped_method_signature"
    SCOPED_QUERY_CLAUSE = "scoped_query_clause"
    SCOPED_INSERT_CLAUSE = "scoped_insert_clause"


@dataclass(frozen=True)
class PatternRule:
    """A category paired with the compiled pattern that detects it."""

    category: PatternCategory
    matcher: re.Pattern[str]

    def count(self, text: str) -> int:
        """Return the number of non-overlapping matches in ``text``."""
        return sum(1 for _ in self.matcher.finditer(text))


@dataclass(frozen=True)
class RuleSet:
    """Immutable, ordered collection of pattern rules."""

    rules: Tuple[PatternRule, ...]

    def __post_init__(self) -> None:
        seen = set()
        for rule in self.rules:
            if rule.category in seen:
                raise ValueError(f"Duplicate rule for category '{rule.category.value}'")
            seen.add(rule.category)
        missing = [category.value for category in PatternCategory if category not in seen]
        if missing:
            raise ValueError(f"Rule set is missing categories: {', '.join(missing)}")

    def rules_for(self, category: PatternCategory) -> PatternRule:
        for rule in self.rules:
            if rule.category is category:
                return rule
        raise KeyError(category)  # pragma: no cover - __post_init__ guarantees coverage

    def __iter__(self) -> Iterator[PatternRule]:
        return iter(self.rules)


def build_rule_set(
    tenant_parameter: str = DEFAULT_TENANT_PARAMETER,
    tenant_column: str = DEFAULT_TENANT_COLUMN,
) -> RuleSet:
    """Compile the rule set for the given tenant parameter and column names."""
    if not tenant_parameter or not tenant_column:
        raise ValueError("Tenant parameter and column names must be non-empty")

    param = re.escape(tenant_parameter)
    column = re.escape(tenant_column)

    # Method signatures are matched case-sensitively, clauses are not.
    return RuleSet(
        rules=(
            PatternRule(
                PatternCategory.METHOD_SIGNATURE,
                re.compile(r"async\s+\w+\s*\("),
            ),
            PatternRule(
                PatternCategory.SCOPED_METHOD_SIGNATURE,
                re.compile(rf"\basync\s+\w+\s*\([^)]*{param}[^)]*\)"),
            ),
            PatternRule(
                PatternCategory.SCOPED_QUERY_CLAUSE,
                re.compile(rf"WHERE[^;]*{column}\s*=", re.IGNORECASE),
            ),
            PatternRule(
                PatternCategory.SCOPED_INSERT_CLAUSE,
                re.compile(rf"INSERT\s+INTO[^(]*\([^)]*{column}[^)]*\)", re.IGNORECASE),
            ),
        )
    )


DEFAULT_RULE_SET = build_rule_set()


__all__ = [
    "DEFAULT_RULE_SET",
    "DEFAULT_TENANT_COLUMN",
    "DEFAULT_TENANT_PARAMETER",
    "PatternCategory",
    "PatternRule",
    "RuleSet",
    "build_rule_set",
]
