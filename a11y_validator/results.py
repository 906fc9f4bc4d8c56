"""
Aggregation helpers over validation results

Counts are occurrences: a rule matching three nodes counts three times.
"""

from typing import Any, Dict, Iterable, List

from a11y_validator.models import PageResult


def count_occurrences(rules: Iterable[Dict[str, Any]]) -> int:
    return sum(len(rule.get('nodes') or []) for rule in rules)


def violations_count(page: PageResult) -> int:
    return count_occurrences(page.result.violations)


def warnings_count(page: PageResult) -> int:
    return count_occurrences(page.result.incomplete)


def total_violations(results: List[PageResult]) -> int:
    return sum(violations_count(page) for page in results)


def total_warnings(results: List[PageResult]) -> int:
    return sum(warnings_count(page) for page in results)


def has_violations(results: List[PageResult]) -> bool:
    return total_violations(results) > 0


def has_warnings(results: List[PageResult]) -> bool:
    return total_warnings(results) > 0
