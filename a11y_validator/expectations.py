"""
Turns validation results into named pass/fail cases, one suite per page
"""

from typing import Callable, List
import logging

from a11y_validator import results as aggregate
from a11y_validator.errors import ConfigurationError
from a11y_validator.models import CaseResult, Expectation, PageResult, RunSummary

logger = logging.getLogger(__name__)


class ExpectationSuite:
    """Builds and evaluates the cases for a result set"""

    def __init__(self, name: str, assert_warnings: bool = False):
        """
        Args:
            name: Name of the parent suite
            assert_warnings: Also assert on warnings (incomplete results)
        """
        self.name = name
        self.assert_warnings = assert_warnings

    def evaluate(self, results: List[PageResult]) -> RunSummary:
        """
        Evaluate every page against its expectation

        Args:
            results: Validation results in page order

        Returns:
            RunSummary with pass/fail counts and the individual cases
        """
        summary = RunSummary()
        for page in results:
            for case in self.cases_for(page):
                if case.passed:
                    summary.passes += 1
                    summary.test_passes.append(case)
                else:
                    summary.fails += 1
                    summary.test_fails.append(case)
                    logger.debug(f"{self.name} > {case.suite} > {case.title}: {case.message}")
        return summary

    def cases_for(self, page: PageResult) -> List[CaseResult]:
        expect = page.options.test.expect if page.options.test else Expectation.PASS
        violations = aggregate.violations_count(page)
        warnings = aggregate.warnings_count(page)

        def case(title: str, check: Callable[[], bool], message: str) -> CaseResult:
            passed = check()
            return CaseResult(suite=page.name, title=title, passed=passed, message='' if passed else message)

        if expect == Expectation.PASS:
            cases = [case('should have no accessibility violations', lambda: violations == 0,
                          f'Accessibility violations found: {violations}')]
            if self.assert_warnings:
                cases.append(case('should have no accessibility warnings', lambda: warnings == 0,
                                  f'Accessibility warnings found: {warnings}'))
            return cases

        if expect == Expectation.FAIL:
            return [case('should have accessibility issues', lambda: violations + warnings > 0,
                         'Accessibility issues expected, none found.')]

        if expect == Expectation.FAIL_VIOLATIONS:
            return [case('should have accessibility violations', lambda: violations > 0,
                         'Accessibility violations expected, none found.')]

        if expect == Expectation.FAIL_WARNINGS and self.assert_warnings:
            return [case('should have accessibility warnings', lambda: warnings > 0,
                         'Accessibility warnings expected, none found.')]

        raise ConfigurationError(
            f"Expectation '{expect.value}' for {page.name} requires warnings to be asserted (--warnings)"
        )
