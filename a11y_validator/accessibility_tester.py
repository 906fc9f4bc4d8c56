"""
Accessibility testing using axe-core via Playwright
"""

import asyncio
from typing import Any, Dict, Iterable, Optional
import logging

from a11y_validator.errors import ScanInvocationError
from a11y_validator.models import ScanResult

logger = logging.getLogger(__name__)

AXE_RUN_SCRIPT = """async ({tags, disabledRules}) => {
    const rules = {};
    for (const id of disabledRules) {
        rules[id] = {enabled: false};
    }
    const options = {rules, resultTypes: ['violations', 'incomplete']};
    if (tags.length) {
        options.runOnly = {type: 'tag', values: tags};
    }
    const results = await axe.run(document, options);
    return {violations: results.violations, incomplete: results.incomplete};
}"""


class AccessibilityTester:
    """Runs accessibility tests using axe-core"""

    def __init__(self, script_url: Optional[str] = None, script_path: Optional[str] = None,
                 timeout: float = 60.0):
        """
        Initialize accessibility tester

        Args:
            script_url: URL to load axe-core from
            script_path: Local axe.min.js, preferred over script_url when set
            timeout: Seconds to wait for axe.run before giving up
        """
        if not script_url and not script_path:
            raise ValueError("Either script_url or script_path is required")
        self.script_url = script_url
        self.script_path = script_path
        self.timeout = timeout

    async def analyze(self, session, tags: Iterable[str], disabled_rules: Iterable[str]) -> ScanResult:
        """
        Run axe-core against the session's current page

        Args:
            session: Browser session
            tags: Rule tags to run; empty runs every rule
            disabled_rules: Rule ids to switch off

        Returns:
            ScanResult with violations and incomplete (warning) entries
        """
        try:
            # Check if axe is already injected
            axe_loaded = await session.evaluate("() => typeof window.axe !== 'undefined'")
            if not axe_loaded:
                if self.script_path:
                    await session.inject_script(path=self.script_path)
                else:
                    await session.inject_script(url=self.script_url)

            # Run axe with timeout to prevent hanging
            results = await asyncio.wait_for(
                session.evaluate(AXE_RUN_SCRIPT, {'tags': list(tags), 'disabledRules': list(disabled_rules)}),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ScanInvocationError(f"axe-core did not finish within {self.timeout}s") from e
        except Exception as e:
            raise ScanInvocationError(f"axe-core failed: {e}") from e

        return self._to_scan_result(results)

    @staticmethod
    def _to_scan_result(results: Any) -> ScanResult:
        if not isinstance(results, dict):
            raise ScanInvocationError(f"Unexpected axe-core result: {results!r}")
        violations = results.get('violations') or []
        incomplete = results.get('incomplete') or []
        logger.info(f"Found {len(violations)} violated rules and {len(incomplete)} incomplete rules")
        for rule in violations:
            logger.debug(f"Violation: {AccessibilityTester.summarize(rule)}")
        for rule in incomplete:
            logger.debug(f"Incomplete: {AccessibilityTester.summarize(rule)}")
        return ScanResult(violations=list(violations), incomplete=list(incomplete))

    @staticmethod
    def summarize(rule: Dict[str, Any]) -> Dict[str, Any]:
        """Compact view of one rule result, used in debug logs"""
        return {
            'id': rule.get('id', ''),
            'impact': rule.get('impact', ''),
            'help': rule.get('help', ''),
            'nodes': len(rule.get('nodes', [])),
        }
