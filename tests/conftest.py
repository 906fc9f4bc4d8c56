"""
Shared fakes: browser sessions that record calls, and a stub axe-core scanner
"""

import itertools
from typing import Any, Dict, List, Optional, Set

import pytest

from a11y_validator.config_loader import ValidatorConfig
from a11y_validator.errors import ElementNotFound, ElementWaitTimeout, NavigationError
from a11y_validator.models import BrowserName, LocatorKind, ScanResult


class FakeElement:
    def __init__(self, session: "FakeSession", selector: str):
        self.session = session
        self.selector = selector

    async def is_visible(self) -> bool:
        return self.selector not in self.session.hidden


class FakeSession:
    """Stands in for BrowserSession; every call is appended to ``calls``"""

    _ids = itertools.count(1)

    def __init__(self, browser_name: BrowserName = BrowserName.CHROME,
                 missing: Optional[Set[str]] = None, log: Optional[List] = None):
        self.id = next(self._ids)
        self.browser_name = browser_name
        self.missing = set(missing or ())
        self.hidden: Set[str] = set()
        self.failing_urls: Set[str] = set()
        self.calls: List[tuple] = []
        self.shared_log = log
        self.quit_count = 0
        self.quit_error: Optional[Exception] = None
        self.url: Optional[str] = None

    def _record(self, *call):
        self.calls.append(call)
        if self.shared_log is not None:
            self.shared_log.append((self.id,) + call)

    async def navigate(self, url: str):
        self._record('navigate', url)
        if url in self.failing_urls:
            raise NavigationError(f"Failed to load {url}")
        self.url = url

    async def locate(self, selector: str, kind: LocatorKind = LocatorKind.CSS):
        self._record('locate', selector, kind)
        if selector in self.missing:
            raise ElementNotFound(selector)
        return FakeElement(self, selector)

    async def wait_for(self, selector: str, timeout_ms: int):
        self._record('wait_for', selector, timeout_ms)
        if selector in self.missing:
            raise ElementWaitTimeout(selector, timeout_ms)

    async def click(self, element: FakeElement):
        self._record('click', element.selector)

    async def send_keys(self, element: FakeElement, text: str):
        self._record('send_keys', element.selector, text)

    async def press(self, element: FakeElement, key: str):
        self._record('press', element.selector, key)

    async def switch_to_frame(self, frame):
        self._record('switch_to_frame', frame)

    async def switch_to_default(self):
        self._record('switch_to_default')

    async def sleep(self, duration_ms: int):
        self._record('sleep', duration_ms)

    async def set_script_timeout(self, timeout_ms: int):
        self._record('set_script_timeout', timeout_ms)

    async def quit(self):
        self.quit_count += 1
        self._record('quit')
        if self.quit_error is not None:
            raise self.quit_error


class FakeSessionFactory:
    """Session factory for BrowserManager that keeps every session it made"""

    def __init__(self, missing: Optional[Set[str]] = None, log: Optional[List] = None):
        self.missing = set(missing or ())
        self.log = log
        self.created: List[FakeSession] = []

    async def __call__(self, browser_name: BrowserName) -> FakeSession:
        session = FakeSession(browser_name, missing=self.missing, log=self.log)
        self.created.append(session)
        return session


def make_rule(rule_id: str, nodes: int, impact: str = 'serious', tags=None) -> Dict[str, Any]:
    return {
        'id': rule_id,
        'impact': impact,
        'help': f'{rule_id} help',
        'helpUrl': f'https://dequeuniversity.com/rules/axe/4.8/{rule_id}',
        'tags': tags or ['wcag2a'],
        'nodes': [
            {
                'html': f'<div id="{rule_id}-{i}"></div>',
                'target': [f'#{rule_id}-{i}'],
                'any': [{'message': f'{rule_id} message {i}', 'relatedNodes': []}],
                'all': [],
                'none': [],
            }
            for i in range(nodes)
        ],
    }


class StubScanner:
    """Returns canned scan results keyed by the session's current URL"""

    def __init__(self, results: Optional[Dict[str, ScanResult]] = None, error: Optional[Exception] = None):
        self.results = results or {}
        self.error = error
        self.calls: List[tuple] = []

    async def analyze(self, session, tags, disabled_rules) -> ScanResult:
        self.calls.append((session.url, tuple(tags), tuple(disabled_rules)))
        if session.shared_log is not None:
            session.shared_log.append((session.id, 'analyze', session.url))
        if self.error is not None:
            raise self.error
        return self.results.get(session.url, ScanResult())


@pytest.fixture
def config() -> ValidatorConfig:
    return ValidatorConfig(settle_delay=0, wait_timeout=500, timeout=1000)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
