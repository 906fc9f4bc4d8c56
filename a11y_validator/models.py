"""
Data models for page definitions, command steps and validation results
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple, Union
from enum import Enum


class BrowserName(str, Enum):
    """Supported browser families"""
    CHROME = "chrome"
    FIREFOX = "firefox"


class Expectation(str, Enum):
    """Expected outcome of a page validation"""
    PASS = "pass"
    FAIL = "fail"
    FAIL_VIOLATIONS = "fail-violations"
    FAIL_WARNINGS = "fail-warnings"


class LocatorKind(str, Enum):
    """Element lookup strategies understood by the find command"""
    CSS = "css"
    XPATH = "xpath"
    LINKTEXT = "linktext"
    NAME = "name"
    CLASSNAME = "classname"
    ID = "id"

    @classmethod
    def parse(cls, value: Optional[str]) -> "LocatorKind":
        """Case-insensitive lookup, falling back to css"""
        if not value:
            return cls.CSS
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.CSS


# Command steps. The union below is the complete set of supported commands.

@dataclass(frozen=True)
class WaitFor:
    selector: str
    timeout: Optional[int] = None


@dataclass(frozen=True)
class ClickOn:
    selector: str


@dataclass(frozen=True)
class Pause:
    """Blocks the event loop for duration_ms (busy wait)"""
    duration_ms: int


@dataclass(frozen=True)
class Sleep:
    """Yields to the event loop for duration_ms"""
    duration_ms: int


@dataclass(frozen=True)
class Find:
    selector: str
    selector_type: LocatorKind = LocatorKind.CSS


@dataclass(frozen=True)
class SelectOption:
    from_selector: str
    option_text: str


@dataclass(frozen=True)
class Type:
    into_selector: str
    text: str
    key: Optional[str] = None


@dataclass(frozen=True)
class Keyboard:
    key_type: str
    key_combo: Optional[str] = None
    element_selector: str = "body"


@dataclass(frozen=True)
class SwitchFrame:
    frame: Union[str, int]


@dataclass(frozen=True)
class ClickAndWait:
    click_selector: str
    wait_selector: str


CommandStep = Union[
    WaitFor, ClickOn, Pause, Sleep, Find, SelectOption,
    Type, Keyboard, SwitchFrame, ClickAndWait,
]


@dataclass(frozen=True)
class AuthOptions:
    """Authentication delegate settings; extra keys are passed through untouched"""
    handler: Optional[str]
    extra: Dict[str, Any] = field(default_factory=dict)
    base_dir: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data['handler'] = self.handler
        return data


@dataclass(frozen=True)
class PageTest:
    expect: Expectation


@dataclass(frozen=True)
class PageOptions:
    """Per-page overrides; None means fall back to the run configuration"""
    browser: Optional[BrowserName] = None
    reuse_browser: Optional[bool] = None
    auth: Optional[AuthOptions] = None
    commands: Tuple[CommandStep, ...] = ()
    tags: Optional[Tuple[str, ...]] = None
    ignore_rules: Optional[Tuple[str, ...]] = None
    test: Optional[PageTest] = None


@dataclass(frozen=True)
class PageDefinition:
    """A page to validate"""
    link: str
    desc: Optional[str] = None
    options: PageOptions = field(default_factory=PageOptions)

    @property
    def name(self) -> str:
        return self.desc or self.link


@dataclass(frozen=True)
class Definition:
    """Loaded definition file contents"""
    links: Tuple[PageDefinition, ...] = ()
    base_dir: Optional[str] = None


@dataclass(frozen=True)
class ScanResult:
    """axe-core output for one page; entries are the engine's raw rule results"""
    violations: List[Dict[str, Any]] = field(default_factory=list)
    incomplete: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class PageResult:
    """Represents the validation result of a single page"""
    link: str
    desc: Optional[str]
    options: PageOptions
    result: ScanResult

    @property
    def name(self) -> str:
        return self.desc or self.link


@dataclass
class CaseResult:
    """A named pass/fail case generated from a page result"""
    suite: str
    title: str
    passed: bool
    message: str = ""


@dataclass
class RunSummary:
    """Counts handed to the process exit policy"""
    fails: int = 0
    passes: int = 0
    test_fails: List[CaseResult] = field(default_factory=list)
    test_passes: List[CaseResult] = field(default_factory=list)
