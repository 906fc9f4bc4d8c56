"""
Page validation loop: drives every page of a definition through the browser and axe-core
"""

from enum import Enum
from typing import Awaitable, List, Optional, Tuple, TypeVar
import logging

from a11y_validator import results as aggregate
from a11y_validator.accessibility_tester import AccessibilityTester
from a11y_validator.auth import AuthenticationDelegate
from a11y_validator.browser_manager import BrowserManager
from a11y_validator.commands import CommandInterpreter
from a11y_validator.config_loader import ValidatorConfig
from a11y_validator.errors import SessionTeardownError
from a11y_validator.fatal import FatalExitHandler
from a11y_validator.models import Definition, PageDefinition, PageResult

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RunState(str, Enum):
    """Where the validation loop currently is"""
    IDLE = "idle"
    ACQUIRING = "acquiring"
    AUTHENTICATING = "authenticating"
    NAVIGATING = "navigating"
    RUNNING_COMMANDS = "running-commands"
    SCANNING = "scanning"
    RECORDING = "recording"
    DONE = "done"


class Validator:
    """Validates the pages of a definition one after another"""

    def __init__(self, definition: Definition, config: ValidatorConfig,
                 browser_manager: Optional[BrowserManager] = None,
                 scanner: Optional[AccessibilityTester] = None,
                 interpreter: Optional[CommandInterpreter] = None,
                 auth: Optional[AuthenticationDelegate] = None):
        """
        Initialize validator

        Args:
            definition: Pages to validate, in order
            config: Run configuration
            browser_manager: Session manager (defaults to Playwright-backed)
            scanner: Accessibility engine adapter (defaults to axe-core)
            interpreter: Command interpreter (defaults to one using config.wait_timeout)
            auth: Authentication delegate loader
        """
        self.definition = definition
        self.config = config
        self.browser_manager = browser_manager or BrowserManager(config)
        self.scanner = scanner or AccessibilityTester(
            script_url=config.axe_script_url,
            script_path=config.axe_script_path,
            timeout=config.timeout / 1000.0,
        )
        self.interpreter = interpreter or CommandInterpreter(config.wait_timeout)
        self.auth = auth or AuthenticationDelegate()
        self.fatal = FatalExitHandler(self.browser_manager)
        self.state = RunState.IDLE
        self.index = 0
        # append-only, in page order
        self.results: List[PageResult] = []

    async def run(self) -> List[PageResult]:
        """
        Validate all pages, then close every browser

        Returns:
            One PageResult per page, in definition order

        Raises:
            SystemExit: on any fatal error, after all browsers are closed
        """
        pages = self.definition.links
        for index, page in enumerate(pages):
            self.index = index
            await self._validate_page(page)

        self.state = RunState.DONE
        try:
            await self.browser_manager.close_all()
        except SessionTeardownError as e:
            logger.error(f"Error occurred while trying to close browsers: {e}")

        return self.results

    async def _validate_page(self, page: PageDefinition):
        options = page.options

        self.state = RunState.ACQUIRING
        session = await self._guard(
            self.browser_manager.acquire(options),
            'An error occurred while trying to start a browser.',
        )

        logger.info(f"Setting browser timeout (ms): {self.config.timeout}")
        await self._guard(
            session.set_script_timeout(self.config.timeout),
            'An error occurred while trying to set the browser timeout.',
        )

        if options.auth is not None:
            self.state = RunState.AUTHENTICATING
            await self._guard(
                self.auth.authenticate(session, options.auth, page.link),
                'An error occurred while trying to authenticate page.',
            )

        self.state = RunState.NAVIGATING
        logger.info(f"Loading page: {page.name}")
        await self._guard(session.navigate(page.link), 'An error occurred while trying to load page.')
        if self.config.settle_delay > 0:
            await self._guard(session.sleep(self.config.settle_delay), 'An error occurred while trying to load page.')

        if options.commands:
            self.state = RunState.RUNNING_COMMANDS
            logger.info(f"Performing {len(options.commands)} pre-validation commands.")
            await self._guard(
                self.interpreter.run_chain(session, options.commands),
                'An error occurred while trying to run pre-validation tasks.',
            )

        self.state = RunState.SCANNING
        tags, disabled_rules = self.rule_selection(page)
        logger.info(f"Running validation with tags: {','.join(tags)}"
                    + (f" without rules: {','.join(disabled_rules)}" if disabled_rules else ""))
        scan = await self._guard(
            self.scanner.analyze(session, tags, disabled_rules),
            'An error occurred while running the validator.',
        )

        self.state = RunState.RECORDING
        self.results.append(PageResult(link=page.link, desc=page.desc, options=options, result=scan))

    def rule_selection(self, page: PageDefinition) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Tags and ignored rules for a page; page options win over run defaults"""
        tags = page.options.tags if page.options.tags else self.config.tags
        disabled_rules = page.options.ignore_rules or ()
        return tuple(tags), tuple(disabled_rules)

    async def _guard(self, operation: Awaitable[T], message: str) -> T:
        try:
            return await operation
        except Exception as e:
            await self.fatal.fail(message, e)

    # Result aggregation

    def violations_on_page(self, page: PageResult) -> int:
        return aggregate.violations_count(page)

    def warnings_on_page(self, page: PageResult) -> int:
        return aggregate.warnings_count(page)

    def validation_errors(self) -> int:
        return aggregate.total_violations(self.results)

    def warnings(self) -> int:
        return aggregate.total_warnings(self.results)

    def has_validation_errors(self) -> bool:
        return aggregate.has_violations(self.results)

    def has_warnings(self) -> bool:
        return aggregate.has_warnings(self.results)
