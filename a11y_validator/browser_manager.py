"""
Browser management using Playwright
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional
import logging

from playwright.async_api import async_playwright, Playwright

from a11y_validator.browser_session import BrowserSession
from a11y_validator.config_loader import ValidatorConfig
from a11y_validator.errors import SessionTeardownError
from a11y_validator.models import BrowserName, PageOptions

logger = logging.getLogger(__name__)

# Sandbox-safe defaults for containers and CI
CHROMIUM_ARGS = [
    '--no-sandbox',
    '--allow-running-insecure-content',
    '--disable-dev-shm-usage',
    '--disable-software-rasterizer',
]

SessionFactory = Callable[[BrowserName], Awaitable[BrowserSession]]


class BrowserManager:
    """Creates, caches and tears down browser sessions"""

    def __init__(self, config: ValidatorConfig, session_factory: Optional[SessionFactory] = None):
        """
        Initialize browser manager

        Args:
            config: Run configuration (headless flag, binaries, reuse policy)
            session_factory: Coroutine function creating a session for a browser name.
                Defaults to launching a Playwright browser.
        """
        self.config = config
        self.session_factory = session_factory or self._launch
        self.playwright: Optional[Playwright] = None
        # every session created during the run, in creation order
        self.sessions: List[BrowserSession] = []
        # reusable sessions keyed by browser name
        self.cache: Dict[str, BrowserSession] = {}

    def resolve_browser(self, options: Optional[PageOptions]) -> BrowserName:
        if options is not None and options.browser is not None:
            return options.browser
        return self.config.browser

    def wants_reuse(self, options: Optional[PageOptions]) -> bool:
        return bool(self.config.reuse_browsers or (options is not None and options.reuse_browser))

    async def acquire(self, options: Optional[PageOptions] = None) -> BrowserSession:
        """
        Get a session for a page

        Args:
            options: Page options (browser override, reuse flag)

        Returns:
            A cached session when reuse is requested and one exists, else a new session
        """
        browser_name = self.resolve_browser(options)
        if self.wants_reuse(options):
            cached = self.cache.get(browser_name.value)
            if cached is not None:
                logger.debug(f"Reusing {cached}")
                return cached
            session = await self._create(browser_name)
            self.cache[browser_name.value] = session
            return session
        return await self._create(browser_name)

    async def _create(self, browser_name: BrowserName) -> BrowserSession:
        session = await self.session_factory(browser_name)
        self.sessions.append(session)
        logger.info(f"Started {browser_name.value} browser (session {session.id})")
        return session

    async def start(self):
        """Start the Playwright driver"""
        if not self.playwright:
            self.playwright = await async_playwright().start()

    async def _launch(self, browser_name: BrowserName) -> BrowserSession:
        await self.start()
        binary = self.config.binary_for(browser_name)
        launch_args = {'headless': self.config.headless}
        if binary:
            launch_args['executable_path'] = binary
            logger.info(f"{browser_name.value} running with binary: {binary}")

        try:
            if browser_name == BrowserName.FIREFOX:
                browser = await self.playwright.firefox.launch(**launch_args)
            else:
                browser = await self.playwright.chromium.launch(args=CHROMIUM_ARGS, **launch_args)
        except Exception as e:
            error_msg = str(e)
            # Check if this is a Playwright browser installation issue
            if "Executable doesn't exist" in error_msg or "playwright install" in error_msg.lower():
                logger.error("Playwright browsers are not installed. Please run: playwright install")
                raise RuntimeError(
                    "Playwright browsers are not installed. "
                    f"Please run: playwright install {'firefox' if browser_name == BrowserName.FIREFOX else 'chromium'}"
                ) from None
            raise

        context = await browser.new_context(ignore_https_errors=True)
        page = await context.new_page()
        return BrowserSession(browser_name, browser, context, page)

    async def close_all(self):
        """
        Quit every session created during the run

        Each session is quit once; sessions are dropped from the registry before quitting
        so a second call is a no-op. Individual failures are collected and raised together
        as a SessionTeardownError.
        """
        sessions, self.sessions = self.sessions, []
        self.cache.clear()

        logger.info(f"Closing {len(sessions)} browsers.")
        outcomes = await asyncio.gather(*(session.quit() for session in sessions), return_exceptions=True)
        errors = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]

        if self.playwright:
            playwright, self.playwright = self.playwright, None
            try:
                await playwright.stop()
            except Exception as e:
                errors.append(e)

        if errors:
            raise SessionTeardownError(errors)
