"""
Live browser session wrapper around a Playwright browser, context and page
"""

import itertools
from typing import Any, Optional, Union
import logging

from playwright.async_api import (
    Browser, BrowserContext, Error as PlaywrightError, Frame, Locator, Page,
    TimeoutError as PlaywrightTimeoutError,
)

from a11y_validator.errors import ElementNotFound, ElementWaitTimeout, NavigationError
from a11y_validator.models import BrowserName, LocatorKind

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1)


def xpath_literal(value: str) -> str:
    """Quote a value as an XPath 1.0 string literal; values with both quote kinds use concat()"""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = [f'"{part}"' for part in value.split('"')]
    return "concat(" + ", '\"', ".join(parts) + ")"


def css_string(value: str) -> str:
    """Quote a value as a CSS string; non-ASCII characters are kept as they are"""
    escaped = value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\a ')
    return f'"{escaped}"'


def to_selector(selector: str, kind: LocatorKind = LocatorKind.CSS) -> str:
    """
    Translate a lookup strategy into a Playwright selector string

    Args:
        selector: Selector value as written in the definition file
        kind: Lookup strategy

    Returns:
        Playwright selector
    """
    if kind == LocatorKind.XPATH:
        return f"xpath={selector}"
    if kind == LocatorKind.LINKTEXT:
        return f"xpath=//a[normalize-space(.)={xpath_literal(selector)}]"
    if kind == LocatorKind.NAME:
        return f"css=[name={css_string(selector)}]"
    if kind == LocatorKind.CLASSNAME:
        return f"css=[class~={css_string(selector)}]"
    if kind == LocatorKind.ID:
        return f"css=[id={css_string(selector)}]"
    return f"css={selector}"


class BrowserSession:
    """A single live browser with one page; all lookups happen in the current frame"""

    def __init__(self, browser_name: BrowserName, browser: Browser, context: BrowserContext, page: Page):
        self.id = next(_session_ids)
        self.browser_name = browser_name
        self.browser = browser
        self.context = context
        self.page = page
        self.frame: Frame = page.main_frame
        self.closed = False

    def __repr__(self) -> str:
        return f"<BrowserSession {self.id} {self.browser_name.value}>"

    async def navigate(self, url: str):
        try:
            await self.page.goto(url, wait_until='load')
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e}") from e
        self.frame = self.page.main_frame

    async def locate(self, selector: str, kind: LocatorKind = LocatorKind.CSS) -> Locator:
        """Return the first element matching selector, failing at once if there is none"""
        locator = self.frame.locator(to_selector(selector, kind)).first
        try:
            count = await locator.count()
        except PlaywrightError as e:
            raise ElementNotFound(selector, message=f"Invalid selector [{selector}]: {e}") from e
        if count == 0:
            raise ElementNotFound(selector)
        return locator

    async def wait_for(self, selector: str, timeout_ms: int):
        try:
            await self.frame.wait_for_selector(to_selector(selector), state='attached', timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementWaitTimeout(selector, timeout_ms) from e
        except PlaywrightError as e:
            raise ElementNotFound(selector, timeout_ms, message=f"Could not wait for [{selector}]: {e}") from e

    async def click(self, element: Locator):
        await element.click()

    async def send_keys(self, element: Locator, text: str):
        await element.press_sequentially(text)

    async def press(self, element: Locator, key: str):
        await element.press(key)

    async def switch_to_frame(self, frame: Union[str, int]):
        """Switch into a child frame by index, name or id"""
        target: Optional[Frame] = None
        children = self.frame.child_frames
        if isinstance(frame, int) or (isinstance(frame, str) and frame.isdigit()):
            index = int(frame)
            if 0 <= index < len(children):
                target = children[index]
        else:
            target = next((child for child in children if child.name == frame), None)
            if target is None:
                handle = await self.frame.query_selector(
                    f"iframe[id={css_string(frame)}], frame[id={css_string(frame)}]"
                )
                if handle is not None:
                    target = await handle.content_frame()
        if target is None:
            raise ElementNotFound(str(frame), message=f"No frame named or indexed [{frame}]")
        self.frame = target

    async def switch_to_default(self):
        self.frame = self.page.main_frame

    async def sleep(self, duration_ms: int):
        await self.page.wait_for_timeout(duration_ms)

    async def set_script_timeout(self, timeout_ms: int):
        self.page.set_default_timeout(timeout_ms)

    async def inject_script(self, url: Optional[str] = None, path: Optional[str] = None):
        await self.frame.add_script_tag(url=url, path=path)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.frame.evaluate(script, arg)

    async def quit(self):
        """Close context and browser"""
        self.closed = True
        try:
            await self.context.close()
        finally:
            await self.browser.close()
