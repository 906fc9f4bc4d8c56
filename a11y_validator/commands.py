"""
Command interpreter: plays back a page's pre-validation commands against a session
"""

import time
from typing import Any, Iterable, Optional
import logging

from a11y_validator.errors import MalformedStepError
from a11y_validator.models import (
    ClickAndWait, ClickOn, CommandStep, Find, Keyboard, Pause, SelectOption,
    Sleep, SwitchFrame, Type, WaitFor,
)

logger = logging.getLogger(__name__)

# Symbolic key names -> Playwright key names. "null" releases modifiers and sends nothing.
KEY_NAMES = {
    'tab': 'Tab',
    'enter': 'Enter',
    'esc': 'Escape',
    'delete': 'Delete',
    'backspace': 'Backspace',
    'ctrl': 'Control',
    'alt': 'Alt',
    'shift': 'Shift',
    'command': 'Meta',
    'null': None,
}


def resolve_key(key: str, key_combo: Optional[str] = None) -> Optional[str]:
    """
    Map a key name from a definition file to a Playwright key

    Args:
        key: Symbolic key name, 'combo', or a literal character
        key_combo: Comma separated keys, used when key is 'combo'

    Returns:
        Key or chord (e.g. 'Control+a'), or None for the null key
    """
    name = key.lower()
    if name == 'combo':
        if not key_combo:
            raise MalformedStepError("Key type 'combo' requires keyCombo")
        parts = [resolve_key(part.strip()) for part in key_combo.split(',') if part.strip()]
        return '+'.join(part for part in parts if part)
    if name in KEY_NAMES:
        return KEY_NAMES[name]
    return key


def busy_wait(duration_ms: int):
    """Spin the current thread for duration_ms; nothing else runs meanwhile"""
    stop = time.monotonic() + duration_ms / 1000.0
    while time.monotonic() < stop:
        pass


class CommandInterpreter:
    """Maps command steps to browser actions"""

    def __init__(self, wait_timeout: int):
        """
        Args:
            wait_timeout: Default timeout in ms for waitFor-style commands
        """
        self.wait_timeout = wait_timeout
        self._handlers = {
            WaitFor: self._wait_for,
            ClickOn: self._click_on,
            Pause: self._pause,
            Sleep: self._sleep,
            Find: self._find,
            SelectOption: self._select_option,
            Type: self._type,
            Keyboard: self._keyboard,
            SwitchFrame: self._switch_frame,
            ClickAndWait: self._click_and_wait,
        }

    async def run_chain(self, session, steps: Iterable[CommandStep]):
        """Execute steps in order; the first failure propagates and stops the chain"""
        for index, step in enumerate(steps):
            logger.debug(f"Command {index + 1}: {step}")
            await self.execute(session, step)

    async def execute(self, session, step: CommandStep) -> Any:
        handler = self._handlers.get(type(step))
        if handler is None:
            raise MalformedStepError(f"Unsupported command: {step!r}")
        return await handler(session, step)

    async def _wait_for(self, session, step: WaitFor):
        timeout = step.timeout if step.timeout is not None else self.wait_timeout
        await session.wait_for(step.selector, timeout)

    async def _click_on(self, session, step: ClickOn):
        element = await session.locate(step.selector)
        await session.click(element)

    async def _pause(self, session, step: Pause):
        busy_wait(step.duration_ms)

    async def _sleep(self, session, step: Sleep):
        await session.sleep(step.duration_ms)

    async def _find(self, session, step: Find) -> bool:
        element = await session.locate(step.selector, step.selector_type)
        return await element.is_visible()

    async def _select_option(self, session, step: SelectOption):
        # Types the visible text; the browser picks the option the keystrokes land on.
        element = await session.locate(step.from_selector)
        await session.send_keys(element, step.option_text)

    async def _type(self, session, step: Type):
        element = await session.locate(step.into_selector)
        await session.send_keys(element, step.text)
        if step.key:
            await self._keyboard(session, Keyboard(key_type=step.key, element_selector=step.into_selector))

    async def _keyboard(self, session, step: Keyboard):
        element = await session.locate(step.element_selector)
        key = resolve_key(step.key_type, step.key_combo)
        if key is None:
            return
        await session.press(element, key)

    async def _switch_frame(self, session, step: SwitchFrame):
        if step.frame == 'default':
            await session.switch_to_default()
        else:
            await session.switch_to_frame(step.frame)

    async def _click_and_wait(self, session, step: ClickAndWait):
        await self._click_on(session, ClickOn(selector=step.click_selector))
        await self._wait_for(session, WaitFor(selector=step.wait_selector))
