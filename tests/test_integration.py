"""
Runs the command interpreter against a real Playwright browser.

Skipped unless A11Y_VALIDATOR_BROWSER_TESTS=1 and the browsers are installed
(playwright install chromium).
"""

import os
from urllib.parse import quote

import pytest
import pytest_asyncio

from a11y_validator.browser_manager import BrowserManager
from a11y_validator.commands import CommandInterpreter
from a11y_validator.config_loader import ValidatorConfig
from a11y_validator.errors import ElementNotFound
from a11y_validator.models import ClickOn, Find, LocatorKind, PageOptions, SelectOption, Type, WaitFor

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(os.environ.get('A11Y_VALIDATOR_BROWSER_TESTS') != '1',
                       reason='set A11Y_VALIDATOR_BROWSER_TESTS=1 to run browser tests'),
]

PAGE = """<!DOCTYPE html>
<html lang="en"><body>
<main id="main">
  <select id="typeSelect">
    <option value="a">a</option>
    <option value="b">b</option>
    <option value="c">c</option>
  </select>
  <input id="q" aria-label="Search">
  <a href="#more">Read more</a>
</main>
</body></html>"""


@pytest_asyncio.fixture
async def live_session():
    manager = BrowserManager(ValidatorConfig(headless=True))
    session = await manager.acquire(PageOptions())
    await session.navigate('data:text/html,' + quote(PAGE))
    yield session
    await manager.close_all()


@pytest.mark.asyncio
async def test_select_option_by_typing(live_session):
    await CommandInterpreter(2000).execute(live_session, SelectOption(from_selector='#typeSelect', option_text='c'))
    assert await live_session.evaluate("() => document.querySelector('#typeSelect').value") == 'c'


@pytest.mark.asyncio
async def test_select_unknown_option_keeps_first(live_session):
    await CommandInterpreter(2000).execute(live_session, SelectOption(from_selector='#typeSelect', option_text='x'))
    assert await live_session.evaluate("() => document.querySelector('#typeSelect').value") == 'a'


@pytest.mark.asyncio
async def test_type_and_find(live_session):
    interpreter = CommandInterpreter(2000)
    await interpreter.run_chain(live_session, [
        WaitFor(selector='#main'),
        Type(into_selector='#q', text='axe'),
    ])
    assert await live_session.evaluate("() => document.querySelector('#q').value") == 'axe'
    assert await interpreter.execute(live_session, Find(selector='Read more', selector_type=LocatorKind.LINKTEXT))


@pytest.mark.asyncio
async def test_missing_element(live_session):
    with pytest.raises(ElementNotFound):
        await CommandInterpreter(2000).execute(live_session, ClickOn(selector='#missing'))
