"""
Tests for configuration loading and environment overrides
"""

import pytest

from a11y_validator.config_loader import ConfigLoader, ValidatorConfig, parse_bool, parse_browser, parse_list
from a11y_validator.errors import ConfigurationError
from a11y_validator.models import BrowserName


def test_defaults():
    config = ConfigLoader.load_config(environ={})

    assert config == ValidatorConfig()
    assert config.browser == BrowserName.CHROME
    assert config.headless is True
    assert config.timeout == 60000
    assert config.wait_timeout == 20000
    assert config.settle_delay == 3000
    assert config.tags == ('wcag2a', 'wcag2aa')
    assert config.reuse_browsers is False


def test_yaml_file_then_environment(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(
        "browser: firefox\n"
        "timeout: 1000\n"
        "tags: [wcag2a]\n"
        "firefox_binary: /opt/firefox/firefox\n",
        encoding='utf-8',
    )

    config = ConfigLoader.load_config(str(path), environ={'TIMEOUT': '2500', 'HEADLESS': 'no'})

    assert config.browser == BrowserName.FIREFOX
    assert config.timeout == 2500
    assert config.headless is False
    assert config.tags == ('wcag2a',)
    assert config.binary_for(BrowserName.FIREFOX) == '/opt/firefox/firefox'
    assert config.binary_for(BrowserName.CHROME) is None


def test_environment_tags_and_reuse():
    config = ConfigLoader.load_config(environ={
        'TAGS': 'wcag2aa, best-practice',
        'REUSE_BROWSERS': 'true',
        'BROWSER': 'Firefox',
    })
    assert config.tags == ('wcag2aa', 'best-practice')
    assert config.reuse_browsers is True
    assert config.browser == BrowserName.FIREFOX


def test_empty_environment_values_are_ignored():
    assert ConfigLoader.load_config(environ={'TIMEOUT': ''}).timeout == 60000


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError, match='not found'):
        ConfigLoader.load_config(str(tmp_path / 'missing.yaml'), environ={})


def test_config_file_must_be_mapping(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('- a\n- b\n', encoding='utf-8')
    with pytest.raises(ConfigurationError, match='mapping'):
        ConfigLoader.load_config(str(path), environ={})


def test_invalid_values_are_rejected():
    with pytest.raises(ConfigurationError, match='headless'):
        ConfigLoader.load_config(environ={'HEADLESS': 'maybe'})
    with pytest.raises(ConfigurationError, match='timeout'):
        ConfigLoader.load_config(environ={'TIMEOUT': 'soon'})
    with pytest.raises(ConfigurationError, match='Unsupported browser'):
        ConfigLoader.load_config(environ={'BROWSER': 'opera'})


def test_unknown_keys_are_ignored(caplog):
    config = ConfigLoader.from_dict({'colour': 'blue', 'debug': 'yes'})
    assert config.debug is True
    assert "Ignoring unknown configuration key 'colour'" in caplog.text


def test_with_overrides_skips_none():
    base = ValidatorConfig(timeout=1000)
    config = base.with_overrides(headless=False, browser=None, detailed_report=True)

    assert config.timeout == 1000
    assert config.headless is False
    assert config.browser == BrowserName.CHROME
    assert config.detailed_report is True
    assert base.headless is True


def test_describe():
    view = ConfigLoader.describe(ValidatorConfig())
    assert view['BROWSER'] == 'chrome'
    assert view['TAGS'] == 'wcag2a,wcag2aa'
    assert view['TIMEOUT'] == 60000


@pytest.mark.parametrize('value,expected', [
    ('yes', True), ('TRUE', True), ('1', True), (True, True),
    ('no', False), ('false', False), ('0', False), (False, False),
])
def test_parse_bool(value, expected):
    assert parse_bool(value, 'flag') is expected


def test_parse_list():
    assert parse_list('a, b,,c ') == ('a', 'b', 'c')
    assert parse_list(['x', 'y']) == ('x', 'y')
    assert parse_list(None) == ()


def test_parse_browser_accepts_enum():
    assert parse_browser(BrowserName.FIREFOX) is BrowserName.FIREFOX
    assert parse_browser(' chrome ') is BrowserName.CHROME
