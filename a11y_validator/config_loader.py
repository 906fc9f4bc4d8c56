"""
Configuration loader for YAML config files
"""

import yaml
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Any, Mapping, Optional, Tuple
import logging
import os

from a11y_validator.errors import ConfigurationError
from a11y_validator.models import BrowserName

logger = logging.getLogger(__name__)

DEFAULT_AXE_SCRIPT_URL = "https://unpkg.com/axe-core@4.8.2/axe.min.js"


@dataclass(frozen=True)
class ValidatorConfig:
    """Run-wide settings, built once at startup"""
    name: str = "a11y-validator"
    browser: BrowserName = BrowserName.CHROME
    headless: bool = True
    reuse_browsers: bool = False
    timeout: int = 60000
    wait_timeout: int = 20000
    settle_delay: int = 3000
    tags: Tuple[str, ...] = ("wcag2a", "wcag2aa")
    chrome_binary: Optional[str] = None
    firefox_binary: Optional[str] = None
    assert_warnings: bool = False
    detailed_report: bool = False
    debug: bool = False
    axe_script_url: str = DEFAULT_AXE_SCRIPT_URL
    axe_script_path: Optional[str] = None

    def binary_for(self, browser: BrowserName) -> Optional[str]:
        if browser == BrowserName.FIREFOX:
            return self.firefox_binary
        return self.chrome_binary

    def with_overrides(self, **overrides: Any) -> "ValidatorConfig":
        """Return a copy with the non-None overrides applied"""
        values = {k: v for k, v in overrides.items() if v is not None}
        return ConfigLoader.from_dict(values, base=self)


def parse_bool(value: Any, name: str) -> bool:
    """Parse true/false/yes/no/1/0"""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ('true', 'yes', '1'):
        return True
    if text in ('false', 'no', '0'):
        return False
    raise ConfigurationError(f"{name} should be either true or false, got '{value}'")


def parse_list(value: Any) -> Tuple[str, ...]:
    """Comma separated string or list to a tuple of stripped items"""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(',')
    else:
        items = [str(item) for item in value]
    return tuple(item.strip() for item in items if item and item.strip())


def parse_browser(value: Any) -> BrowserName:
    if isinstance(value, BrowserName):
        return value
    try:
        return BrowserName(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unsupported browser '{value}'. Use one of: {', '.join(b.value for b in BrowserName)}"
        ) from None


def _parse_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} should be a number of milliseconds, got '{value}'") from None


_PARSERS = {
    'name': str,
    'browser': parse_browser,
    'headless': lambda v: parse_bool(v, 'headless'),
    'reuse_browsers': lambda v: parse_bool(v, 'reuse_browsers'),
    'timeout': lambda v: _parse_int(v, 'timeout'),
    'wait_timeout': lambda v: _parse_int(v, 'wait_timeout'),
    'settle_delay': lambda v: _parse_int(v, 'settle_delay'),
    'tags': parse_list,
    'chrome_binary': str,
    'firefox_binary': str,
    'assert_warnings': lambda v: parse_bool(v, 'assert_warnings'),
    'detailed_report': lambda v: parse_bool(v, 'detailed_report'),
    'debug': lambda v: parse_bool(v, 'debug'),
    'axe_script_url': str,
    'axe_script_path': str,
}

# Environment variable -> config key
ENV_VARIABLES = {
    'NAME': 'name',
    'BROWSER': 'browser',
    'HEADLESS': 'headless',
    'REUSE_BROWSERS': 'reuse_browsers',
    'TIMEOUT': 'timeout',
    'WAIT_TIMEOUT': 'wait_timeout',
    'TAGS': 'tags',
    'CHROME_BINARY': 'chrome_binary',
    'FIREFOX_BINARY': 'firefox_binary',
    'ASSERT_WARNINGS': 'assert_warnings',
    'DETAILED_REPORT': 'detailed_report',
    'DEBUG': 'debug',
    'AXE_SCRIPT_URL': 'axe_script_url',
    'AXE_SCRIPT_PATH': 'axe_script_path',
}


class ConfigLoader:
    """Loads and manages configuration"""

    @staticmethod
    def load_config(config_path: str = None, environ: Mapping[str, str] = None) -> ValidatorConfig:
        """
        Load configuration from YAML file

        Args:
            config_path: Path to config file (optional)
            environ: Environment mapping used for overrides (defaults to os.environ)

        Returns:
            Immutable ValidatorConfig
        """
        config: Dict[str, Any] = {}

        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise ConfigurationError(f"Config file not found: {path}")
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Error loading config from {config_path}: {e}") from e
            if not isinstance(config, dict):
                raise ConfigurationError(f"Config file {config_path} must contain a mapping")
            logger.info(f"Loaded configuration from {config_path}")

        # Override with environment variables
        config = ConfigLoader._apply_env_overrides(config, os.environ if environ is None else environ)

        return ConfigLoader.from_dict(config)

    @staticmethod
    def from_dict(values: Mapping[str, Any], base: ValidatorConfig = None) -> ValidatorConfig:
        """Build a config from plain values, validating each one"""
        parsed = {}
        for key, value in values.items():
            parser = _PARSERS.get(key)
            if parser is None:
                logger.warning(f"Ignoring unknown configuration key '{key}'")
                continue
            parsed[key] = parser(value)
        return replace(base or ValidatorConfig(), **parsed)

    @staticmethod
    def _apply_env_overrides(config: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        config = dict(config)
        for variable, key in ENV_VARIABLES.items():
            value = environ.get(variable)
            if value:
                config[key] = value
        return config

    @staticmethod
    def describe(config: ValidatorConfig) -> Dict[str, Any]:
        """Flat view of the effective configuration, for debug logging"""
        return {
            'NAME': config.name,
            'BROWSER': config.browser.value,
            'HEADLESS': config.headless,
            'REUSE_BROWSERS': config.reuse_browsers,
            'TIMEOUT': config.timeout,
            'WAIT_TIMEOUT': config.wait_timeout,
            'TAGS': ','.join(config.tags),
            'DETAILED_REPORT': config.detailed_report,
            'ASSERT_WARNINGS': config.assert_warnings,
        }
