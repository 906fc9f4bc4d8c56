"""
Definition file loader: turns YAML page lists into PageDefinition objects
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
import logging

from a11y_validator.config_loader import parse_bool, parse_browser, parse_list
from a11y_validator.errors import ConfigurationError, MalformedStepError
from a11y_validator.models import (
    AuthOptions, ClickAndWait, ClickOn, CommandStep, Definition, Expectation, Find,
    Keyboard, LocatorKind, PageDefinition, PageOptions, PageTest, Pause,
    SelectOption, Sleep, SwitchFrame, Type, WaitFor,
)

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.yml', '.yaml', '.json')


class DefinitionLoader:
    """Reads definition files and validates their contents"""

    def load(self, definition_file: str) -> Definition:
        """
        Load a definition file

        Args:
            definition_file: Path to a .yml/.yaml/.json file

        Returns:
            Definition with the ordered page list
        """
        path = Path(definition_file).resolve()
        if not path.exists():
            raise ConfigurationError(f"The specified file was not found: {path}")
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise ConfigurationError(f"Unsupported definition file: {path.name}")

        logger.info(f"Loading definition file: {definition_file}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"An error occurred while loading definition file {path}: {e}") from e

        definition = self.parse(raw, base_dir=str(path.parent))
        logger.debug(f"Definition loaded: {definition}")
        return definition

    def parse(self, raw: Any, base_dir: Optional[str] = None) -> Definition:
        """Validate an already decoded definition object"""
        if raw is None:
            return Definition(links=(), base_dir=base_dir)
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                "Definition is not valid. Must be a mapping with a field named 'links'."
            )
        links = raw.get('links')
        if links is None:
            return Definition(links=(), base_dir=base_dir)
        if not isinstance(links, list):
            raise ConfigurationError(
                "Definition 'links' is not a list. "
                "Expected format: links: [ {link: 'http://abc.com'}, 'http://def.com', ... ]"
            )
        pages = tuple(self._parse_page(entry, base_dir) for entry in links)
        logger.info(f"Definition is validated OK ({len(pages)} pages).")
        return Definition(links=pages, base_dir=base_dir)

    def _parse_page(self, entry: Any, base_dir: Optional[str]) -> PageDefinition:
        if isinstance(entry, str):
            return PageDefinition(link=entry)
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Invalid input type. Must be a string or a mapping: {entry!r}")
        link = entry.get('link')
        if not link:
            raise ConfigurationError(f"Field 'link' is missing in: {dict(entry)!r}")
        if not isinstance(link, str):
            raise ConfigurationError(f"Value of field 'link' is not a string: {link!r}")
        desc = entry.get('desc')
        options = self._parse_options(entry.get('options') or {}, base_dir, link)
        return PageDefinition(link=link, desc=str(desc) if desc is not None else None, options=options)

    def _parse_options(self, raw: Any, base_dir: Optional[str], link: str) -> PageOptions:
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Options for {link} must be a mapping")

        browser = parse_browser(raw['browser']) if raw.get('browser') else None
        reuse = parse_bool(raw['reuseBrowser'], 'reuseBrowser') if 'reuseBrowser' in raw else None

        auth = None
        if raw.get('auth') is not None:
            auth = self._parse_auth(raw['auth'], base_dir, link)

        commands = raw.get('commands') or []
        if not isinstance(commands, list):
            raise ConfigurationError(f"Commands for {link} must be a list")

        test = None
        if raw.get('test') is not None:
            test = self._parse_test(raw['test'], link)

        return PageOptions(
            browser=browser,
            reuse_browser=reuse,
            auth=auth,
            commands=tuple(parse_step(step) for step in commands),
            tags=parse_list(raw['tags']) if raw.get('tags') else None,
            ignore_rules=parse_list(raw['ignoreRules']) if raw.get('ignoreRules') else None,
            test=test,
        )

    @staticmethod
    def _parse_auth(raw: Any, base_dir: Optional[str], link: str) -> AuthOptions:
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Auth options for {link} must be a mapping")
        extra = {k: v for k, v in raw.items() if k != 'handler'}
        return AuthOptions(handler=raw.get('handler'), extra=extra, base_dir=base_dir)

    @staticmethod
    def _parse_test(raw: Any, link: str) -> PageTest:
        if not isinstance(raw, Mapping) or not raw.get('expect'):
            raise ConfigurationError(f"Test option does not have an expectation for link {link}")
        try:
            return PageTest(expect=Expectation(str(raw['expect']).lower()))
        except ValueError:
            raise ConfigurationError(f"Unknown test expectation type: {raw['expect']}") from None


def _require(body: Mapping, key: str, command: str, *alternatives: str) -> Any:
    for name in (key,) + alternatives:
        if body.get(name) is not None:
            return body[name]
    raise MalformedStepError(f"Command '{command}' is missing field '{key}'")


def _as_mapping(value: Any, command: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise MalformedStepError(f"Command '{command}' expects a mapping, got {value!r}")
    return value


def _as_millis(value: Any, command: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MalformedStepError(f"Command '{command}' expects a duration in ms, got {value!r}") from None


def _wait_for(value: Any) -> WaitFor:
    if isinstance(value, str):
        return WaitFor(selector=value)
    body = _as_mapping(value, 'waitFor')
    timeout = body.get('timeout')
    return WaitFor(
        selector=_require(body, 'selector', 'waitFor'),
        timeout=_as_millis(timeout, 'waitFor') if timeout is not None else None,
    )


def _find(value: Any) -> Find:
    if isinstance(value, str):
        return Find(selector=value)
    body = _as_mapping(value, 'find')
    return Find(selector=_require(body, 'selector', 'find'), selector_type=LocatorKind.parse(body.get('type')))


def _select_option(value: Any) -> SelectOption:
    body = _as_mapping(value, 'selectOption')
    return SelectOption(
        from_selector=_require(body, 'from', 'selectOption'),
        option_text=str(_require(body, 'option', 'selectOption')),
    )


def _type(value: Any) -> Type:
    body = _as_mapping(value, 'type')
    return Type(
        into_selector=_require(body, 'into', 'type'),
        text=str(_require(body, 'text', 'type')),
        key=body.get('key'),
    )


def _keyboard(value: Any) -> Keyboard:
    if isinstance(value, str):
        return Keyboard(key_type=value)
    body = _as_mapping(value, 'keyboard')
    combo = body.get('keyCombo')
    if isinstance(combo, list):
        combo = ','.join(str(k) for k in combo)
    return Keyboard(
        key_type=str(_require(body, 'keyType', 'keyboard')),
        key_combo=combo or None,
        element_selector=body.get('element') or 'body',
    )


def _switch_frame(value: Any) -> SwitchFrame:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MalformedStepError(f"Command 'switchFrame' expects a frame name or index, got {value!r}")
    return SwitchFrame(frame=value)


def _click_and_wait(value: Any) -> ClickAndWait:
    body = _as_mapping(value, 'clickAndWait')
    return ClickAndWait(
        click_selector=_require(body, 'clickOn', 'clickAndWait'),
        wait_selector=_require(body, 'waitFor', 'clickAndWait', 'thenWaitFor'),
    )


STEP_PARSERS = {
    'waitFor': _wait_for,
    'clickOn': lambda v: ClickOn(selector=str(v)),
    'pause': lambda v: Pause(duration_ms=_as_millis(v, 'pause')),
    'sleep': lambda v: Sleep(duration_ms=_as_millis(v, 'sleep')),
    'find': _find,
    'selectOption': _select_option,
    'type': _type,
    'keyboard': _keyboard,
    'switchFrame': _switch_frame,
    'clickAndWait': _click_and_wait,
}


def parse_step(raw: Any) -> CommandStep:
    """
    Parse one command mapping such as {'clickOn': '#menu'}

    Exactly one supported command key must be present.
    """
    if not isinstance(raw, Mapping):
        raise MalformedStepError(f"Command must be a mapping with exactly one command, got {raw!r}")
    keys: List[str] = list(raw.keys())
    unknown = [k for k in keys if k not in STEP_PARSERS]
    if unknown:
        raise MalformedStepError(
            f"Unknown command {unknown[0]!r}. Supported commands: {', '.join(STEP_PARSERS)}"
        )
    if len(keys) != 1:
        raise MalformedStepError(f"Command must have exactly one command key, got {keys}")
    key = keys[0]
    return STEP_PARSERS[key](raw[key])


def load_definition(definition_file: str) -> Definition:
    return DefinitionLoader().load(definition_file)


def definition_from_dict(raw: Dict[str, Any], base_dir: Optional[str] = None) -> Definition:
    return DefinitionLoader().parse(raw, base_dir=base_dir)
