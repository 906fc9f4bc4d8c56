"""
Tests for definition file loading and command parsing
"""

from pathlib import Path

import pytest

from a11y_validator.definition_loader import DefinitionLoader, definition_from_dict, load_definition, parse_step
from a11y_validator.errors import ConfigurationError, MalformedStepError
from a11y_validator.models import (
    BrowserName, ClickAndWait, ClickOn, Expectation, Find, Keyboard, LocatorKind,
    Pause, SelectOption, Sleep, SwitchFrame, Type, WaitFor,
)


DEFINITION_YAML = """
links:
  - http://localhost:3000/plain
  - link: http://localhost:3000/lorem/ipsum
    desc: Lorem page
    options:
      browser: Firefox
      reuseBrowser: true
      tags: wcag2a, best-practice
      ignoreRules: color-contrast
      test:
        expect: fail-violations
      auth:
        handler: ./auth_handler.py
        env: test
      commands:
        - waitFor: '.lorem-page'
        - clickAndWait:
            clickOn: '#menuItem + label'
            thenWaitFor: '.result-table'
"""


class TestLoad:
    def test_load_yaml_file(self, tmp_path):
        path = tmp_path / 'pages.yaml'
        path.write_text(DEFINITION_YAML, encoding='utf-8')

        definition = load_definition(str(path))

        assert definition.base_dir == str(tmp_path.resolve())
        assert [page.link for page in definition.links] == [
            'http://localhost:3000/plain',
            'http://localhost:3000/lorem/ipsum',
        ]
        plain, lorem = definition.links
        assert plain.desc is None
        assert plain.options.commands == ()
        assert lorem.name == 'Lorem page'

        options = lorem.options
        assert options.browser == BrowserName.FIREFOX
        assert options.reuse_browser is True
        assert options.tags == ('wcag2a', 'best-practice')
        assert options.ignore_rules == ('color-contrast',)
        assert options.test.expect == Expectation.FAIL_VIOLATIONS
        assert options.auth.handler == './auth_handler.py'
        assert options.auth.extra == {'env': 'test'}
        assert options.auth.base_dir == str(tmp_path.resolve())
        assert options.commands == (
            WaitFor(selector='.lorem-page'),
            ClickAndWait(click_selector='#menuItem + label', wait_selector='.result-table'),
        )

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match='not found'):
            load_definition(str(tmp_path / 'nope.yaml'))

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / 'pages.js'
        path.write_text('exports.links = []', encoding='utf-8')
        with pytest.raises(ConfigurationError, match='Unsupported'):
            load_definition(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'pages.yml'
        path.write_text('links: [unclosed', encoding='utf-8')
        with pytest.raises(ConfigurationError):
            load_definition(str(path))

    def test_json_definition(self, tmp_path):
        path = tmp_path / 'pages.json'
        path.write_text('{"links": [{"link": "about:blank"}]}', encoding='utf-8')
        assert load_definition(str(path)).links[0].link == 'about:blank'


class TestParse:
    def test_missing_links_gives_empty_list(self):
        assert definition_from_dict({}).links == ()
        assert DefinitionLoader().parse(None).links == ()

    def test_links_must_be_a_list(self):
        with pytest.raises(ConfigurationError):
            definition_from_dict({'links': 'http://a.com'})

    def test_link_field_required(self):
        with pytest.raises(ConfigurationError, match="'link' is missing"):
            definition_from_dict({'links': [{'desc': 'no link'}]})

    def test_link_must_be_string(self):
        with pytest.raises(ConfigurationError, match='not a string'):
            definition_from_dict({'links': [{'link': 42}]})

    def test_invalid_entry_type(self):
        with pytest.raises(ConfigurationError):
            definition_from_dict({'links': [42]})

    def test_unknown_expectation(self):
        with pytest.raises(ConfigurationError, match='Unknown test expectation'):
            definition_from_dict({'links': [{'link': 'a', 'options': {'test': {'expect': 'to-fail'}}}]})

    def test_test_option_needs_expectation(self):
        with pytest.raises(ConfigurationError, match='expectation'):
            definition_from_dict({'links': [{'link': 'a', 'options': {'test': {}}}]})

    def test_unknown_browser(self):
        with pytest.raises(ConfigurationError, match='Unsupported browser'):
            definition_from_dict({'links': [{'link': 'a', 'options': {'browser': 'safari'}}]})

    def test_tags_as_list(self):
        definition = definition_from_dict({'links': [{'link': 'a', 'options': {'tags': ['wcag2aa', 'wcag21aa']}}]})
        assert definition.links[0].options.tags == ('wcag2aa', 'wcag21aa')


class TestParseStep:
    @pytest.mark.parametrize('raw,expected', [
        ({'waitFor': 'body'}, WaitFor(selector='body')),
        ({'waitFor': {'selector': '#x', 'timeout': 500}}, WaitFor(selector='#x', timeout=500)),
        ({'clickOn': '#menu'}, ClickOn(selector='#menu')),
        ({'pause': 200}, Pause(duration_ms=200)),
        ({'sleep': '300'}, Sleep(duration_ms=300)),
        ({'find': {'type': 'XPath', 'selector': '//h1'}}, Find(selector='//h1', selector_type=LocatorKind.XPATH)),
        ({'find': {'type': 'weird', 'selector': 'h1'}}, Find(selector='h1', selector_type=LocatorKind.CSS)),
        ({'selectOption': {'from': '#typeSelect', 'option': 'b'}}, SelectOption(from_selector='#typeSelect', option_text='b')),
        ({'type': {'into': '#q', 'text': 'hello'}}, Type(into_selector='#q', text='hello')),
        ({'type': {'into': '#q', 'text': 'hello', 'key': 'enter'}}, Type(into_selector='#q', text='hello', key='enter')),
        ({'keyboard': {'keyType': 'tab'}}, Keyboard(key_type='tab')),
        ({'keyboard': {'keyType': 'combo', 'keyCombo': ['ctrl', 'a'], 'element': '#ed'}},
         Keyboard(key_type='combo', key_combo='ctrl,a', element_selector='#ed')),
        ({'switchFrame': 'default'}, SwitchFrame(frame='default')),
        ({'switchFrame': 1}, SwitchFrame(frame=1)),
        ({'clickAndWait': {'clickOn': '#a', 'waitFor': '#b'}}, ClickAndWait(click_selector='#a', wait_selector='#b')),
    ])
    def test_supported_shapes(self, raw, expected):
        assert parse_step(raw) == expected

    @pytest.mark.parametrize('raw', [
        {},
        {'clickOn': '#a', 'waitFor': '#b'},
        {'hover': '#a'},
        'clickOn',
        {'type': {'into': '#q'}},
        {'selectOption': '#typeSelect'},
        {'pause': 'soon'},
        {'switchFrame': True},
        {'clickAndWait': {'clickOn': '#a'}},
    ])
    def test_malformed_steps(self, raw):
        with pytest.raises(MalformedStepError):
            parse_step(raw)

    def test_malformed_step_fails_definition_load(self):
        with pytest.raises(ConfigurationError):
            definition_from_dict({'links': [{'link': 'a', 'options': {'commands': [{'hover': '#x'}]}}]})


def test_example_definition_parses():
    example = Path(__file__).resolve().parent.parent / 'pages.example.yaml'
    definition = load_definition(str(example))
    assert len(definition.links) == 4
    assert definition.links[1].options.commands[0] == Type(into_selector='#q', text='accessibility', key='enter')
    assert definition.links[2].options.test.expect == Expectation.FAIL_VIOLATIONS
