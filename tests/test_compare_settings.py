"""
Tests for reading comparison settings from the environment.
"""
import pytest

from compare_settings import (
    SETTING_NAMES,
    ComparisonSettings,
    load_settings,
    parse_mapping_overrides,
    parse_replacement_rules,
)
from key_replacements import ReplacementRule
from value_normalizer import NormalizationOptions


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset every setting; values a .env file loads are undone at teardown."""
    for name in SETTING_NAMES:
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)
    return tmp_path / '.env'


class TestParsers:

    def test_replacement_rules_keep_order(self):
        assert parse_replacement_rules('-=>;INV=>; =>_') == (
            ReplacementRule('-', ''),
            ReplacementRule('INV', ''),
            ReplacementRule(' ', '_'),
        )

    def test_empty_rules(self):
        assert parse_replacement_rules('') == ()

    def test_bad_rule(self):
        with pytest.raises(ValueError, match='REPLACEMENT_RULES'):
            parse_replacement_rules('no-arrow')

    def test_mapping_overrides(self):
        assert parse_mapping_overrides('Cust Name => Name; Note=>') == {'Cust Name': 'Name', 'Note': ''}


class TestLoadSettings:

    def test_defaults(self, clean_env):
        settings = load_settings(clean_env)

        assert settings.options == NormalizationOptions(True, True, False)
        assert settings.replacement_rules == ()
        assert settings.mapping_overrides == {}
        assert settings.log_level == 'INFO'
        assert settings.missing_inputs() == [
            'SOURCE_FILE_PATH', 'DESTINATION_FILE_PATH', 'SOURCE_KEY_COLUMN', 'DESTINATION_KEY_COLUMN',
        ]

    def test_from_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv('SOURCE_FILE_PATH', 'a.csv')
        monkeypatch.setenv('DESTINATION_FILE_PATH', 'b.xlsx')
        monkeypatch.setenv('SOURCE_KEY_COLUMN', 'ID')
        monkeypatch.setenv('DESTINATION_KEY_COLUMN', 'Ref')
        monkeypatch.setenv('IGNORE_CASE', 'no')
        monkeypatch.setenv('IGNORE_SYMBOLS', 'ON')
        monkeypatch.setenv('REPLACEMENT_RULES', '-=>')

        settings = load_settings(clean_env)

        assert settings.missing_inputs() == []
        assert settings.destination_key_column == 'Ref'
        assert settings.options == NormalizationOptions(False, True, True)
        assert settings.replacement_rules == (ReplacementRule('-', ''),)

    def test_dotenv_file(self, clean_env):
        clean_env.write_text('SOURCE_KEY_COLUMN=Code\nIGNORE_WHITESPACE=false\n')

        settings = load_settings(clean_env)

        assert settings.source_key_column == 'Code'
        assert settings.options.ignore_whitespace is False

    def test_invalid_bool(self, clean_env, monkeypatch):
        monkeypatch.setenv('IGNORE_CASE', 'maybe')
        with pytest.raises(ValueError, match='IGNORE_CASE'):
            load_settings(clean_env)

    def test_settings_are_frozen(self):
        settings = ComparisonSettings('a.csv', 'b.csv', 'ID', 'ID')
        with pytest.raises(AttributeError):
            settings.source_file = 'c.csv'
