import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from key_replacements import ReplacementRule
from value_normalizer import NormalizationOptions

TRUE_VALUES = {'1', 'true', 'yes', 'on'}
FALSE_VALUES = {'0', 'false', 'no', 'off'}
PAIR_SEPARATOR = ';'
ARROW = '=>'

SETTING_NAMES = [
    'SOURCE_FILE_PATH', 'DESTINATION_FILE_PATH', 'SOURCE_KEY_COLUMN', 'DESTINATION_KEY_COLUMN',
    'OUTPUT_FILE_PATH', 'IGNORE_CASE', 'IGNORE_WHITESPACE', 'IGNORE_SYMBOLS',
    'REPLACEMENT_RULES', 'COLUMN_MAPPINGS', 'LOG_LEVEL',
]


@dataclass(frozen=True)
class ComparisonSettings:
    source_file: str
    destination_file: str
    source_key_column: str
    destination_key_column: str
    output_file: str = ''
    options: NormalizationOptions = field(default_factory=NormalizationOptions)
    replacement_rules: tuple = ()
    mapping_overrides: dict = field(default_factory=dict)
    log_level: str = 'INFO'

    def missing_inputs(self):
        """Names of the required settings that are still empty."""
        required = {
            'SOURCE_FILE_PATH': self.source_file,
            'DESTINATION_FILE_PATH': self.destination_file,
            'SOURCE_KEY_COLUMN': self.source_key_column,
            'DESTINATION_KEY_COLUMN': self.destination_key_column,
        }
        return [name for name, value in required.items() if not value]


def parse_bool(name, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of true/false, yes/no, on/off or 1/0 (got '{raw}')")


def parse_pairs(name, raw):
    """
    Split 'a=>b;c=>d' into [('a', 'b'), ('c', 'd')], keeping order.
    The right-hand side may be empty ('-=>').
    """
    pairs = []
    for chunk in (raw or '').split(PAIR_SEPARATOR):
        if not chunk.strip():
            continue
        if ARROW not in chunk:
            raise ValueError(f"{name} entries must look like 'from{ARROW}to' (got '{chunk}')")
        left, right = chunk.split(ARROW, 1)
        pairs.append((left, right))
    return pairs


def parse_replacement_rules(raw):
    """Replacement text is kept verbatim so spaces can be searched for."""
    return tuple(ReplacementRule(find, replace) for find, replace in parse_pairs('REPLACEMENT_RULES', raw))


def parse_mapping_overrides(raw):
    return {
        source.strip(): destination.strip()
        for source, destination in parse_pairs('COLUMN_MAPPINGS', raw)
    }


def load_settings(env_path=None):
    """
    Read the comparison settings from the environment, loading a .env file
    first when one exists.

    Args:
        env_path (str): Explicit .env location; defaults to searching from the
            current directory

    Returns:
        ComparisonSettings
    """
    load_dotenv(env_path)

    options = NormalizationOptions(
        ignore_case=parse_bool('IGNORE_CASE', True),
        ignore_whitespace=parse_bool('IGNORE_WHITESPACE', True),
        ignore_symbols=parse_bool('IGNORE_SYMBOLS', False),
    )

    return ComparisonSettings(
        source_file=os.getenv('SOURCE_FILE_PATH', ''),
        destination_file=os.getenv('DESTINATION_FILE_PATH', ''),
        source_key_column=os.getenv('SOURCE_KEY_COLUMN', ''),
        destination_key_column=os.getenv('DESTINATION_KEY_COLUMN', ''),
        output_file=os.getenv('OUTPUT_FILE_PATH', ''),
        options=options,
        replacement_rules=parse_replacement_rules(os.getenv('REPLACEMENT_RULES', '')),
        mapping_overrides=parse_mapping_overrides(os.getenv('COLUMN_MAPPINGS', '')),
        log_level=(os.getenv('LOG_LEVEL') or 'INFO').upper(),
    )
