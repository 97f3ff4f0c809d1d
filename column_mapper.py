import logging
import math
import re
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

# Removed in this order, so 'Column' goes before its prefix 'Col'
NAME_NOISE_WORDS = ('Column', 'Col', 'Field', 'Fld')
NAME_SEPARATORS = re.compile(r'[_\-.]')
TOKEN_OVERLAP_RATIO = 0.7


@dataclass(frozen=True)
class ColumnMapping:
    """
    Pairs a source column with the destination column it is compared to.
    An empty destination column means the source column is shown in the
    report but never compared.
    """
    source_column: str
    destination_column: str = ''

    @property
    def is_mapped(self):
        return bool(self.destination_column)


def normalize_column_name(name):
    """
    Strip common noise words from a column name and turn separators into
    single spaces, e.g. 'Cust_ID' -> 'Cust ID', 'Col.Amount' -> 'Amount'.
    """
    if not name:
        return ''

    normalized = name
    for word in NAME_NOISE_WORDS:
        normalized = normalized.replace(word, '')
    normalized = NAME_SEPARATORS.sub(' ', normalized)

    return ' '.join(normalized.split())


def is_similar_column_name(source_name, destination_name):
    """
    Token-overlap check between two column names.

    Both names are normalized and split into words. The names are similar
    when the number of shared words (case-insensitive) reaches 70% of the
    smaller word set, rounded down.
    """
    if not source_name or not destination_name:
        return False

    normalized_source = normalize_column_name(source_name)
    normalized_destination = normalize_column_name(destination_name)

    if normalized_source.lower() == normalized_destination.lower():
        return True

    source_tokens = {token.lower() for token in normalized_source.split()}
    destination_tokens = {token.lower() for token in normalized_destination.split()}
    if not source_tokens or not destination_tokens:
        return False

    common = source_tokens & destination_tokens
    required = math.floor(min(len(source_tokens), len(destination_tokens)) * TOKEN_OVERLAP_RATIO)
    return len(common) >= required


def find_exact_match(source_name, destination_columns):
    lowered = source_name.lower()
    for column in destination_columns:
        if column.lower() == lowered:
            return column
    return None


def find_partial_match(source_name, destination_columns):
    lowered = source_name.lower()
    for column in destination_columns:
        candidate = column.lower()
        if lowered in candidate or candidate in lowered:
            return column
    return None


def find_similar_match(source_name, destination_columns):
    for column in destination_columns:
        if is_similar_column_name(source_name, column):
            return column
    return None


def suggest_destination(source_name, destination_columns):
    """
    Propose a destination column for one source column.

    Tries an exact (case-insensitive) name match, then a substring match in
    either direction, then the token-overlap heuristic. The first
    destination column satisfying a strategy wins.

    Returns:
        str: The matching destination column, or '' when nothing fits
    """
    if not source_name:
        return ''

    for strategy in (find_exact_match, find_partial_match, find_similar_match):
        match = strategy(source_name, destination_columns)
        if match is not None:
            logger.debug("Mapped '%s' -> '%s' (%s)", source_name, match, strategy.__name__)
            return match

    logger.debug("No destination column found for '%s'", source_name)
    return ''


def auto_map(source_columns, destination_columns):
    """
    Build a fresh mapping for every source column.

    Earlier mappings are never consulted, so calling this again with the
    same column lists gives the same result.

    Args:
        source_columns (list[str]): Source dataset column names
        destination_columns (list[str]): Destination dataset column names

    Returns:
        list[ColumnMapping]: One mapping per source column, in source order
    """
    destination_columns = list(destination_columns)
    mappings = [
        ColumnMapping(column, suggest_destination(column, destination_columns))
        for column in source_columns
    ]
    mapped = sum(1 for mapping in mappings if mapping.is_mapped)
    logger.info("Auto-mapped %d of %d source columns", mapped, len(mappings))
    return mappings


def apply_overrides(mappings, overrides):
    """
    Apply user-chosen mappings on top of an auto-mapped list.

    Args:
        mappings (list[ColumnMapping]): Current mappings
        overrides (dict): source column -> destination column ('' unmaps)

    Returns:
        list[ColumnMapping]: A new list; ``mappings`` is left untouched
    """
    known = {mapping.source_column for mapping in mappings}
    for source_column in overrides:
        if source_column not in known:
            logger.warning("Ignoring mapping override for unknown source column '%s'", source_column)

    return [
        replace(mapping, destination_column=overrides[mapping.source_column])
        if mapping.source_column in overrides else mapping
        for mapping in mappings
    ]
