import logging

from key_replacements import apply_replacements

logger = logging.getLogger(__name__)


def cell_text(row, column):
    """Read a cell as text; a missing column or empty cell reads as ''."""
    value = row.get(column)
    if value is None:
        return ''
    return str(value)


def build_destination_index(destination_rows, key_column, rules):
    """
    Build the key -> row lookup for the destination dataset.

    The replacement rules are applied to every key first. Rows with an empty
    key are skipped. When a key repeats, the later row replaces the earlier
    one and the key is recorded once in the duplicate list.

    Args:
        destination_rows (list[dict]): Destination rows in file order
        key_column (str): Destination key column name
        rules (list[ReplacementRule]): Key replacement rules

    Returns:
        tuple: (dict of key -> row, list of duplicate keys in order of first
        detection)
    """
    index = {}
    duplicates = []
    seen_duplicates = set()

    for row in destination_rows:
        key = apply_replacements(cell_text(row, key_column), rules)
        if not key:
            continue

        if key in index and key not in seen_duplicates:
            seen_duplicates.add(key)
            duplicates.append(key)
        index[key] = row

    logger.info("Indexed %d destination keys (%d duplicate)", len(index), len(duplicates))
    return index, duplicates
