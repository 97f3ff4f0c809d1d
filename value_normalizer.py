from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizationOptions:
    """
    Comparison flags applied when two cell values are checked for equality.
    Stored values are never modified, the flags only affect the comparison.
    """
    ignore_case: bool = True
    ignore_whitespace: bool = True
    ignore_symbols: bool = False


def remove_symbols(text, preserve_whitespace=True):
    """
    Drop every character that is not a letter or digit.

    Args:
        text (str): Value to clean
        preserve_whitespace (bool): Keep whitespace characters in place

    Returns:
        str: The filtered value
    """
    if not text:
        return ''
    return ''.join(
        ch for ch in text
        if ch.isalnum() or (preserve_whitespace and ch.isspace())
    )


def remove_all_whitespace(text):
    """Remove all whitespace, including interior spaces, tabs and newlines."""
    if not text:
        return ''
    return ''.join(ch for ch in text if not ch.isspace())


def ordinal_upper(text):
    """
    Upper-case one character at a time, keeping characters whose upper case
    is longer than one character (e.g. 'ß') unchanged.
    """
    return ''.join(ch.upper() if len(ch.upper()) == 1 else ch for ch in text)


def normalize_value(value, options):
    """
    Apply the normalization steps enabled in ``options`` to a single value.

    Symbols are stripped before whitespace so a symbol next to a space does
    not leave a stray space behind.
    """
    text = '' if value is None else str(value)

    if options.ignore_symbols:
        text = remove_symbols(text, preserve_whitespace=True)

    if options.ignore_whitespace:
        text = remove_all_whitespace(text)

    if options.ignore_case:
        text = ordinal_upper(text)

    return text


def equal_under_options(a, b, options):
    """
    Compare two values after normalization.

    Args:
        a: First value (None is treated as empty text)
        b: Second value (None is treated as empty text)
        options (NormalizationOptions): Active comparison flags

    Returns:
        bool: True when the normalized values are identical
    """
    return normalize_value(a, options) == normalize_value(b, options)
