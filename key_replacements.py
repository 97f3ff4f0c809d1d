import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ReplacementRule:
    """Find/replace pair applied to key values before matching."""
    find: str = ''
    replace: str = ''


def replace_ignore_case(text, find, replace):
    """
    Replace every occurrence of ``find`` in ``text`` ignoring case.

    ``replace`` is inserted literally, backslashes and group references are
    not interpreted.
    """
    if not text or not find:
        return text or ''
    pattern = re.compile(re.escape(find), re.IGNORECASE)
    return pattern.sub(lambda _match: replace or '', text)


def apply_replacements(text, rules):
    """
    Run the key value through the replacement rules in list order.

    Each rule sees the output of the previous one, so rules chain:
    [('a', 'b'), ('b', 'c')] turns 'a' into 'c'. Rules with an empty
    ``find`` are skipped.

    Args:
        text (str): Raw key value (None is treated as empty text)
        rules (list[ReplacementRule]): Ordered rules, possibly empty

    Returns:
        str: The key used for matching
    """
    result = '' if text is None else str(text)
    for rule in rules or ():
        if not rule.find:
            continue
        result = replace_ignore_case(result, rule.find, rule.replace)
    return result
