"""Exclusion rule set.

Pure predicates over a candidate string or an attribute name. Each one
answers "should this be dropped?"; ``exclusion_reason`` runs the string
checks in order and names the first one that fires.
"""

from i18n_finder.config import FinderConfig


def is_too_short(value: str, config: FinderConfig) -> bool:
    """Trimmed text shorter than the configured minimum (stray punctuation)."""
    return len(value.strip()) < config.min_string_length


def matches_exclude_pattern(value: str, config: FinderConfig) -> bool:
    """Identifiers, constants, colors, URLs, paths, units, operators, blanks."""
    return any(p.search(value) for p in config.compiled_exclude_patterns)


def looks_translated(value: str, config: FinderConfig) -> bool:
    """Text that itself reads like a translation call, e.g. ``t('key')``."""
    return any(p.search(value) for p in config.compiled_i18n_patterns)


def is_excluded_attribute(name: str, config: FinderConfig) -> bool:
    """Attributes such as ``className`` or ``testID`` never hold UI text."""
    return name in config.skipped_attributes


def exclusion_reason(value: str, config: FinderConfig) -> str | None:
    """Name of the first string rule that rejects ``value``, or None.

    Patterns are matched against the trimmed text.
    """
    if is_too_short(value, config):
        return "min_length"
    text = value.strip()
    if matches_exclude_pattern(text, config):
        return "pattern"
    if looks_translated(text, config):
        return "translated"
    return None


def should_exclude(value: str, config: FinderConfig) -> bool:
    return exclusion_reason(value, config) is not None
