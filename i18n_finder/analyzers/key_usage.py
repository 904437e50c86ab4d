"""Key-usage extractor.

Finds calls such as ``t("home.title")`` or ``i18n.t(`home.title`)`` and
records the statically known key. Calls whose first argument is computed at
runtime (``t(key)``, ``t(`home.${name}`)``) cannot be resolved and are
skipped.
"""

from tree_sitter import Node

from i18n_finder.analyzers.ancestry import translation_call_name
from i18n_finder.analyzers.parser import (
    first_named_child,
    get_child_by_field,
    has_substitutions,
    iter_nodes,
    line_column,
    string_literal_value,
    template_segments,
)
from i18n_finder.config import FinderConfig
from i18n_finder.models.translation import KeyUsage


def static_key(argument: Node) -> str | None:
    """Key text of a call argument, or None if it is not static."""
    if argument.type == "string":
        return string_literal_value(argument)
    if argument.type == "template_string" and not has_substitutions(argument):
        segments = template_segments(argument)
        return segments[0][0] if segments else ""
    return None


def extract_key_usages(root: Node, file: str, config: FinderConfig) -> list[KeyUsage]:
    """Find translation-function calls with a static first argument.

    Args:
        root: Root node of the file's syntax tree.
        file: Path recorded on each usage.
        config: Supplies the translation-function names.

    Returns:
        Usages in source order.
    """
    usages: list[KeyUsage] = []
    for node in iter_nodes(root):
        name = translation_call_name(node, config.function_names)
        if name is None:
            continue

        arguments = get_child_by_field(node, "arguments")
        # Tagged templates (t`...`) carry a template_string, not an argument list
        if arguments is None or arguments.type != "arguments":
            continue
        first = first_named_child(arguments)
        if first is None:
            continue

        key = static_key(first)
        if key is None:
            continue

        line, column = line_column(first)
        usages.append(
            KeyUsage(key=key, file=file, line=line, column=column, invoked_function=name)
        )
    return usages
