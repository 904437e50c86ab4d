"""String classification engine.

Walks one parsed component file and reports every literal that looks like
user-facing text. Seven syntactic shapes are recognized:

- TextNode: ``<Text>Welcome</Text>``
- AttributeLiteral: ``<Button title="Click Me" />``
- AttributeExpression: ``<Button title={"Click Me"} />``
- ExpressionLiteral: ``<Text>{"Hello"}</Text>``
- TemplateSegment: ``<Text>{`Welcome ${name}`}</Text>`` (one per literal segment)
- ReturnLiteral: ``return "Hello"`` inside a render function
- ConditionalReturnLiteral: ``return ok ? "Saved" : "Failed"`` inside a render function

Candidates then pass through the exclusion rules: attribute names, enclosing
translation calls, minimum length, exclusion patterns and already-translated
patterns.
"""

import html
import json
from collections.abc import Callable
from dataclasses import dataclass, field

from tree_sitter import Node

from i18n_finder.analyzers.ancestry import (
    attribute_name,
    attribute_value,
    element_context,
    enclosing_attribute,
    is_inside_markup,
    is_inside_translation_call,
    is_likely_render_function,
)
from i18n_finder.analyzers.parser import (
    first_named_child,
    get_child_by_field,
    iter_nodes,
    line_column,
    string_literal_value,
    template_segments,
    unwrap_parentheses,
)
from i18n_finder.analyzers.rules import is_excluded_attribute, should_exclude
from i18n_finder.config import FinderConfig
from i18n_finder.models.translation import OccurrenceKind, StringOccurrence

TEXT_RUN_TYPES = frozenset({"jsx_text", "html_character_reference"})


def normalize_jsx_text(raw: str) -> str:
    """Collapse JSX text the way it renders: lines trimmed, blank lines dropped."""
    lines = [line.strip() for line in html.unescape(raw).splitlines()]
    return " ".join(line for line in lines if line)


@dataclass
class ClassificationContext:
    """Per-file accumulator threaded through the traversal."""

    file: str
    config: FinderConfig
    occurrences: list[StringOccurrence] = field(default_factory=list)

    def emit(
        self,
        node: Node,
        value: str,
        kind: OccurrenceKind,
        context: str = "",
        position: tuple[int, int] | None = None,
    ) -> None:
        """Record ``value`` unless an exclusion rule rejects it."""
        if is_inside_translation_call(node, self.config.function_names):
            return
        if should_exclude(value, self.config):
            return

        line, column = position if position is not None else line_column(node)
        self.occurrences.append(
            StringOccurrence(
                file=self.file,
                line=line,
                column=column,
                raw_value=value.strip(),
                kind=kind,
                context=context,
            )
        )


# =============================================================================
# Shape handlers
# =============================================================================


def _visit_text(node: Node, ctx: ClassificationContext) -> None:
    parent = node.parent
    # Entities also occur inside attribute strings; only element children count
    if parent is None or parent.type != "jsx_element" or parent.text is None:
        return

    # A run of adjacent text/entity siblings is one piece of text; handle it
    # at its first member only.
    prev = node.prev_sibling
    if prev is not None and prev.type in TEXT_RUN_TYPES:
        return

    run_end = node
    sibling = node.next_sibling
    while sibling is not None and sibling.type in TEXT_RUN_TYPES:
        run_end = sibling
        sibling = sibling.next_sibling

    raw = parent.text[node.start_byte - parent.start_byte:run_end.end_byte - parent.start_byte]
    value = normalize_jsx_text(raw.decode("utf-8"))
    if not value:
        return

    ctx.emit(node, value, "TextNode", element_context(node))


def _visit_attribute(node: Node, ctx: ClassificationContext) -> None:
    name = attribute_name(node)
    if is_excluded_attribute(name, ctx.config):
        return

    value_node = attribute_value(node)
    if value_node is None:
        return

    if value_node.type == "string":
        value = string_literal_value(value_node)
        ctx.emit(value_node, value, "AttributeLiteral", f'{name}="{value}"')
    elif value_node.type == "jsx_expression":
        expression = _sole_expression(value_node)
        if expression is not None and expression.type == "string":
            value = string_literal_value(expression)
            context = f"{name}={{{json.dumps(value, ensure_ascii=False)}}}"
            ctx.emit(expression, value, "AttributeExpression", context)


def _visit_expression_container(node: Node, ctx: ClassificationContext) -> None:
    # Attribute values are reported by _visit_attribute
    if node.parent is not None and node.parent.type == "jsx_attribute":
        return
    expression = _sole_expression(node)
    if expression is None or expression.type != "string":
        return
    ctx.emit(
        expression,
        string_literal_value(expression),
        "ExpressionLiteral",
        element_context(node),
    )


def _visit_template(node: Node, ctx: ClassificationContext) -> None:
    if not is_inside_markup(node):
        return
    attribute = enclosing_attribute(node)
    if attribute is not None and is_excluded_attribute(attribute_name(attribute), ctx.config):
        return

    context = element_context(node)
    for value, line, column in template_segments(node):
        if not value.strip():
            continue
        ctx.emit(node, value, "TemplateSegment", context, position=(line, column))


def _visit_return(node: Node, ctx: ClassificationContext) -> None:
    argument = unwrap_parentheses(first_named_child(node))
    if argument is None:
        return
    if argument.type not in ("string", "ternary_expression"):
        return
    if not is_likely_render_function(node):
        return

    if argument.type == "string":
        ctx.emit(
            argument,
            string_literal_value(argument),
            "ReturnLiteral",
            "Direct string return",
        )
        return

    for field_name in ("consequence", "alternative"):
        branch = unwrap_parentheses(get_child_by_field(argument, field_name))
        if branch is not None and branch.type == "string":
            ctx.emit(
                branch,
                string_literal_value(branch),
                "ConditionalReturnLiteral",
                "Ternary expression",
            )


def _sole_expression(container: Node) -> Node | None:
    named = [c for c in container.children if c.is_named and c.type != "comment"]
    if len(named) != 1:
        return None
    return unwrap_parentheses(named[0])


_HANDLERS: dict[str, Callable[[Node, ClassificationContext], None]] = {
    "jsx_text": _visit_text,
    "html_character_reference": _visit_text,
    "jsx_attribute": _visit_attribute,
    "jsx_expression": _visit_expression_container,
    "template_string": _visit_template,
    "return_statement": _visit_return,
}


def classify_tree(root: Node, file: str, config: FinderConfig) -> list[StringOccurrence]:
    """Find candidate user-facing strings in one parsed file.

    Args:
        root: Root node of the file's syntax tree.
        file: Path recorded on each occurrence.
        config: Rule set to apply.

    Returns:
        Occurrences in source order.
    """
    ctx = ClassificationContext(file=file, config=config)
    for node in iter_nodes(root):
        handler = _HANDLERS.get(node.type)
        if handler is not None:
            handler(node, ctx)
    return ctx.occurrences
