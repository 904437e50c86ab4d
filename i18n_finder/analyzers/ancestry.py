"""Upward queries over a syntax tree.

Everything here walks ``node.parent`` links. ``find_ancestor`` is the shared
primitive; the translation-call, markup and render-function checks are all
predicates handed to it.
"""

from collections.abc import Callable, Collection

from tree_sitter import Node

from i18n_finder.analyzers.parser import (
    first_named_child,
    get_child_by_field,
    get_child_by_type,
    node_text,
)

MARKUP_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})
MARKUP_TYPES = MARKUP_ELEMENT_TYPES | {"jsx_expression"}


def find_ancestor(
    node: Node,
    predicate: Callable[[Node], bool],
    include_self: bool = False,
) -> Node | None:
    """Return the nearest ancestor satisfying ``predicate``.

    Args:
        node: Starting node.
        predicate: Test applied to each ancestor, innermost first.
        include_self: Also test ``node`` itself.
    """
    current = node if include_self else node.parent
    while current is not None:
        if predicate(current):
            return current
        current = current.parent
    return None


def has_ancestor(node: Node, predicate: Callable[[Node], bool]) -> bool:
    return find_ancestor(node, predicate) is not None


def callee_name(call: Node) -> str | None:
    """Name a call expression invokes.

    ``t("x")`` gives ``t``; ``i18n.t("x")`` gives the accessed property ``t``.
    """
    func = get_child_by_field(call, "function")
    if func is None:
        return None
    if func.type == "identifier":
        return node_text(func)
    if func.type == "member_expression":
        prop = get_child_by_field(func, "property")
        if prop is not None and prop.type in ("property_identifier", "identifier"):
            return node_text(prop)
    return None


def translation_call_name(node: Node, function_names: Collection[str]) -> str | None:
    """Callee name if ``node`` is a call to a translation function."""
    if node.type != "call_expression":
        return None
    name = callee_name(node)
    if name is not None and name in function_names:
        return name
    return None


def is_inside_translation_call(node: Node, function_names: Collection[str]) -> bool:
    """True if any enclosing call invokes one of ``function_names``.

    The whole ancestor chain is inspected: a literal may sit several
    expressions deep inside a translation call's arguments.
    """
    return has_ancestor(
        node, lambda n: translation_call_name(n, function_names) is not None
    )


def is_inside_markup(node: Node) -> bool:
    """True if the node is nested in a markup element or ``{...}`` container."""
    return has_ancestor(node, lambda n: n.type in MARKUP_TYPES)


def _starts_uppercase(name: str | None) -> bool:
    return bool(name) and name[0].isupper()


def _is_render_scope(node: Node) -> bool:
    if node.type == "function_declaration":
        name = get_child_by_field(node, "name")
        return name is not None and _starts_uppercase(node_text(name))

    if node.type == "arrow_function":
        parent = node.parent
        if parent is not None and parent.type == "variable_declarator":
            name = get_child_by_field(parent, "name")
            return (
                name is not None
                and name.type == "identifier"
                and _starts_uppercase(node_text(name))
            )
        return False

    if node.type == "method_definition":
        if node.parent is None or node.parent.type != "class_body":
            return False
        name = get_child_by_field(node, "name")
        return name is not None and node_text(name).startswith("render")

    return False


def is_likely_render_function(node: Node) -> bool:
    """True if the node lives inside something that renders markup.

    Render scopes are capitalised function declarations, arrow functions
    assigned to capitalised variables (component convention), and class
    methods whose name starts with ``render``.
    """
    return has_ancestor(node, _is_render_scope)


def element_name(element: Node) -> str | None:
    """Tag name of a markup element; None for fragments."""
    if element.type == "jsx_self_closing_element":
        name = get_child_by_field(element, "name")
    else:
        opening = get_child_by_field(element, "open_tag") or get_child_by_type(
            element, "jsx_opening_element"
        )
        name = get_child_by_field(opening, "name") if opening is not None else None
    return node_text(name) if name is not None else None


def element_context(node: Node) -> str:
    """``<Tag>`` of the nearest enclosing markup element, or empty string."""
    element = find_ancestor(
        node, lambda n: n.type in MARKUP_ELEMENT_TYPES, include_self=True
    )
    if element is None:
        return ""
    name = element_name(element)
    return f"<{name}>" if name else ""


def enclosing_attribute(node: Node) -> Node | None:
    """The ``jsx_attribute`` whose value contains ``node``, if any.

    Stops at the nearest markup element so attributes of outer elements are
    not considered.
    """
    current = node.parent
    while current is not None:
        if current.type == "jsx_attribute":
            return current
        if current.type in MARKUP_ELEMENT_TYPES:
            return None
        current = current.parent
    return None


def attribute_name(attribute: Node) -> str:
    """Name of a ``jsx_attribute`` (``aria-label``, ``xlink:href``, ``title``)."""
    name = first_named_child(attribute)
    return node_text(name) if name is not None else ""


def attribute_value(attribute: Node) -> Node | None:
    """Value node of a ``jsx_attribute``; None for boolean shorthand."""
    named = [c for c in attribute.children if c.is_named and c.type != "comment"]
    if len(named) < 2:
        return None
    return named[-1]
