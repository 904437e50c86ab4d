"""Syntax tree provider backed by tree-sitter.

Parses JavaScript/TypeScript component sources (including JSX/TSX) and
provides small helpers for reading nodes.
"""

import html
import re
from collections.abc import Iterator
from pathlib import Path

from tree_sitter import Language, Node, Parser, Tree

from i18n_finder.errors import ParseFailure

# File extension to grammar mapping. Plain .js/.jsx use the JavaScript grammar,
# which accepts JSX; .ts must not be parsed as TSX because of `<T>expr` casts.
EXTENSION_TO_GRAMMAR: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

SUPPORTED_EXTENSIONS = frozenset(EXTENSION_TO_GRAMMAR)

_LANGUAGES: dict[str, Language] = {}
_PARSERS: dict[str, Parser] = {}


def _get_language(name: str) -> Language:
    """Lazily load tree-sitter language bindings."""
    if name not in _LANGUAGES:
        if name == "typescript":
            import tree_sitter_typescript as ts_typescript

            _LANGUAGES[name] = Language(ts_typescript.language_typescript())
        elif name == "tsx":
            import tree_sitter_typescript as ts_typescript

            _LANGUAGES[name] = Language(ts_typescript.language_tsx())
        elif name == "javascript":
            import tree_sitter_javascript as ts_javascript

            _LANGUAGES[name] = Language(ts_javascript.language())
        else:
            raise KeyError(name)
    return _LANGUAGES[name]


def get_parser(suffix: str) -> Parser | None:
    """Get the cached parser for a file extension, or None if unsupported."""
    grammar = EXTENSION_TO_GRAMMAR.get(suffix.lower())
    if grammar is None:
        return None
    if grammar not in _PARSERS:
        _PARSERS[grammar] = Parser(_get_language(grammar))
    return _PARSERS[grammar]


def _first_error_line(node: Node) -> int | None:
    """1-based line of the first ERROR or MISSING node, if any."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            line = _first_error_line(child)
            if line is not None:
                return line
    return None


def parse_source(source: bytes, suffix: str, path: str | Path = "<source>") -> Tree:
    """Parse source bytes with the grammar selected by ``suffix``.

    Raises:
        ParseFailure: If the extension is unsupported, the bytes are not
            UTF-8, or the source contains syntax errors.
    """
    parser = get_parser(suffix)
    if parser is None:
        raise ParseFailure(path, f"unsupported file type: {suffix or '<none>'}")

    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseFailure(path, f"not valid UTF-8: {e}") from e

    tree = parser.parse(source)
    if tree.root_node.has_error:
        line = _first_error_line(tree.root_node)
        where = f" near line {line}" if line is not None else ""
        raise ParseFailure(path, f"syntax error{where}")
    return tree


def parse_file(filepath: Path) -> tuple[Tree, bytes]:
    """Read and parse one source file.

    Returns:
        The syntax tree and the raw source bytes.

    Raises:
        ParseFailure: If the file cannot be read or parsed.
    """
    try:
        source = filepath.read_bytes()
    except OSError as e:
        raise ParseFailure(filepath, e.strerror or str(e)) from e
    return parse_source(source, filepath.suffix, filepath), source


# =============================================================================
# Node helpers
# =============================================================================


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order walk in source order without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def get_child_by_field(node: Node, field_name: str) -> Node | None:
    """Get child by field name."""
    return node.child_by_field_name(field_name)


def get_child_by_type(node: Node, type_name: str) -> Node | None:
    """Get first child of a specific type."""
    for child in node.children:
        if child.type == type_name:
            return child
    return None


def first_named_child(node: Node) -> Node | None:
    for child in node.children:
        if child.is_named and child.type != "comment":
            return child
    return None


def unwrap_parentheses(node: Node | None) -> Node | None:
    """Strip any number of enclosing ``( ... )``."""
    while node is not None and node.type == "parenthesized_expression":
        node = first_named_child(node)
    return node


def document_span(node: Node) -> tuple[bytes, int]:
    """Source of the file a node belongs to, and the byte offset it starts at.

    The root node does not cover leading whitespace, so its text starts at
    ``root.start_byte`` rather than 0.
    """
    root = node
    while root.parent is not None:
        root = root.parent
    return root.text or b"", root.start_byte


def char_column(span: tuple[bytes, int], offset: int, byte_column: int) -> int:
    """Column of byte ``offset`` counted in UTF-16 code units, as JavaScript tools do.

    tree-sitter points count bytes; a line with non-ASCII text before
    ``offset`` would otherwise report a larger column.
    """
    document, base = span
    line_start = offset - byte_column
    prefix = document[max(line_start - base, 0):offset - base]
    if prefix.isascii():
        return byte_column
    # Bytes before the root node are leading whitespace
    skipped = max(base - line_start, 0)
    return skipped + len(prefix.decode("utf-8").encode("utf-16-le")) // 2


def line_column(node: Node) -> tuple[int, int]:
    """1-based line and 0-based character column of a node's start."""
    row, column = node.start_point
    if column == 0:
        return row + 1, 0
    return row + 1, char_column(document_span(node), node.start_byte, column)


_ESCAPE_RE = re.compile(
    r"\\(?:u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|x([0-9a-fA-F]{2})|(\r\n|\n|\r|\u2028|\u2029)|(.))",
    re.DOTALL,
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def _replace_escape(match: re.Match[str]) -> str:
    code_point = match.group(1) or match.group(2) or match.group(3)
    if code_point:
        return chr(int(code_point, 16))
    if match.group(4):
        return ""  # line continuation
    char = match.group(5)
    return _SIMPLE_ESCAPES.get(char, char)


def decode_escapes(raw: str) -> str:
    """Decode JavaScript escape sequences in a literal's raw text."""
    if "\\" not in raw:
        return raw
    return _ESCAPE_RE.sub(_replace_escape, raw)


def string_literal_value(node: Node) -> str:
    """Cooked value of a ``string`` node.

    JSX attribute strings do not process backslash escapes but do resolve
    HTML character references.
    """
    raw = node_text(node)
    if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
        raw = raw[1:-1]
    parent = node.parent
    if parent is not None and parent.type == "jsx_attribute":
        return html.unescape(raw)
    return decode_escapes(raw)


def template_segments(node: Node) -> list[tuple[str, int, int]]:
    """Literal segments of a ``template_string`` node.

    Returns:
        List of (cooked text, line, column) for every segment between the
        backticks and ``${...}`` substitutions, in source order. Empty
        segments are omitted.
    """
    span = document_span(node)
    segments: list[tuple[str, int, int]] = []

    # Segment boundaries: (start byte, start point) of each literal run
    start_byte = node.start_byte + 1
    start_point = (node.start_point[0], node.start_point[1] + 1)

    for child in node.children:
        if child.type != "template_substitution":
            continue
        _append_segment(segments, span, start_byte, child.start_byte, start_point)
        start_byte = child.end_byte
        start_point = child.end_point

    _append_segment(segments, span, start_byte, node.end_byte - 1, start_point)
    return segments


def _append_segment(
    segments: list[tuple[str, int, int]],
    span: tuple[bytes, int],
    start: int,
    end: int,
    point: tuple[int, int],
) -> None:
    if end <= start:
        return
    document, base = span
    raw = document[start - base:end - base].decode("utf-8")
    column = char_column(span, start, point[1])
    segments.append((decode_escapes(raw), point[0] + 1, column))


def has_substitutions(node: Node) -> bool:
    """True if a ``template_string`` contains any ``${...}``."""
    return any(child.type == "template_substitution" for child in node.children)
