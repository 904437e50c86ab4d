"""Tests for the tree-sitter syntax tree provider."""

from pathlib import Path

import pytest

from i18n_finder.analyzers.parser import (
    decode_escapes,
    iter_nodes,
    parse_file,
    parse_source,
    template_segments,
)
from i18n_finder.errors import ParseFailure


class TestParseSource:
    """Grammar selection and failure reporting."""

    @pytest.mark.parametrize("suffix", [".js", ".jsx", ".mjs", ".tsx"])
    def test_jsx_grammars(self, suffix: str) -> None:
        tree = parse_source(b"const A = () => <Text>Hello</Text>;", suffix)
        assert not tree.root_node.has_error

    def test_plain_typescript(self) -> None:
        tree = parse_source(b"const n = <number>value;", ".ts")
        assert not tree.root_node.has_error

    def test_unsupported_extension(self) -> None:
        with pytest.raises(ParseFailure, match="unsupported file type"):
            parse_source(b"print('x')", ".py", "script.py")

    def test_syntax_error_names_line(self) -> None:
        with pytest.raises(ParseFailure, match="syntax error") as excinfo:
            parse_source(b"const a = 1;\nconst = ;\n", ".js", "bad.js")
        assert excinfo.value.path == "bad.js"

    def test_invalid_utf8(self) -> None:
        with pytest.raises(ParseFailure, match="UTF-8"):
            parse_source(b"const a = '\xff\xfe';", ".js")


class TestParseFile:
    """Reading from disk."""

    def test_returns_tree_and_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "App.jsx"
        path.write_text("export const App = () => <div>Hi there</div>;\n")
        tree, source = parse_file(path)
        assert source.startswith(b"export")
        assert tree.root_node.type == "program"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseFailure):
            parse_file(tmp_path / "Missing.jsx")


class TestLiterals:
    """Cooked values of string and template literals."""

    def test_decode_escapes(self) -> None:
        assert decode_escapes(r"a\nb") == "a\nb"
        assert decode_escapes(r"\x41B\u{43}") == "ABC"
        assert decode_escapes(r"it\'s") == "it's"
        assert decode_escapes("no escapes") == "no escapes"

    def test_template_segments_positions(self) -> None:
        tree = parse_source(b"const s = `Hello ${name}!\nBye`;", ".js")
        template = next(n for n in iter_nodes(tree.root_node) if n.type == "template_string")
        assert template_segments(template) == [("Hello ", 1, 11), ("!\nBye", 1, 24)]

    def test_template_without_text(self) -> None:
        tree = parse_source(b"const s = `${a}${b}`;", ".js")
        template = next(n for n in iter_nodes(tree.root_node) if n.type == "template_string")
        assert template_segments(template) == []
