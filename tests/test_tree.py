"""Tests for translation trees."""

import json
from pathlib import Path

import pytest

from i18n_finder.errors import BaselineReadError, OutputWriteError
from i18n_finder.keys.tree import (
    SENTINEL,
    build_tree,
    companion_path,
    flatten_tree,
    load_translation_pairs,
    load_translation_tree,
    merge_into_baseline,
    set_path,
    write_documents,
    write_json,
)


class TestSetPath:
    """Nesting with leaf preservation."""

    def test_nested(self) -> None:
        tree: dict = {}
        set_path(tree, "home.title", "Welcome")
        set_path(tree, "home.subtitle", "Hi")
        assert tree == {"home": {"title": "Welcome", "subtitle": "Hi"}}

    def test_leaf_becomes_branch(self) -> None:
        tree: dict = {}
        set_path(tree, "home", "Home")
        set_path(tree, "home.title", "Welcome")
        assert tree == {"home": {SENTINEL: "Home", "title": "Welcome"}}

    def test_leaf_written_onto_branch(self) -> None:
        tree: dict = {}
        set_path(tree, "home.title", "Welcome")
        set_path(tree, "home", "Home")
        assert tree == {"home": {"title": "Welcome", SENTINEL: "Home"}}

    def test_keep_existing(self) -> None:
        tree: dict = {"home": {"title": "Bienvenue"}}
        set_path(tree, "home.title", "Welcome", keep_existing=True)
        set_path(tree, "home.extra", "More", keep_existing=True)
        assert tree == {"home": {"title": "Bienvenue", "extra": "More"}}


class TestBuildAndFlatten:
    """Round trips between flat keys and trees."""

    def test_round_trip(self) -> None:
        pairs = {
            "screens.auth.login_form.welcome": "Welcome",
            "screens.auth.login_form.click_me": "Click Me",
            "profile.profile_settings": "Profile Settings",
            "common.ok": "OK",
        }
        tree = build_tree(pairs.items())
        assert flatten_tree(tree) == pairs
        assert build_tree(flatten_tree(tree).items()) == tree

    def test_round_trip_with_sentinel(self) -> None:
        pairs = {"home": "Home", "home.title": "Welcome"}
        tree = build_tree(pairs.items())
        assert flatten_tree(tree) == pairs

    def test_flat_mode_keeps_dotted_keys(self) -> None:
        tree = build_tree([("a.b", "x")], flat=True)
        assert tree == {"a.b": "x"}


class TestMergeIntoBaseline:
    """Existing translations are never lost."""

    def test_existing_values_win(self) -> None:
        baseline = {"home": {"title": "Bienvenue"}}
        merged = merge_into_baseline(baseline, {"home": {"title": "Welcome", "save": "Save"}})
        assert merged == {"home": {"title": "Bienvenue", "save": "Save"}}
        assert baseline == {"home": {"title": "Bienvenue"}}

    def test_leaf_preserved_when_branch_needed(self) -> None:
        merged = merge_into_baseline({"home": "Accueil"}, {"home": {"title": "Welcome"}})
        assert merged == {"home": {SENTINEL: "Accueil", "title": "Welcome"}}

    def test_paths_compared_across_shapes(self) -> None:
        merged = merge_into_baseline({"a.b": "Kept"}, {"a": {"b": "", "c": "New"}})
        assert merged == {"a.b": "Kept", "a": {"c": "New"}}

    def test_flat_merge(self) -> None:
        baseline = {"home": {"title": "Bienvenue"}}
        merged = merge_into_baseline(baseline, {"home.title": "", "home": "Home", "ok": "OK"}, flat=True)
        assert merged == {"home": {"title": "Bienvenue", SENTINEL: "Home"}, "ok": "OK"}

    def test_identical_trees_merge_cleanly(self) -> None:
        tree = {"a": {"b": "x", "c": "y"}, "d": "z"}
        merged = merge_into_baseline(tree, tree)
        assert merged == tree
        assert SENTINEL not in json.dumps(merged)


class TestLoading:
    """Reading persisted documents."""

    def test_load_tree(self, write_json) -> None:
        path = write_json("en.json", {"a": {"b": "x"}})
        assert load_translation_tree(path) == {"a": {"b": "x"}}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(BaselineReadError, match="file not found") as excinfo:
            load_translation_tree(tmp_path / "missing.json")
        assert excinfo.value.path.endswith("missing.json")

    def test_invalid_json(self, write_json) -> None:
        path = write_json("bad.json", "{not json")
        with pytest.raises(BaselineReadError, match="invalid JSON"):
            load_translation_tree(path)

    def test_non_object_root(self, write_json) -> None:
        path = write_json("list.json", ["a"])
        with pytest.raises(BaselineReadError, match="JSON object"):
            load_translation_tree(path)

    def test_non_string_leaf(self, write_json) -> None:
        path = write_json("num.json", {"a": {"count": 3}})
        with pytest.raises(BaselineReadError, match="a.count"):
            load_translation_tree(path)

    def test_pairs_keep_repeated_keys(self, write_json) -> None:
        path = write_json("dup.json", '{"a": "x", "a": "y"}')
        assert list(load_translation_pairs(path)) == [("a", "x"), ("a", "y")]


class TestWriting:
    """Atomic output."""

    def test_write_json(self, tmp_path: Path) -> None:
        path = write_json(tmp_path / "out" / "en.json", {"k": "Café"})
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "Café"}
        assert "Café" in path.read_text(encoding="utf-8")
        assert not (tmp_path / "out" / "en.json.tmp").exists()

    def test_write_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(OutputWriteError):
            write_json(blocker / "en.json", {})

    def test_unserializable_document_writes_nothing(self, tmp_path: Path) -> None:
        first = tmp_path / "en.json"
        with pytest.raises(TypeError):
            write_documents([(first, {"a": "b"}), (tmp_path / "map.json", {"x": object()})])
        assert not first.exists()

    def test_failed_companion_leaves_main_document_untouched(self, tmp_path: Path) -> None:
        main = tmp_path / "en.json"
        main.write_text('{"old": "Old"}\n', encoding="utf-8")
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(OutputWriteError) as excinfo:
            write_documents([(main, {"new": "New"}), (blocker / "en.keymap.json", {})])
        assert excinfo.value.path.endswith("en.keymap.json")
        assert json.loads(main.read_text(encoding="utf-8")) == {"old": "Old"}
        assert not (tmp_path / "en.json.tmp").exists()

    def test_companion_path(self) -> None:
        assert companion_path(Path("locales/en.json"), ".keymap.json") == Path("locales/en.keymap.json")
        assert companion_path(Path("en"), ".keymap.json") == Path("en.keymap.json")
