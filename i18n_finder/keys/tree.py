"""Translation trees: nesting, flattening, loading and writing.

A translation document is a JSON object whose values are either strings
(leaves) or further objects (branches). When a key has to be both, e.g.
``home`` = "Home" and ``home.title`` = "Welcome", the leaf is kept under the
reserved child ``_value``:

    {"home": {"_value": "Home", "title": "Welcome"}}

Flattening maps ``home._value`` back to ``home``, so no text is ever lost
by nesting keys.
"""

import copy
import json
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from i18n_finder.errors import BaselineReadError, OutputWriteError
from i18n_finder.logging import logger
from i18n_finder.models.translation import TranslationTree

SENTINEL = "_value"


def set_path(tree: TranslationTree, key: str, value: str, keep_existing: bool = False) -> None:
    """Store ``value`` at dotted ``key``, nesting as needed.

    Args:
        tree: Tree to modify in place.
        key: Dotted key path.
        value: Leaf text.
        keep_existing: Leave an existing leaf (or ``_value``) untouched
            instead of overwriting it.
    """
    parts = key.split(".")
    current = tree
    for part in parts[:-1]:
        node = current.get(part)
        if node is None:
            node = current[part] = {}
        elif isinstance(node, str):
            node = current[part] = {SENTINEL: node}
        current = node

    last = parts[-1]
    existing = current.get(last)
    if isinstance(existing, dict):
        if keep_existing and SENTINEL in existing:
            return
        existing[SENTINEL] = value
    elif existing is not None and keep_existing:
        return
    else:
        current[last] = value


def build_tree(pairs: Iterable[tuple[str, str]], flat: bool = False) -> TranslationTree:
    """Build a translation document from ``(full_key, value)`` pairs.

    In flat mode every key is written verbatim at the top level.
    """
    tree: TranslationTree = {}
    for key, value in pairs:
        if flat:
            tree[key] = value
        else:
            set_path(tree, key, value)
    return tree


def iter_leaves(tree: TranslationTree, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(full_key, value)`` for every leaf in document order."""
    for key, value in tree.items():
        if key == SENTINEL and prefix:
            yield prefix, value
            continue
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            yield from iter_leaves(value, full_key)
        else:
            yield full_key, value


def flatten_tree(tree: TranslationTree) -> dict[str, Any]:
    """Full dotted key -> leaf value."""
    return dict(iter_leaves(tree))


def merge_into_baseline(
    baseline: TranslationTree,
    tree: TranslationTree,
    flat: bool = False,
) -> TranslationTree:
    """Add the leaves of ``tree`` to a copy of ``baseline``.

    Keys are compared by full dotted path, whatever shape the baseline uses:
    ``{"a.b": ...}`` and ``{"a": {"b": ...}}`` both define ``a.b``. Paths the
    baseline already defines keep their value; only new paths are added,
    nested or (with ``flat``) verbatim at the top level. Structural
    conflicts are resolved with the ``_value`` child.
    """
    merged = copy.deepcopy(baseline)
    defined = set(flatten_tree(baseline))
    for key, value in iter_leaves(tree):
        if key in defined:
            continue
        if not flat:
            set_path(merged, key, value, keep_existing=True)
        elif isinstance(merged.get(key), dict):
            merged[key][SENTINEL] = value
        else:
            merged[key] = value
    return merged


# =============================================================================
# Reading
# =============================================================================


class _Pairs(list):
    """A JSON object kept as its raw ``(key, value)`` pairs, duplicates included."""


def _read_json(path: Path, object_pairs_hook: Any = None) -> Any:
    if not path.is_file():
        raise BaselineReadError(path, "file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BaselineReadError(path, str(e)) from e
    try:
        return json.loads(text, object_pairs_hook=object_pairs_hook)
    except json.JSONDecodeError as e:
        raise BaselineReadError(path, f"invalid JSON ({e})") from e


def _check_leaves(node: Any, path: Path, prefix: str = "") -> None:
    items = node if isinstance(node, _Pairs) else node.items()
    for key, value in items:
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, (dict, _Pairs)):
            _check_leaves(value, path, full_key)
        elif not isinstance(value, str):
            raise BaselineReadError(
                path, f"value of '{full_key}' must be a string, got {type(value).__name__}"
            )


def load_translation_tree(path: str | Path) -> TranslationTree:
    """Read a persisted translation document.

    Raises:
        BaselineReadError: If the file is missing, is not valid JSON, is not
            a JSON object, or has a leaf that is not a string.
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, dict):
        raise BaselineReadError(path, "expected a JSON object at the top level")
    _check_leaves(data, path)
    return data


def load_translation_pairs(path: str | Path) -> list[tuple[str, Any]]:
    """Read a translation document without collapsing repeated keys.

    Every JSON object becomes a list of ``(key, value)`` pairs in file order,
    so a key written twice in the same object is still visible.
    """
    path = Path(path)
    data = _read_json(path, object_pairs_hook=_Pairs)
    if not isinstance(data, _Pairs):
        raise BaselineReadError(path, "expected a JSON object at the top level")
    _check_leaves(data, path)
    return data


def is_branch(value: Any) -> bool:
    return isinstance(value, (dict, _Pairs))


def pairs_to_tree(value: Any) -> Any:
    """Collapse raw pairs into plain dicts (last key wins, like JSON.parse)."""
    if isinstance(value, _Pairs):
        return {k: pairs_to_tree(v) for k, v in value}
    return value


# =============================================================================
# Writing
# =============================================================================


def companion_path(output: str | Path, suffix: str) -> Path:
    """``en.json`` -> ``en<suffix>`` (e.g. ``en.keymap.json``)."""
    output = Path(output)
    name = output.name.removesuffix(".json")
    return output.with_name(name + suffix)


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json(path: str | Path, data: Any) -> Path:
    """Write a JSON document atomically.

    The text goes to a temporary file in the target directory first and
    then replaces the target, so a failed write leaves no partial file.

    Raises:
        OutputWriteError: If the directory or file cannot be written.
    """
    return write_documents([(Path(path), data)])[0]


def _temp_path(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def _stage(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with _temp_path(path).open("w", encoding="utf-8") as fp:
        fp.write(text)
        fp.flush()
        os.fsync(fp.fileno())


def _discard(paths: list[Path]) -> None:
    for path in paths:
        temp_path = _temp_path(path)
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            logger.debug("  Could not remove %s", temp_path)


def write_documents(documents: list[tuple[Path, Any]]) -> list[Path]:
    """Write several documents as one unit.

    Every document is serialized, then every document is written to a
    temporary sibling, and only then are the targets replaced. A document
    that cannot be encoded or staged leaves all targets untouched.

    Raises:
        OutputWriteError: If a directory or file cannot be written.
    """
    rendered = [(Path(path), dump_json(data)) for path, data in documents]
    targets = [path for path, _ in rendered]

    current = targets[0] if targets else Path()
    try:
        for current, text in rendered:
            _stage(current, text)
        for current in targets:
            os.replace(_temp_path(current), current)
    except OSError as e:
        _discard(targets)
        raise OutputWriteError(current, e.strerror or str(e)) from e

    for path in targets:
        logger.debug("  Wrote %s", path)
    return targets
