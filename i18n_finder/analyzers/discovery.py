"""Source file discovery.

Selects the files to analyze with include/exclude glob patterns relative to
the scan root, plus optional per-repo patterns from ``.i18nfinderignore``.

Glob syntax:
    ``*`` any run of characters within one path segment, ``?`` one such
    character, ``**`` any number of directories, ``[abc]`` / ``[!abc]``
    character classes, ``{a,b}`` alternatives (may nest).

Hidden files and directories (leading ``.``) are never scanned.
"""

import os
import re
from functools import lru_cache
from pathlib import Path

from i18n_finder.logging import logger

IGNORE_FILENAME = ".i18nfinderignore"


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate patterns.

    Example:
        expand_braces("**/*.{js,ts}") == ["**/*.js", "**/*.ts"]
    """
    depth = 0
    start = -1
    for i, char in enumerate(pattern):
        if char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                options = _split_top_level(pattern[start + 1:i])
                if len(options) < 2:
                    continue
                prefix, suffix = pattern[:start], pattern[i + 1:]
                expanded: list[str] = []
                for option in options:
                    expanded.extend(expand_braces(prefix + option + suffix))
                return expanded
    return [pattern]


def _split_top_level(body: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current = ""
    for char in body:
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        current += char
    parts.append(current)
    return parts


def _translate(pattern: str) -> str:
    """Translate one brace-free glob into a regex body."""
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                at_segment_start = i == 0 or pattern[i - 1] == "/"
                if at_segment_start and pattern.startswith("**/", i):
                    out.append("(?:.*/)?")
                    i += 3
                    continue
                if at_segment_start and i + 2 == n:
                    out.append(".*")
                    i += 2
                    continue
                out.append(".*")
                i += 2
                continue
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = pattern[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        else:
            out.append(re.escape(char))
        i += 1
    return "".join(out)


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob (braces allowed) to a full-match regex on posix paths."""
    pattern = pattern.removeprefix("./")
    alternatives = [_translate(p) for p in expand_braces(pattern)]
    return re.compile("(?:" + "|".join(alternatives) + r")\Z")


def matches_any(rel_path: str, patterns: list[str] | tuple[str, ...]) -> bool:
    return any(compile_glob(p).match(rel_path) for p in patterns)


def _directory_prefixes(patterns: list[str]) -> list[str]:
    """Patterns of the form ``<dir>/**`` reduced to ``<dir>`` for pruning."""
    return [p[:-3] for p in patterns if p.endswith("/**") and len(p) > 3]


def parse_ignore_file(root: Path) -> list[str]:
    """Read ``.i18nfinderignore`` from the scan root.

    Each non-comment line is a glob; a bare name (no ``/``) matches that
    file or directory at any depth.
    """
    ignore_file = root / IGNORE_FILENAME
    if not ignore_file.is_file():
        return []

    patterns: list[str] = []
    try:
        content = ignore_file.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("  Failed to read %s: %s", ignore_file, e)
        return []

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            logger.debug("  Negation patterns not supported: %s", line)
            continue
        line = line.rstrip("/")
        if "/" not in line:
            patterns.extend([f"**/{line}", f"**/{line}/**"])
        else:
            patterns.extend([line.lstrip("/"), f"{line.lstrip('/')}/**"])
    return patterns


def discover_files(
    root: str | Path,
    include_patterns: list[str],
    exclude_patterns: list[str],
    use_ignore_file: bool = True,
) -> list[Path]:
    """Find the source files to analyze.

    Args:
        root: Scan root. A single file is returned as-is.
        include_patterns: Globs a file must match (relative to root).
        exclude_patterns: Globs that remove a file (or prune a directory).
        use_ignore_file: Also honour ``.i18nfinderignore`` in the root.

    Returns:
        Absolute paths, sorted for a deterministic processing order.
    """
    root = Path(root).resolve()
    if root.is_file():
        return [root]
    if not root.is_dir():
        return []

    excludes = list(exclude_patterns)
    if use_ignore_file:
        custom = parse_ignore_file(root)
        if custom:
            logger.debug("  Loaded %d patterns from %s", len(custom), IGNORE_FILENAME)
            excludes.extend(custom)
    prune = _directory_prefixes(excludes)

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir

        kept = []
        for name in dirnames:
            if name.startswith("."):
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if matches_any(rel, prune):
                continue
            kept.append(name)
        dirnames[:] = sorted(kept)

        for name in filenames:
            if name.startswith("."):
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if not matches_any(rel, include_patterns):
                continue
            if matches_any(rel, excludes):
                continue
            files.append(Path(dirpath) / name)

    return sorted(files)
