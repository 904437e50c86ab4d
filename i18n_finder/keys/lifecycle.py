"""Key lifecycle operations.

Pure transforms from scan records (and a persisted baseline, where one is
needed) to new translation documents or reports:

- generate: hardcoded strings -> namespaced keys with the text as value
- extract: translation-call keys -> keys with a placeholder value
- complete: extract + generate over the same project, unioned
- validate: defined keys vs. keys used in code
- check_duplicates: repeated key paths and repeated values in one document
- find_string_usage: translations containing some text, and their call sites

``save_*`` helpers write an operation's documents atomically once every
document has been built.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from i18n_finder.config import FinderConfig
from i18n_finder.errors import NoInputError
from i18n_finder.keys.generator import KeyAllocator, generate_key, namespace_from_path
from i18n_finder.keys.tree import (
    build_tree,
    companion_path,
    flatten_tree,
    is_branch,
    iter_leaves,
    merge_into_baseline,
    pairs_to_tree,
    write_documents,
)
from i18n_finder.logging import logger
from i18n_finder.models.translation import (
    CompletionResult,
    DuplicateKey,
    DuplicateReport,
    DuplicateValueGroup,
    GenerationResult,
    KeyEntry,
    KeyLocation,
    KeyUsage,
    KeyUsageGroup,
    StringOccurrence,
    StringUsageReport,
    TranslationMatch,
    TranslationTree,
    ValidationReport,
)

# =============================================================================
# Entry builders
# =============================================================================


def _generated_entries(
    occurrences: Sequence[StringOccurrence],
    config: FinderConfig,
    namespaced: bool,
) -> list[KeyEntry]:
    allocator = KeyAllocator()
    entries: list[KeyEntry] = []
    for occ in occurrences:
        namespace = namespace_from_path(occ.file, config) if namespaced else ""
        fragment = generate_key(occ.raw_value, config.max_key_length, config.fallback_key_prefix)
        entries.append(
            KeyEntry(
                full_key=allocator.allocate(namespace, fragment),
                value=occ.raw_value,
                source="hardcoded",
                locations=[KeyLocation(file=occ.file, line=occ.line, column=occ.column)],
            )
        )
    return entries


def _extracted_entries(usages: Sequence[KeyUsage], placeholder: str) -> list[KeyEntry]:
    by_key: dict[str, KeyEntry] = {}
    for usage in usages:
        entry = by_key.get(usage.key)
        if entry is None:
            entry = by_key[usage.key] = KeyEntry(
                full_key=usage.key, value=placeholder, source="existing"
            )
        entry.locations.append(KeyLocation(file=usage.file, line=usage.line, column=usage.column))
    return list(by_key.values())


# =============================================================================
# Operations
# =============================================================================


def generate_translations(
    occurrences: Sequence[StringOccurrence],
    config: FinderConfig,
    flat: bool = False,
    namespace: bool = True,
) -> GenerationResult:
    """Assign a unique key to every hardcoded string.

    Keys are ``<namespace>.<fragment>`` where the namespace comes from the
    file path; the first occurrence of a key keeps it unsuffixed.

    Args:
        occurrences: Classified strings in scan order.
        config: Key-generation settings.
        flat: Write a flat document (implies no namespace).
        namespace: Prefix keys with the file-derived namespace.

    Raises:
        NoInputError: If there are no occurrences.
    """
    if not occurrences:
        raise NoInputError("generate", "No hardcoded strings found to generate translations from.")

    entries = _generated_entries(occurrences, config, namespaced=namespace and not flat)
    translations = build_tree(((e.full_key, e.value) for e in entries), flat=flat)
    logger.info("  Generated %d keys from %d strings", len(entries), len(occurrences))
    return GenerationResult(translations=translations, entries=entries)


def extract_translations(usages: Sequence[KeyUsage], placeholder: str = "") -> GenerationResult:
    """One placeholder leaf per distinct key used in translation calls.

    Raises:
        NoInputError: If no static key usages were found.
    """
    if not usages:
        raise NoInputError("extract", "No i18n keys found in the codebase.")

    entries = _extracted_entries(usages, placeholder)
    translations = build_tree((e.full_key, e.value) for e in entries)
    logger.info("  Extracted %d unique keys from %d usages", len(entries), len(usages))
    return GenerationResult(translations=translations, entries=entries)


def complete_translations(
    occurrences: Sequence[StringOccurrence],
    usages: Sequence[KeyUsage],
    config: FinderConfig,
    flat: bool = False,
    namespace: bool = True,
    placeholder: str = "",
    baseline: TranslationTree | None = None,
) -> CompletionResult:
    """Union of extracted keys and keys generated for hardcoded strings.

    When both sides produce the same full key, the extracted entry keeps its
    value and source and gains the generated entry's locations. With a
    baseline, its leaves are kept as they are and only new keys are added.

    Raises:
        NoInputError: If neither side yields a key.
    """
    existing = _extracted_entries(usages, placeholder)
    generated = _generated_entries(occurrences, config, namespaced=namespace and not flat)
    if not existing and not generated:
        raise NoInputError("complete", "No i18n keys or hardcoded strings found.")

    merged: dict[str, KeyEntry] = {e.full_key: e for e in existing}
    new_count = 0
    for entry in generated:
        current = merged.get(entry.full_key)
        if current is None:
            merged[entry.full_key] = entry
            new_count += 1
            continue
        logger.debug("  Key %s already used in code; keeping its entry", entry.full_key)
        merged[entry.full_key] = current.model_copy(
            update={"locations": current.locations + entry.locations}
        )

    entries = list(merged.values())
    translations = build_tree(((e.full_key, e.value) for e in entries), flat=flat)

    if baseline is not None:
        translations = merge_into_baseline(baseline, translations, flat=flat)

    logger.info("  %d existing keys, %d new keys", len(existing), new_count)
    return CompletionResult(
        translations=translations,
        entries=entries,
        existing_count=len(existing),
        new_count=new_count,
    )


def validate_keys(
    translations: TranslationTree,
    usages: Sequence[KeyUsage],
    translation_file: str = "",
) -> ValidationReport:
    """Compare the keys a document defines with the keys code uses.

    ``missing`` lists every call site whose key is not defined; ``unused``
    lists defined keys no call site uses, in document order.
    """
    defined = list(flatten_tree(translations))
    defined_set = set(defined)
    used = list(dict.fromkeys(u.key for u in usages))
    used_set = set(used)

    return ValidationReport(
        translation_file=translation_file,
        defined_keys=defined,
        used_keys=used,
        missing=[u for u in usages if u.key not in defined_set],
        unused=[key for key in defined if key not in used_set],
    )


def _collect_repeated_paths(
    node: list[tuple[str, Any]],
    prefix: str,
    seen: dict[str, Any],
    duplicates: list[DuplicateKey],
) -> None:
    for key, value in node:
        full_key = f"{prefix}.{key}" if prefix else key
        plain = pairs_to_tree(value)
        if full_key in seen:
            duplicates.append(DuplicateKey(key=full_key, value=plain, existing_value=seen[full_key]))
        else:
            seen[full_key] = plain
        if is_branch(value):
            _collect_repeated_paths(value, full_key, seen, duplicates)


def check_duplicates(pairs: list[tuple[str, Any]], translation_file: str = "") -> DuplicateReport:
    """Find repeated key paths and values shared by several keys.

    Args:
        pairs: Document as returned by ``load_translation_pairs``; repeated
            keys in one object and dotted keys that collide with nested ones
            (``"a.b"`` next to ``{"a": {"b": ...}}``) are both reported.
        translation_file: Path shown in the report.
    """
    duplicate_keys: list[DuplicateKey] = []
    _collect_repeated_paths(pairs, "", {}, duplicate_keys)

    by_value: dict[str, list[str]] = {}
    for key, value in iter_leaves(pairs_to_tree(pairs)):
        if not isinstance(value, str) or not value.strip():
            continue
        keys = by_value.setdefault(value, [])
        if key not in keys:
            keys.append(key)

    duplicate_values = [
        DuplicateValueGroup(value=value, keys=keys)
        for value, keys in by_value.items()
        if len(keys) > 1
    ]

    return DuplicateReport(
        translation_file=translation_file,
        duplicate_keys=duplicate_keys,
        duplicate_values=duplicate_values,
    )


def find_string_usage(
    translations: TranslationTree,
    query: str,
    usages: Sequence[KeyUsage],
) -> StringUsageReport:
    """Translations whose text contains ``query`` (case-insensitive) and their call sites."""
    needle = query.lower()
    matches = [
        TranslationMatch(key=key, value=value)
        for key, value in iter_leaves(translations)
        if needle in value.lower()
    ]

    groups: list[KeyUsageGroup] = []
    for match in matches:
        locations = [u for u in usages if u.key == match.key]
        if locations:
            groups.append(KeyUsageGroup(key=match.key, value=match.value, locations=locations))

    return StringUsageReport(query=query, matching_keys=matches, usages=groups)


# =============================================================================
# Companion documents
# =============================================================================


def source_link(root: Path, file: str, line: int | None = None, column: int | None = None) -> str:
    """Clickable ``/abs/path:line[:column]`` for a root-relative file."""
    base = root if root.is_dir() else root.parent
    link = str((base / file).resolve())
    if line:
        link += f":{line}"
        if column:
            link += f":{column}"
    return link


def build_keymap(entries: Sequence[KeyEntry], root: Path) -> dict[str, Any]:
    """Audit document: full key -> value, source and locations with links."""
    return {
        entry.full_key: {
            "value": entry.value,
            "source": entry.source,
            "locations": [
                {"file": loc.file, "line": loc.line, "link": source_link(root, loc.file, loc.line)}
                for loc in entry.locations
            ],
        }
        for entry in entries
    }


def build_locations(entries: Sequence[KeyEntry], root: Path) -> dict[str, Any]:
    """Key -> every call site, with links including the column."""
    return {
        entry.full_key: [
            {
                "file": loc.file,
                "line": loc.line,
                "column": loc.column,
                "link": source_link(root, loc.file, loc.line, loc.column),
            }
            for loc in entry.locations
        ]
        for entry in entries
    }


def save_generation(result: GenerationResult, output: str | Path, root: Path) -> list[Path]:
    """Write the translation document and its ``.keymap.json`` companion."""
    output = Path(output)
    return write_documents(
        [
            (output, result.translations),
            (companion_path(output, ".keymap.json"), build_keymap(result.entries, root)),
        ]
    )


def save_extraction(
    result: GenerationResult,
    output: str | Path,
    root: Path,
    with_locations: bool = False,
) -> list[Path]:
    """Write the extracted document and, optionally, ``.locations.json``."""
    output = Path(output)
    documents: list[tuple[Path, Any]] = [(output, result.translations)]
    if with_locations:
        documents.append(
            (companion_path(output, ".locations.json"), build_locations(result.entries, root))
        )
    return write_documents(documents)
