"""Translation-key generation, translation trees and key lifecycle operations."""

from i18n_finder.keys.generator import (
    KeyAllocator,
    generate_key,
    namespace_from_path,
    simple_hash,
)
from i18n_finder.keys.lifecycle import (
    check_duplicates,
    complete_translations,
    extract_translations,
    find_string_usage,
    generate_translations,
    validate_keys,
)
from i18n_finder.keys.tree import (
    SENTINEL,
    build_tree,
    flatten_tree,
    load_translation_pairs,
    load_translation_tree,
    merge_into_baseline,
)

__all__ = [
    # Key generation
    "KeyAllocator",
    "generate_key",
    "namespace_from_path",
    "simple_hash",
    # Trees
    "SENTINEL",
    "build_tree",
    "flatten_tree",
    "load_translation_tree",
    "load_translation_pairs",
    "merge_into_baseline",
    # Lifecycle
    "check_duplicates",
    "complete_translations",
    "extract_translations",
    "find_string_usage",
    "generate_translations",
    "validate_keys",
]
