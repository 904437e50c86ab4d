"""Analyzers: parsing, string classification and key-usage extraction."""

from i18n_finder.analyzers.classifier import classify_tree
from i18n_finder.analyzers.discovery import discover_files, expand_braces
from i18n_finder.analyzers.key_usage import extract_key_usages
from i18n_finder.analyzers.parser import SUPPORTED_EXTENSIONS, parse_file, parse_source
from i18n_finder.analyzers.rules import exclusion_reason, should_exclude
from i18n_finder.analyzers.scanner import (
    FileAnalysis,
    ProjectAnalysis,
    analyze_file,
    analyze_project,
    scan_key_usages,
    scan_project,
)

__all__ = [
    # Parsing
    "parse_file",
    "parse_source",
    "SUPPORTED_EXTENSIONS",
    # Classification
    "classify_tree",
    "exclusion_reason",
    "should_exclude",
    # Key usages
    "extract_key_usages",
    # Discovery
    "discover_files",
    "expand_braces",
    # Scan driver
    "FileAnalysis",
    "ProjectAnalysis",
    "analyze_file",
    "analyze_project",
    "scan_key_usages",
    "scan_project",
]
