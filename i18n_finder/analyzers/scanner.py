"""Project scan driver.

Discovers the files of a project, parses each one once and runs both the
string classifier and the key-usage extractor over the same tree. Files are
processed one at a time in sorted path order, so every downstream step
(key suffixing in particular) sees a deterministic occurrence order.

Per-file parse failures are logged and collected as diagnostics; they never
abort the run.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from i18n_finder.analyzers.classifier import classify_tree
from i18n_finder.analyzers.discovery import discover_files
from i18n_finder.analyzers.key_usage import extract_key_usages
from i18n_finder.analyzers.parser import parse_file
from i18n_finder.analyzers.scan_cache import (
    ScanCache,
    is_file_stale,
    load_scan_cache,
    make_entry,
    save_scan_cache,
)
from i18n_finder.config import FinderConfig
from i18n_finder.errors import ParseFailure
from i18n_finder.logging import log_operation, logger, progress_bar
from i18n_finder.models.translation import (
    FileError,
    KeyUsage,
    ScanResult,
    ScanStats,
    StringOccurrence,
    UsageScanResult,
)


@dataclass
class FileAnalysis:
    """Everything learned from one source file."""

    file: str
    occurrences: list[StringOccurrence] = field(default_factory=list)
    usages: list[KeyUsage] = field(default_factory=list)
    error: str | None = None


@dataclass
class ProjectAnalysis:
    """Per-file analyses of a whole project, in processing order."""

    root: Path
    files: list[FileAnalysis] = field(default_factory=list)
    cached_count: int = 0

    @property
    def errors(self) -> list[FileError]:
        return [FileError(file=f.file, error=f.error) for f in self.files if f.error]

    def scan_result(self) -> ScanResult:
        """Classification results with the per-run counters."""
        stats = ScanStats()
        results: list[StringOccurrence] = []
        for analysis in self.files:
            if analysis.error:
                continue
            stats.record(analysis.occurrences)
            results.extend(analysis.occurrences)
        return ScanResult(
            timestamp=datetime.now(UTC),
            root=str(self.root),
            stats=stats,
            results=results,
            errors=self.errors,
        )

    def usage_result(self) -> UsageScanResult:
        """Translation-call key usages of every file that parsed."""
        usages: list[KeyUsage] = []
        scanned = 0
        for analysis in self.files:
            if analysis.error:
                continue
            scanned += 1
            usages.extend(analysis.usages)
        return UsageScanResult(
            root=str(self.root),
            files_scanned=scanned,
            usages=usages,
            errors=self.errors,
        )


def relative_name(filepath: Path, root: Path) -> str:
    """Posix path of ``filepath`` relative to ``root`` (name only for a file root)."""
    if root.is_file():
        return filepath.name
    try:
        return filepath.relative_to(root).as_posix()
    except ValueError:
        return filepath.as_posix()


def analyze_file(filepath: Path, file: str, config: FinderConfig) -> FileAnalysis:
    """Parse one file and run both extractors over its tree.

    Args:
        filepath: Path to read.
        file: Path recorded on the produced records.
        config: Rule set.

    Returns:
        The analysis; ``error`` is set (and the lists empty) on parse failure.
    """
    try:
        tree, _ = parse_file(filepath)
    except ParseFailure as e:
        logger.warning("  Skipping %s: %s", file, e.reason)
        return FileAnalysis(file=file, error=e.reason)

    root_node = tree.root_node
    return FileAnalysis(
        file=file,
        occurrences=classify_tree(root_node, file, config),
        usages=extract_key_usages(root_node, file, config),
    )


def _from_cache(file: str, cache: ScanCache) -> FileAnalysis:
    entry = cache.files[file]
    return FileAnalysis(
        file=file,
        occurrences=[StringOccurrence.model_validate(o) for o in entry.occurrences],
        usages=[KeyUsage.model_validate(u) for u in entry.usages],
        error=entry.error,
    )


def analyze_project(
    root: str | Path,
    config: FinderConfig,
    use_cache: bool = False,
) -> ProjectAnalysis:
    """Analyze every file under ``root`` selected by the config's globs.

    Args:
        root: Project directory (or a single file).
        config: Rule set and discovery patterns.
        use_cache: Reuse results for unchanged files from
            ``<root>/.i18n-finder/scan_cache.msgpack`` and refresh it.

    Returns:
        ProjectAnalysis with one entry per discovered file.
    """
    root = Path(root).resolve()
    analysis = ProjectAnalysis(root=root)

    with log_operation("analyze_project", {"root": root}):
        files = discover_files(root, config.include_patterns, config.exclude_patterns)
        logger.info("  Found %d files to scan", len(files))

        cache_dir = root if root.is_dir() else root.parent
        cache: ScanCache | None = None
        if use_cache:
            cache = load_scan_cache(cache_dir, config.fingerprint())
            if cache:
                logger.info("  Loaded scan cache with %d entries", len(cache.files))
            else:
                cache = ScanCache.empty(config.fingerprint())

        for filepath in progress_bar(files, desc="Scanning files", total=len(files), unit="files"):
            file = relative_name(filepath, root)

            if cache is not None and not is_file_stale(filepath, file, cache):
                analysis.files.append(_from_cache(file, cache))
                analysis.cached_count += 1
                continue

            result = analyze_file(filepath, file, config)
            analysis.files.append(result)

            if cache is not None:
                entry = make_entry(
                    filepath,
                    [o.model_dump() for o in result.occurrences],
                    [u.model_dump() for u in result.usages],
                    result.error,
                )
                if entry is not None:
                    cache.files[file] = entry

        if cache is not None:
            current = {f.file for f in analysis.files}
            deleted = set(cache.files) - current
            for name in deleted:
                del cache.files[name]
            if deleted:
                logger.info("  Removed %d deleted files from cache", len(deleted))
            cache.created_at = datetime.now(UTC).isoformat()
            save_scan_cache(cache_dir, cache)

        failed = sum(1 for f in analysis.files if f.error)
        logger.info(
            "  %d files analyzed (%d cached, %d failed to parse)",
            len(analysis.files),
            analysis.cached_count,
            failed,
        )

    return analysis


def scan_project(
    root: str | Path,
    config: FinderConfig,
    use_cache: bool = False,
) -> ScanResult:
    """Classify hardcoded strings across a project."""
    return analyze_project(root, config, use_cache).scan_result()


def scan_key_usages(
    root: str | Path,
    config: FinderConfig,
    use_cache: bool = False,
) -> UsageScanResult:
    """Collect translation-function key usages across a project."""
    return analyze_project(root, config, use_cache).usage_result()
