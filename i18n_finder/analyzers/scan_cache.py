"""Per-file analysis cache.

Stores the classified strings and key usages of each file so unchanged
files are not re-parsed on the next scan. The cache lives in
``<root>/.i18n-finder/scan_cache.msgpack`` and is only valid for the
rule set (config fingerprint) it was built with.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import msgpack

from i18n_finder.logging import logger

# Bump when the entry layout or the classification output changes
SCAN_CACHE_VERSION = "1.0"

CACHE_DIRNAME = ".i18n-finder"


@dataclass
class FileCacheEntry:
    """Cache entry for a single analyzed file."""

    mtime: float
    size: int
    occurrences: list[dict]  # StringOccurrence dumps
    usages: list[dict]  # KeyUsage dumps
    content_hash: str = ""
    error: str | None = None  # parse failure reason, if the file did not parse


@dataclass
class ScanCache:
    """Analysis results keyed by root-relative posix path."""

    version: str
    fingerprint: str
    created_at: str
    files: dict[str, FileCacheEntry] = field(default_factory=dict)

    @classmethod
    def empty(cls, fingerprint: str) -> "ScanCache":
        return cls(
            version=SCAN_CACHE_VERSION,
            fingerprint=fingerprint,
            created_at=datetime.now(UTC).isoformat(),
        )


def get_cache_path(root: Path) -> Path:
    return root / CACHE_DIRNAME / "scan_cache.msgpack"


def compute_file_hash(filepath: Path) -> str:
    """SHA256 of a file's contents, or empty string on error."""
    try:
        with filepath.open("rb") as f:
            return hashlib.sha256(f.read()).hexdigest()
    except OSError:
        return ""


def load_scan_cache(root: Path, fingerprint: str) -> ScanCache | None:
    """Load the cache for ``root`` if it exists and matches ``fingerprint``.

    Returns:
        ScanCache if valid, None otherwise (missing, corrupt, other version
        or built with a different configuration).
    """
    cache_path = get_cache_path(root)
    if not cache_path.exists():
        return None

    try:
        with cache_path.open("rb") as f:
            data = msgpack.unpack(f, raw=False)

        if not isinstance(data, dict):
            logger.warning("  Scan cache is not a mapping, ignoring cache")
            return None
        if data.get("version") != SCAN_CACHE_VERSION:
            logger.info("  Scan cache version mismatch, ignoring cache")
            return None
        if data.get("fingerprint") != fingerprint:
            logger.info("  Configuration changed since last scan, ignoring cache")
            return None

        files = {}
        for path, entry in data.get("files", {}).items():
            files[path] = FileCacheEntry(
                mtime=entry["mtime"],
                size=entry["size"],
                occurrences=entry["occurrences"],
                usages=entry["usages"],
                content_hash=entry.get("content_hash", ""),
                error=entry.get("error"),
            )

        return ScanCache(
            version=data["version"],
            fingerprint=data["fingerprint"],
            created_at=data["created_at"],
            files=files,
        )

    except (OSError, msgpack.UnpackException, msgpack.ExtraData, KeyError, TypeError, ValueError) as e:
        logger.warning("  Failed to load scan cache: %s", e)
        return None


def save_scan_cache(root: Path, cache: ScanCache) -> None:
    """Write the cache; failures are logged and otherwise ignored."""
    cache_path = get_cache_path(root)
    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": cache.version,
            "fingerprint": cache.fingerprint,
            "created_at": cache.created_at,
            "files": {
                path: {
                    "mtime": entry.mtime,
                    "size": entry.size,
                    "occurrences": entry.occurrences,
                    "usages": entry.usages,
                    "content_hash": entry.content_hash,
                    "error": entry.error,
                }
                for path, entry in cache.files.items()
            },
        }

        with cache_path.open("wb") as f:
            msgpack.pack(data, f)

        logger.info("  Saved scan cache with %d files (msgpack)", len(cache.files))

    except OSError as e:
        logger.warning("  Failed to save scan cache: %s", e)


def is_file_stale(file_path: Path, cache_key: str, cache: ScanCache) -> bool:
    """Check whether a file must be re-analyzed.

    Unchanged mtime and size means fresh. Same size with a new mtime falls
    back to comparing content hashes (git checkout, touch).
    """
    if cache_key not in cache.files:
        return True

    entry = cache.files[cache_key]

    try:
        stat = file_path.stat()

        if stat.st_mtime == entry.mtime and stat.st_size == entry.size:
            return False

        if stat.st_size != entry.size:
            return True

        if entry.content_hash:
            current_hash = compute_file_hash(file_path)
            if current_hash and current_hash == entry.content_hash:
                entry.mtime = stat.st_mtime
                return False

        return True

    except OSError:
        return True


def make_entry(
    file_path: Path,
    occurrences: list[dict],
    usages: list[dict],
    error: str | None = None,
) -> FileCacheEntry | None:
    """Build an entry from a fresh analysis; None if the file cannot be stat'd."""
    try:
        stat = file_path.stat()
    except OSError:
        return None
    return FileCacheEntry(
        mtime=stat.st_mtime,
        size=stat.st_size,
        occurrences=occurrences,
        usages=usages,
        content_hash=compute_file_hash(file_path),
        error=error,
    )
