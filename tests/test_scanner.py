"""Tests for the project scan driver and its cache."""

from pathlib import Path

from i18n_finder.analyzers.scan_cache import get_cache_path, load_scan_cache
from i18n_finder.analyzers.scanner import analyze_project, scan_key_usages, scan_project
from i18n_finder.config import FinderConfig


class TestScanProject:
    """Classification across a project."""

    def test_stats_and_order(self, project: Path, config: FinderConfig) -> None:
        result = scan_project(project, config)
        assert result.stats.files_scanned == 2
        assert result.stats.files_with_issues == 2
        assert result.stats.total_strings == 4
        assert result.stats.strings_by_type == {"TextNode": 2, "AttributeLiteral": 2}
        assert [o.raw_value for o in result.results] == [
            "Profile Settings",
            "Welcome to the App",
            "Click Me",
            "Enter your name",
        ]
        assert result.errors == []

    def test_relative_posix_paths(self, project: Path, config: FinderConfig) -> None:
        files = set(scan_project(project, config).by_file())
        assert files == {"src/profile/index.tsx", "src/screens/auth/LoginForm.jsx"}

    def test_broken_file_reported_not_fatal(self, broken_project: Path, config: FinderConfig) -> None:
        result = scan_project(broken_project, config)
        assert [e.file for e in result.errors] == ["src/Broken.jsx"]
        assert "syntax error" in result.errors[0].error
        assert result.stats.files_scanned == 2
        assert result.stats.total_strings == 4

    def test_single_file_root(self, project: Path, config: FinderConfig) -> None:
        result = scan_project(project / "src" / "profile" / "index.tsx", config)
        assert [(o.file, o.raw_value) for o in result.results] == [("index.tsx", "Profile Settings")]

    def test_export_document(self, project: Path, config: FinderConfig) -> None:
        exported = scan_project(project, config).export()
        assert set(exported) == {"timestamp", "stats", "results"}
        assert exported["stats"]["filesScanned"] == 2
        assert exported["results"][0]["rawValue"] == "Profile Settings"


class TestScanKeyUsages:
    """Translation-call keys across a project."""

    def test_usages(self, project: Path, config: FinderConfig) -> None:
        result = scan_key_usages(project, config)
        assert [u.key for u in result.usages] == ["profile.subtitle", "profile.hint", "login.title"]
        assert result.files_scanned == 2

    def test_custom_function_names(self, project: Path, config: FinderConfig) -> None:
        custom = config.with_overrides(i18n_function_names=("translate",))
        assert scan_key_usages(project, custom).usages == []


class TestScanCache:
    """Reuse of per-file results."""

    def test_second_run_uses_cache(self, project: Path, config: FinderConfig) -> None:
        first = analyze_project(project, config, use_cache=True)
        assert first.cached_count == 0
        assert get_cache_path(project.resolve()).exists()

        second = analyze_project(project, config, use_cache=True)
        assert second.cached_count == 2
        assert second.scan_result().results == first.scan_result().results
        assert second.usage_result().usages == first.usage_result().usages

    def test_changed_file_reanalyzed(self, project: Path, config: FinderConfig) -> None:
        analyze_project(project, config, use_cache=True)
        target = project / "src" / "profile" / "index.tsx"
        target.write_text("export const P = () => <h1>Account Details</h1>;\n")

        again = analyze_project(project, config, use_cache=True)
        assert again.cached_count == 1
        assert "Account Details" in [o.raw_value for o in again.scan_result().results]

    def test_config_change_invalidates(self, project: Path, config: FinderConfig) -> None:
        analyze_project(project, config, use_cache=True)
        stricter = config.with_overrides(min_string_length=12)
        again = analyze_project(project, stricter, use_cache=True)
        assert again.cached_count == 0
        assert [o.raw_value for o in again.scan_result().results] == [
            "Profile Settings",
            "Welcome to the App",
            "Enter your name",
        ]

    def test_deleted_file_dropped(self, project: Path, config: FinderConfig) -> None:
        analyze_project(project, config, use_cache=True)
        (project / "src" / "profile" / "index.tsx").unlink()
        analyze_project(project, config, use_cache=True)

        cache = load_scan_cache(project.resolve(), config.fingerprint())
        assert cache is not None
        assert set(cache.files) == {"src/screens/auth/LoginForm.jsx"}

    def test_parse_errors_cached(self, broken_project: Path, config: FinderConfig) -> None:
        analyze_project(broken_project, config, use_cache=True)
        again = analyze_project(broken_project, config, use_cache=True)
        assert again.cached_count == 3
        assert [e.file for e in again.errors] == ["src/Broken.jsx"]

    def test_corrupt_cache_ignored(self, project: Path, config: FinderConfig) -> None:
        cache_path = get_cache_path(project.resolve())
        cache_path.parent.mkdir(parents=True)
        cache_path.write_bytes(b"\x01")
        assert load_scan_cache(project.resolve(), config.fingerprint()) is None

        result = analyze_project(project, config, use_cache=True)
        assert result.cached_count == 0
        assert load_scan_cache(project.resolve(), config.fingerprint()) is not None

    def test_cache_disabled_by_default(self, project: Path, config: FinderConfig) -> None:
        analyze_project(project, config)
        assert not get_cache_path(project.resolve()).exists()
