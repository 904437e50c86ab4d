"""CLI interface for i18n-finder.

Finds hardcoded user-facing strings in JavaScript/TypeScript UI code and
manages the translation keys derived from them.

Exit codes: 0 success (including "nothing to do"), 1 issues found with
``--fail-on-issues``, 2 fatal error (bad configuration, unreadable
translation file, failed write).
"""

import functools
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from i18n_finder import __version__
from i18n_finder.config import FinderConfig, load_config
from i18n_finder.errors import I18nFinderError, NoInputError
from i18n_finder.logging import set_verbosity

EXIT_ISSUES = 1
EXIT_FATAL = 2

_path_argument = click.argument(
    "path",
    type=click.Path(exists=True, resolve_path=True, path_type=Path),
    default=".",
    required=False,
)


def scan_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that scans source files."""
    options = [
        click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False, path_type=Path),
            help="JSON configuration override (default: $I18N_FINDER_CONFIG)",
        ),
        click.option(
            "--min-length",
            type=click.IntRange(min=1),
            help="Minimum trimmed string length to report",
        ),
        click.option(
            "--include",
            multiple=True,
            help="Glob of files to scan, relative to PATH (repeatable, replaces defaults)",
        ),
        click.option(
            "--exclude",
            multiple=True,
            help="Glob of files to skip (repeatable, replaces defaults)",
        ),
        click.option(
            "--function-name",
            "function_names",
            multiple=True,
            help="Translation function name (repeatable, replaces defaults)",
        ),
        click.option(
            "--cache/--no-cache",
            default=False,
            help="Reuse results for unchanged files from PATH/.i18n-finder (default: off)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


_json_output_option = click.option(
    "--json-output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also export the report as JSON to this file",
)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn package errors into messages and exit codes."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except NoInputError as e:
            click.echo(click.style(f"\n⚠ {e}\n", fg="yellow"))
            return None
        except I18nFinderError as e:
            click.echo(click.style(f"Error: {e}", fg="red"), err=True)
            sys.exit(EXIT_FATAL)

    return wrapper


def _build_config(
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
) -> FinderConfig:
    config = load_config(config_path)
    return config.with_overrides(
        min_string_length=min_length,
        include_patterns=include,
        exclude_patterns=exclude,
        i18n_function_names=function_names,
    )


def _export_json(path: Path | None, model: Any) -> None:
    if path is None:
        return
    from i18n_finder.keys.tree import write_json

    write_json(path, model.model_dump(mode="json", by_alias=True))
    click.echo(click.style(f"✓ Results exported to {path}\n", fg="green"))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="i18n-finder")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """i18n-finder - find hardcoded strings and manage translation keys.

    Without a command, scans the current directory.
    """
    set_verbosity(verbose=verbose, quiet=quiet)
    if ctx.invoked_subcommand is None:
        ctx.invoke(scan)


@cli.command()
@_path_argument
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Export scan results as JSON",
)
@click.option(
    "-g",
    "--generate",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also generate a translation file from the detected strings",
)
@click.option("--flat", is_flag=True, help="Generate a flat translation file")
@click.option("--no-namespace", is_flag=True, help="Do not prefix keys with file namespaces")
@scan_options
@handle_errors
def scan(
    path: Path,
    output: Path | None,
    generate: Path | None,
    flat: bool,
    no_namespace: bool,
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
    cache: bool,
) -> None:
    """Scan for hardcoded user-facing strings.

    PATH: Project directory or single file (default: current directory).
    """
    from i18n_finder.analyzers.scanner import scan_project
    from i18n_finder.keys.lifecycle import generate_translations, save_generation
    from i18n_finder.keys.tree import write_json
    from i18n_finder.reporting import report_generation, report_scan

    config = _build_config(config_path, min_length, include, exclude, function_names)
    result = scan_project(path, config, use_cache=cache)
    report_scan(result)

    if output is not None:
        write_json(output, result.export())
        click.echo(click.style(f"✓ Results exported to {output}\n", fg="green"))

    if generate is not None:
        generation = generate_translations(
            result.results, config, flat=flat, namespace=not no_namespace
        )
        report_generation(generation, save_generation(generation, generate, path))


@cli.command()
@click.argument("path", type=click.Path(exists=True, resolve_path=True, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--flat", is_flag=True, help="Generate a flat translation file")
@click.option("--no-namespace", is_flag=True, help="Do not prefix keys with file namespaces")
@scan_options
@handle_errors
def generate(
    path: Path,
    output: Path,
    flat: bool,
    no_namespace: bool,
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
    cache: bool,
) -> None:
    """Generate a translation file from hardcoded strings.

    PATH: Project directory to scan.
    OUTPUT: Translation file to write (a .keymap.json is written beside it).
    """
    from i18n_finder.analyzers.scanner import scan_project
    from i18n_finder.keys.lifecycle import generate_translations, save_generation
    from i18n_finder.reporting import report_file_errors, report_generation

    config = _build_config(config_path, min_length, include, exclude, function_names)
    result = scan_project(path, config, use_cache=cache)
    report_file_errors(result.errors)

    generation = generate_translations(
        result.results, config, flat=flat, namespace=not no_namespace
    )
    report_generation(generation, save_generation(generation, output, path))


@cli.command()
@click.argument("path", type=click.Path(exists=True, resolve_path=True, path_type=Path))
@click.argument("translation_file", type=click.Path(path_type=Path))
@_json_output_option
@click.option("--fail-on-issues", is_flag=True, help="Exit with code 1 if keys are missing or unused")
@scan_options
@handle_errors
def validate(
    path: Path,
    translation_file: Path,
    json_output: Path | None,
    fail_on_issues: bool,
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
    cache: bool,
) -> None:
    """Find missing and unused translation keys.

    PATH: Project directory to scan.
    TRANSLATION_FILE: Translation file defining the keys.
    """
    from i18n_finder.analyzers.scanner import scan_key_usages
    from i18n_finder.keys.lifecycle import validate_keys
    from i18n_finder.keys.tree import load_translation_tree
    from i18n_finder.reporting import report_file_errors, report_validation

    translations = load_translation_tree(translation_file)
    config = _build_config(config_path, min_length, include, exclude, function_names)
    usage = scan_key_usages(path, config, use_cache=cache)
    report_file_errors(usage.errors)

    report = validate_keys(translations, usage.usages, str(translation_file))
    report_validation(report, path)
    _export_json(json_output, report)

    if fail_on_issues and report.has_issues:
        sys.exit(EXIT_ISSUES)


@cli.command("extract-keys")
@click.argument("path", type=click.Path(exists=True, resolve_path=True, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--placeholder", default="", help="Value for every extracted key (default: empty)")
@click.option("--with-locations", is_flag=True, help="Also write a .locations.json file")
@_json_output_option
@scan_options
@handle_errors
def extract_keys(
    path: Path,
    output: Path,
    placeholder: str,
    with_locations: bool,
    json_output: Path | None,
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
    cache: bool,
) -> None:
    """Build a translation file from keys already used in t() calls.

    PATH: Project directory to scan.
    OUTPUT: Translation file to write.
    """
    from i18n_finder.analyzers.scanner import scan_key_usages
    from i18n_finder.keys.lifecycle import extract_translations, save_extraction
    from i18n_finder.reporting import report_extraction, report_file_errors

    config = _build_config(config_path, min_length, include, exclude, function_names)
    usage = scan_key_usages(path, config, use_cache=cache)
    report_file_errors(usage.errors)

    result = extract_translations(usage.usages, placeholder=placeholder)
    report_extraction(result, save_extraction(result, output, path, with_locations))
    _export_json(json_output, result)


@cli.command()
@click.argument("path", type=click.Path(exists=True, resolve_path=True, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--flat", is_flag=True, help="Generate a flat translation file")
@click.option("--no-namespace", is_flag=True, help="Do not prefix new keys with file namespaces")
@click.option("--placeholder", default="", help="Value for keys found in t() calls (default: empty)")
@click.option(
    "--baseline",
    type=click.Path(path_type=Path),
    help="Existing translation file to merge into; its values are kept",
)
@_json_output_option
@scan_options
@handle_errors
def complete(
    path: Path,
    output: Path,
    flat: bool,
    no_namespace: bool,
    placeholder: str,
    baseline: Path | None,
    json_output: Path | None,
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
    cache: bool,
) -> None:
    """Existing keys from t() calls plus new keys for hardcoded strings.

    PATH: Project directory to scan.
    OUTPUT: Translation file to write (a .keymap.json is written beside it).
    """
    from i18n_finder.analyzers.scanner import analyze_project
    from i18n_finder.keys.lifecycle import complete_translations, save_generation
    from i18n_finder.keys.tree import load_translation_tree
    from i18n_finder.reporting import report_completion, report_file_errors

    baseline_tree = load_translation_tree(baseline) if baseline is not None else None
    config = _build_config(config_path, min_length, include, exclude, function_names)
    analysis = analyze_project(path, config, use_cache=cache)
    report_file_errors(analysis.errors)

    scan_result = analysis.scan_result()
    usage = analysis.usage_result()
    result = complete_translations(
        scan_result.results,
        usage.usages,
        config,
        flat=flat,
        namespace=not no_namespace,
        placeholder=placeholder,
        baseline=baseline_tree,
    )
    report_completion(result, save_generation(result, output, path))
    _export_json(json_output, result)


@cli.command("check-duplicates")
@click.argument("translation_file", type=click.Path(path_type=Path))
@_json_output_option
@click.option("--fail-on-issues", is_flag=True, help="Exit with code 1 if duplicates are found")
@handle_errors
def check_duplicates(translation_file: Path, json_output: Path | None, fail_on_issues: bool) -> None:
    """Find repeated keys and repeated values in a translation file.

    TRANSLATION_FILE: Translation file to check.
    """
    from i18n_finder.keys.lifecycle import check_duplicates as run_check
    from i18n_finder.keys.tree import load_translation_pairs
    from i18n_finder.reporting import report_duplicates

    report = run_check(load_translation_pairs(translation_file), str(translation_file))
    report_duplicates(report)
    _export_json(json_output, report)

    if fail_on_issues and report.has_issues:
        sys.exit(EXIT_ISSUES)


@cli.command("find-string")
@click.argument("path", type=click.Path(exists=True, resolve_path=True, path_type=Path))
@click.argument("text")
@click.option(
    "-t",
    "--translation-file",
    type=click.Path(path_type=Path),
    required=True,
    help="Translation file to search",
)
@_json_output_option
@scan_options
@handle_errors
def find_string(
    path: Path,
    text: str,
    translation_file: Path,
    json_output: Path | None,
    config_path: Path | None,
    min_length: int | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    function_names: tuple[str, ...],
    cache: bool,
) -> None:
    """Find where translations containing TEXT are used.

    PATH: Project directory to scan.
    TEXT: Text to look for in translation values (case-insensitive).
    """
    from i18n_finder.analyzers.scanner import scan_key_usages
    from i18n_finder.keys.lifecycle import find_string_usage
    from i18n_finder.keys.tree import load_translation_tree
    from i18n_finder.reporting import report_string_usage

    translations = load_translation_tree(translation_file)
    click.echo(click.style(f'\nFinding usage of "{text}"...', fg="blue", bold=True))

    config = _build_config(config_path, min_length, include, exclude, function_names)
    usage = scan_key_usages(path, config, use_cache=cache)

    report = find_string_usage(translations, text, usage.usages)
    report_string_usage(report, path)
    _export_json(json_output, report)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
