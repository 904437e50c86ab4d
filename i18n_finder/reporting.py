"""Terminal reports.

Human-readable renderings of scan results and key lifecycle reports,
written to stdout with ``click``. The JSON export behind ``--json-output``
lives in the CLI.
"""

from pathlib import Path

import click

from i18n_finder.keys.lifecycle import source_link
from i18n_finder.models.translation import (
    CompletionResult,
    DuplicateReport,
    FileError,
    GenerationResult,
    ScanResult,
    StringUsageReport,
    ValidationReport,
)

RULE = "=" * 80
SAMPLE_SIZE = 5


def _heading(text: str) -> None:
    click.echo(click.style(f"\n{text}\n", fg="blue", bold=True))
    click.echo(click.style(RULE, dim=True))


def _footer() -> None:
    click.echo(click.style("\n" + RULE + "\n", dim=True))


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def report_file_errors(errors: list[FileError]) -> None:
    if not errors:
        return
    click.echo(click.style(f"\n⚠ {len(errors)} file(s) could not be parsed:", fg="yellow", bold=True))
    for error in errors:
        click.echo(click.style(f"   • {error.file}: {error.error}", dim=True))


def report_scan(result: ScanResult) -> None:
    """Summary, per-type counts and every occurrence grouped by file."""
    _heading("Scan Results")

    stats = result.stats
    click.echo(click.style("\nSummary:", fg="cyan"))
    click.echo(f"  Files scanned: {stats.files_scanned}")
    click.echo(f"  Files with issues: {stats.files_with_issues}")
    click.echo(f"  Total hardcoded strings: {stats.total_strings}")

    if stats.total_strings:
        click.echo(click.style("\nStrings by type:", fg="cyan"))
        for kind, count in sorted(stats.strings_by_type.items(), key=lambda kv: -kv[1]):
            click.echo(f"  {kind}: {count}")

    report_file_errors(result.errors)
    click.echo(click.style("\n" + RULE, dim=True))

    if not result.results:
        click.echo(click.style("\n✓ No hardcoded strings found! Your project is i18n ready.\n", fg="green", bold=True))
        return

    click.echo(click.style(f"\n⚠ Found {len(result.results)} hardcoded strings:", fg="yellow", bold=True))

    for file, occurrences in result.by_file().items():
        plural = "s" if len(occurrences) > 1 else ""
        click.echo(click.style(f"\n📄 {file}", fg="blue", bold=True))
        click.echo(click.style(f"   ({len(occurrences)} issue{plural})", dim=True))
        for index, occ in enumerate(occurrences, start=1):
            click.echo(click.style(f"\n   {index}. Line {occ.line}:{occ.column}", dim=True))
            click.echo(click.style(f"      Type: {occ.kind}", fg="yellow"))
            click.echo(f'      String: "{occ.raw_value}"')
            if occ.context:
                click.echo(click.style(f"      Context: {occ.context}", dim=True))

    _footer()
    click.echo(click.style("Next steps:", fg="cyan"))
    click.echo("   1. Generate a translation file: i18n-finder generate <path> locales/en.json")
    click.echo("   2. Replace hardcoded strings with t() calls using the keymap file")
    click.echo("   3. Validate keys: i18n-finder validate <path> locales/en.json")
    click.echo("   4. Run this scan again to verify\n")


def report_generation(result: GenerationResult, written: list[Path]) -> None:
    output, *companions = written
    click.echo(click.style(f"\n✓ Generated i18n file: {output}", fg="green"))
    click.echo(click.style(f"   Contains {result.key_count} translation keys", dim=True))
    for path in companions:
        click.echo(click.style(f"   Key mapping saved to: {path}\n", dim=True))


def report_extraction(result: GenerationResult, written: list[Path]) -> None:
    output, *companions = written
    click.echo(click.style(f"\n✓ Generated translation file: {output}", fg="green"))
    click.echo(click.style(f"   Contains {result.key_count} keys", dim=True))
    for path in companions:
        click.echo(click.style(f"   Key locations saved to: {path}", dim=True))

    click.echo(click.style("\nKeys by namespace:", fg="cyan"))
    for namespace, count in result.namespace_counts().items():
        click.echo(f"  {namespace}: {count}")

    click.echo(click.style("\nSample keys found:", fg="cyan"))
    for entry in result.entries[:10]:
        click.echo(click.style(f"  • {entry.full_key}", dim=True))
        if entry.locations:
            loc = entry.locations[0]
            click.echo(click.style(f"    └─ {loc.file}:{loc.line}", dim=True))
    if result.key_count > 10:
        click.echo(click.style(f"  ... and {result.key_count - 10} more", dim=True))
    click.echo("")


def report_completion(result: CompletionResult, written: list[Path]) -> None:
    output, *companions = written
    _heading("Complete Generation Results")

    click.echo(click.style(f"\n✓ Generated: {output}", fg="green", bold=True))
    click.echo(f"   Total keys: {result.key_count}")
    click.echo(click.style(f"   • Existing i18n keys: {result.existing_count}", fg="cyan"))
    click.echo(click.style(f"   • New keys (from hardcoded strings): {result.new_count}", fg="yellow"))
    for path in companions:
        click.echo(click.style(f"\n   Keymap saved to: {path}", dim=True))

    existing = result.existing
    if existing:
        click.echo(click.style("\nExisting keys (need translation values):", fg="cyan"))
        for entry in existing[:SAMPLE_SIZE]:
            click.echo(click.style(f"   • {entry.full_key}", dim=True))
        if len(existing) > SAMPLE_SIZE:
            click.echo(click.style(f"   ... and {len(existing) - SAMPLE_SIZE} more", dim=True))

    new = result.new
    if new:
        click.echo(click.style("\nNew keys (values pre-filled from hardcoded strings):", fg="yellow"))
        for entry in new[:SAMPLE_SIZE]:
            click.echo(click.style(f"   • {entry.full_key}", dim=True))
            click.echo(click.style(f'     "{_truncate(entry.value, 40)}"', dim=True))
        if len(new) > SAMPLE_SIZE:
            click.echo(click.style(f"   ... and {len(new) - SAMPLE_SIZE} more", dim=True))

    click.echo(click.style("\nNext steps:", fg="cyan"))
    step = 1
    if existing:
        click.echo(f"   {step}. Fill in translation values for existing keys")
        step += 1
    click.echo(f"   {step}. Replace hardcoded strings with t() calls using the keymap")
    click.echo(f"   {step + 1}. Run validation: i18n-finder validate <path> {output}")
    _footer()


def report_validation(report: ValidationReport, root: Path) -> None:
    _heading("Validation Results")

    click.echo(click.style("\nSummary:", fg="cyan"))
    click.echo(f"  Keys in translation file: {len(report.defined_keys)}")
    click.echo(f"  Keys used in code: {len(report.used_keys)}")
    click.echo(f"  Missing keys (used but not defined): {len(report.missing)}")
    click.echo(f"  Unused keys (defined but not used): {len(report.unused)}")

    if report.missing:
        click.echo(click.style(f"\n✗ Missing Keys ({len(report.missing)}):", fg="red", bold=True))
        click.echo(click.style("   These keys are used in code but not defined in translation file:\n", dim=True))
        for file, usages in report.missing_by_file.items():
            click.echo(click.style(f"   📄 {source_link(root, file, usages[0].line)}", fg="blue"))
            for usage in usages:
                click.echo(click.style(f"      {source_link(root, file, usage.line, usage.column)}", fg="yellow"))
                click.echo(click.style(f"      {usage.invoked_function}('{usage.key}')", dim=True))

    if report.unused:
        click.echo(click.style(f"\n⚠ Unused Keys ({len(report.unused)}):", fg="yellow", bold=True))
        click.echo(click.style("   These keys are defined but not found in code:\n", dim=True))
        for key in report.unused:
            click.echo(click.style(f"   • {key}", dim=True))

    if not report.has_issues:
        click.echo(click.style("\n✓ All keys are valid! No missing or unused keys found.", fg="green", bold=True))

    _footer()


def report_duplicates(report: DuplicateReport, limit: int = 20) -> None:
    _heading("Duplicate Check Results")

    if not report.has_issues:
        click.echo(click.style("\n✓ No duplicates found!\n", fg="green", bold=True))
        return

    if report.duplicate_keys:
        click.echo(click.style(f"\n✗ Duplicate Keys ({len(report.duplicate_keys)}):", fg="red", bold=True))
        click.echo(click.style("   The same key appears multiple times:\n", dim=True))
        for dup in report.duplicate_keys:
            click.echo(click.style(f"   • {dup.key}", fg="yellow"))
            click.echo(click.style(f'     Value 1: "{dup.existing_value}"', dim=True))
            click.echo(click.style(f'     Value 2: "{dup.value}"', dim=True))

    if report.duplicate_values:
        groups = report.duplicate_values
        click.echo(click.style(f"\n⚠ Duplicate Values ({len(groups)}):", fg="yellow", bold=True))
        click.echo(click.style("   The same translation text exists under multiple keys:\n", dim=True))
        for group in groups[:limit]:
            click.echo(click.style(f'   "{_truncate(group.value, 50)}"', fg="cyan"))
            for key in group.keys:
                click.echo(click.style(f"     • {key}", dim=True))
        if len(groups) > limit:
            click.echo(click.style(f"\n   ... and {len(groups) - limit} more", dim=True))

    _footer()


def report_string_usage(report: StringUsageReport, root: Path) -> None:
    if not report.matching_keys:
        click.echo(click.style(f'\n⚠ No translations found containing "{report.query}"\n', fg="yellow"))
        return

    click.echo(click.style(f"\nFound {len(report.matching_keys)} matching translation(s):\n", fg="cyan"))
    for match in report.matching_keys:
        click.echo(f"  • {click.style(match.key, bold=True)}")
        click.echo(click.style(f'    "{match.value}"\n', dim=True))

    _heading("Usage Results")

    if not report.usages:
        click.echo(click.style("\n⚠ No usages found in code for these keys.", fg="yellow", bold=True))
        click.echo(click.style("   The translation exists but might not be used anywhere.\n", dim=True))
        for match in report.matching_keys:
            click.echo(click.style(f"   • {match.key} - not used in code", dim=True))
    else:
        for group in report.usages:
            click.echo(click.style(f'\n✓ "{group.value}"', fg="green", bold=True))
            click.echo(click.style(f"   Key: {group.key}", fg="cyan"))
            click.echo(f"   Found in {len(group.locations)} location(s):\n")
            for usage in group.locations:
                link = source_link(root, usage.file, usage.line, usage.column)
                click.echo(click.style(f"   📄 {link}", fg="blue"))
                click.echo(click.style(f"      {usage.invoked_function}('{usage.key}')\n", dim=True))

        unused = report.unused_matches
        if unused:
            click.echo(click.style("\n⚠ Keys not found in code:", fg="yellow", bold=True))
            for match in unused:
                click.echo(click.style(f"   • {match.key}", dim=True))

    _footer()
