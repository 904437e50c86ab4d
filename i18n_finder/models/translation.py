"""Pydantic models for classification results and key lifecycle reports.

Field names are snake_case in Python and camelCase on the wire; dump with
``by_alias=True`` to produce the exported JSON documents.
"""

from collections import defaultdict
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OccurrenceKind = Literal[
    "TextNode",
    "AttributeLiteral",
    "AttributeExpression",
    "TemplateSegment",
    "ExpressionLiteral",
    "ReturnLiteral",
    "ConditionalReturnLiteral",
]

KeySource = Literal["existing", "hardcoded"]

# A persisted translation document: nested str -> (str | TranslationTree)
TranslationTree = dict[str, Any]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StringOccurrence(_WireModel):
    """One located literal that is a candidate for translation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    file: str = Field(description="Path of the source file")
    line: int = Field(description="1-based line of the literal")
    column: int = Field(description="0-based column of the literal")
    raw_value: str = Field(description="Literal text, trimmed")
    kind: OccurrenceKind = Field(description="Syntactic shape the text was found in")
    context: str = Field(default="", description="Enclosing tag or a descriptive label")


class KeyUsage(_WireModel):
    """One call of a translation function with a statically known key."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    key: str = Field(description="Key argument of the call")
    file: str = Field(description="Path of the source file")
    line: int = Field(description="1-based line of the key argument")
    column: int = Field(description="0-based column of the key argument")
    invoked_function: str = Field(description="Callee name, e.g. 't'")


class FileError(_WireModel):
    """A file that could not be analyzed."""

    file: str
    error: str


class ScanStats(_WireModel):
    """Counters accumulated over one classification run."""

    files_scanned: int = 0
    files_with_issues: int = 0
    total_strings: int = 0
    strings_by_type: dict[str, int] = Field(default_factory=dict)

    def record(self, occurrences: list[StringOccurrence]) -> None:
        """Account for the occurrences found in one successfully parsed file."""
        self.files_scanned += 1
        if occurrences:
            self.files_with_issues += 1
        for occ in occurrences:
            self.total_strings += 1
            self.strings_by_type[occ.kind] = self.strings_by_type.get(occ.kind, 0) + 1


class ScanResult(_WireModel):
    """Outcome of classifying every discovered file."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    root: str = Field(default="", description="Directory that was scanned")
    stats: ScanStats = Field(default_factory=ScanStats)
    results: list[StringOccurrence] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)

    def by_file(self) -> dict[str, list[StringOccurrence]]:
        grouped: dict[str, list[StringOccurrence]] = defaultdict(list)
        for occ in self.results:
            grouped[occ.file].append(occ)
        return dict(grouped)

    def export(self) -> dict[str, Any]:
        """The scan-result export document."""
        return self.model_dump(
            mode="json", by_alias=True, include={"timestamp", "stats", "results"}
        )


class UsageScanResult(_WireModel):
    """Outcome of extracting translation-call keys from every discovered file."""

    root: str = ""
    files_scanned: int = 0
    usages: list[KeyUsage] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)

    @property
    def used_keys(self) -> list[str]:
        """Distinct keys in first-seen order."""
        return list(dict.fromkeys(u.key for u in self.usages))


class KeyLocation(_WireModel):
    """A place in the source where a key's text lives or is used."""

    file: str
    line: int
    column: int | None = None


class KeyEntry(_WireModel):
    """A fully qualified key with its value and provenance."""

    full_key: str = Field(description="Dotted key path, unique within a run")
    value: str = Field(description="Translation text or placeholder")
    source: KeySource = Field(description="'existing' (found in a call) or 'hardcoded'")
    locations: list[KeyLocation] = Field(default_factory=list)


class GenerationResult(_WireModel):
    """Translation tree produced from hardcoded strings or key usages."""

    translations: TranslationTree = Field(default_factory=dict)
    entries: list[KeyEntry] = Field(default_factory=list)

    @property
    def key_count(self) -> int:
        return len(self.entries)

    def namespace_counts(self) -> dict[str, int]:
        """Number of keys per top-level namespace (``_root`` for undotted keys)."""
        counts: dict[str, int] = {}
        for entry in self.entries:
            ns = entry.full_key.split(".", 1)[0] if "." in entry.full_key else "_root"
            counts[ns] = counts.get(ns, 0) + 1
        return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


class CompletionResult(GenerationResult):
    """Union of extracted (existing) keys and keys generated for hardcoded text."""

    existing_count: int = 0
    new_count: int = 0

    @property
    def existing(self) -> list[KeyEntry]:
        return [e for e in self.entries if e.source == "existing"]

    @property
    def new(self) -> list[KeyEntry]:
        return [e for e in self.entries if e.source == "hardcoded"]


class ValidationReport(_WireModel):
    """Cross-reference of keys defined in a translation file and keys used in code."""

    translation_file: str = ""
    defined_keys: list[str] = Field(default_factory=list)
    used_keys: list[str] = Field(default_factory=list)
    missing: list[KeyUsage] = Field(
        default_factory=list, description="Call sites whose key is not defined"
    )
    unused: list[str] = Field(
        default_factory=list, description="Defined keys that no call site uses"
    )

    @property
    def missing_keys(self) -> list[str]:
        return list(dict.fromkeys(u.key for u in self.missing))

    @property
    def missing_by_file(self) -> dict[str, list[KeyUsage]]:
        grouped: dict[str, list[KeyUsage]] = defaultdict(list)
        for usage in self.missing:
            grouped[usage.file].append(usage)
        return dict(grouped)

    @property
    def has_issues(self) -> bool:
        return bool(self.missing or self.unused)


class DuplicateKey(_WireModel):
    """A key path that occurs more than once in one document."""

    key: str
    value: Any = Field(description="Value of the repeated occurrence")
    existing_value: Any = Field(description="Value of the first occurrence")


class DuplicateValueGroup(_WireModel):
    """Distinct keys that share the same translation text."""

    value: str
    keys: list[str]


class DuplicateReport(_WireModel):
    """Findings of a duplicate check over one translation document."""

    translation_file: str = ""
    duplicate_keys: list[DuplicateKey] = Field(default_factory=list)
    duplicate_values: list[DuplicateValueGroup] = Field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.duplicate_keys or self.duplicate_values)


class TranslationMatch(_WireModel):
    """A translation leaf whose value matched a search."""

    key: str
    value: str


class KeyUsageGroup(_WireModel):
    """All call sites of one matched key."""

    key: str
    value: str
    locations: list[KeyUsage]


class StringUsageReport(_WireModel):
    """Where the translations containing a piece of text are used in code."""

    query: str
    matching_keys: list[TranslationMatch] = Field(default_factory=list)
    usages: list[KeyUsageGroup] = Field(default_factory=list)

    @property
    def unused_matches(self) -> list[TranslationMatch]:
        used = {group.key for group in self.usages}
        return [m for m in self.matching_keys if m.key not in used]
