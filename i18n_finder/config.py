"""Configuration for string classification and key generation.

All knobs live on one validated model, ``FinderConfig``. Override documents
are JSON objects whose keys may be written in snake_case or camelCase
(``minStringLength`` and ``min_string_length`` are equivalent). Any field
present in an override replaces the default wholesale; unknown keys are
rejected.

Environment:
    I18N_FINDER_CONFIG: Default override document used by the CLI when
        ``--config`` is not given.
"""

import hashlib
import json
import os
import re
from functools import cached_property
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from i18n_finder.errors import ConfigurationError

CONFIG_ENV_VAR = "I18N_FINDER_CONFIG"

DEFAULT_INCLUDE_PATTERNS = ["**/*.{js,jsx,ts,tsx}"]

DEFAULT_EXCLUDE_PATTERNS = [
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.expo/**",
    "**/.git/**",
    "**/coverage/**",
    "**/__tests__/**",
    "**/*.test.{js,jsx,ts,tsx}",
    "**/*.spec.{js,jsx,ts,tsx}",
]

# Text that already looks like a translation call
DEFAULT_I18N_PATTERNS = [
    r"^t\(",
    r"^i18n\.",
    r"translate\(",
    r"^intl\.",
    r"formatMessage\(",
    r"^__\(",
    r"^_\(",
]

DEFAULT_I18N_FUNCTION_NAMES = [
    "useTranslation",
    "useIntl",
    "withTranslation",
    "t",
    "translate",
    "__",
    "_",
]

# Values that are typically not user-facing
DEFAULT_EXCLUDE_STRING_PATTERNS = [
    r"^[a-z][a-zA-Z0-9]*$",  # camelCase identifiers (likely prop names)
    r"^[A-Z_]+$",  # CONSTANT_NAMES
    r"^#[0-9a-fA-F]{3,8}$",  # hex colors
    r"(?i)^rgba?\(",  # rgb/rgba colors
    r"(?i)^https?://",  # URLs
    r"^\.{1,2}/",  # relative paths
    r"^/",  # absolute paths
    r"^@",  # package imports
    r"^data:",  # data URIs
    r"(?i)^\d+px$",  # CSS units
    r"^\d+%$",  # percentages
    r"^[<>]=?$",  # comparison operators
    r"^\s*$",  # empty or whitespace only
]

DEFAULT_EXCLUDE_ATTRIBUTE_NAMES = [
    "testID",
    "accessibilityLabel",
    "accessibilityHint",
    "key",
    "ref",
    "style",
    "className",
    "id",
    "type",
    "name",
    "value",
    "defaultValue",
    "href",
    "src",
    "alt",
    "role",
    "aria-label",
    "aria-describedby",
    "data-testid",
    "as",
]

DEFAULT_NAMESPACE_SKIP_DIRS = ["src", "app", "lib", "utils"]


class FinderConfig(BaseModel):
    """Validated rule set and key-generation settings."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    include_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS),
        description="Glob patterns (relative to the scan root) of files to analyze",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS),
        description="Glob patterns of files to skip",
    )
    min_string_length: int = Field(
        default=2, ge=1, description="Trimmed text shorter than this is ignored"
    )
    i18n_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_I18N_PATTERNS),
        description="Regexes for text that already looks like a translation call",
    )
    i18n_function_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_I18N_FUNCTION_NAMES),
        description="Callee names treated as translation functions",
    )
    exclude_string_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_STRING_PATTERNS),
        description="Regexes for text that is not user-facing",
    )
    exclude_attribute_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_ATTRIBUTE_NAMES),
        description="Markup attributes whose values are never reported",
    )
    namespace_skip_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NAMESPACE_SKIP_DIRS),
        description="Directory names dropped when deriving a namespace",
    )
    index_file_names: list[str] = Field(
        default_factory=lambda: ["index"],
        description="Base names that do not contribute a namespace segment",
    )
    default_namespace: str = Field(default="common", min_length=1)
    max_key_length: int = Field(default=40, ge=2)
    fallback_key_prefix: str = Field(default="text_", min_length=1)

    @field_validator("i18n_patterns", "exclude_string_patterns")
    @classmethod
    def _check_regexes(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e
        return patterns

    @field_validator("i18n_function_names")
    @classmethod
    def _check_function_names(cls, names: list[str]) -> list[str]:
        if not names:
            raise ValueError("at least one translation function name is required")
        return names

    @cached_property
    def compiled_exclude_patterns(self) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(p) for p in self.exclude_string_patterns)

    @cached_property
    def compiled_i18n_patterns(self) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(p) for p in self.i18n_patterns)

    @cached_property
    def function_names(self) -> frozenset[str]:
        return frozenset(self.i18n_function_names)

    @cached_property
    def skipped_attributes(self) -> frozenset[str]:
        return frozenset(self.exclude_attribute_names)

    def fingerprint(self) -> str:
        """Stable hash of every setting, used to key cached analysis results."""
        canonical = json.dumps(self.model_dump(), sort_keys=True)
        return hashlib.sha256(canonical.encode()).hexdigest()[:16]

    def with_overrides(self, **overrides: Any) -> "FinderConfig":
        """Return a copy with the given non-empty fields replaced.

        ``None`` and empty sequences mean "not given" so CLI options can be
        passed straight through.
        """
        updates = {
            k: list(v) if isinstance(v, tuple) else v
            for k, v in overrides.items()
            if v is not None and v != () and v != []
        }
        if not updates:
            return self
        data = self.model_dump()
        data.update(updates)
        try:
            return FinderConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(None, _format_validation_error(e)) from e


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def load_config(path: str | Path | None = None) -> FinderConfig:
    """Load a configuration override document.

    Args:
        path: JSON override file. When None, ``I18N_FINDER_CONFIG`` is
            consulted; when that is unset too, defaults are returned.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file is missing, not a JSON object,
            contains unknown keys, or holds invalid values.
    """
    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if not env_path:
            return FinderConfig()
        path = env_path

    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(config_path, f"cannot read file ({e.strerror or e})") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(config_path, f"not valid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ConfigurationError(config_path, "expected a JSON object at the top level")

    try:
        return FinderConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(config_path, _format_validation_error(e)) from e
