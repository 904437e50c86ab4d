"""Tests for configuration loading and overrides."""

from pathlib import Path

import pytest

from i18n_finder.config import CONFIG_ENV_VAR, FinderConfig, load_config
from i18n_finder.errors import ConfigurationError


class TestLoadConfig:
    """Override documents."""

    def test_defaults_without_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = load_config()
        assert config == FinderConfig()
        assert config.min_string_length == 2
        assert "t" in config.function_names

    def test_camel_case_keys(self, write_json) -> None:
        path = write_json("cfg.json", {"minStringLength": 4, "i18nFunctionNames": ["tr"]})
        config = load_config(path)
        assert config.min_string_length == 4
        assert config.i18n_function_names == ["tr"]

    def test_snake_case_keys(self, write_json) -> None:
        path = write_json("cfg.json", {"exclude_attribute_names": ["title"]})
        assert load_config(path).skipped_attributes == frozenset({"title"})

    def test_override_replaces_list_wholesale(self, write_json) -> None:
        path = write_json("cfg.json", {"excludePatterns": []})
        assert load_config(path).exclude_patterns == []

    def test_env_var(self, write_json, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_json("cfg.json", {"defaultNamespace": "shared"})
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config().default_namespace == "shared"

    def test_unknown_key(self, write_json) -> None:
        path = write_json("cfg.json", {"minLength": 3})
        with pytest.raises(ConfigurationError, match="minLength"):
            load_config(path)

    def test_invalid_regex(self, write_json) -> None:
        path = write_json("cfg.json", {"excludeStringPatterns": ["(unclosed"]})
        with pytest.raises(ConfigurationError, match="invalid regular expression"):
            load_config(path)

    def test_not_an_object(self, write_json) -> None:
        path = write_json("cfg.json", ["minStringLength"])
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)

    def test_invalid_json(self, write_json) -> None:
        path = write_json("cfg.json", "{")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            load_config(tmp_path / "absent.json")
        assert excinfo.value.path.endswith("absent.json")

    def test_empty_function_names(self, write_json) -> None:
        path = write_json("cfg.json", {"i18nFunctionNames": []})
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestOverrides:
    """CLI-style overrides."""

    def test_empty_values_ignored(self) -> None:
        config = FinderConfig()
        assert config.with_overrides(min_string_length=None, include_patterns=()) is config

    def test_tuples_become_lists(self) -> None:
        config = FinderConfig().with_overrides(include_patterns=("src/**/*.tsx",), min_string_length=3)
        assert config.include_patterns == ["src/**/*.tsx"]
        assert config.min_string_length == 3

    def test_invalid_override(self) -> None:
        with pytest.raises(ConfigurationError):
            FinderConfig().with_overrides(min_string_length=0)

    def test_fingerprint(self) -> None:
        assert FinderConfig().fingerprint() == FinderConfig().fingerprint()
        changed = FinderConfig().with_overrides(min_string_length=5)
        assert changed.fingerprint() != FinderConfig().fingerprint()
