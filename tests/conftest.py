"""Pytest configuration and shared fixtures."""

import json
import os
from collections.abc import Callable
from pathlib import Path

import pytest

# Keep tqdm quiet in test output
os.environ.setdefault("I18N_FINDER_DISABLE_PROGRESS", "1")

from i18n_finder.analyzers.classifier import classify_tree  # noqa: E402
from i18n_finder.analyzers.key_usage import extract_key_usages  # noqa: E402
from i18n_finder.analyzers.parser import parse_source  # noqa: E402
from i18n_finder.config import FinderConfig  # noqa: E402
from i18n_finder.models.translation import KeyUsage, StringOccurrence  # noqa: E402

LOGIN_FORM = """\
import React from 'react';
import { View, Text, Button, TextInput } from 'react-native';
import { useTranslation } from 'react-i18next';

export const LoginForm = () => {
  const { t } = useTranslation();
  const [name, setName] = React.useState('');

  return (
    <View className="container">
      <Text>Welcome to the App</Text>
      <Button title="Click Me" testID="login-button" />
      <Text>{t('login.title')}</Text>
      <TextInput placeholder="Enter your name" />
    </View>
  );
};
"""

PROFILE_SCREEN = """\
import React from 'react';
import i18n from 'i18next';

export default function ProfileScreen({ user }) {
  return (
    <div>
      <h1>Profile Settings</h1>
      <p>{i18n.t('profile.subtitle')}</p>
      <span>{t(`profile.hint`)}</span>
    </div>
  );
}
"""

BROKEN = """\
export const Broken = () => (
  <View>
    <Text>Unclosed
"""


@pytest.fixture
def config() -> FinderConfig:
    """Default configuration."""
    return FinderConfig()


@pytest.fixture
def classify(config: FinderConfig) -> Callable[..., list[StringOccurrence]]:
    """Classify a source snippet; returns its occurrences."""

    def _classify(
        source: str,
        suffix: str = ".jsx",
        cfg: FinderConfig | None = None,
    ) -> list[StringOccurrence]:
        tree = parse_source(source.encode("utf-8"), suffix)
        return classify_tree(tree.root_node, f"Sample{suffix}", cfg or config)

    return _classify


@pytest.fixture
def usages_of(config: FinderConfig) -> Callable[..., list[KeyUsage]]:
    """Extract key usages from a source snippet."""

    def _usages(
        source: str,
        suffix: str = ".jsx",
        cfg: FinderConfig | None = None,
    ) -> list[KeyUsage]:
        tree = parse_source(source.encode("utf-8"), suffix)
        return extract_key_usages(tree.root_node, f"Sample{suffix}", cfg or config)

    return _usages


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small React project with hardcoded strings, t() calls and noise."""
    root = tmp_path / "app"
    (root / "src" / "screens" / "auth").mkdir(parents=True)
    (root / "src" / "screens" / "auth" / "LoginForm.jsx").write_text(LOGIN_FORM)
    (root / "src" / "profile").mkdir(parents=True)
    (root / "src" / "profile" / "index.tsx").write_text(PROFILE_SCREEN)

    # Ignored by the default exclude patterns
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / "node_modules" / "lib" / "Widget.jsx").write_text(
        "export const W = () => <Text>Vendor text</Text>;\n"
    )
    (root / "src" / "screens" / "auth" / "LoginForm.test.jsx").write_text(
        "export const T = () => <Text>Test text</Text>;\n"
    )
    return root


@pytest.fixture
def broken_project(project: Path) -> Path:
    """The sample project plus one file with a syntax error."""
    (project / "src" / "Broken.jsx").write_text(BROKEN)
    return project


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, object], Path]:
    """Write a JSON document (or raw text) under tmp_path."""

    def _write(name: str, data: object) -> Path:
        path = tmp_path / name
        text = data if isinstance(data, str) else json.dumps(data, indent=2)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
