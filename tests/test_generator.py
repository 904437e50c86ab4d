"""Tests for key and namespace generation."""

import pytest

from i18n_finder.config import FinderConfig
from i18n_finder.keys.generator import (
    KeyAllocator,
    generate_key,
    namespace_from_path,
    simple_hash,
)


class TestGenerateKey:
    """Key fragments from text."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Welcome to the App", "welcome_to_the_app"),
            ("Click Me", "click_me"),
            ("  Save   changes! ", "save_changes"),
            ("Loading...", "loading"),
            ("Password must be at least 8 characters", "password_must_be_at_least_8_characters"),
        ],
    )
    def test_readable_keys(self, value: str, expected: str) -> None:
        assert generate_key(value) == expected

    def test_truncated_without_trailing_underscore(self) -> None:
        key = generate_key("This is a rather long sentence that keeps on going for a while")
        assert len(key) <= 40
        assert not key.endswith("_")
        assert key == "this_is_a_rather_long_sentence_that_keep"

    def test_truncation_boundary_on_separator(self) -> None:
        # 39 letters then a space: the cut lands on the separator
        value = "a" * 39 + " tail"
        assert generate_key(value) == "a" * 39

    def test_fallback_for_punctuation(self) -> None:
        key = generate_key("¿¡!?")
        assert key.startswith("text_")
        assert key == "text_" + simple_hash("¿¡!?")

    def test_fallback_for_single_character(self) -> None:
        assert generate_key("A!").startswith("text_")

    def test_deterministic(self) -> None:
        assert generate_key("Привет мир") == generate_key("Привет мир")
        assert simple_hash("Привет мир") == simple_hash("Привет мир")

    def test_distinct_normal_forms_give_distinct_keys(self) -> None:
        values = ["Save", "Save changes", "Cancel", "Delete account"]
        assert len({generate_key(v) for v in values}) == len(values)

    def test_custom_length_and_prefix(self) -> None:
        assert generate_key("Hello world", max_length=5) == "hello"
        assert generate_key("!!", fallback_prefix="str_").startswith("str_")


class TestSimpleHash:
    """32-bit rolling hash, base 36."""

    def test_known_values(self) -> None:
        assert simple_hash("") == "0"
        assert simple_hash("a") == "2p"  # 97
        assert simple_hash("ab") == "2e9"  # 97 * 31 + 98 = 3105

    def test_at_most_eight_characters(self) -> None:
        assert len(simple_hash("x" * 500)) <= 8


class TestNamespaceFromPath:
    """Namespaces from relative paths."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("src/screens/auth/LoginForm.tsx", "screens.auth.login_form"),
            ("src/components/Button.jsx", "components.button"),
            ("src/profile/index.tsx", "profile"),
            ("App.js", "app"),
            ("src/index.js", "common"),
            ("lib/utils/helpers.ts", "helpers"),
            ("Features/Cart/CartItem.jsx", "features.cart.cart_item"),
        ],
    )
    def test_namespaces(self, path: str, expected: str) -> None:
        assert namespace_from_path(path) == expected

    def test_configured_skip_dirs_and_default(self) -> None:
        config = FinderConfig(namespace_skip_dirs=["screens"], default_namespace="shared")
        assert namespace_from_path("screens/Home.jsx", config) == "home"
        assert namespace_from_path("screens/index.jsx", config) == "shared"


class TestKeyAllocator:
    """Uniqueness within a run."""

    def test_first_request_unsuffixed(self) -> None:
        allocator = KeyAllocator()
        assert allocator.allocate("home", "save") == "home.save"
        assert allocator.allocate("home", "save") == "home.save_1"
        assert allocator.allocate("home", "save") == "home.save_2"
        assert allocator.allocate("profile", "save") == "profile.save"

    def test_without_namespace(self) -> None:
        allocator = KeyAllocator()
        assert allocator.allocate("", "ok_button") == "ok_button"
        assert allocator.allocate("", "ok_button") == "ok_button_1"

    def test_pre_claimed_keys(self) -> None:
        allocator = KeyAllocator(["home.save", "home.save_1"])
        assert allocator.allocate("home", "save") == "home.save_2"
        assert "home.save_2" in allocator
        assert len(allocator) == 3
