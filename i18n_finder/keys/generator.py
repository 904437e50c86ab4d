"""Key generation.

Turns a piece of hardcoded text into a readable, deterministic key fragment
and a source path into a dotted namespace:

    generate_key("Welcome to the App!")       -> "welcome_to_the_app"
    generate_key("¡¿?!")                      -> "text_<hash>"
    namespace_from_path("src/screens/auth/LoginForm.tsx") -> "screens.auth.login_form"

``KeyAllocator`` makes the combined keys unique within one run by suffixing
``_1``, ``_2``... in the order keys are requested.
"""

import re
from collections.abc import Iterable
from pathlib import PurePosixPath

from i18n_finder.analyzers.parser import SUPPORTED_EXTENSIONS
from i18n_finder.config import FinderConfig

_NON_WORD = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_UPPER = re.compile(r"([A-Z])")

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def simple_hash(value: str) -> str:
    """Short deterministic hash: 32-bit ``h * 31 + c`` over UTF-16 code units.

    Returns at most 8 base-36 characters.
    """
    encoded = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 1 << 32
    return _to_base36(abs(h))[:8]


def generate_key(value: str, max_length: int = 40, fallback_prefix: str = "text_") -> str:
    """Derive a snake_case key fragment from text.

    Lower-cases, keeps only ``a-z``, digits and whitespace, joins the words
    with ``_`` and truncates to ``max_length``. Text that leaves fewer than
    two characters falls back to ``fallback_prefix`` plus a hash of the
    original value.
    """
    cleaned = _NON_WORD.sub("", value.lower().strip())
    key = "_".join(_WHITESPACE.split(cleaned.strip()))
    key = key[:max_length].rstrip("_")

    if len(key) < 2:
        key = fallback_prefix + simple_hash(value)
    return key


def _file_segment(stem: str) -> str:
    """``LoginForm`` -> ``login_form``."""
    return _UPPER.sub(r"_\1", stem).lower().removeprefix("_")


def namespace_from_path(rel_path: str, config: FinderConfig | None = None) -> str:
    """Dotted namespace for a root-relative source path.

    Directory names are lower-cased and the configured noise directories
    (``src``, ``app``...) are dropped; the file name contributes a
    snake_case segment unless it is an index file.
    """
    config = config or FinderConfig()
    path = PurePosixPath(rel_path)
    skip = {d.lower() for d in config.namespace_skip_dirs}
    index_names = {n.lower() for n in config.index_file_names}

    segments = [part.lower() for part in path.parts[:-1] if part.lower() not in skip]

    stem = path.stem if path.suffix.lower() in SUPPORTED_EXTENSIONS else path.name
    if stem and stem.lower() not in index_names:
        segments.append(_file_segment(stem))

    segments = [s for s in segments if s]
    return ".".join(segments) if segments else config.default_namespace


def join_key(namespace: str, fragment: str) -> str:
    return f"{namespace}.{fragment}" if namespace else fragment


class KeyAllocator:
    """Hands out full keys that are unique within one run.

    The first request for a key gets it unsuffixed; later requests for the
    same key get ``_1``, ``_2``... appended to the fragment.
    """

    def __init__(self, claimed: Iterable[str] = ()):
        self._claimed: set[str] = set(claimed)

    def __contains__(self, key: str) -> bool:
        return key in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)

    def allocate(self, namespace: str, fragment: str) -> str:
        candidate = join_key(namespace, fragment)
        counter = 1
        while candidate in self._claimed:
            candidate = join_key(namespace, f"{fragment}_{counter}")
            counter += 1
        self._claimed.add(candidate)
        return candidate
