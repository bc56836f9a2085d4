"""Pytest fixtures for fontmap tests."""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fontmap.font_map import FontMap  # noqa: E402

# TrueType fonts commonly installed on Linux and macOS
SYSTEM_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",  # Debian/Ubuntu/Raspbian
    "/usr/share/fonts/TTF/DejaVuSans.ttf",  # Arch Linux
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",  # Fedora
    "/usr/share/fonts/dejavu-sans-fonts/DejaVuSans.ttf",  # Fedora (newer)
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",  # macOS
]

SYSTEM_FONT = next((p for p in SYSTEM_FONT_CANDIDATES if os.path.exists(p)), None)


class FakeParsedFont:
    """Stand-in for ParsedFont that records where it was loaded from."""

    def __init__(self, name, path):
        self.name = name
        self.path = path


class FakeFont:
    """Stand-in for SizedFont that records warm-up texts."""

    def __init__(self, parsed, size):
        self.parsed = parsed
        self.size = size
        self.warmed = []

    def warm_cache(self, text):
        self.warmed.append(text)

    @property
    def cached_chars(self):
        return frozenset("".join(self.warmed))


@pytest.fixture
def fake_resolver():
    """System resolver mock that maps every name to a fixed path."""
    return MagicMock(side_effect=lambda name: f"/system/fonts/{name}.ttf")


@pytest.fixture
def fake_parser():
    """Parser mock that counts loads without touching the filesystem."""
    return MagicMock(side_effect=lambda path, name: FakeParsedFont(name, path))


@pytest.fixture
def fake_font_factory():
    """Font factory producing FakeFont instances."""
    return FakeFont


@pytest.fixture
def font_map(fake_resolver, fake_parser):
    """Create a FontMap wired to fake collaborators."""
    return FontMap(
        resolver=fake_resolver, parser=fake_parser, font_factory=FakeFont
    )


@pytest.fixture
def system_font_path():
    """Path of an installed TrueType font."""
    if SYSTEM_FONT is None:
        pytest.skip("No TrueType font installed")
    return SYSTEM_FONT


@pytest.fixture
def malformed_font_file(tmp_path):
    """A file that is not a font."""
    path = tmp_path / "broken.ttf"
    path.write_bytes(b"this is not a font file" * 10)
    return path
