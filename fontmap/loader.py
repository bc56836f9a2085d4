"""Font file loading and system font resolution."""

import io
import logging
import math
import os
import shutil
import subprocess
from typing import Optional, Union

from PIL import ImageFont

from .exceptions import NameUnresolvedError, ParseFailedError, SourceUnavailableError

logger = logging.getLogger(__name__)

# Size used only to validate font data; real instances are created per size
PROBE_SIZE = 10

# Seconds to wait for fc-match before giving up
DEFAULT_RESOLVER_TIMEOUT = 2.0

PathLike = Union[str, "os.PathLike[str]"]


class ParsedFont:
    """
    A font file decoded once and shared by every size derived from it.

    Holds the raw font bytes so that new sizes are built from memory
    without touching the filesystem again.
    """

    def __init__(self, name: str, data: bytes, probe: ImageFont.FreeTypeFont):
        self.name = name
        self.data = data
        family, style = probe.getname()
        self.family: Optional[str] = family
        self.style: Optional[str] = style

    def variant(self, size: float) -> ImageFont.FreeTypeFont:
        """
        Create a Pillow font at the given size from the shared bytes.

        Args:
            size: Font size in points

        Returns:
            PIL FreeTypeFont

        Raises:
            ParseFailedError: If Pillow cannot build the font at this size.
        """
        if not math.isfinite(size):
            raise ParseFailedError(self.name, f"invalid font size {size!r}")
        try:
            return ImageFont.truetype(io.BytesIO(self.data), size)
        except (OSError, ValueError) as e:
            raise ParseFailedError(self.name, f"size {size!r}: {e}") from e

    def __repr__(self) -> str:
        return (
            f"ParsedFont(name={self.name!r}, family={self.family!r}, "
            f"style={self.style!r}, bytes={len(self.data)})"
        )


def read_font_file(path: PathLike) -> bytes:
    """
    Read a font file to completion.

    Raises:
        SourceUnavailableError: If the file is missing or unreadable.
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise SourceUnavailableError(str(path), e.strerror or str(e)) from e


def parse_font(data: bytes, name: str = "<memory>") -> ParsedFont:
    """
    Parse raw font data with Pillow.

    Args:
        data: Contents of a TrueType/OpenType font file
        name: Font name used in error messages

    Returns:
        ParsedFont wrapping the data

    Raises:
        ParseFailedError: If the data is not a usable font.
    """
    if not data:
        raise ParseFailedError(name, "font data is empty")
    try:
        probe = ImageFont.truetype(io.BytesIO(data), PROBE_SIZE)
    except (OSError, ValueError) as e:
        raise ParseFailedError(name, str(e)) from e
    return ParsedFont(name, data, probe)


def load_font(path: PathLike, name: str = "<memory>") -> ParsedFont:
    """Read and parse the font file at path."""
    data = read_font_file(path)
    parsed = parse_font(data, name=name)
    logger.info(f"Loaded font '{name}' from {path} ({len(data)} bytes)")
    return parsed


def fontconfig_available() -> bool:
    """Return True if the fontconfig fc-match tool is on PATH."""
    return shutil.which("fc-match") is not None


def find_font(name: str, timeout: float = DEFAULT_RESOLVER_TIMEOUT) -> str:
    """
    Resolve a font family name to a file path using fontconfig.

    Args:
        name: Font family name, e.g. "DejaVu Sans"
        timeout: Seconds to wait for fc-match

    Returns:
        Path of the matching font file

    Raises:
        NameUnresolvedError: If fontconfig is unavailable or finds no file.
    """
    if not fontconfig_available():
        raise NameUnresolvedError(name, "fontconfig is not available on this system")

    try:
        result = subprocess.run(
            ["fc-match", name, "--format=%{file}"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise NameUnresolvedError(name, f"fc-match timed out after {timeout}s") from e
    except OSError as e:
        raise NameUnresolvedError(name, f"fc-match failed: {e}") from e

    path = result.stdout.strip()
    if result.returncode != 0 or not path:
        raise NameUnresolvedError(name, "no match from fontconfig")
    if not os.path.exists(path):
        raise NameUnresolvedError(name, f"fontconfig returned missing file {path}")

    logger.debug(f"fontconfig resolved '{name}' to {path}")
    return path
