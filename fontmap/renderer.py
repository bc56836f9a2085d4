"""Rendering-ready font instances with a per-character glyph cache."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from PIL import ImageFont

    from .loader import ParsedFont

logger = logging.getLogger(__name__)


@dataclass
class Glyph:
    """Rasterized glyph for a single character."""

    char: str
    mask: Any  # Pillow core image in "L" mode
    offset: tuple[int, int]

    @property
    def size(self) -> tuple[int, int]:
        return self.mask.size


class SizedFont:
    """
    A font at one size, ready for rendering.

    Borrows its ParsedFont; the owning FontMap keeps the parsed font alive.
    Glyph masks are rasterized lazily and cached per character.
    """

    def __init__(self, parsed: "ParsedFont", size: float):
        self.parsed = parsed
        self.size = size
        self.font: "ImageFont.FreeTypeFont" = parsed.variant(size)
        self._glyphs: dict[str, Glyph] = {}

    @property
    def cached_chars(self) -> frozenset[str]:
        """Characters whose glyphs are already rasterized."""
        return frozenset(self._glyphs)

    def warm_cache(self, text: str) -> int:
        """
        Rasterize every character of text that is not cached yet.

        Args:
            text: Sample text expected to be rendered at this size

        Returns:
            Number of newly cached glyphs
        """
        added = 0
        for char in text:
            if char not in self._glyphs:
                self._glyphs[char] = self._rasterize(char)
                added += 1
        if added:
            logger.debug(
                f"Warmed {added} glyphs for '{self.parsed.name}' at {self.size}"
            )
        return added

    def glyph(self, char: str) -> Glyph:
        """Return the cached glyph for char, rasterizing it on a miss."""
        if char not in self._glyphs:
            self._glyphs[char] = self._rasterize(char)
        return self._glyphs[char]

    def _rasterize(self, char: str) -> Glyph:
        mask, offset = self.font.getmask2(char, mode="L")
        return Glyph(char=char, mask=mask, offset=offset)

    def __repr__(self) -> str:
        return (
            f"SizedFont(name={self.parsed.name!r}, size={self.size!r}, "
            f"glyphs={len(self._glyphs)})"
        )
