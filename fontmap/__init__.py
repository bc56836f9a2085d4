"""Font instance cache with background loading."""

from .config import FontMapConfig, build_font_map, load_config, load_font_map_async
from .deferred import DeferredFontMap, FontMapState
from .exceptions import (
    FontMapError,
    InvalidStateError,
    NameUnresolvedError,
    NotLoadedError,
    ParseFailedError,
    SourceUnavailableError,
)
from .font_map import FontMap
from .loader import ParsedFont, find_font, load_font, parse_font, read_font_file
from .renderer import SizedFont
from .size_key import SizeKey

__all__ = [
    "FontMap",
    "DeferredFontMap",
    "FontMapState",
    "FontMapConfig",
    "build_font_map",
    "load_config",
    "load_font_map_async",
    "ParsedFont",
    "SizedFont",
    "SizeKey",
    "find_font",
    "load_font",
    "parse_font",
    "read_font_file",
    "FontMapError",
    "SourceUnavailableError",
    "ParseFailedError",
    "NameUnresolvedError",
    "NotLoadedError",
    "InvalidStateError",
]
