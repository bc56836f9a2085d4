"""Synchronous font cache keyed by font name and size."""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from .exceptions import NotLoadedError
from .loader import ParsedFont, find_font, load_font
from .renderer import SizedFont
from .size_key import SizeKey

logger = logging.getLogger(__name__)

Resolver = Callable[[str], str]
Parser = Callable[..., ParsedFont]
FontFactory = Callable[[ParsedFont, float], Any]


@dataclass
class PendingFont:
    """Requirements queued for one font name, in queue order."""

    name: str
    requests: list[tuple[float, str]] = field(default_factory=list)


class FontMap:
    """
    Cache of rendering-ready fonts, one per (name, size) pair.

    Usage is two-phase: queue every (name, size, sample text) the
    application will need, optionally override paths, then call
    resolve() once to load everything. Each font file is parsed at most
    once per name and the parsed font is kept for the life of the map.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        parser: Optional[Parser] = None,
        font_factory: Optional[FontFactory] = None,
    ):
        """
        Initialize an empty font map.

        Args:
            resolver: Maps a font name to a file path when no override exists
            parser: Loads a path into a ParsedFont, called as parser(path, name=name)
            font_factory: Builds a rendering-ready font from (parsed, size)
        """
        self._resolver = resolver or find_font
        self._parser = parser or load_font
        self._font_factory = font_factory or SizedFont

        self._paths: dict[str, str] = {}
        self._pending: dict[str, PendingFont] = {}
        self._ready: dict[tuple[str, SizeKey], Any] = {}
        # Sole owner of parsed fonts; entries are never removed
        self._parsed: dict[str, ParsedFont] = {}

    def queue(self, name: str, size: float, sample_text: str = "") -> None:
        """
        Declare that font name is needed at size, warmed for sample_text.

        Nothing is loaded until resolve() is called.
        """
        pending = self._pending.get(name)
        if pending is None:
            pending = self._pending[name] = PendingFont(name)
        pending.requests.append((size, sample_text))

    def add_font_path(
        self, name: str, path: Union[str, "os.PathLike[str]"]
    ) -> None:
        """
        Load font name from path instead of asking the system resolver.

        Only affects names that have not been parsed yet; fonts already
        loaded from another path are left as they are.
        """
        path = str(path)
        if name in self._parsed and self._paths.get(name) != path:
            logger.debug(
                f"Path for '{name}' changed to {path} after it was loaded; "
                "existing instances are kept"
            )
        self._paths[name] = path

    def font_path(self, name: str) -> Optional[str]:
        """Return the recorded path for name, or None if not known yet."""
        return self._paths.get(name)

    def pending_names(self) -> list[str]:
        """Names with requirements that have not been resolved yet."""
        return list(self._pending)

    def resolve(self) -> None:
        """
        Load every pending requirement into the cache.

        Raises:
            SourceUnavailableError: If a font file is missing or unreadable.
            ParseFailedError: If a font file is not a valid font.
            NameUnresolvedError: If a name has no override and the system
                resolver cannot find it.
        """
        created = 0
        for name, pending in list(self._pending.items()):
            parsed = self._parsed_font(name)
            for size, sample_text in pending.requests:
                key = (name, SizeKey(size))
                font = self._ready.get(key)
                if font is None:
                    font = self._font_factory(parsed, size)
                    self._ready[key] = font
                    created += 1
                font.warm_cache(sample_text)
            del self._pending[name]
        logger.info(f"Resolved fonts: {created} new, {len(self._ready)} total")

    def _parsed_font(self, name: str) -> ParsedFont:
        parsed = self._parsed.get(name)
        if parsed is not None:
            logger.debug(f"Reusing parsed font '{name}'")
            return parsed

        path = self._paths.get(name)
        if path is None:
            path = self._resolver(name)
            self._paths[name] = path

        parsed = self._parser(path, name=name)
        self._parsed[name] = parsed
        return parsed

    def get_font(self, name: str, size: float) -> Any:
        """
        Get the cached font for an exact (name, size) match.

        Raises:
            NotLoadedError: If the pair was never queued and resolved.
        """
        try:
            return self._ready[(name, SizeKey(size))]
        except KeyError:
            raise NotLoadedError(name, size) from None

    def has_font(self, name: str, size: float) -> bool:
        return (name, SizeKey(size)) in self._ready

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        name, size = item
        return self.has_font(name, size)

    def __len__(self) -> int:
        return len(self._ready)
