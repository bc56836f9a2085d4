"""Configuration loading and font map construction from config."""

import dataclasses
import functools
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .deferred import DeferredFontMap
from .exceptions import NameUnresolvedError
from .font_map import FontMap
from .loader import DEFAULT_RESOLVER_TIMEOUT, find_font

logger = logging.getLogger(__name__)

# Searched in order when no explicit config path is given
CONFIG_PATHS = [
    Path("fontmap.json"),
    Path.home() / ".config" / "fontmap" / "fontmap.json",
    Path("/etc/fontmap/fontmap.json"),
]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class FontRequirement:
    """A font needed at one size, warmed for a sample text."""

    name: str = ""
    size: float = 12.0
    sample: str = ""

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if valid."""
        errors = []
        if not isinstance(self.name, str) or not self.name:
            errors.append(f"Font name must be a non-empty string, not {self.name!r}")
        if not _is_number(self.size):
            errors.append(f"Invalid size {self.size!r} for '{self.name}'")
        elif not math.isfinite(self.size) or self.size <= 0:
            errors.append(
                f"Invalid size {self.size} for '{self.name}': "
                "must be finite and positive"
            )
        if not isinstance(self.sample, str):
            errors.append(f"Sample for '{self.name}' must be a string")
        return errors


@dataclass
class ResolverConfig:
    """System font resolver settings."""

    enabled: bool = True
    timeout_seconds: float = DEFAULT_RESOLVER_TIMEOUT

    def validate(self) -> list[str]:
        errors = []
        if not isinstance(self.enabled, bool):
            errors.append(
                f"Resolver 'enabled' must be true or false, not {self.enabled!r}"
            )
        if not _is_number(self.timeout_seconds):
            errors.append(
                f"Resolver timeout must be a number, not {self.timeout_seconds!r}"
            )
        elif self.timeout_seconds <= 0:
            errors.append("Resolver timeout must be positive")
        return errors


@dataclass
class FontMapConfig:
    """Main configuration container."""

    fonts: list[FontRequirement] = field(default_factory=list)
    paths: dict[str, str] = field(default_factory=dict)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)

    def validate(self) -> list[str]:
        """Validate all configuration sections. Returns list of errors."""
        errors = []
        for requirement in self.fonts:
            errors.extend(requirement.validate())
        for name, path in self.paths.items():
            if not isinstance(path, str) or not path:
                errors.append(
                    f"Path for font '{name}' must be a non-empty string, not {path!r}"
                )
        errors.extend(self.resolver.validate())
        return errors


def _section(cls, data: Any, where: str):
    """
    Build a config dataclass from one JSON object.

    Missing keys keep their defaults; unknown keys are rejected so that a
    typo does not silently fall back to a default.
    """
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be an object, not {type(data).__name__}")
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown keys in {where}: {', '.join(unknown)}")
    return cls(**data)


def config_from_dict(data: Any) -> FontMapConfig:
    """
    Convert parsed JSON to a FontMapConfig without validating values.

    Raises:
        ValueError: If the document does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ValueError("Font config must be a JSON object")

    fonts = data.get("fonts", [])
    if not isinstance(fonts, list):
        raise ValueError("'fonts' must be a list")
    paths = data.get("paths", {})
    if not isinstance(paths, dict):
        raise ValueError("'paths' must be an object")

    return FontMapConfig(
        fonts=[
            _section(FontRequirement, item, f"fonts[{i}]")
            for i, item in enumerate(fonts)
        ],
        paths=dict(paths),
        resolver=_section(ResolverConfig, data.get("resolver", {}), "resolver"),
    )


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Locate the config file to load.

    An explicit path must exist; otherwise CONFIG_PATHS are searched and
    None is returned when none of them exists.
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path
    return next((path for path in CONFIG_PATHS if path.exists()), None)


def load_config(config_path: Optional[Path] = None) -> FontMapConfig:
    """
    Load and validate the font configuration.

    Args:
        config_path: Explicit config file. If None, CONFIG_PATHS are searched.

    Returns:
        FontMapConfig, or defaults when no config file exists.

    Raises:
        FileNotFoundError: If config_path was given and does not exist.
        ValueError: If the file is not valid JSON or fails validation.
    """
    path = find_config_file(config_path)
    if path is None:
        logger.warning("No font config file found, using defaults")
        return FontMapConfig()

    logger.info(f"Loading font config from {path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    try:
        config = config_from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Malformed config file {path}: {e}") from e

    errors = config.validate()
    if errors:
        raise ValueError(
            f"Invalid font config {path}:\n"
            + "\n".join(f"  - {error}" for error in errors)
        )
    return config


def _resolver_disabled(name: str) -> str:
    raise NameUnresolvedError(name, "system font lookup is disabled in config")


def build_font_map(config: FontMapConfig) -> FontMap:
    """
    Queue every configured font, apply path overrides and resolve.

    Args:
        config: Font map configuration

    Returns:
        Resolved FontMap
    """
    if config.resolver.enabled:
        resolver = functools.partial(
            find_font, timeout=config.resolver.timeout_seconds
        )
    else:
        resolver = _resolver_disabled

    font_map = FontMap(resolver=resolver)
    for name, path in config.paths.items():
        font_map.add_font_path(name, path)
    for requirement in config.fonts:
        font_map.queue(requirement.name, requirement.size, requirement.sample)
    font_map.resolve()
    return font_map


def load_font_map_async(config: FontMapConfig) -> DeferredFontMap:
    """Build the configured font map on a background thread."""
    return DeferredFontMap.launch(functools.partial(build_font_map, config))
