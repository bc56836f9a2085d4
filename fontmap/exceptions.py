"""Exceptions raised while resolving and loading fonts."""


class FontMapError(Exception):
    """Base class for all font map errors."""


class SourceUnavailableError(FontMapError):
    """A font file is missing or cannot be read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Font file unavailable: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ParseFailedError(FontMapError):
    """Font data could not be parsed into a usable font."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        self.reason = reason
        message = f"Unable to parse font '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NameUnresolvedError(FontMapError):
    """A font name could not be mapped to a file by the system resolver."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        self.reason = reason
        message = f"Cannot resolve font name '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NotLoadedError(FontMapError):
    """No font instance exists for the requested name and size."""

    def __init__(self, name: str, size: float):
        self.name = name
        self.size = size
        super().__init__(f"No font loaded for '{name}' at size {size!r}")


class InvalidStateError(FontMapError):
    """A deferred font map was used in a state that does not allow it."""
