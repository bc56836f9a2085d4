"""Background loading of a FontMap with a one-time synchronization point."""

import logging
import threading
from enum import Enum
from types import TracebackType
from typing import Callable, NoReturn, Optional

from .exceptions import InvalidStateError
from .font_map import FontMap

logger = logging.getLogger(__name__)


class FontMapState(Enum):
    """Lifecycle of a DeferredFontMap."""

    WAITING = "waiting"
    READY = "ready"
    INVALID = "invalid"
    FAILED = "failed"


class DeferredFontMap:
    """
    A FontMap that is built on a background thread.

    A bare instance has no work attached and is INVALID; use launch() or
    ready() to get a usable handle. A launched handle is WAITING while the
    worker runs. The first call to synchronize() joins the worker and moves
    to READY; later calls do nothing. INVALID is also held while that
    transition runs, under the handle's lock. If the worker raised, the
    handle moves to FAILED and keeps raising the worker's error.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = FontMapState.INVALID
        self._thread: Optional[threading.Thread] = None
        self._result: Optional[FontMap] = None
        self._error: Optional[BaseException] = None
        self._error_traceback: Optional[TracebackType] = None
        self._font_map: Optional[FontMap] = None

    @classmethod
    def launch(
        cls, loader: Callable[[], FontMap], name: str = "fontmap-loader"
    ) -> "DeferredFontMap":
        """
        Start building a font map in a daemon thread.

        Args:
            loader: Callable that queues requirements, resolves and returns
                the FontMap
            name: Worker thread name

        Returns:
            DeferredFontMap in the WAITING state
        """
        deferred = cls()
        deferred._thread = threading.Thread(
            target=deferred._run, args=(loader,), name=name, daemon=True
        )
        deferred._state = FontMapState.WAITING
        deferred._thread.start()
        logger.info(f"Started background font load ({name})")
        return deferred

    @classmethod
    def ready(cls, font_map: FontMap) -> "DeferredFontMap":
        """Wrap an already resolved font map."""
        deferred = cls()
        deferred._font_map = font_map
        deferred._state = FontMapState.READY
        return deferred

    @property
    def state(self) -> FontMapState:
        return self._state

    def done(self) -> bool:
        """Return True if the background work has finished (never blocks)."""
        if self._state in (FontMapState.READY, FontMapState.FAILED):
            return True
        thread = self._thread
        return thread is not None and not thread.is_alive()

    def _run(self, loader: Callable[[], FontMap]) -> None:
        """Worker body (runs in thread)."""
        try:
            self._result = loader()
        except Exception as e:
            self._error = e
            self._error_traceback = e.__traceback__

    def _raise_error(self) -> NoReturn:
        # Restore the worker traceback so repeated raises do not stack frames
        raise self._error.with_traceback(self._error_traceback)

    def synchronize(self) -> None:
        """
        Block until the font map is loaded. Safe to call repeatedly.

        Raises:
            InvalidStateError: If the handle is caught mid-transition, or the
                loader did not return a FontMap.
            FontMapError: Whatever the background load raised.
        """
        with self._lock:
            if self._state is FontMapState.READY:
                return
            if self._state is FontMapState.FAILED:
                self._raise_error()
            if self._state is FontMapState.INVALID or self._thread is None:
                raise InvalidStateError("Font map is in an invalid state")

            thread = self._thread
            self._thread = None
            self._state = FontMapState.INVALID
            thread.join()

            result, self._result = self._result, None
            if self._error is None and not isinstance(result, FontMap):
                self._error = InvalidStateError(
                    f"Font loader returned {type(result).__name__}, expected FontMap"
                )
            if self._error is not None:
                self._state = FontMapState.FAILED
                logger.error(f"Background font load failed: {self._error}")
                self._raise_error()

            self._font_map = result
            self._state = FontMapState.READY
            logger.info(f"Font map synchronized ({len(result)} fonts)")

    def access(self) -> FontMap:
        """
        Get the loaded font map. synchronize() must have been called first.

        Raises:
            InvalidStateError: If the map has not been synchronized yet.
        """
        if self._state is FontMapState.READY:
            return self._font_map
        if self._state is FontMapState.FAILED:
            self._raise_error()
        if self._state is FontMapState.WAITING:
            raise InvalidStateError("Font map not yet ready; call synchronize() first")
        raise InvalidStateError("Font map is in an invalid state")
