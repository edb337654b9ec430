"""X11 connection manager.

Wraps a python-xlib Display with the handful of requests the daemon needs
and exposes the event stream to asyncio by watching the X socket.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Tuple, Union

from Xlib import X, display, error

from .errors import OperationError, XConnectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyValue:
    """Raw value of a window property.

    `data` holds bytes for 8-bit properties and a tuple of integers for
    16/32-bit ones.
    """

    format: int
    data: Union[bytes, Tuple[int, ...]]


class XConnection:
    """Manages the X server connection used by the daemon."""

    def __init__(self, display_name: Optional[str] = None) -> None:
        """Initialize connection manager.

        Args:
            display_name: X display to open, None for $DISPLAY
        """
        self.display_name = display_name
        self.display: Optional[display.Display] = None
        self.is_closed = False
        self._atoms: Dict[str, int] = {}
        self._errors: Deque[error.XError] = deque()
        self._waiter: Optional[asyncio.Future] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def is_connected(self) -> bool:
        """True while the display is open."""
        return self.display is not None and not self.is_closed

    def connect(self) -> display.Display:
        """Open the display.

        Raises:
            XConnectionError: If the display cannot be opened
        """
        try:
            self.display = display.Display(self.display_name)
        except (error.DisplayError, error.ConnectionClosedError, OSError) as e:
            raise XConnectionError(self.display_name, str(e)) from e

        self.display.set_error_handler(self._on_async_error)
        logger.info(f"Connected to X display {self.display.get_display_name()}")
        return self.display

    def _on_async_error(self, err: error.XError, request: Any) -> None:
        """Collect errors of unchecked requests for the event stream."""
        self._errors.append(err)

    def _require_display(self) -> display.Display:
        if self.display is None or self.is_closed:
            raise error.ConnectionClosedError("client")
        return self.display

    def root_window(self) -> int:
        """Return the id of the default screen's root window."""
        return self._require_display().screen().root.id

    def select_substructure_events(self, window_id: int) -> None:
        """Subscribe to structure notifications of the children of window_id."""
        try:
            dpy = self._require_display()
            window = dpy.create_resource_object("window", window_id)
            catcher = error.CatchError()
            window.change_attributes(event_mask=X.SubstructureNotifyMask, onerror=catcher)
            dpy.sync()
        except error.ConnectionClosedError as e:
            raise OperationError("select input", window_id, str(e)) from e
        if catcher.get_error():
            raise OperationError("select input", window_id, str(catcher.get_error()))
        logger.debug(f"Selected SubstructureNotify on window {window_id}")

    def intern_atom(self, name: str) -> int:
        """Return the atom for name, X.NONE when the server does not know it."""
        if name not in self._atoms:
            self._atoms[name] = self._require_display().intern_atom(name, only_if_exists=True)
        return self._atoms[name]

    def get_property(self, window_id: int, name: str) -> Optional[PropertyValue]:
        """Read a property of any type.

        Returns:
            PropertyValue, or None if the atom or property does not exist

        Raises:
            OperationError: If the request fails (bad window, closed connection)
        """
        try:
            atom = self.intern_atom(name)
            if atom == X.NONE:
                return None
            window = self._require_display().create_resource_object("window", window_id)
            reply = window.get_full_property(atom, X.AnyPropertyType)
        except (error.XError, error.ConnectionClosedError) as e:
            raise OperationError(f"get property {name}", window_id, str(e)) from e

        if reply is None:
            return None

        value = reply.value
        if reply.format == 8:
            data = value.encode("latin-1") if isinstance(value, str) else bytes(value)
        else:
            data = tuple(int(item) for item in value)
        return PropertyValue(format=reply.format, data=data)

    def _checked(self, operation: str, window_id: int) -> None:
        dpy = self._require_display()
        window = dpy.create_resource_object("window", window_id)
        catcher = error.CatchError()
        getattr(window, operation)(onerror=catcher)
        dpy.sync()
        if catcher.get_error():
            raise OperationError(operation, window_id, str(catcher.get_error()))

    def unmap_window(self, window_id: int) -> None:
        """Unmap a window and wait for the server to confirm it.

        Raises:
            OperationError: If the server rejects the request
        """
        try:
            self._checked("unmap", window_id)
        except error.ConnectionClosedError as e:
            raise OperationError("unmap", window_id, str(e)) from e

    def map_window(self, window_id: int) -> None:
        """Map a window and wait for the server to confirm it.

        Raises:
            OperationError: If the server rejects the request
        """
        try:
            self._checked("map", window_id)
        except error.ConnectionClosedError as e:
            raise OperationError("map", window_id, str(e)) from e

    async def wait_for_event(self) -> Tuple[Optional[Any], Optional[error.XError]]:
        """Wait for the next event.

        Returns:
            (event, error) pair. Either half may be None; (None, None) means
            the stream has ended because the connection was closed.
        """
        while not self.is_closed:
            dpy = self._require_display()
            try:
                pending = dpy.pending_events()
            except error.ConnectionClosedError as e:
                logger.info(f"X connection closed: {e}")
                return None, None

            xerror = self._errors.popleft() if self._errors else None
            if pending:
                return dpy.next_event(), xerror
            if xerror is not None:
                return None, xerror

            await self._wait_readable(dpy.fileno())

        return None, None

    async def _wait_readable(self, fd: int) -> None:
        self._loop = asyncio.get_running_loop()
        self._waiter = self._loop.create_future()
        self._loop.add_reader(fd, self._wake)
        try:
            await self._waiter
        finally:
            if not self.is_closed:
                self._loop.remove_reader(fd)
            self._waiter = None

    def _wake(self) -> None:
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(None)

    def close(self) -> None:
        """Close the display. Safe to call more than once.

        A coroutine suspended in wait_for_event() returns (None, None).
        """
        if self.is_closed:
            return
        self.is_closed = True

        if self.display is not None:
            if self._waiter is not None and self._loop is not None:
                self._loop.remove_reader(self.display.fileno())
            try:
                self.display.close()
            except (error.ConnectionClosedError, OSError) as e:
                logger.debug(f"Error while closing display: {e}")
        self._wake()
        logger.info("X connection closed")
