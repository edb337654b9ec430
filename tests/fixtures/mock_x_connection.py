"""Mock X connection for testing.

The X server is replaced by a Mock built on XConnection's interface: each
window id maps to the WM_CLASS names it reports, and the event stream is a
queue of (event, error) pairs.
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Union
from unittest.mock import Mock

from Xlib import X

from sphidewin.connection import PropertyValue, XConnection
from sphidewin.errors import OperationError
from sphidewin.resolver import NET_CLIENT_LIST

ROOT_ID = 1

WindowSpec = Union[List[str], Exception, None]


def class_property(classes: Iterable[str]) -> PropertyValue:
    """Encode class names the way X stores WM_CLASS."""
    return PropertyValue(format=8, data=b"".join(name.encode() + b"\0" for name in classes))


def map_notify(window_id: int) -> Mock:
    """Mock MapNotify event for window_id."""
    return Mock(type=X.MapNotify, window=Mock(id=window_id))


def unmap_notify(window_id: int) -> Mock:
    """Mock UnmapNotify event for window_id."""
    return Mock(type=X.UnmapNotify, window=Mock(id=window_id))


def build_mock_connection(
    windows: Optional[Dict[int, WindowSpec]] = None,
    client_list: Optional[List[int]] = None,
    events: Iterable = (),
) -> Mock:
    """Mock XConnection.

    Args:
        windows: window id -> class names, an exception raised on query, or
            None for a window without WM_CLASS. Unknown ids raise BadWindow.
        client_list: _NET_CLIENT_LIST of the root; None when missing
        events: (event, error) pairs delivered before the stream blocks

    wait_for_event() blocks after the queue is drained until close() is
    called, then returns (None, None).
    """
    windows = windows or {}
    queue = list(events)
    closed = asyncio.Event()

    conn = Mock(spec=XConnection)
    conn.root_window.return_value = ROOT_ID

    def get_property(window_id, name):
        if name == NET_CLIENT_LIST:
            if client_list is None:
                return None
            return PropertyValue(format=32, data=tuple(client_list))
        if window_id not in windows:
            raise OperationError(f"get property {name}", window_id, "BadWindow")
        entry = windows[window_id]
        if isinstance(entry, Exception):
            raise entry
        if entry is None:
            return None
        return class_property(entry)

    async def wait_for_event():
        if queue:
            return queue.pop(0)
        await closed.wait()
        return None, None

    conn.get_property.side_effect = get_property
    conn.wait_for_event.side_effect = wait_for_event
    conn.close.side_effect = closed.set
    return conn
