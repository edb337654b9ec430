"""Window class resolution.

Reads WM_CLASS of client windows and the EWMH client list of the root
window.
"""

import logging
from typing import List

from .connection import XConnection
from .errors import OperationError, ResolveError

logger = logging.getLogger(__name__)

WM_CLASS = "WM_CLASS"
NET_CLIENT_LIST = "_NET_CLIENT_LIST"


def decode_class_names(raw: bytes) -> List[str]:
    """Split a raw WM_CLASS value into its names.

    The value is a list of NUL-separated strings terminated by a NUL; the
    empty element produced by the terminator is dropped.

    Args:
        raw: Property bytes

    Returns:
        Class names in property order (instance name first)
    """
    if not raw:
        return []

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        # ICCCM defines WM_CLASS as STRING, i.e. Latin-1
        text = raw.decode("latin-1")

    names = text.split("\0")
    if names[-1] == "":
        names.pop()
    return names


class ClassResolver:
    """Resolves window ids to their WM_CLASS names."""

    def __init__(self, connection: XConnection) -> None:
        """
        Initialize class resolver.

        Args:
            connection: Connected XConnection
        """
        self.connection = connection

    def resolve(self, window_id: int) -> List[str]:
        """Return the WM_CLASS names of a window.

        A window without WM_CLASS resolves to an empty list.

        Raises:
            ResolveError: If the property cannot be read or is not 8-bit
        """
        try:
            prop = self.connection.get_property(window_id, WM_CLASS)
        except OperationError as e:
            raise ResolveError(window_id, e.message) from e

        if prop is None:
            logger.debug(f"Window {window_id} has no WM_CLASS")
            return []

        if prop.format != 8 or not isinstance(prop.data, bytes):
            raise ResolveError(window_id, f"unexpected property format {prop.format}")

        return decode_class_names(prop.data)

    def client_list(self, root_id: int) -> List[int]:
        """Return the window ids listed in the root's _NET_CLIENT_LIST.

        Raises:
            ResolveError: If the property cannot be read or is not 32-bit
        """
        try:
            prop = self.connection.get_property(root_id, NET_CLIENT_LIST)
        except OperationError as e:
            raise ResolveError(root_id, e.message) from e

        if prop is None:
            logger.warning(
                f"Root window {root_id} has no {NET_CLIENT_LIST}; "
                "window manager is not EWMH compliant, nothing to pre-scan"
            )
            return []

        if prop.format != 32 or isinstance(prop.data, bytes):
            raise ResolveError(root_id, f"unexpected {NET_CLIENT_LIST} format {prop.format}")

        return list(prop.data)
