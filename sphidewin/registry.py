"""Registry of windows hidden by this process.

All access goes through an asyncio lock shared by the event dispatcher and
the shutdown path, so a restore pass never interleaves with a half-done
hide.
"""

import asyncio
import logging
from typing import Callable, Dict, Iterable, List

from .errors import OperationError
from .models import RestoreOutcome

logger = logging.getLogger(__name__)

WindowOperation = Callable[[int], None]


class HiddenRegistry:
    """Insertion-ordered set of window ids this process has unmapped."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._windows: Dict[int, List[str]] = {}
        self._lock = asyncio.Lock()
        self._sealed = False

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, window_id: object) -> bool:
        return window_id in self._windows

    @property
    def sealed(self) -> bool:
        """True once the final restore pass has started."""
        return self._sealed

    def is_empty(self) -> bool:
        """Return True when no window is currently hidden."""
        return not self._windows

    def window_ids(self) -> List[int]:
        """Return hidden window ids in hide order."""
        return list(self._windows)

    def _can_register(self, window_id: int) -> bool:
        if self._sealed:
            logger.debug(f"Registry sealed, not registering window {window_id}")
            return False
        if window_id in self._windows:
            logger.warning(f"Window {window_id} is already hidden, ignoring duplicate")
            return False
        return True

    async def add(self, window_id: int, classes: Iterable[str] = ()) -> bool:
        """Record a window as hidden.

        Args:
            window_id: Window that was unmapped
            classes: Its WM_CLASS names, kept for log messages

        Returns:
            False if the window was already registered or the registry is sealed
        """
        async with self._lock:
            if not self._can_register(window_id):
                return False
            self._windows[window_id] = list(classes)
            return True

    async def hide(self, window_id: int, classes: Iterable[str], unmap: WindowOperation) -> bool:
        """Unmap a window and record it, as one step under the registry lock.

        Duplicates and a sealed registry are rejected before any unmap is issued.

        Args:
            window_id: Window to hide
            classes: Its WM_CLASS names
            unmap: Callable issuing the unmap request

        Returns:
            True if the window was unmapped and registered

        Raises:
            OperationError: If the unmap fails; nothing is recorded
        """
        async with self._lock:
            if not self._can_register(window_id):
                return False
            unmap(window_id)
            self._windows[window_id] = list(classes)
            return True

    async def restore_all(self, map_window: WindowOperation, seal: bool = False) -> List[RestoreOutcome]:
        """Map every registered window again, in hide order.

        Every window gets exactly one map attempt. Mapped windows are removed;
        windows whose map fails stay registered and are reported. An empty
        registry issues no requests.

        Args:
            map_window: Callable issuing the map request
            seal: Refuse any registration after this pass

        Returns:
            One RestoreOutcome per registered window
        """
        async with self._lock:
            if seal:
                self._sealed = True

            outcomes: List[RestoreOutcome] = []
            for window_id, classes in list(self._windows.items()):
                try:
                    map_window(window_id)
                except OperationError as e:
                    outcomes.append(
                        RestoreOutcome(window_id=window_id, classes=classes, success=False, error=e.message)
                    )
                    continue

                del self._windows[window_id]
                outcomes.append(RestoreOutcome(window_id=window_id, classes=classes))

            return outcomes
