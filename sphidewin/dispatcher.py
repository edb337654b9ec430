"""Event dispatcher.

Consumes the X event stream in delivery order and applies the hide policy
to every newly mapped window.
"""

import logging
from typing import Any, Iterable

from Xlib import X

from .connection import XConnection
from .errors import OperationError, ResolveError
from .models import DispatcherState
from .registry import HiddenRegistry
from .resolver import ClassResolver

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Main loop of the daemon: classify events, resolve, hide."""

    def __init__(
        self,
        connection: XConnection,
        resolver: ClassResolver,
        registry: HiddenRegistry,
        target_class: str,
    ) -> None:
        """Initialize dispatcher.

        Args:
            connection: Connected XConnection
            resolver: ClassResolver bound to the same connection
            registry: Registry shared with the shutdown path
            target_class: WM_CLASS name to hide
        """
        self.connection = connection
        self.resolver = resolver
        self.registry = registry
        self.target_class = target_class
        self.state = DispatcherState.RUNNING
        self.events_processed = 0

    @property
    def is_running(self) -> bool:
        return self.state is DispatcherState.RUNNING

    def stop(self) -> None:
        """Enter the terminal SHUTTING_DOWN state."""
        if self.state is not DispatcherState.SHUTTING_DOWN:
            logger.debug("Dispatcher state: running -> shutting_down")
        self.state = DispatcherState.SHUTTING_DOWN

    def matches(self, classes: Iterable[str]) -> bool:
        """Return True if any of the window's class names is the target."""
        return self.target_class in set(classes)

    async def hide_if_matching(self, window_id: int, origin: str = "") -> bool:
        """Resolve a window and hide it if it belongs to the target class.

        Resolve and unmap failures are logged and the window is skipped.

        Args:
            window_id: Candidate window
            origin: Optional note for log lines (e.g. "previously spawned")

        Returns:
            True if the window was unmapped and registered
        """
        suffix = f" ({origin})" if origin else ""

        try:
            classes = self.resolver.resolve(window_id)
        except ResolveError as e:
            logger.warning(f"Skipping window {window_id}{suffix}: {e.message}", extra={"error": e.to_dict()})
            return False

        if not self.matches(classes):
            logger.debug(f"{classes} {window_id}{suffix} does not match '{self.target_class}'")
            return False

        if not self.is_running:
            logger.debug(f"Not hiding {classes} {window_id}{suffix}: shutting down")
            return False

        try:
            hidden = await self.registry.hide(window_id, classes, self.connection.unmap_window)
        except OperationError as e:
            logger.warning(f"Couldn't unmap {classes} {window_id}{suffix}: {e.message}", extra={"error": e.to_dict()})
            return False

        if hidden:
            logger.info(f"{classes} {window_id}{suffix} unmapped")
        return hidden

    async def handle_event(self, event: Any) -> None:
        """Process one event from the X server."""
        self.events_processed += 1

        if event.type == X.MapNotify:
            await self.hide_if_matching(event.window.id)
        else:
            logger.debug(f"Ignoring event type {event.type}")

    async def run(self) -> None:
        """Process events until the stream ends or the dispatcher is stopped."""
        logger.info(f"Watching for windows of class '{self.target_class}'")

        while self.is_running:
            event, xerror = await self.connection.wait_for_event()

            if event is None and xerror is None:
                if self.is_running:
                    logger.info("Both event and error are empty, event stream ended")
                break

            if xerror is not None:
                logger.warning(f"X error: {xerror}")

            if event is not None and self.is_running:
                await self.handle_event(event)

        logger.info(f"Dispatcher stopped after {self.events_processed} event(s)")
