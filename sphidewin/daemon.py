"""Main daemon lifecycle.

Connects to the X server, runs the optional pre-scan and the event
dispatcher, and restores every hidden window on interrupt or stream end.
"""

import asyncio
import logging
import os
import signal
from typing import List, Optional

from .connection import XConnection
from .dispatcher import EventDispatcher
from .errors import OperationError, XConnectionError
from .models import HiderConfig, RestoreOutcome
from .prescan import prescan
from .registry import HiddenRegistry
from .resolver import ClassResolver

logger = logging.getLogger(__name__)


class WindowHiderDaemon:
    """Main daemon class."""

    def __init__(self, config: HiderConfig, connection: Optional[XConnection] = None) -> None:
        """Initialize daemon.

        Args:
            config: Parsed invocation settings
            connection: Gateway to use, a fresh XConnection when None
        """
        self.config = config
        self.connection = connection if connection is not None else XConnection()
        self.registry = HiddenRegistry()
        self.dispatcher: Optional[EventDispatcher] = None
        self.root_id: Optional[int] = None
        self.shutdown_event = asyncio.Event()
        self._shutdown_done = False

    def connect(self) -> None:
        """Open the X connection and subscribe to root structure events.

        Raises:
            XConnectionError: If the display cannot be opened
        """
        self.connection.connect()
        self.root_id = self.connection.root_window()
        self.connection.select_substructure_events(self.root_id)

        self.dispatcher = EventDispatcher(
            connection=self.connection,
            resolver=ClassResolver(self.connection),
            registry=self.registry,
            target_class=self.config.target_class,
        )

    async def initialize(self) -> None:
        """Run the pre-scan when enabled. Requires connect()."""
        if self.config.prescan:
            await prescan(self.dispatcher, self.root_id)
        else:
            logger.debug("Pre-scan disabled")

    async def run(self) -> None:
        """Run the event dispatcher until the stream ends or shutdown."""
        await self.dispatcher.run()

    async def shutdown(self) -> List[RestoreOutcome]:
        """Restore every hidden window and close the connection.

        Safe to call more than once; later calls do nothing.

        Returns:
            Outcomes of the restore pass
        """
        if self._shutdown_done:
            return []
        self._shutdown_done = True

        logger.info("Shutting down, restoring hidden windows...")
        if self.dispatcher is not None:
            self.dispatcher.stop()

        outcomes = await self.registry.restore_all(self.connection.map_window, seal=True)
        for outcome in outcomes:
            if outcome.success:
                logger.info(f"Mapped {outcome.window_id}")
            else:
                logger.warning(f"Couldn't map {outcome.classes} {outcome.window_id}: {outcome.error}")

        if not self.registry.is_empty():
            logger.warning(f"{len(self.registry)} window(s) could not be restored: {self.registry.window_ids()}")

        self.connection.close()
        logger.info("Daemon shutdown complete")
        return outcomes

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        def shutdown_handler(signum, frame):
            """Handle SIGTERM/SIGINT for graceful shutdown."""
            logger.info(f"Received signal {signum}, initiating shutdown...")
            # Signal handlers cannot touch asyncio objects directly
            loop.call_soon_threadsafe(self.shutdown_event.set)

        signal.signal(signal.SIGTERM, shutdown_handler)
        signal.signal(signal.SIGINT, shutdown_handler)


async def main_async(config: HiderConfig, connection: Optional[XConnection] = None) -> int:
    """Async main function.

    Returns:
        Exit code (0 = clean shutdown, 1 = cannot connect or fatal error)
    """
    daemon = WindowHiderDaemon(config, connection)

    try:
        daemon.connect()
    except XConnectionError as e:
        logger.error(e.message, extra={"error": e.to_dict()})
        return 1
    except OperationError as e:
        logger.error(f"Cannot watch the root window: {e.message}", extra={"error": e.to_dict()})
        daemon.connection.close()
        return 1

    logger.info(f"PID: {os.getpid()}")
    daemon.setup_signal_handlers()
    exit_code = 0

    try:
        await daemon.initialize()

        run_task = asyncio.create_task(daemon.run())
        shutdown_task = asyncio.create_task(daemon.shutdown_event.wait())

        # Wait for either stream end or shutdown signal
        await asyncio.wait(
            [run_task, shutdown_task], return_when=asyncio.FIRST_COMPLETED
        )

        # Restoring closes the connection, which ends the dispatcher's wait
        await daemon.shutdown()
        shutdown_task.cancel()
        run_result, _ = await asyncio.gather(run_task, shutdown_task, return_exceptions=True)

        if isinstance(run_result, Exception):
            logger.error(f"Fatal error: {run_result}", exc_info=run_result)
            exit_code = 1

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        exit_code = 1

    finally:
        await daemon.shutdown()

    return exit_code
