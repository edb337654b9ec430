"""Startup pass over windows that were mapped before the daemon started."""

import logging

from .dispatcher import EventDispatcher
from .errors import ResolveError

logger = logging.getLogger(__name__)

PRESCAN_ORIGIN = "previously spawned"


async def prescan(dispatcher: EventDispatcher, root_id: int) -> int:
    """Apply the hide policy to every window in the root's client list.

    Must complete before dispatcher.run() starts consuming live events.

    Args:
        dispatcher: Dispatcher whose policy and registry are used
        root_id: Root window holding _NET_CLIENT_LIST

    Returns:
        Number of windows hidden
    """
    try:
        window_ids = dispatcher.resolver.client_list(root_id)
    except ResolveError as e:
        logger.warning(f"Pre-scan skipped: {e.message}", extra={"error": e.to_dict()})
        return 0

    logger.info(f"Pre-scan: checking {len(window_ids)} client window(s)")

    hidden = 0
    for window_id in window_ids:
        if await dispatcher.hide_if_matching(window_id, origin=PRESCAN_ORIGIN):
            hidden += 1

    logger.info(f"Pre-scan complete: {hidden} window(s) hidden")
    return hidden
