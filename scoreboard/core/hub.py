"""
Connection registry (hub)

Set of live connections eligible to receive broadcasts. All membership
changes and full scans are serialized by one asyncio.Lock. The lock is held
for the whole of a for_each scan, so a slow peer delays joins and leaves
for the duration of that one broadcast.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set

logger = logging.getLogger(__name__)


class Hub:
    """Tracks live connections"""

    def __init__(self):
        self._members: Set = set()
        self._lock = asyncio.Lock()

    @property
    def count(self) -> int:
        return len(self._members)

    def __contains__(self, connection) -> bool:
        return connection in self._members

    async def register(
        self,
        connection,
        on_join: Optional[Callable[[object], Awaitable[None]]] = None,
    ) -> None:
        """
        Add a connection to the hub

        Args:
            connection: Accepted connection handle
            on_join: Coroutine function run with the lock held before the
                connection becomes visible to broadcasts (used to send the
                initial snapshot). If it raises, the connection is not added.
        """
        async with self._lock:
            if on_join is not None:
                await on_join(connection)
            self._members.add(connection)
        logger.info(f"🔌 {connection!r} registered ({self.count} active)")

    async def deregister(self, connection) -> None:
        """Remove a connection; removing an absent one is a no-op"""
        async with self._lock:
            if connection not in self._members:
                return
            self._members.discard(connection)
        logger.info(f"👋 {connection!r} deregistered ({self.count} active)")

    async def for_each(self, fn: Callable[[object], Awaitable[bool]]) -> List:
        """
        Apply fn to every member of a point-in-time view of the hub

        fn returns False to mark its connection for removal. Marked
        connections are removed once, after the scan completes.

        Returns:
            List of removed connections
        """
        failed = []
        async with self._lock:
            try:
                for connection in list(self._members):
                    if not await fn(connection):
                        failed.append(connection)
            finally:
                for connection in failed:
                    self._members.discard(connection)
        return failed
