"""
Broadcaster: fan a serialized snapshot out to every hub member
"""
import logging

from scoreboard.core.hub import Hub
from scoreboard.models import ScoreSnapshot

logger = logging.getLogger(__name__)


class Broadcaster:
    """Best-effort delivery of one payload to every live connection"""

    def __init__(self, hub: Hub):
        self.hub = hub

    async def broadcast(self, snapshot: ScoreSnapshot) -> int:
        """
        Write the snapshot to every registered connection

        A connection whose write fails is closed and evicted from the hub;
        delivery to the others continues.

        Args:
            snapshot: State to publish

        Returns:
            Number of connections that received the payload
        """
        payload = snapshot.to_payload()
        delivered = 0

        async def deliver(connection) -> bool:
            nonlocal delivered
            try:
                await connection.send(payload)
            except Exception as e:
                logger.warning(f"⚠️ Broadcast to {connection!r} failed: {e}")
                try:
                    await connection.close()
                except Exception as close_error:
                    logger.warning(f"Closing {connection!r} failed: {close_error}")
                return False
            delivered += 1
            return True

        evicted = await self.hub.for_each(deliver)
        if evicted:
            logger.info(f"Evicted {len(evicted)} dead connection(s), {self.hub.count} active")
        return delivered
