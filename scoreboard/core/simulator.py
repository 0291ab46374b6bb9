"""
Score simulator

Background task that bumps one team every interval and broadcasts the
result, independent of any client. Team A on even Unix seconds, team B on
odd ones. Demo / keepalive only.
"""
import asyncio
import logging
import time
from typing import Callable, Optional

from scoreboard.core.broadcaster import Broadcaster
from scoreboard.core.score_state import ScoreState
from scoreboard.models import Action, Command, ScoreSnapshot, Team

logger = logging.getLogger(__name__)


def pick_team(now: float) -> Team:
    """Team to score at wall-clock time `now`"""
    return Team.A if int(now) % 2 == 0 else Team.B


class ScoreSimulator:
    """Periodic score generator"""

    def __init__(
        self,
        state: ScoreState,
        broadcaster: Broadcaster,
        interval_sec: float = 5.0,
        clock: Callable[[], float] = time.time,
    ):
        self.state = state
        self.broadcaster = broadcaster
        self.interval_sec = interval_sec
        self.clock = clock
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> ScoreSnapshot:
        """Score one point and broadcast it"""
        team = pick_team(self.clock())
        snapshot, _ = await self.state.apply(Command(action=Action.INCREMENT, team=team))
        delivered = await self.broadcaster.broadcast(snapshot)
        logger.debug(f"Simulated point for {team.value}, sent to {delivered} connection(s)")
        return snapshot

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_sec)
            try:
                await self.tick()
            except Exception:
                logger.exception("Simulator tick failed")

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self.run())
        logger.info(f"⏱️ Simulator started (every {self.interval_sec}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Simulator stopped")
