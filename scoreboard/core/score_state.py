"""
Shared score state

Single source of truth for the two-team score. Every read-modify-write and
every snapshot happens under the state's own lock, so concurrent commands
are linearized and a snapshot never observes a half-applied mutation.

Rules:
  - increment: target team +1, unconditional
  - decrement: target team -1 only while it is above zero
  - reset: both teams back to zero
  - unknown action or team: no-op (applied = False)
"""
import asyncio
from typing import Tuple

from scoreboard.models import Action, Command, ScoreSnapshot, Team


class ScoreState:
    """Lock-guarded score pair, one instance per server process"""

    def __init__(self, score_a: int = 0, score_b: int = 0):
        if score_a < 0 or score_b < 0:
            raise ValueError("Scores must be non-negative")
        self._scores = {Team.A: score_a, Team.B: score_b}
        self._lock = asyncio.Lock()

    async def apply(self, command: Command) -> Tuple[ScoreSnapshot, bool]:
        """
        Apply a command atomically

        Args:
            command: Decoded command

        Returns:
            (snapshot taken right after the mutation, whether anything changed)
        """
        async with self._lock:
            applied = self._mutate(command)
            return self._snapshot(), applied

    async def snapshot(self) -> ScoreSnapshot:
        """Consistent copy of the current scores"""
        async with self._lock:
            return self._snapshot()

    def _mutate(self, command: Command) -> bool:
        if command.action is Action.RESET:
            self._scores[Team.A] = 0
            self._scores[Team.B] = 0
            return True

        if command.team not in self._scores:
            return False

        if command.action is Action.INCREMENT:
            self._scores[command.team] += 1
            return True

        if command.action is Action.DECREMENT:
            # Floor at zero, silently
            if self._scores[command.team] > 0:
                self._scores[command.team] -= 1
                return True
            return False

        return False

    def _snapshot(self) -> ScoreSnapshot:
        return ScoreSnapshot(score_a=self._scores[Team.A], score_b=self._scores[Team.B])
