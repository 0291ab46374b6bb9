"""
Command processor: decoding plus the per-connection loop

Lifecycle of one connection:
  CONNECTED    -> registered, initial snapshot sent to this connection only
  (PROCESSING) -> each decoded command is applied and the result broadcast
  DISCONNECTED -> deregistered, transport closed, loop exits (terminal)

Malformed payloads are logged and skipped; they never disconnect the client.
Every successfully decoded command is followed by a broadcast, including
commands the state treats as no-ops, so clients see the unchanged state.
"""
import logging
from typing import Union

from pydantic import ValidationError

from scoreboard.core.broadcaster import Broadcaster
from scoreboard.core.exceptions import CommandDecodeError, ConnectionClosed
from scoreboard.core.hub import Hub
from scoreboard.core.score_state import ScoreState
from scoreboard.models import Action, Command, CommandMessage, Team

logger = logging.getLogger(__name__)


def decode_command(raw: Union[str, bytes]) -> Command:
    """
    Decode one inbound frame into a Command

    Args:
        raw: JSON object text, e.g. '{"action": "increment", "team": "A"}'

    Returns:
        Command; unrecognized action/team values become UNKNOWN/OTHER

    Raises:
        CommandDecodeError: Not JSON, not an object, or non-string fields
    """
    try:
        message = CommandMessage.model_validate_json(raw)
    except ValidationError as exc:
        errors = exc.errors()
        reason = errors[0]["msg"] if errors else str(exc)
        raise CommandDecodeError(raw, reason) from exc

    return Command(
        action=Action.parse(message.action or ""),
        team=Team.parse(message.team or ""),
    )


class CommandProcessor:
    """Runs the read-apply-broadcast loop for each connection"""

    def __init__(self, state: ScoreState, hub: Hub, broadcaster: Broadcaster):
        self.state = state
        self.hub = hub
        self.broadcaster = broadcaster

    async def serve(self, connection) -> None:
        """Own the connection until it disconnects"""
        try:
            await self.hub.register(connection, on_join=self._send_initial)
        except Exception as e:
            logger.warning(f"Initial sync with {connection!r} failed: {e}")
            await connection.close()
            return

        try:
            await self._process(connection)
        finally:
            await self.hub.deregister(connection)
            await connection.close()
            logger.info(f"{connection!r} disconnected")

    async def handle(self, raw: Union[str, bytes]) -> bool:
        """
        Decode, apply and broadcast one inbound frame

        Returns:
            False when the frame was malformed and skipped
        """
        try:
            command = decode_command(raw)
        except CommandDecodeError as e:
            logger.warning(f"❌ {e}")
            return False

        snapshot, applied = await self.state.apply(command)
        # Broadcast even when applied is False
        await self.broadcaster.broadcast(snapshot)
        logger.info(
            f"Processed {command.action.value}/{command.team.value} "
            f"(applied={applied}). New state: {snapshot.to_payload()}"
        )
        return True

    async def _send_initial(self, connection) -> None:
        snapshot = await self.state.snapshot()
        await connection.send(snapshot.to_payload())

    async def _process(self, connection) -> None:
        while True:
            try:
                raw = await connection.receive()
            except ConnectionClosed:
                return
            except Exception as e:
                logger.warning(f"Read error on {connection!r}: {e}", exc_info=True)
                return

            await self.handle(raw)
