"""
Per-process server state

One instance of each core component, built at startup and attached to
app.state so routers receive them by reference instead of as globals.
"""
from dataclasses import dataclass

from scoreboard.core.broadcaster import Broadcaster
from scoreboard.core.hub import Hub
from scoreboard.core.processor import CommandProcessor
from scoreboard.core.score_state import ScoreState
from scoreboard.core.simulator import ScoreSimulator
from scoreboard.models import ServerConfig


@dataclass
class ServerState:
    config: ServerConfig
    scores: ScoreState
    hub: Hub
    broadcaster: Broadcaster
    processor: CommandProcessor
    simulator: ScoreSimulator


def build_state(config: ServerConfig) -> ServerState:
    """Wire the core components together, scores starting at zero"""
    scores = ScoreState()
    hub = Hub()
    broadcaster = Broadcaster(hub)
    return ServerState(
        config=config,
        scores=scores,
        hub=hub,
        broadcaster=broadcaster,
        processor=CommandProcessor(scores, hub, broadcaster),
        simulator=ScoreSimulator(scores, broadcaster, config.simulator.interval_sec),
    )
