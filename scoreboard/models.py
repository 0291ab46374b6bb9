"""
Data models for the scoreboard server
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class Action(str, Enum):
    """Mutation requested by a client"""
    INCREMENT = "increment"
    DECREMENT = "decrement"
    RESET = "reset"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "Action":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class Team(str, Enum):
    """Team targeted by a command"""
    A = "A"
    B = "B"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "Team":
        if value in (cls.A.value, cls.B.value):
            return cls(value)
        return cls.OTHER


class CommandMessage(BaseModel):
    """Inbound wire payload, e.g. {"action": "increment", "team": "A"}"""
    model_config = ConfigDict(extra="ignore")

    # null is read as an empty string
    action: Optional[StrictStr] = None
    team: Optional[StrictStr] = None


class Command(BaseModel):
    """Decoded command, consumed immediately and never stored"""
    model_config = ConfigDict(frozen=True)

    action: Action
    team: Team = Team.OTHER


class ScoreSnapshot(BaseModel):
    """Immutable copy of the score pair at one instant"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    score_a: int = Field(default=0, ge=0, alias="scoreA")
    score_b: int = Field(default=0, ge=0, alias="scoreB")

    def to_payload(self) -> str:
        """Serialize to the outbound JSON text: {"scoreA": 1, "scoreB": 0}"""
        return self.model_dump_json(by_alias=True)


class SimulatorConfig(BaseModel):
    """Periodic score simulator settings"""
    enabled: bool = False
    interval_sec: float = Field(default=5.0, gt=0)


class ServerConfig(BaseModel):
    """Server configuration loaded from YAML"""
    host: str = "0.0.0.0"
    port: int = 8080
    ws_path: str = "/ws"
    index_path: str = "static/index.html"
    log_level: str = "INFO"
    simulator: SimulatorConfig = SimulatorConfig()
