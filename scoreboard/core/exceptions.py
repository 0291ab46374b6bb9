"""
Scoreboard exceptions

Decode errors are recoverable (the connection stays open); ConnectionClosed
is terminal for the single connection that raised it.
"""


class ScoreboardException(Exception):
    """Base class for all scoreboard errors"""
    pass


class CommandDecodeError(ScoreboardException):
    """Inbound payload could not be decoded into a Command"""
    def __init__(self, raw, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed command {raw!r}: {reason}")


class ConnectionClosed(ScoreboardException):
    """Peer closed the connection or the transport went away"""
    def __init__(self, code: int = 1000):
        self.code = code
        super().__init__(f"Connection closed (code {code})")
