"""
Tests for command decoding and the per-connection loop
"""
import asyncio

import pytest

from scoreboard.core.broadcaster import Broadcaster
from scoreboard.core.exceptions import CommandDecodeError
from scoreboard.core.hub import Hub
from scoreboard.core.processor import CommandProcessor, decode_command
from scoreboard.core.score_state import ScoreState
from scoreboard.models import Action, Team
from tests.fakes import FakeConnection, score, wait_until


def make_processor(state=None):
    hub = Hub()
    return CommandProcessor(state or ScoreState(), hub, Broadcaster(hub))


# ============ Decoding ============

def test_decode_valid_command():
    """Well-formed JSON decodes to a command"""
    command = decode_command('{"action": "increment", "team": "A"}')
    assert command.action is Action.INCREMENT
    assert command.team is Team.A


def test_decode_reset_without_team():
    """Missing team decodes as OTHER"""
    command = decode_command('{"action": "reset"}')
    assert command.action is Action.RESET
    assert command.team is Team.OTHER


def test_decode_unrecognized_values():
    """Unknown strings decode, they are not errors"""
    command = decode_command('{"action": "explode", "team": "C", "extra": 1}')
    assert command.action is Action.UNKNOWN
    assert command.team is Team.OTHER


def test_decode_null_fields():
    """null action/team decode like missing fields"""
    command = decode_command('{"action": null, "team": null}')
    assert command.action is Action.UNKNOWN
    assert command.team is Team.OTHER
    assert decode_command('{"action": "increment", "team": null}').team is Team.OTHER


def test_decode_bytes_frame():
    """Binary frames carrying JSON are accepted"""
    assert decode_command(b'{"action": "decrement", "team": "B"}').team is Team.B


@pytest.mark.parametrize("raw", [
    "garbage",
    "",
    "[1, 2]",
    '"increment"',
    '{"action": 5, "team": "A"}',
    '{"action": "increment", "team": ["A"]}',
])
def test_decode_malformed(raw):
    """Malformed payloads raise CommandDecodeError"""
    with pytest.raises(CommandDecodeError):
        decode_command(raw)


# ============ Connection loop ============

def test_initial_snapshot_sent_on_connect():
    """A new connection first receives the current state"""
    async def scenario():
        processor = make_processor(ScoreState(3, 1))
        conn = FakeConnection()
        await processor.serve(conn)
        return conn

    conn = asyncio.run(scenario())
    assert conn.sent == [score(3, 1)]


def test_example_session():
    """increment A, decrement B at zero, reset"""
    async def scenario():
        processor = make_processor()
        conn = FakeConnection([
            '{"action":"increment","team":"A"}',
            '{"action":"decrement","team":"B"}',
            '{"action":"reset"}',
        ])
        await processor.serve(conn)
        return conn

    conn = asyncio.run(scenario())
    assert conn.sent == [score(0, 0), score(1, 0), score(1, 0), score(0, 0)]


def test_malformed_message_is_skipped():
    """Garbage neither mutates nor broadcasts, and the loop keeps going"""
    async def scenario():
        processor = make_processor()
        conn = FakeConnection([
            "not json",
            '{"action":"increment","team":"B"}',
        ])
        await processor.serve(conn)
        return conn, await processor.state.snapshot()

    conn, snapshot = asyncio.run(scenario())
    assert conn.sent == [score(0, 0), score(0, 1)]
    assert snapshot.score_b == 1


def test_null_team_is_noop_with_broadcast():
    """A null team changes nothing but still broadcasts the state"""
    async def scenario():
        processor = make_processor()
        conn = FakeConnection(['{"action":"increment","team":null}'])
        await processor.serve(conn)
        return conn, await processor.state.snapshot()

    conn, snapshot = asyncio.run(scenario())
    assert conn.sent == [score(0, 0), score(0, 0)]
    assert (snapshot.score_a, snapshot.score_b) == (0, 0)


def test_disconnect_deregisters_and_closes():
    """Hang-up is terminal: removed from the hub and closed once"""
    async def scenario():
        processor = make_processor()
        conn = FakeConnection(hold_open=True)
        task = asyncio.create_task(processor.serve(conn))
        await wait_until(lambda: processor.hub.count == 1)
        conn.hang_up()
        await task
        return processor.hub, conn

    hub, conn = asyncio.run(scenario())
    assert hub.count == 0
    assert conn.close_calls == 1


def test_read_error_is_terminal():
    """An unexpected transport error ends only that connection"""
    async def scenario():
        processor = make_processor()
        conn = FakeConnection([OSError("reset by peer")], hold_open=True)
        await processor.serve(conn)
        return processor.hub, conn

    hub, conn = asyncio.run(scenario())
    assert hub.count == 0
    assert conn.closed is True


def test_failed_initial_send():
    """If the initial snapshot cannot be written the connection is dropped"""
    async def scenario():
        processor = make_processor()
        conn = FakeConnection(hold_open=True, fail_send=True)
        await processor.serve(conn)
        return processor.hub, conn

    hub, conn = asyncio.run(scenario())
    assert hub.count == 0
    assert conn.closed is True


def test_all_connections_receive_update():
    """Every connection, sender included, sees the increment"""
    async def scenario():
        processor = make_processor()
        conns = [FakeConnection(hold_open=True, name=str(i)) for i in range(3)]
        tasks = [asyncio.create_task(processor.serve(c)) for c in conns]
        await wait_until(lambda: processor.hub.count == 3)

        conns[0].feed('{"action":"increment","team":"A"}')
        await wait_until(lambda: all(len(c.sent) == 2 for c in conns))

        for c in conns:
            c.hang_up()
        await asyncio.gather(*tasks)
        return conns

    for conn in asyncio.run(scenario()):
        assert conn.sent == [score(0, 0), score(1, 0)]


def test_dead_peer_does_not_block_others():
    """A peer failing writes is evicted, the sender keeps going"""
    async def scenario():
        processor = make_processor()
        sender = FakeConnection(hold_open=True, name="sender")
        dead = FakeConnection(hold_open=True, name="dead")
        tasks = [asyncio.create_task(processor.serve(c)) for c in (sender, dead)]
        await wait_until(lambda: processor.hub.count == 2)

        dead.fail_send = True
        sender.feed('{"action":"increment","team":"A"}')
        sender.feed('{"action":"increment","team":"A"}')
        await wait_until(lambda: len(sender.sent) == 3)

        sender.hang_up()
        dead.hang_up()
        await asyncio.gather(*tasks)
        return processor.hub, sender, dead

    hub, sender, dead = asyncio.run(scenario())
    assert sender.sent == [score(0, 0), score(1, 0), score(2, 0)]
    assert dead.sent == [score(0, 0)]
    assert dead.close_calls == 1
    assert hub.count == 0


def test_concurrent_connections_lose_no_updates():
    """K connections each incrementing A once add exactly K"""
    async def scenario():
        processor = make_processor()
        conns = [
            FakeConnection(['{"action":"increment","team":"A"}'], name=str(i))
            for i in range(50)
        ]
        await asyncio.gather(*[processor.serve(c) for c in conns])
        return await processor.state.snapshot()

    snapshot = asyncio.run(scenario())
    assert snapshot.score_a == 50
    assert snapshot.score_b == 0
