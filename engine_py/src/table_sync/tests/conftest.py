"""
Shared fixtures: an in-memory websocket channel and sample wire payloads.
"""

import asyncio

import orjson
import pytest
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK

_CLOSE = object()


class FakeWebSocket:
    """Stands in for a websockets client connection."""

    def __init__(self):
        self.sent = []
        self.closed = False
        self._inbox = asyncio.Queue()

    def push(self, frame):
        """Queue a frame (str/bytes) as if the server sent it."""
        self._inbox.put_nowait(frame)

    def push_json(self, payload):
        self.push(orjson.dumps(payload).decode("utf-8"))

    def server_close(self):
        self._inbox.put_nowait(_CLOSE)

    def server_drop(self):
        self._inbox.put_nowait(ConnectionClosedError(None, None))

    async def send(self, data):
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(data)

    async def close(self):
        self.closed = True
        self._inbox.put_nowait(_CLOSE)

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._inbox.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            raise item
        return item


class FakeConnector:
    """connect_factory that hands out FakeWebSockets and records calls."""

    def __init__(self, error=None, gate=None):
        self.error = error
        self.gate = gate
        self.sockets = []

    async def __call__(self, url, open_timeout=None):
        self.last_url = url
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        ws = FakeWebSocket()
        self.sockets.append(ws)
        return ws

    @property
    def ws(self):
        return self.sockets[-1]


async def settle(rounds: int = 10):
    """Let background tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_card(card_id, suit="hearts", rank="5", value=5):
    return {"id": card_id, "suit": suit, "rank": rank, "value": value}


def make_player(player_id, name=None, hand=(), score=0, current=False):
    return {
        "id": player_id,
        "name": name or player_id.upper(),
        "hand": list(hand),
        "score": score,
        "isCurrentPlayer": current,
    }


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def two_player_snapshot():
    return {
        "type": "game_state",
        "gameId": "g1",
        "players": [
            make_player("p1", "Alice", [make_card("h5"), make_card("s9", "spades", "9", 9)], current=True),
            make_player("p2", "Bob", [make_card("dK", "diamonds", "K", 13)]),
        ],
        "currentPlayer": "p1",
        "gamePhase": "playing",
        "playedCards": [],
        "sharedZone": [],
    }
