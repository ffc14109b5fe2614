"""Console session: connect, join, follow the game until it ends"""

import asyncio
import logging
from typing import Optional

from .client import GameClient
from .config import ClientConfig
from .connection import ConnectFactory, open_websocket
from .models import ConnectionState, GamePhase, GameState
from .serialization import summarize_state

logger = logging.getLogger(__name__)


async def run_session(
    config: ClientConfig,
    player_name: str,
    game_id: Optional[str] = None,
    deal: bool = False,
    connect_factory: ConnectFactory = open_websocket,
) -> GameState:
    """
    Play one session from the console.

    Returns when the game finishes or the channel goes down, with the last
    known state.
    """
    client = GameClient(config, connect_factory=connect_factory)
    done = asyncio.Event()

    def on_state(state: GameState):
        logger.info(f"State: {summarize_state(state)}")
        if state.phase == GamePhase.FINISHED:
            logger.info("Game finished")
            done.set()

    def on_connection(old: ConnectionState, new: ConnectionState):
        if new == ConnectionState.DISCONNECTED:
            done.set()

    client.subscribe(on_state)
    client.connection.add_state_listener(on_connection)

    await client.connect()
    if client.connection_state != ConnectionState.CONNECTED:
        logger.error(f"Could not connect to {config.url}")
        return client.state

    await client.join_game(player_name, game_id)
    if deal:
        await client.deal_cards()

    try:
        await done.wait()
    finally:
        await client.disconnect()
    return client.state
