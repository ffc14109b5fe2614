"""
Game client - wires connection, codec, reducer and store together.

Data flows one way: player intent -> dispatcher -> connection -> relay ->
connection -> store (decode, reduce, notify) -> subscribers.
"""

import logging
from typing import Callable, Optional

from .config import ClientConfig
from .connection import ConnectFactory, ConnectionManager, open_websocket
from .dispatcher import ActionDispatcher
from .models import Card, ConnectionState, GameState
from .store import GameStore, StateListener

logger = logging.getLogger(__name__)


class GameClient:
    """One participant's view of one game session."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        local_player_id: Optional[str] = None,
        connect_factory: ConnectFactory = open_websocket,
    ):
        self.config = config or ClientConfig()
        self.store = GameStore(local_player_id=local_player_id)
        self.connection = ConnectionManager(
            self.config.url,
            on_message=self.store.handle_frame,
            open_timeout=self.config.open_timeout,
            connect_factory=connect_factory,
        )
        self.actions = ActionDispatcher(self.connection, self.store)

    @property
    def state(self) -> GameState:
        return self.store.state

    @property
    def selected_card(self) -> Optional[Card]:
        return self.store.selected_card

    @property
    def connection_state(self) -> ConnectionState:
        return self.connection.state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    async def connect(self) -> None:
        await self.connection.connect()

    async def disconnect(self) -> None:
        await self.connection.disconnect()

    def reset(self) -> None:
        self.store.reset()

    async def join_game(self, player_name: str, game_id: Optional[str] = None) -> None:
        await self.actions.join_game(player_name, game_id)

    async def deal_cards(self) -> None:
        await self.actions.deal_cards()

    async def play_card(self, card: Card) -> None:
        await self.actions.play_card(card)

    async def drop_card_shared(self, card: Card, x: float, y: float) -> None:
        await self.actions.drop_card_shared(card, x, y)

    def select_card(self, card: Optional[Card]) -> None:
        self.actions.select_card(card)
