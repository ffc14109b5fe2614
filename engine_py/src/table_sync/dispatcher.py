"""Builds protocol commands from player intents and sends them."""

import logging
from typing import Optional

from .connection import ConnectionManager
from .models import Card
from .serialization import card_to_wire, encode_command
from .store import GameStore
from .ws.events import (
    OutboundCommand,
    create_deal_cards_command,
    create_drop_card_shared_command,
    create_join_game_command,
    create_play_card_command,
)

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """
    Player-facing actions. Every action is fire-and-forget: the server
    answers through the inbound event stream, not through a return value.
    """

    def __init__(self, connection: ConnectionManager, store: GameStore):
        self.connection = connection
        self.store = store

    async def join_game(self, player_name: str, game_id: Optional[str] = None) -> None:
        """Join ``game_id``, or let the server pick a game when omitted."""
        logger.info(f"Joining game {game_id or '(new)'} as {player_name}")
        await self._send(create_join_game_command(player_name, game_id))

    async def deal_cards(self) -> None:
        await self._send(create_deal_cards_command())

    async def play_card(self, card: Card) -> None:
        """
        Play a card. The local selection is cleared before the command goes
        out and is not restored if the server never confirms.
        """
        self.store.clear_selection()
        await self._send(create_play_card_command(card_to_wire(card)))

    async def drop_card_shared(self, card: Card, x: float, y: float) -> None:
        await self._send(create_drop_card_shared_command(card_to_wire(card), x, y))

    def select_card(self, card: Optional[Card]) -> None:
        # local only
        self.store.select(card)

    async def _send(self, command: OutboundCommand) -> None:
        sent = await self.connection.send(encode_command(command))
        if not sent:
            logger.info(f"{command.type.value} was not sent")
