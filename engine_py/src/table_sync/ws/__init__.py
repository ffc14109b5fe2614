"""
Wire message models for the table sync protocol.
"""

from .events import *

__all__ = [
    "InboundEventType", "CommandType", "WireCard", "WirePlayer", "Position",
    "GameStateEvent", "PlayerJoinedEvent", "PlayerLeftEvent", "CardPlayedEvent",
    "CardsDealtEvent", "GameEndedEvent", "ServerErrorEvent", "InboundEvent",
    "JoinGameCommand", "DealCardsCommand", "PlayCardCommand", "DropCardSharedCommand",
    "OutboundCommand", "parse_inbound_event", "create_join_game_command",
    "create_deal_cards_command", "create_play_card_command",
    "create_drop_card_shared_command",
]
