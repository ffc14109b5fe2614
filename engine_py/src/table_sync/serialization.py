"""
Frame encoding/decoding and wire <-> model conversion.
"""

from typing import Any, Dict, Iterable, Tuple, Union

import orjson
from pydantic import ValidationError

from .errors import CommandError, DecodeError
from .models import Card, GameState, Player
from .ws.events import InboundEvent, OutboundCommand, WireCard, WirePlayer, parse_inbound_event


def decode_frame(raw: Union[str, bytes]) -> InboundEvent:
    """
    Decode one inbound frame into a typed event.

    Args:
        raw: Text (or UTF-8 bytes) received from the channel

    Returns:
        Parsed inbound event

    Raises:
        DecodeError, UnknownEventError, ProtocolError
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise DecodeError(f"Malformed frame: {e}")

    if not isinstance(data, dict):
        raise DecodeError(f"Frame must be a JSON object, got {type(data).__name__}")

    return parse_inbound_event(data)


def encode_command(command: OutboundCommand) -> str:
    """Serialize an outbound command to the ``{type, data?}`` envelope."""
    payload = command.model_dump(mode="json", exclude_none=True)
    return orjson.dumps(payload).decode("utf-8")


def card_from_wire(card: WireCard) -> Card:
    return Card(id=card.id, suit=card.suit, rank=card.rank, value=card.value)


def cards_from_wire(cards: Iterable[WireCard]) -> Tuple[Card, ...]:
    return tuple(card_from_wire(card) for card in cards)


def player_from_wire(player: WirePlayer) -> Player:
    return Player(
        id=player.id,
        name=player.name,
        hand=cards_from_wire(player.hand),
        score=player.score,
        is_current_player=player.isCurrentPlayer,
        is_dealer=player.isDealer,
    )


def players_from_wire(players: Iterable[WirePlayer]) -> Tuple[Player, ...]:
    return tuple(player_from_wire(player) for player in players)


def card_to_wire(card: Card) -> WireCard:
    try:
        return WireCard(id=card.id, suit=card.suit, rank=card.rank, value=card.value)
    except ValidationError as e:
        raise CommandError(f"Invalid card {card.id!r}: {e.error_count()} error(s)")


def _card_dict(card: Card) -> Dict[str, Any]:
    return {"id": card.id, "suit": card.suit, "rank": card.rank, "value": card.value}


def serialize_player(player: Player) -> Dict[str, Any]:
    """Serialize a player using wire field names."""
    serialized = {
        "id": player.id,
        "name": player.name,
        "hand": [_card_dict(card) for card in player.hand],
        "score": player.score,
        "isCurrentPlayer": player.is_current_player,
    }
    if player.is_dealer is not None:
        serialized["isDealer"] = player.is_dealer
    return serialized


def serialize_state(state: GameState) -> Dict[str, Any]:
    """
    Serialize game state to a plain dict with wire field names.

    Used for logging and for handing state to presentation code that
    expects the JSON shape.
    """
    return {
        "gameId": state.game_id,
        "players": [serialize_player(player) for player in state.players],
        "currentPlayer": state.current_player_id,
        "gamePhase": state.phase.value,
        "playedCards": [_card_dict(card) for card in state.played_cards],
        "deck": [_card_dict(card) for card in state.deck],
        "sharedZone": [_card_dict(card) for card in state.shared_zone],
    }


def summarize_state(state: GameState) -> Dict[str, Any]:
    """Create a minimal summary with only essential information."""
    return {
        "gameId": state.game_id,
        "phase": state.phase.value,
        "currentPlayer": state.current_player_id,
        "players": [f"{player.name}:{len(player.hand)}" for player in state.players],
        "played": len(state.played_cards),
        "sharedZone": len(state.shared_zone),
        "deck": len(state.deck),
    }
