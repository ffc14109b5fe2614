"""
State reducer - applies inbound events to game state.

The reducer is the single point of state mutation. ``reduce`` is a pure
function: (state, event) -> new state. Inputs are never modified; a handler
that has nothing to change returns the state it was given.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Optional, Tuple

from .models import GamePhase, GameState, Player
from .serialization import card_from_wire, cards_from_wire, player_from_wire, players_from_wire
from .ws.events import (
    CardPlayedEvent, CardsDealtEvent, GameEndedEvent, GameStateEvent, InboundEvent,
    InboundEventType, PlayerJoinedEvent, PlayerLeftEvent, ServerErrorEvent,
)

logger = logging.getLogger(__name__)


def _current_player_or_none(players: Tuple[Player, ...], player_id: Optional[str]) -> Optional[str]:
    if player_id is None:
        return None
    if any(player.id == player_id for player in players):
        return player_id
    logger.warning(f"Current player {player_id} is not in the player list, clearing it")
    return None


def apply_game_state(state: GameState, event: GameStateEvent) -> GameState:
    """Replace the state wholesale with a full snapshot."""
    if (
        event.gameId is not None
        and state.game_id is not None
        and event.gameId != state.game_id
        and state.started
    ):
        logger.warning(
            f"Ignoring snapshot for game {event.gameId}: game {state.game_id} has already started"
        )
        return state

    players = players_from_wire(event.players)
    return replace(
        state,
        game_id=event.gameId if event.gameId is not None else state.game_id,
        players=players,
        current_player_id=_current_player_or_none(players, event.currentPlayer),
        phase=event.gamePhase,
        started=state.started or event.gamePhase != GamePhase.WAITING,
        played_cards=(
            cards_from_wire(event.playedCards) if event.playedCards is not None else state.played_cards
        ),
        shared_zone=(
            cards_from_wire(event.sharedZone) if event.sharedZone is not None else state.shared_zone
        ),
    )


def apply_player_joined(state: GameState, event: PlayerJoinedEvent) -> GameState:
    """Append the new player, or replace it in place if the id is already known."""
    joined = player_from_wire(event.player)
    if state.has_player(joined.id):
        logger.info(f"Player {joined.id} joined again, updating existing entry")
        players = tuple(joined if player.id == joined.id else player for player in state.players)
    else:
        players = state.players + (joined,)
    return replace(state, players=players)


def apply_player_left(state: GameState, event: PlayerLeftEvent) -> GameState:
    if not state.has_player(event.playerId):
        logger.debug(f"Player {event.playerId} left but was not in the player list")
        return state

    players = tuple(player for player in state.players if player.id != event.playerId)
    current_player_id = state.current_player_id
    if current_player_id == event.playerId:
        current_player_id = None
    return replace(state, players=players, current_player_id=current_player_id)


def apply_card_played(state: GameState, event: CardPlayedEvent) -> GameState:
    """Append the card to both the played log and the shared zone."""
    # The hand is left alone; the next snapshot carries the updated hand.
    card = card_from_wire(event.card)
    return replace(
        state,
        played_cards=state.played_cards + (card,),
        shared_zone=state.shared_zone + (card,),
    )


def apply_cards_dealt(state: GameState, event: CardsDealtEvent) -> GameState:
    players = players_from_wire(event.players)
    return replace(
        state,
        players=players,
        deck=cards_from_wire(event.deck) if event.deck is not None else state.deck,
        current_player_id=_current_player_or_none(players, state.current_player_id),
    )


def apply_game_ended(state: GameState, event: GameEndedEvent) -> GameState:
    if state.phase == GamePhase.FINISHED:
        return state
    return replace(state, phase=GamePhase.FINISHED, started=True)


def apply_server_error(state: GameState, event: ServerErrorEvent) -> GameState:
    return state


_HANDLERS: Dict[InboundEventType, Callable[[GameState, InboundEvent], GameState]] = {
    InboundEventType.GAME_STATE: apply_game_state,
    InboundEventType.PLAYER_JOINED: apply_player_joined,
    InboundEventType.PLAYER_LEFT: apply_player_left,
    InboundEventType.CARD_PLAYED: apply_card_played,
    InboundEventType.CARDS_DEALT: apply_cards_dealt,
    InboundEventType.GAME_ENDED: apply_game_ended,
    InboundEventType.ERROR: apply_server_error,
}


def reduce(state: GameState, event: InboundEvent) -> GameState:
    """
    Apply one inbound event to the game state.

    Args:
        state: Current game state (never modified)
        event: Validated inbound event

    Returns:
        The next game state; ``state`` itself for unrecognized events
    """
    handler = _HANDLERS.get(getattr(event, "type", None))
    if handler is None:
        logger.warning(f"No handler for event type: {getattr(event, 'type', None)}")
        return state
    return handler(state, event)
