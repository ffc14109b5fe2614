"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .constants import PHASE_WAITING, PHASE_PLAYING, PHASE_FINISHED


class GamePhase(str, Enum):
    WAITING = PHASE_WAITING
    PLAYING = PHASE_PLAYING
    FINISHED = PHASE_FINISHED


class ConnectionState(str, Enum):
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'


@dataclass(frozen=True)
class Card:
    id: str
    suit: str  # hearts|diamonds|clubs|spades
    rank: str
    value: int


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    hand: Tuple[Card, ...] = ()  # display order
    score: int = 0
    is_current_player: bool = False
    is_dealer: Optional[bool] = None

    def holds(self, card_id: str) -> bool:
        return any(card.id == card_id for card in self.hand)


@dataclass(frozen=True)
class GameState:
    game_id: Optional[str] = None
    players: Tuple[Player, ...] = ()
    current_player_id: Optional[str] = None
    phase: GamePhase = GamePhase.WAITING
    played_cards: Tuple[Card, ...] = ()  # append-only
    deck: Tuple[Card, ...] = ()
    shared_zone: Tuple[Card, ...] = ()
    # set once the server has reported a playing (or later) phase; game_id is frozen from then on
    started: bool = False

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def has_player(self, player_id: str) -> bool:
        return self.get_player(player_id) is not None


def initial_state() -> GameState:
    return GameState()
