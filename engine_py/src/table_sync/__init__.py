"""Client-side state synchronization for shared card tables."""

from .client import GameClient
from .config import ClientConfig
from .connection import ConnectionManager
from .dispatcher import ActionDispatcher
from .models import Card, ConnectionState, GamePhase, GameState, Player, initial_state
from .reducer import reduce
from .store import GameStore

__all__ = [
    "GameClient", "ClientConfig", "ConnectionManager", "ActionDispatcher",
    "Card", "ConnectionState", "GamePhase", "GameState", "Player", "initial_state",
    "reduce", "GameStore",
]
