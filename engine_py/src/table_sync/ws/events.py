"""
WebSocket message models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, ValidationError

from ..constants import SUITS
from ..errors import CommandError, DecodeError, ProtocolError, UnknownEventError
from ..models import GamePhase


class InboundEventType(str, Enum):
    """Inbound (server -> client) event types."""
    GAME_STATE = "game_state"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    CARD_PLAYED = "card_played"
    CARDS_DEALT = "cards_dealt"
    GAME_ENDED = "game_ended"
    ERROR = "error"


class CommandType(str, Enum):
    """Outbound (client -> server) command types."""
    JOIN_GAME = "join_game"
    DEAL_CARDS = "deal_cards"
    PLAY_CARD = "play_card"
    DROP_CARD_SHARED = "drop_card_shared"
    SELECT_CARD = "select_card"  # local only, never encoded


# Shared payload models
class WireCard(BaseModel):
    """Card as it appears on the wire."""
    id: str = Field(..., min_length=1)
    suit: Literal[SUITS]
    rank: str
    value: int


class WirePlayer(BaseModel):
    """Player as it appears on the wire."""
    id: str = Field(..., min_length=1)
    name: str
    hand: List[WireCard] = Field(default_factory=list)
    score: int = 0
    isCurrentPlayer: bool = False
    isDealer: Optional[bool] = None


class Position(BaseModel):
    """Drop position inside the shared zone."""
    x: float
    y: float


# Inbound event models
class BaseInboundEvent(BaseModel):
    """Base inbound event model."""
    type: InboundEventType


class GameStateEvent(BaseInboundEvent):
    """Full snapshot of the game."""
    type: InboundEventType = InboundEventType.GAME_STATE
    gameId: Optional[str] = None
    players: List[WirePlayer]
    currentPlayer: Optional[str] = None
    gamePhase: GamePhase
    playedCards: Optional[List[WireCard]] = None
    sharedZone: Optional[List[WireCard]] = None


class PlayerJoinedEvent(BaseInboundEvent):
    """A player entered the game."""
    type: InboundEventType = InboundEventType.PLAYER_JOINED
    player: WirePlayer


class PlayerLeftEvent(BaseInboundEvent):
    """A player left the game."""
    type: InboundEventType = InboundEventType.PLAYER_LEFT
    playerId: str


class CardPlayedEvent(BaseInboundEvent):
    """A card went into the shared zone."""
    type: InboundEventType = InboundEventType.CARD_PLAYED
    card: WireCard
    playerId: Optional[str] = None


class CardsDealtEvent(BaseInboundEvent):
    """Outcome of a deal."""
    type: InboundEventType = InboundEventType.CARDS_DEALT
    players: List[WirePlayer]
    deck: Optional[List[WireCard]] = None  # the relay leaves it out of data.game


class GameEndedEvent(BaseInboundEvent):
    """The game is over."""
    type: InboundEventType = InboundEventType.GAME_ENDED


class ServerErrorEvent(BaseInboundEvent):
    """Relay rejected something we sent."""
    type: InboundEventType = InboundEventType.ERROR
    message: str = ""


# Union type for all inbound events
InboundEvent = Union[
    GameStateEvent,
    PlayerJoinedEvent,
    PlayerLeftEvent,
    CardPlayedEvent,
    CardsDealtEvent,
    GameEndedEvent,
    ServerErrorEvent
]


# Outbound command models
class JoinGameData(BaseModel):
    playerName: str = Field(..., min_length=1)
    gameId: Optional[str] = None


class PlayCardData(BaseModel):
    card: WireCard


class DropCardSharedData(BaseModel):
    card: WireCard
    position: Position


class BaseCommand(BaseModel):
    """Base command model."""
    type: CommandType


class JoinGameCommand(BaseCommand):
    """Join (or create) a game."""
    type: CommandType = CommandType.JOIN_GAME
    data: JoinGameData


class DealCardsCommand(BaseCommand):
    """Ask the server to deal."""
    type: CommandType = CommandType.DEAL_CARDS


class PlayCardCommand(BaseCommand):
    """Play a card from the local hand."""
    type: CommandType = CommandType.PLAY_CARD
    data: PlayCardData


class DropCardSharedCommand(BaseCommand):
    """Drop a card at a position in the shared zone."""
    type: CommandType = CommandType.DROP_CARD_SHARED
    data: DropCardSharedData


# Union type for all outbound commands
OutboundCommand = Union[
    JoinGameCommand,
    DealCardsCommand,
    PlayCardCommand,
    DropCardSharedCommand
]


EVENT_MAP = {
    InboundEventType.GAME_STATE: GameStateEvent,
    InboundEventType.PLAYER_JOINED: PlayerJoinedEvent,
    InboundEventType.PLAYER_LEFT: PlayerLeftEvent,
    InboundEventType.CARD_PLAYED: CardPlayedEvent,
    InboundEventType.CARDS_DEALT: CardsDealtEvent,
    InboundEventType.GAME_ENDED: GameEndedEvent,
    InboundEventType.ERROR: ServerErrorEvent,
}


def _flatten_envelope(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Lift fields nested under ``data`` (and under ``data.game``, which the
    relay uses for snapshots, deals and game end) to the top level. Fields
    already present at the top level win.
    """
    nested = data.get("data")
    if not isinstance(nested, dict):
        return data

    flat: Dict[str, Any] = {}
    game = nested.get("game")
    if isinstance(game, dict):
        flat.update(game)
        if "id" in game and "gameId" not in game:
            flat["gameId"] = game["id"]
    flat.update({k: v for k, v in nested.items() if k != "game"})
    flat.update({k: v for k, v in data.items() if k != "data"})
    return flat


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into the matching event model.

    Args:
        data: Decoded JSON object from the channel

    Returns:
        Parsed event model

    Raises:
        DecodeError: If the type tag is missing or not a string
        UnknownEventError: If the type tag is not a catalogued event
        ProtocolError: If the payload does not match the event's shape
    """
    event_type = data.get("type")

    if not event_type:
        raise DecodeError("Missing event type")
    if not isinstance(event_type, str):
        raise DecodeError(f"Event type must be a string, got {type(event_type).__name__}")

    try:
        event_type = InboundEventType(event_type)
    except ValueError:
        raise UnknownEventError(event_type)

    event_class = EVENT_MAP[event_type]
    fields = _flatten_envelope(data)

    # The relay uses "" for "nobody's turn"
    if fields.get("currentPlayer") == "":
        fields = {**fields, "currentPlayer": None}

    try:
        return event_class(**fields)
    except ValidationError as e:
        raise ProtocolError(f"Invalid {event_type.value} payload: {e.error_count()} error(s): "
                            f"{_describe_errors(e)}")


def _describe_errors(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def create_join_game_command(player_name: str, game_id: Optional[str] = None) -> JoinGameCommand:
    """Create a join_game command."""
    try:
        return JoinGameCommand(data=JoinGameData(playerName=player_name, gameId=game_id))
    except ValidationError as e:
        raise CommandError(f"Invalid join_game command: {_describe_errors(e)}")


def create_deal_cards_command() -> DealCardsCommand:
    """Create a deal_cards command."""
    return DealCardsCommand()


def create_play_card_command(card: WireCard) -> PlayCardCommand:
    """Create a play_card command."""
    return PlayCardCommand(data=PlayCardData(card=card))


def create_drop_card_shared_command(card: WireCard, x: float, y: float) -> DropCardSharedCommand:
    """Create a drop_card_shared command."""
    try:
        return DropCardSharedCommand(
            data=DropCardSharedData(card=card, position=Position(x=x, y=y))
        )
    except ValidationError as e:
        raise CommandError(f"Invalid drop_card_shared command: {_describe_errors(e)}")
