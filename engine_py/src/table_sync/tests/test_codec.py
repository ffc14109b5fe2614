"""
Tests for frame decoding and command encoding.
"""

import orjson
import pytest

from table_sync.errors import CommandError, DecodeError, ProtocolError, SyncError, UnknownEventError
from table_sync.models import Card, GamePhase
from table_sync.serialization import (
    card_to_wire, decode_frame, encode_command, serialize_state, player_from_wire,
)
from table_sync.ws.events import (
    CardPlayedEvent, CardsDealtEvent, GameEndedEvent, GameStateEvent, PlayerJoinedEvent,
    PlayerLeftEvent, ServerErrorEvent,
    WirePlayer, create_deal_cards_command, create_drop_card_shared_command,
    create_join_game_command, create_play_card_command,
)

from conftest import make_card, make_player


def test_decode_game_state(two_player_snapshot):
    event = decode_frame(orjson.dumps(two_player_snapshot).decode())
    assert isinstance(event, GameStateEvent)
    assert event.gameId == "g1"
    assert event.gamePhase == GamePhase.PLAYING
    assert [p.id for p in event.players] == ["p1", "p2"]
    assert event.playedCards == []


def test_decode_accepts_bytes():
    event = decode_frame(b'{"type": "player_left", "playerId": "p9"}')
    assert isinstance(event, PlayerLeftEvent)
    assert event.playerId == "p9"


def test_decode_optional_collections_absent():
    event = decode_frame(orjson.dumps({
        "type": "game_state", "gameId": "g1", "players": [],
        "currentPlayer": None, "gamePhase": "waiting",
    }))
    assert event.playedCards is None
    assert event.sharedZone is None


def test_decode_data_envelope():
    frame = {"type": "player_joined", "data": {"player": make_player("p3", "Cleo")}}
    event = decode_frame(orjson.dumps(frame))
    assert isinstance(event, PlayerJoinedEvent)
    assert event.player.name == "Cleo"


def test_decode_nested_game_snapshot():
    frame = {
        "type": "game_state",
        "data": {"game": {
            "id": "g7",
            "players": [make_player("p1")],
            "currentPlayer": "",
            "gamePhase": "waiting",
            "playedCards": [],
        }},
    }
    event = decode_frame(orjson.dumps(frame))
    assert event.gameId == "g7"
    assert event.currentPlayer is None
    assert event.sharedZone is None


def test_top_level_fields_win_over_envelope():
    frame = {"type": "player_left", "playerId": "top", "data": {"playerId": "nested"}}
    assert decode_frame(orjson.dumps(frame)).playerId == "top"


def test_card_played_with_player_id():
    event = decode_frame(orjson.dumps({"type": "card_played", "playerId": "p1", "card": make_card("c1")}))
    assert isinstance(event, CardPlayedEvent)
    assert event.playerId == "p1"


def test_server_error_event():
    event = decode_frame('{"type": "error", "data": {"message": "game is full"}}')
    assert isinstance(event, ServerErrorEvent)
    assert event.message == "game is full"


@pytest.mark.parametrize("raw", ["{not json", "", b"\xff\xfe", "[1, 2]", "42", '"game_state"'])
def test_malformed_frames(raw):
    with pytest.raises(DecodeError):
        decode_frame(raw)


@pytest.mark.parametrize("raw", ['{"gameId": "g1"}', '{"type": ""}', '{"type": 7}'])
def test_missing_or_bad_type(raw):
    with pytest.raises(DecodeError):
        decode_frame(raw)


def test_unknown_type():
    with pytest.raises(UnknownEventError) as exc_info:
        decode_frame('{"type": "card_flipped", "card": {}}')
    assert exc_info.value.event_type == "card_flipped"


@pytest.mark.parametrize("payload", [
    {"type": "card_played", "card": {"id": "c1", "suit": "stars", "rank": "A", "value": 14}},
    {"type": "card_played"},
    {"type": "player_left"},
    {"type": "cards_dealt", "players": []},
    {"type": "game_state", "players": [], "gamePhase": "paused"},
    {"type": "player_joined", "player": {"name": "no id"}},
])
def test_wrong_shape_is_protocol_error(payload):
    with pytest.raises(ProtocolError):
        decode_frame(orjson.dumps(payload))


def test_codec_errors_share_a_base():
    for error_class in (DecodeError, ProtocolError):
        assert issubclass(error_class, SyncError)
    assert issubclass(UnknownEventError, SyncError)


def test_player_conversion():
    wire = WirePlayer(**make_player("p1", "Alice", [make_card("h5")], score=2, current=True))
    player = player_from_wire(wire)
    assert player.hand == (Card(id="h5", suit="hearts", rank="5", value=5),)
    assert player.score == 2
    assert player.is_current_player
    assert player.is_dealer is None


def test_encode_join_game_without_game_id():
    encoded = orjson.loads(encode_command(create_join_game_command("Alice")))
    assert encoded == {"type": "join_game", "data": {"playerName": "Alice"}}


def test_encode_join_game_with_game_id():
    encoded = orjson.loads(encode_command(create_join_game_command("Alice", "g1")))
    assert encoded == {"type": "join_game", "data": {"playerName": "Alice", "gameId": "g1"}}


def test_join_game_requires_name():
    with pytest.raises(CommandError):
        create_join_game_command("")
    with pytest.raises(ValueError):
        create_join_game_command("")


def test_encode_deal_cards_has_no_data():
    assert orjson.loads(encode_command(create_deal_cards_command())) == {"type": "deal_cards"}


def test_encode_play_card():
    card = Card(id="c1", suit="spades", rank="A", value=14)
    encoded = orjson.loads(encode_command(create_play_card_command(card_to_wire(card))))
    assert encoded == {
        "type": "play_card",
        "data": {"card": {"id": "c1", "suit": "spades", "rank": "A", "value": 14}},
    }


def test_encode_drop_card_shared():
    card = Card(id="c1", suit="hearts", rank="Q", value=12)
    encoded = orjson.loads(encode_command(create_drop_card_shared_command(card_to_wire(card), 120, 48.5)))
    assert encoded["type"] == "drop_card_shared"
    assert encoded["data"]["card"]["id"] == "c1"
    assert encoded["data"]["position"] == {"x": 120, "y": 48.5}


@pytest.mark.parametrize("card", [
    Card(id="c1", suit="stars", rank="A", value=14),
    Card(id="", suit="hearts", rank="A", value=14),
])
def test_invalid_card_raises_command_error(card):
    with pytest.raises(CommandError):
        card_to_wire(card)


def test_decode_nested_cards_dealt_without_deck():
    frame = {
        "type": "cards_dealt",
        "data": {"game": {
            "id": "g7",
            "players": [make_player("p1", hand=[make_card("a1")]), make_player("p2")],
            "currentPlayer": "p1",
            "gamePhase": "waiting",
        }},
    }
    event = decode_frame(orjson.dumps(frame))
    assert isinstance(event, CardsDealtEvent)
    assert [p.id for p in event.players] == ["p1", "p2"]
    assert event.deck is None


def test_decode_nested_game_ended():
    frame = {"type": "game_ended", "data": {"game": {"id": "g7", "players": [], "gamePhase": "finished"}}}
    assert isinstance(decode_frame(orjson.dumps(frame)), GameEndedEvent)


def test_serialize_state_uses_wire_names(two_player_snapshot):
    from table_sync.reducer import reduce
    from table_sync.models import initial_state

    state = reduce(initial_state(), decode_frame(orjson.dumps(two_player_snapshot)))
    serialized = serialize_state(state)

    assert serialized["gameId"] == "g1"
    assert serialized["currentPlayer"] == "p1"
    assert serialized["gamePhase"] == "playing"
    assert serialized["players"][0]["isCurrentPlayer"] is True
    assert "isDealer" not in serialized["players"][0]
