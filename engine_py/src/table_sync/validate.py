"""
Invariant checks for game state.

These never modify state and never raise. The store runs them after each
applied event and logs whatever they find; the server stays authoritative.
"""

from collections import Counter
from typing import List

from .models import GamePhase, GameState


def check_unique_player_ids(state: GameState) -> List[str]:
    counts = Counter(player.id for player in state.players)
    return [f"Duplicate player id {pid}" for pid, n in counts.items() if n > 1]


def check_current_player(state: GameState) -> List[str]:
    problems = []
    flagged = [player.id for player in state.players if player.is_current_player]

    if len(flagged) > 1:
        problems.append(f"More than one player has the turn: {flagged}")
    if flagged and state.phase != GamePhase.PLAYING:
        problems.append(f"Player {flagged[0]} has the turn during phase {state.phase.value}")
    if state.current_player_id is not None and not state.has_player(state.current_player_id):
        problems.append(f"Current player {state.current_player_id} is not in the game")
    return problems


def check_card_locations(state: GameState) -> List[str]:
    """
    Each card id lives in at most one hand, the deck, or the table.

    Played cards are logged in both ``played_cards`` and ``shared_zone``, so
    the table counts as a single location.
    """
    locations = Counter()
    for player in state.players:
        for card_id in {card.id for card in player.hand}:
            locations[card_id] += 1
    for card_id in {card.id for card in state.deck}:
        locations[card_id] += 1
    for card_id in {card.id for card in state.played_cards} | {card.id for card in state.shared_zone}:
        locations[card_id] += 1
    return [f"Card {card_id} is in {n} places" for card_id, n in locations.items() if n > 1]


def find_violations(state: GameState) -> List[str]:
    """Run every invariant check and return the problems found."""
    return (
        check_unique_player_ids(state)
        + check_current_player(state)
        + check_card_locations(state)
    )
