"""
Game state store.

Holds the confirmed game state and the local-only card selection side by
side. Server events go through the reducer; the selection is only ever set by
the local participant and is never sent to the server.
"""

import logging
from typing import Callable, List, Optional, Union

from .errors import SyncError
from .models import Card, GameState, initial_state
from .reducer import reduce
from .serialization import decode_frame
from .validate import find_violations
from .ws.events import CardPlayedEvent, InboundEvent, ServerErrorEvent

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState], None]
SelectionListener = Callable[[Optional[Card]], None]


class GameStore:
    """Canonical game state plus local selection, with subscriptions."""

    def __init__(self, state: Optional[GameState] = None, local_player_id: Optional[str] = None):
        self._state: GameState = state if state is not None else initial_state()
        self._selected_card: Optional[Card] = None
        self._listeners: List[StateListener] = []
        self._selection_listeners: List[SelectionListener] = []
        self.local_player_id = local_player_id
        self.last_error: Optional[str] = None

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def selected_card(self) -> Optional[Card]:
        return self._selected_card

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called with the new state after every change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_selection(self, listener: SelectionListener) -> Callable[[], None]:
        self._selection_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._selection_listeners:
                self._selection_listeners.remove(listener)

        return unsubscribe

    def handle_frame(self, raw: Union[str, bytes]) -> bool:
        """
        Decode one frame and apply it. Never raises.

        Returns:
            True if the frame decoded and was applied
        """
        try:
            event = decode_frame(raw)
        except SyncError as e:
            logger.warning(f"Dropping inbound frame: {e}")
            return False
        self.dispatch(event)
        return True

    def dispatch(self, event: InboundEvent) -> GameState:
        """Apply a validated inbound event and notify subscribers."""
        if isinstance(event, ServerErrorEvent):
            logger.warning(f"Server error: {event.message}")
            self.last_error = event.message

        new_state = reduce(self._state, event)
        if new_state is self._state:
            return self._state

        self._state = new_state
        for problem in find_violations(new_state):
            logger.debug(f"State check after {event.type.value}: {problem}")

        if isinstance(event, CardPlayedEvent):
            self._drop_played_selection(event.card.id)
        self._drop_stale_selection()
        self._notify()
        return self._state

    def select(self, card: Optional[Card]) -> None:
        """Set the local selection. No check against the current hand."""
        self._set_selection(card)

    def clear_selection(self) -> None:
        self._set_selection(None)

    def reset(self) -> None:
        """Return to the initial empty state."""
        logger.info("Resetting game state")
        self._state = initial_state()
        self.last_error = None
        self._set_selection(None)
        self._notify()

    def _drop_played_selection(self, card_id: str) -> None:
        if self._selected_card is not None and self._selected_card.id == card_id:
            logger.debug(f"Selected card {card_id} was played, clearing selection")
            self._set_selection(None)

    def _drop_stale_selection(self) -> None:
        card = self._selected_card
        if card is None or self.local_player_id is None:
            return
        me = self._state.get_player(self.local_player_id)
        if me is None or not me.holds(card.id):
            logger.debug(f"Selected card {card.id} is no longer in hand, clearing selection")
            self._set_selection(None)

    def _set_selection(self, card: Optional[Card]) -> None:
        if card == self._selected_card:
            return
        self._selected_card = card
        for listener in list(self._selection_listeners):
            try:
                listener(card)
            except Exception as e:
                logger.error(f"Selection listener failed: {e}")

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"State listener failed: {e}")
