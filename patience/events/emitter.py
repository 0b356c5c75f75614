"""
Event system for the patience engine.

Game states publish what happens to them (deals, moves, undo/redo, reveals,
wins) on an event emitter so that front ends and statistics collectors can
follow a game without polling it. By default every game publishes on the
process-wide `EventBus`; a game can be given its own emitter instead.

Subscriptions can be scoped to one game. A scoped listener only receives
events whose data carries that game's id, so several games can share one
emitter without their listeners seeing each other's moves.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Optional, Union
import threading
import logging
from enum import Enum

logger = logging.getLogger("patience.events")


def _event_name(event_type: Union[str, Enum]) -> str:
    if isinstance(event_type, Enum):
        return event_type.name
    return event_type


class EventEmitter:
    """
    Dispatches engine events to subscribed callbacks.

    Callbacks are called in subscription order with the event data dict. A
    callback that raises is logged and skipped; it never reaches the game
    that emitted the event.
    """

    def __init__(self):
        self._listeners = defaultdict(list)
        self._listener_lock = threading.RLock()

    def on(
        self,
        event_type: Union[str, Enum],
        callback: Callable[[Dict[str, Any]], None],
        game_id: Optional[str] = None,
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call when the event occurs, fn(event_data)
            game_id: Only deliver events of this game

        Returns:
            Unsubscribe function that removes this subscription
        """
        name = _event_name(event_type)
        handler = (callback, game_id)

        with self._listener_lock:
            self._listeners[name].append(handler)

        def unsubscribe():
            with self._listener_lock:
                handlers = self._listeners[name]
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def emit(self, event_type: Union[str, Enum], data: Dict[str, Any]) -> None:
        """Deliver an event to every listener whose scope matches."""
        name = _event_name(event_type)

        with self._listener_lock:
            handlers = list(self._listeners.get(name, ()))

        # Call handlers outside of the lock so they may subscribe or emit
        for callback, game_id in handlers:
            if game_id is not None and data.get("game_id") != game_id:
                continue
            try:
                callback(data)
            except Exception:
                logger.error("Error in event handler for %s", name, exc_info=True)

    def remove_all_listeners(
        self,
        event_type: Optional[Union[str, Enum]] = None,
        game_id: Optional[str] = None,
    ) -> None:
        """
        Remove listeners.

        Args:
            event_type: Only remove listeners of this event type
            game_id: Only remove listeners scoped to this game
        """
        with self._listener_lock:
            names = (
                [_event_name(event_type)]
                if event_type is not None
                else list(self._listeners)
            )
            for name in names:
                if game_id is None:
                    self._listeners[name] = []
                else:
                    self._listeners[name] = [
                        handler
                        for handler in self._listeners[name]
                        if handler[1] != game_id
                    ]


class EventBus:
    """
    Process-wide event emitter shared by games that are not given their own.
    """

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> EventEmitter:
        """
        Get the singleton instance of the EventBus.

        Returns:
            EventEmitter instance
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = EventEmitter()
        return cls._instance


class EngineEventType(Enum):
    """
    Event types published by patience games.

    Every event carries the ``game_id`` of its game.
    """

    # Game lifecycle
    GAME_CREATED = "game_created"
    GAME_WON = "game_won"
    GAME_STUCK = "game_stuck"

    # Card events
    SHUFFLE = "shuffle"
    CARD_DEALT = "card_dealt"
    CARD_REVEALED = "card_revealed"
    STOCK_RECYCLED = "stock_recycled"

    # Move events
    MOVE_APPLIED = "move_applied"
    MOVE_REJECTED = "move_rejected"
    MOVE_UNDONE = "move_undone"
    MOVE_REDONE = "move_redone"
