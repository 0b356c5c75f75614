"""
Tests for the event system.

These cover the emitter on its own and the way games publish on it: the
process-wide bus, private emitters and game-scoped subscriptions.
"""

import pytest
from unittest.mock import MagicMock

from patience import api
from patience.events import EventEmitter, EventBus, EngineEventType


@pytest.fixture
def emitter():
    return EventEmitter()


def test_enum_and_name_are_the_same_event(emitter):
    callback = MagicMock()

    emitter.on(EngineEventType.MOVE_APPLIED, callback)
    emitter.emit("MOVE_APPLIED", {"game_id": "g1"})

    callback.assert_called_once_with({"game_id": "g1"})


def test_unsubscribe(emitter):
    callback = MagicMock()
    unsubscribe = emitter.on(EngineEventType.CARD_DEALT, callback)

    emitter.emit(EngineEventType.CARD_DEALT, {"cards": ["AS"]})
    unsubscribe()
    emitter.emit(EngineEventType.CARD_DEALT, {"cards": ["KS"]})

    callback.assert_called_once()
    # A second call is harmless
    unsubscribe()


def test_listeners_run_in_subscription_order(emitter):
    calls = []
    emitter.on(EngineEventType.GAME_WON, lambda data: calls.append("first"))
    emitter.on(EngineEventType.GAME_WON, lambda data: calls.append("second"))

    emitter.emit(EngineEventType.GAME_WON, {})

    assert calls == ["first", "second"]


def test_scoped_listener_only_sees_its_game(emitter):
    mine = MagicMock()
    everything = MagicMock()
    emitter.on(EngineEventType.MOVE_APPLIED, mine, game_id="g1")
    emitter.on(EngineEventType.MOVE_APPLIED, everything)

    emitter.emit(EngineEventType.MOVE_APPLIED, {"game_id": "g1"})
    emitter.emit(EngineEventType.MOVE_APPLIED, {"game_id": "g2"})
    emitter.emit(EngineEventType.MOVE_APPLIED, {})

    mine.assert_called_once_with({"game_id": "g1"})
    assert everything.call_count == 3


def test_remove_listeners_of_one_game(emitter):
    finished = MagicMock()
    running = MagicMock()
    emitter.on(EngineEventType.MOVE_UNDONE, finished, game_id="g1")
    emitter.on(EngineEventType.MOVE_UNDONE, running, game_id="g2")

    emitter.remove_all_listeners(game_id="g1")
    emitter.emit(EngineEventType.MOVE_UNDONE, {"game_id": "g1"})
    emitter.emit(EngineEventType.MOVE_UNDONE, {"game_id": "g2"})

    finished.assert_not_called()
    running.assert_called_once()


def test_remove_listeners_of_one_type(emitter):
    won = MagicMock()
    stuck = MagicMock()
    emitter.on(EngineEventType.GAME_WON, won)
    emitter.on(EngineEventType.GAME_STUCK, stuck)

    emitter.remove_all_listeners(EngineEventType.GAME_WON)
    emitter.emit(EngineEventType.GAME_WON, {})
    emitter.emit(EngineEventType.GAME_STUCK, {})

    won.assert_not_called()
    stuck.assert_called_once()

    emitter.remove_all_listeners()
    emitter.emit(EngineEventType.GAME_STUCK, {})
    stuck.assert_called_once()


def test_failing_listener_is_logged_and_skipped(emitter, caplog):
    after = MagicMock()
    emitter.on(EngineEventType.CARD_REVEALED, MagicMock(side_effect=ValueError("boom")))
    emitter.on(EngineEventType.CARD_REVEALED, after)

    emitter.emit(EngineEventType.CARD_REVEALED, {})

    after.assert_called_once()
    assert "Error in event handler for CARD_REVEALED" in caplog.text


def test_event_bus_singleton():
    bus1 = EventBus.get_instance()
    bus2 = EventBus.get_instance()

    assert bus1 is bus2
    assert isinstance(bus1, EventEmitter)


def test_games_publish_on_the_bus_by_default():
    created = MagicMock()
    EventBus.get_instance().on(EngineEventType.GAME_CREATED, created)

    state = api.new_game("klondike", seed=42)

    created.assert_called_once()
    assert created.call_args[0][0]["game_id"] == state.id
    assert state.event_bus is EventBus.get_instance()


def test_game_with_private_emitter_stays_off_the_bus(emitter):
    on_bus = MagicMock()
    on_private = MagicMock()
    EventBus.get_instance().on(EngineEventType.MOVE_APPLIED, on_bus)
    emitter.on(EngineEventType.MOVE_APPLIED, on_private)

    state = api.new_game("klondike", seed=42, event_bus=emitter)
    api.apply_move(state, "stock", "waste")

    on_bus.assert_not_called()
    on_private.assert_called_once()


def test_two_games_on_one_emitter(emitter):
    first = api.new_game("klondike", seed=1, event_bus=emitter)
    second = api.new_game("klondike", seed=2, event_bus=emitter)
    dealt = MagicMock()
    emitter.on(EngineEventType.CARD_DEALT, dealt, game_id=first.id)

    api.apply_move(second, "stock", "waste")
    dealt.assert_not_called()

    api.apply_move(first, "stock", "waste")
    dealt.assert_called_once()
    assert dealt.call_args[0][0]["game_id"] == first.id


def test_every_deal_event_carries_the_game_id(emitter):
    shuffled = MagicMock()
    emitter.on(EngineEventType.SHUFFLE, shuffled)

    state = api.new_game("freecell", seed=3, event_bus=emitter)

    assert shuffled.call_args[0][0]["game_id"] == state.id
