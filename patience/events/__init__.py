"""
Event system for the patience engine.

This package provides the emitters that game states publish to.
"""

from patience.events.emitter import (
    EventEmitter,
    EventBus,
    EngineEventType,
)

__all__ = ["EventEmitter", "EventBus", "EngineEventType"]
