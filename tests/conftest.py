"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by every test package.
"""

import pytest

from patience.common.card import Card
from patience.events import EventBus


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


@pytest.fixture
def up():
    """Factory for face-up cards from codes such as ``"QS"``."""

    def make(code: str) -> Card:
        return Card.from_code(code, face_up=True)

    return make


@pytest.fixture
def down():
    """Factory for face-down cards from codes such as ``"QS"``."""

    def make(code: str) -> Card:
        return Card.from_code(code, face_up=False)

    return make
