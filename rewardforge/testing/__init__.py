"""Testing utilities for RewardForge."""

from .factory import GameFactory, RewardSlotFactory
from .fixtures import app_fixture, memory_app
from .test_client import PlayAttempt, TestClient

__all__ = [
    "GameFactory",
    "RewardSlotFactory",
    "app_fixture",
    "memory_app",
    "PlayAttempt",
    "TestClient",
]
