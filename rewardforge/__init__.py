"""RewardForge public API."""

from .app import RewardApp
from .config import RewardForgeConfig
from .domain.orchestrator import PlayService

__all__ = [
    "PlayService",
    "RewardApp",
    "RewardForgeConfig",
]
