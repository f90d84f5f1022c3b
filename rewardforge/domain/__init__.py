"""Domain models and services."""

from .games import GameDefinition, GameType, RewardSlot, RewardType
from .plays import GrantedReward, Play, PlayHistoryPage
from .selector import RewardDraw, select_reward
from .eligibility import EligibilityChecker, EligibilityResult
from .orchestrator import PlayService
from .exceptions import (
    ConcurrentConflict,
    InvalidGameDefinition,
    NoRewardAvailable,
    NotEligible,
    RewardForgeError,
)

__all__ = [
    "GameDefinition",
    "GameType",
    "RewardSlot",
    "RewardType",
    "GrantedReward",
    "Play",
    "PlayHistoryPage",
    "RewardDraw",
    "select_reward",
    "EligibilityChecker",
    "EligibilityResult",
    "PlayService",
    "ConcurrentConflict",
    "InvalidGameDefinition",
    "NoRewardAvailable",
    "NotEligible",
    "RewardForgeError",
]
