"""Exceptions raised by RewardForge domain services."""

from __future__ import annotations

from typing import Sequence


class RewardForgeError(RuntimeError):
    """Base class for domain exceptions."""


class NotEligible(RewardForgeError):
    """Raised when a user may not play the game right now."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NoRewardAvailable(RewardForgeError):
    """Raised when the draw lands on no slot with remaining supply."""


class ConcurrentConflict(RewardForgeError):
    """Raised when concurrent plays kept winning the award race; safe to retry later."""

    def __init__(self, game_id: str, attempts: int) -> None:
        super().__init__(f"Could not claim a reward in game {game_id} after {attempts} attempts")
        self.game_id = game_id
        self.attempts = attempts


class InvalidGameDefinition(RewardForgeError, ValueError):
    """Raised when a game definition breaks a configuration invariant."""

    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)
