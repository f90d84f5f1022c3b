"""Weighted reward selection."""

from __future__ import annotations

from random import Random
from typing import Sequence

from .games import PROBABILITY_TOTAL, RewardSlot


def select_reward(rewards: Sequence[RewardSlot], draw: float) -> RewardSlot | None:
    """Pick the slot whose cumulative probability window contains ``draw``.

    Slots are walked in stored order. An exhausted slot that would have
    matched is skipped and the same draw is compared against the following
    boundaries, so its probability mass moves to the next open slot in the
    list rather than being spread evenly. A draw equal to a boundary belongs
    to the next slot.

    When the walk runs off the end of the list (the skipped slot was the last
    one), the walk wraps around to the first open slot with a positive
    probability. ``None`` therefore means every drawable slot is exhausted.
    """
    cumulative = 0.0
    for slot in rewards:
        cumulative += slot.probability
        if draw < cumulative and not slot.is_exhausted:
            return slot
    for slot in rewards:
        if slot.probability > 0 and not slot.is_exhausted:
            return slot
    return None


def next_open_slot(rewards: Sequence[RewardSlot], index: int) -> RewardSlot | None:
    """Slot that receives the mass of ``rewards[index]`` once it is exhausted."""
    for slot in rewards[index + 1 :]:
        if not slot.is_exhausted:
            return slot
    for slot in rewards[:index]:
        if slot.probability > 0 and not slot.is_exhausted:
            return slot
    return None


class RewardDraw:
    """Uniform draws over ``[0, 100)`` from a (seedable) pseudo-random source."""

    def __init__(self, rng: Random | None = None) -> None:
        self._rng = rng or Random()

    def __call__(self) -> float:
        return self._rng.random() * PROBABILITY_TOTAL
