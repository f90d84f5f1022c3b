"""Validation utilities for game definitions."""

from __future__ import annotations

from .domain.games import PROBABILITY_TOLERANCE, PROBABILITY_TOTAL, GameDefinition


def validate_game(game: GameDefinition) -> list[str]:
    """Return list of validation errors discovered in a game definition."""
    errors: list[str] = []
    prefix = f"Game '{game.game_id}'"

    if not game.game_id:
        errors.append("Game id must not be empty.")
    if not game.name:
        errors.append(f"{prefix} must have a name.")
    if game.start_date >= game.end_date:
        errors.append(f"{prefix} must start before it ends.")
    if game.daily_play_limit < 0:
        errors.append(f"{prefix} has negative dailyPlayLimit '{game.daily_play_limit}'.")
    if game.total_play_limit < 0:
        errors.append(f"{prefix} has negative totalPlayLimit '{game.total_play_limit}'.")
    if not game.rewards:
        errors.append(f"{prefix} does not contain any rewards.")

    seen: set[str] = set()
    for slot in game.rewards:
        if slot.reward_id in seen:
            errors.append(f"{prefix} has duplicate reward id '{slot.reward_id}'.")
        seen.add(slot.reward_id)
        if not 0 <= slot.probability <= PROBABILITY_TOTAL:
            errors.append(
                f"{prefix} reward '{slot.reward_id}' has probability '{slot.probability}' outside 0-100."
            )
        if slot.value < 0:
            errors.append(f"{prefix} reward '{slot.reward_id}' has negative value '{slot.value}'.")
        if slot.limit < 0:
            errors.append(f"{prefix} reward '{slot.reward_id}' has negative limit '{slot.limit}'.")
        if slot.awarded < 0:
            errors.append(f"{prefix} reward '{slot.reward_id}' has negative awarded count.")
        elif slot.limit > 0 and slot.awarded > slot.limit:
            errors.append(
                f"{prefix} reward '{slot.reward_id}' awarded {slot.awarded} times, above its limit {slot.limit}."
            )

    total = game.probability_total()
    if abs(total - PROBABILITY_TOTAL) > PROBABILITY_TOLERANCE:
        errors.append(f"{prefix} reward probabilities sum to {total:g}, expected 100.")

    return errors


__all__ = ["validate_game"]
