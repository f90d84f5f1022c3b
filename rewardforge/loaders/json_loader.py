"""Load game definitions from JSON documents."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Sequence, TYPE_CHECKING

from ..domain.games import (
    PROBABILITY_TOLERANCE,
    PROBABILITY_TOTAL,
    GameDefinition,
    GameType,
    RewardSlot,
    RewardType,
    ensure_utc,
)

if TYPE_CHECKING:
    from ..app import RewardApp


async def load_games_from_json(app: "RewardApp", path: str | Path) -> Sequence[GameDefinition]:
    """Load games from a JSON file and create them through the admin service."""
    games = load_games_file(path)
    for game in games:
        await app.admin_service.create_game(game)
    return games


def load_games_file(path: str | Path) -> tuple[GameDefinition, ...]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_games_dict(data)


def parse_games_dict(data: dict[str, Any]) -> tuple[GameDefinition, ...]:
    """Parse a JSON dict (already decoded) into domain objects."""
    errors = validate_games_dict(data)
    if errors:
        raise ValueError(_format_errors("Game catalog validation failed", errors))
    return tuple(parse_game(entry) for entry in data.get("games", []))


def parse_game(entry: dict[str, Any]) -> GameDefinition:
    return GameDefinition(
        game_id=entry["id"],
        name=entry["name"],
        description=entry.get("description", ""),
        game_type=GameType(entry.get("type", GameType.SPIN_WHEEL.value)),
        is_active=bool(entry.get("isActive", True)),
        start_date=_parse_datetime(entry["startDate"]),
        end_date=_parse_datetime(entry["endDate"]),
        rewards=tuple(parse_reward(reward) for reward in entry.get("rewards", [])),
        daily_play_limit=int(entry.get("dailyPlayLimit", 1)),
        total_play_limit=int(entry.get("totalPlayLimit", 0)),
    )


def parse_reward(entry: dict[str, Any]) -> RewardSlot:
    return RewardSlot(
        reward_id=str(entry["id"]),
        reward_type=RewardType(entry["type"]),
        value=float(entry["value"]),
        code=entry.get("code"),
        probability=float(entry["probability"]),
        limit=int(entry.get("limit", 0)),
        awarded=int(entry.get("awarded", 0)),
    )


def validate_games_file(path: str | Path) -> list[str]:
    """Validate game catalog JSON file and return a list of errors."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return validate_games_dict(data)


def validate_games_dict(data: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    games_raw = data.get("games") if isinstance(data, dict) else None
    if not isinstance(games_raw, list) or not games_raw:
        return ["Catalog must contain non-empty 'games' array."]

    game_ids: set[str] = set()
    for idx, entry in enumerate(games_raw, start=1):
        if not isinstance(entry, dict):
            errors.append(f"Game #{idx} must be an object.")
            continue
        game_id = entry.get("id")
        if not isinstance(game_id, str) or not game_id.strip():
            errors.append(f"Game #{idx} must define non-empty 'id'.")
            continue
        if game_id in game_ids:
            errors.append(f"Game id '{game_id}' defined multiple times.")
        game_ids.add(game_id)

        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            errors.append(f"Game '{game_id}' must define non-empty 'name'.")

        game_type = entry.get("type", GameType.SPIN_WHEEL.value)
        try:
            GameType(game_type)
        except ValueError:
            errors.append(f"Game '{game_id}' has invalid type '{game_type}'.")

        dates: dict[str, datetime] = {}
        for field_name in ("startDate", "endDate"):
            raw = entry.get(field_name)
            try:
                dates[field_name] = ensure_utc(_parse_datetime(raw))
            except (TypeError, ValueError):
                errors.append(f"Game '{game_id}' has invalid '{field_name}' value '{raw}'.")
        if len(dates) == 2 and dates["startDate"] >= dates["endDate"]:
            errors.append(f"Game '{game_id}' must start before it ends.")

        for field_name in ("dailyPlayLimit", "totalPlayLimit"):
            value = entry.get(field_name, 0)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(f"Game '{game_id}' has invalid '{field_name}' value '{value}'.")

        rewards = entry.get("rewards")
        if not isinstance(rewards, list) or not rewards:
            errors.append(f"Game '{game_id}' must define non-empty 'rewards' array.")
            continue
        errors.extend(_validate_rewards(game_id, rewards))

    return errors


def _validate_rewards(game_id: str, rewards: list[Any]) -> list[str]:
    errors: list[str] = []
    reward_ids: set[str] = set()
    total = 0.0
    for idx, reward in enumerate(rewards, start=1):
        if not isinstance(reward, dict):
            errors.append(f"Game '{game_id}' reward #{idx} must be an object.")
            continue
        reward_id = reward.get("id")
        if not isinstance(reward_id, str) or not reward_id.strip():
            errors.append(f"Game '{game_id}' reward #{idx} must define non-empty 'id'.")
            continue
        if reward_id in reward_ids:
            errors.append(f"Game '{game_id}' reward id '{reward_id}' defined multiple times.")
        reward_ids.add(reward_id)

        reward_type = reward.get("type")
        try:
            RewardType(reward_type)
        except ValueError:
            errors.append(f"Game '{game_id}' reward '{reward_id}' has invalid type '{reward_type}'.")

        value = reward.get("value")
        if not _is_number(value) or value < 0:
            errors.append(f"Game '{game_id}' reward '{reward_id}' has invalid 'value' '{value}'.")

        probability = reward.get("probability")
        if not _is_number(probability) or not 0 <= probability <= PROBABILITY_TOTAL:
            errors.append(
                f"Game '{game_id}' reward '{reward_id}' probability must be a number within 0-100."
            )
        else:
            total += float(probability)

        for field_name in ("limit", "awarded"):
            count = reward.get(field_name, 0)
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                errors.append(
                    f"Game '{game_id}' reward '{reward_id}' has invalid '{field_name}' value '{count}'."
                )

        code = reward.get("code")
        if code is not None and (not isinstance(code, str) or not code.strip()):
            errors.append(f"Game '{game_id}' reward '{reward_id}' code must be a non-empty string.")

    if not errors and abs(total - PROBABILITY_TOTAL) > PROBABILITY_TOLERANCE:
        errors.append(f"Game '{game_id}' reward probabilities sum to {total:g}, expected 100.")
    return errors


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_datetime(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise TypeError(f"Expected ISO 8601 string, got {raw!r}")
    return datetime.fromisoformat(raw)


def _format_errors(prefix: str, errors: Iterable[str]) -> str:
    formatted = "\n".join(f"- {err}" for err in errors)
    return f"{prefix}:\n{formatted}"
