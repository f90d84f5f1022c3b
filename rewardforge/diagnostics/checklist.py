"""Automated checks to highlight reward pool issues."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from ..domain.games import GameDefinition
from ..domain.selector import next_open_slot


@dataclass(slots=True)
class ChecklistIssue:
    severity: str
    message: str


def run_checklist(
    games: Iterable[GameDefinition], *, now: datetime | None = None
) -> list[ChecklistIssue]:
    now = now or datetime.now(timezone.utc)
    issues: list[ChecklistIssue] = []
    games = list(games)
    if not games:
        issues.append(ChecklistIssue("error", "No games defined."))

    for game in games:
        prefix = f"Game {game.game_id}"
        if not game.is_active:
            issues.append(ChecklistIssue("info", f"{prefix} is disabled."))
        elif game.end_date <= now:
            issues.append(ChecklistIssue("warning", f"{prefix} has already ended."))

        drawable = [slot for slot in game.rewards if slot.probability > 0]
        for slot in game.rewards:
            if slot.probability == 0:
                issues.append(
                    ChecklistIssue("warning", f"{prefix} reward {slot.reward_id} can never be drawn.")
                )
            if slot.is_exhausted:
                issues.append(
                    ChecklistIssue("info", f"{prefix} reward {slot.reward_id} is already exhausted.")
                )

        if drawable and all(slot.limit > 0 for slot in drawable):
            supply = sum(slot.remaining or 0 for slot in drawable)
            issues.append(
                ChecklistIssue(
                    "warning",
                    f"{prefix} has only capped rewards; the pool runs dry after {supply} more plays.",
                )
            )

        for index, slot in enumerate(game.rewards):
            if slot.limit == 0 or slot.probability == 0:
                continue
            heir = next_open_slot(game.rewards, index)
            if heir is not None:
                issues.append(
                    ChecklistIssue(
                        "info",
                        f"{prefix}: once reward {slot.reward_id} runs out its "
                        f"{slot.probability:g}% share goes to reward {heir.reward_id}.",
                    )
                )

    return issues
