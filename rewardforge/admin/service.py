"""Administrative operations on game definitions."""

from __future__ import annotations

from datetime import datetime, timezone

from ..domain.exceptions import InvalidGameDefinition
from ..domain.games import GameDefinition
from ..storage.base import AuditStore, GameStore
from ..validators import validate_game


class AdminService:
    def __init__(
        self,
        game_store: GameStore,
        audit_store: AuditStore,
        *,
        enable_audit_logs: bool = True,
    ) -> None:
        self._games = game_store
        self._audit_store = audit_store
        self._enable_audit = enable_audit_logs

    async def create_game(self, game: GameDefinition) -> GameDefinition:
        errors = validate_game(game)
        if errors:
            raise InvalidGameDefinition(errors)
        if await self._games.find_game(game.game_id) is not None:
            raise ValueError(f"Game {game.game_id} already exists")
        if game.created_at is None:
            game.created_at = datetime.now(timezone.utc)
        await self._games.save_game(game)
        await self._audit(
            "create_game",
            {
                "game_id": game.game_id,
                "rewards": [slot.reward_id for slot in game.rewards],
            },
        )
        return game

    async def activate_game(self, game_id: str) -> None:
        await self._set_active(game_id, True)

    async def deactivate_game(self, game_id: str) -> None:
        await self._set_active(game_id, False)

    async def _set_active(self, game_id: str, active: bool) -> None:
        if not await self._games.set_active(game_id, active):
            raise KeyError(f"Game {game_id} not found")
        await self._audit("set_active", {"game_id": game_id, "active": active})

    async def _audit(self, action: str, payload: dict) -> None:
        if not self._enable_audit:
            return
        await self._audit_store.add_entry(
            action,
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                **payload,
            },
        )
