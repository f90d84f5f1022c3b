from datetime import timedelta

import pytest

from rewardforge.admin.service import AdminService
from rewardforge.domain.eligibility import GAME_NOT_ACTIVE
from rewardforge.domain.exceptions import InvalidGameDefinition, NotEligible
from rewardforge.storage.memory import InMemoryAuditStore, InMemoryGameStore
from rewardforge.testing import GameFactory

from conftest import NOW, make_game


@pytest.mark.asyncio()
async def test_create_game_records_audit_entry(app):
    await app.admin_service.create_game(make_game())

    [(_, action, payload)] = app.audit_store.dump()
    assert action == "create_game"
    assert payload["game_id"] == "wheel"
    assert payload["rewards"] == ["discount", "points"]
    game = await app.game_store.find_game("wheel")
    assert game.created_at is not None


@pytest.mark.asyncio()
async def test_create_game_rejects_invalid_definition(app):
    with pytest.raises(InvalidGameDefinition) as excinfo:
        await app.admin_service.create_game(make_game(start=NOW, end=NOW - timedelta(hours=1)))
    assert any("start before it ends" in err for err in excinfo.value.errors)
    assert await app.game_store.find_game("wheel") is None


@pytest.mark.asyncio()
async def test_create_game_rejects_duplicate_id(app):
    await app.admin_service.create_game(make_game())
    with pytest.raises(ValueError):
        await app.admin_service.create_game(make_game())


@pytest.mark.asyncio()
async def test_deactivated_game_cannot_be_played(app):
    await app.admin_service.create_game(make_game())
    await app.admin_service.deactivate_game("wheel")

    with pytest.raises(NotEligible) as excinfo:
        await app.play_service.play(1, "wheel")
    assert excinfo.value.reason == GAME_NOT_ACTIVE

    await app.admin_service.activate_game("wheel")
    assert (await app.play_service.check_eligibility(1, "wheel")).allowed


@pytest.mark.asyncio()
async def test_toggle_unknown_game_raises(app):
    with pytest.raises(KeyError):
        await app.admin_service.deactivate_game("missing")


@pytest.mark.asyncio()
async def test_audit_can_be_disabled():
    audit = InMemoryAuditStore()
    service = AdminService(InMemoryGameStore(), audit, enable_audit_logs=False)
    await service.create_game(GameFactory().build())
    assert audit.dump() == []
