from datetime import timezone

import pytest

from rewardforge.config import PlayConfig, RewardForgeConfig, StorageConfig


def test_from_env_reads_prefixed_variables(monkeypatch):
    monkeypatch.setenv("REWARDFORGE_STORAGE_BACKEND", "sqlalchemy")
    monkeypatch.setenv("REWARDFORGE_STORAGE_DSN", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("REWARDFORGE_PLAY_MAX_CONFLICT_RETRIES", "5")
    monkeypatch.setenv("REWARDFORGE_PLAY_DAY_BOUNDARY_TZ", "Europe/Berlin")
    monkeypatch.setenv("REWARDFORGE_NOTIFY_ENABLED", "false")
    monkeypatch.setenv("REWARDFORGE_NOTIFY_CHANNELS", "in_app, telegram")
    monkeypatch.setenv("REWARDFORGE_RNG_SEED", "42")

    config = RewardForgeConfig.from_env()

    assert config.storage.backend == "sqlalchemy"
    assert config.storage.resolve_dsn() == "sqlite+aiosqlite:///:memory:"
    assert config.play.max_conflict_retries == 5
    assert config.play.day_boundary_tz == "Europe/Berlin"
    assert config.notifications.enabled is False
    assert config.notifications.channels == ("in_app", "telegram")
    assert config.rng_seed == 42


def test_from_env_defaults(monkeypatch):
    for name in ("STORAGE_BACKEND", "PLAY_MAX_CONFLICT_RETRIES", "NOTIFY_ENABLED", "RNG_SEED"):
        monkeypatch.delenv(f"REWARDFORGE_{name}", raising=False)

    config = RewardForgeConfig.from_env()

    assert config.storage.backend == "memory"
    assert config.storage.resolve_dsn() is None
    assert config.play.max_conflict_retries == 3
    assert config.notifications.enabled is True
    assert config.rng_seed is None


@pytest.mark.parametrize(
    ("name", "value"),
    [("STORAGE_BACKEND", "redis"), ("PLAY_MAX_CONFLICT_RETRIES", "-1")],
)
def test_from_env_rejects_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(f"REWARDFORGE_{name}", value)
    with pytest.raises(ValueError):
        RewardForgeConfig.from_env()


def test_sqlalchemy_backend_has_default_dsn():
    assert StorageConfig(backend="sqlalchemy").resolve_dsn().startswith("sqlite+aiosqlite://")


def test_resolve_timezone():
    assert PlayConfig().resolve_timezone() is None
    assert PlayConfig(day_boundary_tz="UTC").resolve_timezone() is timezone.utc
    assert PlayConfig(day_boundary_tz="America/New_York").resolve_timezone().key == "America/New_York"
    with pytest.raises(ValueError):
        PlayConfig(day_boundary_tz="Mars/Olympus").resolve_timezone()
