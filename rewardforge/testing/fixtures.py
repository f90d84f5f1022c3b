"""Pytest fixtures for RewardForge."""

from __future__ import annotations

from random import Random

import pytest

from ..app import RewardApp
from ..config import PlayConfig, RewardForgeConfig
from ..domain.eligibility import Clock, utc_now
from ..notifications import InMemoryNotifier, Notifier


@pytest.fixture()
def memory_app() -> RewardApp:
    return app_fixture()


def app_fixture(
    *,
    clock: Clock = utc_now,
    notifier: Notifier | None = None,
    rng: Random | None = None,
    **kwargs,
) -> RewardApp:
    """Build an in-memory ``RewardApp`` for tests.

    Day boundaries are UTC and notifications go to an ``InMemoryNotifier``
    unless overridden; extra keyword arguments become ``RewardForgeConfig``
    fields.
    """
    kwargs.setdefault("play", PlayConfig(day_boundary_tz="UTC"))
    config = RewardForgeConfig(**kwargs)
    return RewardApp(config, notifier=notifier or InMemoryNotifier(), rng=rng, clock=clock)
