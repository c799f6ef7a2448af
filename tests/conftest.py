from __future__ import annotations

from datetime import date

import pytest

from corvee_core.config import Config
from corvee_core.models import State
from corvee_core.repository import StateRepository
from corvee_core.service import CoreService

FIXED_TODAY = date(2025, 2, 10)


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def empty_service(config: Config) -> CoreService:
    repo = StateRepository(
        State(selected_month="February"),
        undo_depth=config.history.undo_depth,
        weight_range=(config.tasks.min_weight, config.tasks.max_weight),
    )
    return CoreService(repo, config, today=lambda: FIXED_TODAY)


@pytest.fixture
def seeded_service(config: Config) -> CoreService:
    state = State.seeded()
    state.selected_month = "February"
    repo = StateRepository(
        state,
        undo_depth=config.history.undo_depth,
        weight_range=(config.tasks.min_weight, config.tasks.max_weight),
    )
    return CoreService(repo, config, today=lambda: FIXED_TODAY)
