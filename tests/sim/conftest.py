"""Shared fixtures for simulation tests."""

from __future__ import annotations

import pytest

from soul_sim.sim.content.patterns import PatternLibrary, PatternScript
from soul_sim.sim.engine import BattleEngine


def _quiet(s: PatternScript) -> None:
    s.say(f"{s.name} says hi.")


def _quiet_cold_open(s: PatternScript) -> None:
    s.open_menu(delay_ms=s.battle.config.cold_open_menu_delay_ms)


@pytest.fixture
def quiet_library() -> PatternLibrary:
    """Two patterns that spawn nothing, a cold open that only opens the
    menu, and the real stall enclosure."""
    return PatternLibrary(
        patterns=[("first", _quiet), ("second", _quiet)],
        cold_open_fn=_quiet_cold_open,
    )


@pytest.fixture
def quiet_engine(quiet_library: PatternLibrary) -> BattleEngine:
    return BattleEngine(library=quiet_library)


@pytest.fixture
def engine() -> BattleEngine:
    return BattleEngine()
