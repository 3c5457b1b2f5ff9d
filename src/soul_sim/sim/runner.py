"""Encounter simulation runner -- ties the engine, play agents and telemetry together.

Provides two key classes:

- **EncounterSimulator**: Runs a single encounter to completion at a fixed
  tick length.
- **BatchRunner**: Orchestrates many seeded runs (optionally in parallel).
"""

from __future__ import annotations

import logging
import multiprocessing
from typing import Any

from soul_sim.sim.core.battle_state import BattlePhase, BattleState
from soul_sim.sim.core.config import BattleConfig
from soul_sim.sim.core.rng import GameRNG
from soul_sim.sim.engine import BattleEngine
from soul_sim.sim.play_agents.base import PlayAgent
from soul_sim.sim.play_agents.patient_agent import PatientAgent
from soul_sim.sim.play_agents.random_agent import RandomAgent
from soul_sim.sim.snapshot import ui_snapshot
from soul_sim.sim.telemetry import EncounterTelemetry

logger = logging.getLogger(__name__)

_TICK_MS = 16.0
_MAX_TICKS = 10_000

AGENT_CLASSES: dict[str, type[PlayAgent]] = {
    "random": RandomAgent,
    "patient": PatientAgent,
}


# =====================================================================
# EncounterSimulator
# =====================================================================

class EncounterSimulator:
    """Runs one encounter with a play agent until it ends or times out.

    Parameters
    ----------
    engine:
        State machine driving the battle.
    config:
        Battle configuration; the reference encounter if ``None``.
    tick_ms:
        Fixed simulated time per tick.
    max_ticks:
        Safety cap; a run that reaches it reports ``"timeout"``.
    """

    def __init__(
        self,
        engine: BattleEngine | None = None,
        config: BattleConfig | None = None,
        tick_ms: float = _TICK_MS,
        max_ticks: int = _MAX_TICKS,
    ) -> None:
        if tick_ms <= 0:
            raise ValueError(f"tick_ms must be > 0, got {tick_ms}")
        self.engine = engine or BattleEngine()
        self.config = config or BattleConfig()
        self.tick_ms = tick_ms
        self.max_ticks = max_ticks

    def run_encounter(
        self,
        agent: PlayAgent,
        seed: int = 0,
        battle: BattleState | None = None,
    ) -> EncounterTelemetry:
        """Play *battle* (a fresh one by default) with *agent*."""
        if battle is None:
            battle = self.engine.new_battle(self.config)
        hp_start = battle.soul.hp

        while not battle.is_over and battle.tick < self.max_ticks:
            self.step(battle, agent)

        if battle.is_over:
            result = battle.battle_result or "loss"
        else:
            result = "timeout"
            battle.effects.clear()
            logger.warning(
                "Encounter hit max_ticks=%d in phase %s (seed=%d)",
                self.max_ticks, battle.phase.value, seed,
            )

        stats = battle.stats
        return EncounterTelemetry(
            seed=seed,
            agent=type(agent).__name__,
            result=result,
            ticks=battle.tick,
            elapsed_ms=battle.clock_ms,
            hp_start=hp_start,
            hp_end=battle.soul.hp,
            hp_lost=sum(stats.damage_by_kind.values()),
            corruption_peak=stats.corruption_peak,
            phase_reached=battle.phase_index,
            reached_stall=battle.phase_index > self.engine.library.last_index,
            hits_by_kind=dict(stats.hits_by_kind),
            damage_by_kind=dict(stats.damage_by_kind),
            damage_by_pattern=dict(stats.damage_by_pattern),
            menu_actions=list(stats.menu_actions),
        )

    def step(self, battle: BattleState, agent: PlayAgent) -> None:
        """One agent decision plus one engine tick."""
        if battle.phase == BattlePhase.INTRO and agent.wants_intro_skip(battle):
            self.engine.advance_intro(battle)

        if battle.menu_open:
            ui = ui_snapshot(battle)
            action = agent.choose_menu_action(battle, ui.available_actions)
            if action is not None:
                self.engine.choose_action(battle, action)

        held = agent.choose_keys(battle)
        self.engine.update(battle, held, self.tick_ms)


# =====================================================================
# BatchRunner
# =====================================================================

def make_agent(agent_class: type[PlayAgent], seed: int) -> PlayAgent:
    agent_rng = GameRNG(seed).fork("agent")
    try:
        return agent_class(rng=agent_rng)  # type: ignore[call-arg]
    except TypeError:
        return agent_class()  # type: ignore[call-arg]


def _run_single_encounter(
    agent_class: type[PlayAgent],
    seed: int,
    config: BattleConfig,
    max_ticks: int,
) -> EncounterTelemetry:
    simulator = EncounterSimulator(config=config, max_ticks=max_ticks)
    return simulator.run_encounter(make_agent(agent_class, seed), seed=seed)


def _worker_run_single(args: tuple) -> EncounterTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    agent_name, seed, config_data, max_ticks = args
    config = BattleConfig.model_validate(config_data)
    return _run_single_encounter(AGENT_CLASSES[agent_name], seed, config, max_ticks)


class BatchRunner:
    """Runs many seeded encounters, optionally in parallel."""

    def __init__(
        self,
        agent_class: type[PlayAgent] = RandomAgent,
        config: BattleConfig | None = None,
        max_ticks: int = _MAX_TICKS,
    ) -> None:
        self.agent_class = agent_class
        self.config = config or BattleConfig()
        self.max_ticks = max_ticks

    def run_batch(
        self,
        n_runs: int,
        base_seed: int = 42,
        parallel: bool = False,
    ) -> list[EncounterTelemetry]:
        """Run *n_runs* encounters with seeds ``base_seed .. base_seed+n-1``."""
        seeds = [base_seed + i for i in range(n_runs)]

        if parallel and n_runs > 1:
            return self._run_parallel(seeds)
        return self._run_sequential(seeds)

    def _run_sequential(self, seeds: list[int]) -> list[EncounterTelemetry]:
        return [
            _run_single_encounter(self.agent_class, seed, self.config, self.max_ticks)
            for seed in seeds
        ]

    def _run_parallel(self, seeds: list[int]) -> list[EncounterTelemetry]:
        """Run encounters in a process pool.

        Agents are looked up by registered name inside each worker, so only
        agent classes in ``AGENT_CLASSES`` can run in parallel.
        """
        agent_name = _agent_name(self.agent_class)
        config_data: dict[str, Any] = self.config.model_dump()
        work_items = [
            (agent_name, seed, config_data, self.max_ticks) for seed in seeds
        ]

        n_workers = min(len(seeds), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            results = pool.map(_worker_run_single, work_items)

        return results


def _agent_name(agent_class: type[PlayAgent]) -> str:
    for name, cls in AGENT_CLASSES.items():
        if cls is agent_class:
            return name
    raise ValueError(
        f"{agent_class.__name__} is not registered in AGENT_CLASSES; "
        "run it with parallel=False"
    )
