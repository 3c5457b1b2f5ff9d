"""Play one encounter headlessly and print a trace of what happened.

Usage:
    uv run python scripts/run_encounter.py [--agent patient|random] [--seed N]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from soul_sim.sim.core.config import load_config
from soul_sim.sim.engine import BattleEngine
from soul_sim.sim.runner import AGENT_CLASSES, EncounterSimulator, make_agent
from soul_sim.sim.snapshot import hud_snapshot


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a single boss encounter.")
    parser.add_argument("--agent", choices=sorted(AGENT_CLASSES), default="patient")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--config", type=Path, default=None, help="BattleConfig JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    engine = BattleEngine()
    battle = engine.new_battle(config)
    simulator = EncounterSimulator(engine=engine, config=config)
    agent = make_agent(AGENT_CLASSES[args.agent], args.seed)

    tel = simulator.run_encounter(agent, seed=args.seed, battle=battle)

    print("\n--- dialogue ---")
    for line in battle.messages:
        print(f"  {line}")

    hud = hud_snapshot(battle)
    print("\n--- result ---")
    print(f"  result:        {tel.result}")
    print(f"  time:          {tel.elapsed_ms / 1000:.2f}s ({tel.ticks} ticks)")
    print(f"  HP:            {hud.hp} / {hud.hp_max}  (lost {tel.hp_lost:.1f})")
    print(f"  KR peak:       {tel.corruption_peak:.1f}")
    print(f"  patterns:      {tel.phase_reached} started, stall={'yes' if tel.reached_stall else 'no'}")
    print(f"  menu actions:  {', '.join(tel.menu_actions) or '-'}")
    for kind, count in sorted(tel.hits_by_kind.items()):
        print(f"  {kind + ' hits:':15s}{count}")


if __name__ == "__main__":
    main()
