"""Command-line runner for headless and real-time simulations."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import numpy as np

from snake_arena.engine import Event, Simulation
from snake_arena.models import GameOver, GameStatus, SimulationConfig
from snake_arena.pilot import SafePilot
from snake_arena.scheduler import AsyncioScheduler, ManualScheduler

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-arena",
        description="Run the snake simulation with an automatic pilot.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run as fast as possible on a virtual clock.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=1_000)
    sim_p.add_argument(
        "--json", action="store_true",
        help="Print every event as a JSON line.",
    )

    # --- play-async ---
    play_p = sub.add_parser(
        "play-async", help="Run in real time on the asyncio event loop.",
    )
    play_p.add_argument("--config", type=str, default=None)
    play_p.add_argument("--seed", type=int, default=None)
    play_p.add_argument("--max-ticks", type=int, default=200)

    return parser


def _load_config(args: argparse.Namespace) -> SimulationConfig:
    config = (
        SimulationConfig.load(args.config)
        if args.config else SimulationConfig()
    )
    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})
    return config


def _summary(simulation: Simulation) -> str:
    state = simulation.state
    return (
        f"ticks={state.tick} score={state.score} "
        f"length={len(state.snake)} interval={state.interval_ms}ms"
    )


def _run_simulate(args: argparse.Namespace) -> int:
    config = _load_config(args)
    scheduler = ManualScheduler()
    simulation = Simulation(config, scheduler=scheduler)
    pilot = SafePilot(simulation.arena, rng=np.random.default_rng(config.seed))
    pilot.attach(simulation)
    if args.json:
        simulation.subscribe(
            lambda event: print(event.model_dump_json()),  # noqa: T201
        )

    simulation.start()
    pilot.steer(simulation)
    while (
        simulation.status == GameStatus.RUNNING
        and simulation.state.tick < args.max_ticks
    ):
        scheduler.run_next()
    simulation.stop()

    print(_summary(simulation))  # noqa: T201
    return 0


async def _play(config: SimulationConfig, max_ticks: int) -> Simulation:
    scheduler = AsyncioScheduler()
    simulation = Simulation(config, scheduler=scheduler)
    pilot = SafePilot(simulation.arena, rng=np.random.default_rng(config.seed))
    done = asyncio.Event()

    def on_event(event: Event) -> None:
        if isinstance(event, GameOver):
            done.set()
        elif event.tick >= max_ticks:
            simulation.stop()

    simulation.subscribe(on_event)
    pilot.attach(simulation)
    simulation.start()
    pilot.steer(simulation)
    try:
        await done.wait()
    finally:
        await scheduler.shutdown()
    return simulation


def _run_play_async(args: argparse.Namespace) -> int:
    simulation = asyncio.run(_play(_load_config(args), args.max_ticks))
    print(_summary(simulation))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-arena`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "play-async": _run_play_async,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
