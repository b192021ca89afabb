"""Terminal CLI entrypoint for the HIIT timer."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from hiit.core.events import (
    CountdownUpdated,
    PhaseStarted,
    SequencerEvent,
    WorkoutCompleted,
)
from hiit.core.progress import format_clock
from hiit.core.sequencer import plan_phases, planned_duration_sec
from hiit.ui.audio import AudioCue
from hiit.ui.controller import UIController
from hiit.ui.display import PHASE_LABELS
from hiit.workout.model import (
    DEFAULT_CYCLES,
    DEFAULT_REST_PERIOD_SEC,
    DEFAULT_ROUND_DURATION_SEC,
    WorkoutConfig,
)
from hiit.workout.parser import WorkoutConfigError, load_workout, validate_config


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="HIIT interval timer")
    parser.add_argument(
        "--cycles",
        type=int,
        default=DEFAULT_CYCLES,
        help="Number of cycles (1-10)",
    )
    parser.add_argument(
        "--rest",
        type=int,
        default=DEFAULT_REST_PERIOD_SEC,
        help="Rest between rounds and cycles in seconds (0-300, 0 disables rest)",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        nargs="+",
        default=[DEFAULT_ROUND_DURATION_SEC],
        metavar="SEC",
        help="Work duration of each round in seconds (0-600)",
    )
    parser.add_argument(
        "--workout",
        default=None,
        help="Load the workout from a .json or .csv file instead of --rounds",
    )
    parser.add_argument(
        "--plan",
        action="store_true",
        help="Print the phase schedule and exit",
    )
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8088,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--no-sound",
        action="store_true",
        help="Disable audio cues",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> WorkoutConfig:
    if args.workout:
        return load_workout(args.workout, cycles=args.cycles, rest_period_sec=args.rest)
    return validate_config(args.cycles, args.rest, args.rounds)


def describe_phase(event: PhaseStarted, config: WorkoutConfig) -> str:
    label = PHASE_LABELS[event.phase]
    if event.phase == "prepare":
        return f"{label} {format_clock(event.duration_sec)}"
    where = (
        f"Cycle {event.cycle} of {config.cycles} • "
        f"Round {event.round} of {config.round_count}"
    )
    if event.rest_kind == "inter_cycle":
        where = f"Cycle {event.cycle} of {config.cycles} • between cycles"
    return f"{label} {format_clock(event.duration_sec)}  {where}"


def run_plan(config: WorkoutConfig) -> int:
    for index, phase in enumerate(plan_phases(config), start=1):
        print(f"{index:>3}. {describe_phase(phase, config)}")
    print(f"Total: {format_clock(planned_duration_sec(config))}")
    return 0


def _ring_bell(cues: tuple[AudioCue, ...]) -> None:
    sys.stdout.write("\a" * len(cues))
    sys.stdout.flush()


async def run_terminal(
    config: WorkoutConfig,
    sound_enabled: bool = True,
    tick_interval_sec: float = 1.0,
) -> int:
    controller = UIController(
        cue_sink=_ring_bell,
        sound_enabled=sound_enabled,
        tick_interval_sec=tick_interval_sec,
    )
    done = asyncio.Event()
    outcome: list[bool] = []

    def on_event(event: SequencerEvent) -> None:
        if isinstance(event, PhaseStarted):
            print(describe_phase(event, config))
        elif isinstance(event, CountdownUpdated):
            print(f"  {format_clock(event.remaining_sec)}")
        elif isinstance(event, WorkoutCompleted):
            print(PHASE_LABELS["complete"] if not event.aborted else "Workout stopped")

    def on_finish(completed: bool) -> None:
        outcome.append(completed)
        done.set()

    await controller.start_workout(config, on_event=on_event, on_finish=on_finish)
    try:
        await done.wait()
    finally:
        await controller.reset()
    return 0 if outcome and outcome[0] else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except WorkoutConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    logger.info("workout config %s", config)

    if args.plan:
        return run_plan(config)

    if args.ui_web:
        from hiit.ui.web_app import run_web_ui

        return run_web_ui(
            host=args.web_host,
            port=args.web_port,
            sound_enabled=not args.no_sound,
            initial_config=config,
        )

    try:
        return asyncio.run(run_terminal(config, sound_enabled=not args.no_sound))
    except KeyboardInterrupt:
        print("Workout stopped")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
