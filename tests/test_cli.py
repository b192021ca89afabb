from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from hiit.cli.main import build_parser, config_from_args, main, run_terminal
from hiit.workout.model import WorkoutConfig


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])

    assert config_from_args(args) == WorkoutConfig(
        cycles=3,
        rest_period_sec=30,
        round_durations_sec=(30,),
    )


def test_plan_prints_schedule(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--plan", "--cycles", "2", "--rest", "30", "--rounds", "60", "45"])

    out = capsys.readouterr().out
    lines = out.strip().splitlines()
    assert code == 0
    assert lines[0].endswith("Get Ready! 00:05")
    assert "WORK! 01:00  Cycle 1 of 2 • Round 1 of 2" in lines[1]
    assert "REST 00:30  Cycle 2 of 2 • between cycles" in lines[4]
    assert lines[-1] == "Total: 05:05"


def test_plan_from_workout_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    workout_file = tmp_path / "rounds.csv"
    workout_file.write_text("duration_sec\n20\n", encoding="utf-8")

    code = main(["--plan", "--workout", str(workout_file), "--cycles", "2"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert code == 0
    assert len(lines) == 4
    assert lines[-1] == "Total: 00:45"


def test_invalid_config_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--plan", "--cycles", "11"])

    assert code == 2
    assert "Number of cycles must be between 1 and 10" in capsys.readouterr().err


def test_missing_workout_file_exits_with_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(["--plan", "--workout", str(tmp_path / "nope.json")])

    assert code == 2
    assert "Error: Cannot read workout file" in capsys.readouterr().err


def test_undecodable_workout_file_exits_with_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    workout_file = tmp_path / "rounds.csv"
    workout_file.write_bytes(b"\xff\xfeduration_sec\n20\n")

    code = main(["--plan", "--workout", str(workout_file)])

    assert code == 2
    assert "Error: Cannot read workout file" in capsys.readouterr().err


def test_terminal_run_to_completion(capsys: pytest.CaptureFixture[str]) -> None:
    config = WorkoutConfig(cycles=1, rest_period_sec=0, round_durations_sec=(0,))
    code = asyncio.run(run_terminal(config, sound_enabled=False, tick_interval_sec=0.01))

    out = capsys.readouterr().out
    assert code == 0
    assert "Get Ready!" in out
    assert "Workout Complete!" in out
